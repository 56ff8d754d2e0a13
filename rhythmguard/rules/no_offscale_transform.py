"""rhythmguard/no-offscale-transform: translation offsets must sit on the scale."""

from ..length import parse_length_token
from ..models import Finding
from ..options import NoOffscaleTransformOptions
from ..presets import list_scale_preset_names
from .base import BaseRule, RuleContext
from .scale_check import (
    ScaleStateCache,
    collect_candidate_nodes,
    get_fixed_value,
    invalid_preset_message,
    is_unit_in_scope,
    match_scale,
)


def rejected_message(value: str, lower: str, upper: str) -> str:
    return (
        f'Unexpected transform translation value "{value}". '
        f"Use scale values (nearest: {lower} or {upper})."
    )


def is_translation_property(prop: str) -> bool:
    return prop in ("transform", "translate") or prop.startswith("translate-")


class NoOffscaleTransformRule(BaseRule):
    """Enforce scale membership for translate offsets.

    Only ``transform`` (translate-family functions), ``translate`` and
    ``translate-*`` declarations are checked. Negative values are skipped
    when ``allowNegative`` is off.
    """

    @property
    def rule_id(self) -> str:
        return "rhythmguard/no-offscale-transform"

    @property
    def options_model(self) -> type[NoOffscaleTransformOptions]:
        return NoOffscaleTransformOptions

    @property
    def description(self) -> str:
        return "Transform translations must come from the configured scale"

    def check(self, context: RuleContext) -> list[Finding]:
        options: NoOffscaleTransformOptions = context.options
        findings: list[Finding] = []

        selection = options.scale_selection()
        if selection.invalid_preset:
            findings.append(
                self._create_configuration_finding(
                    context,
                    invalid_preset_message(
                        selection.invalid_preset, list_scale_preset_names()
                    ),
                )
            )

        scales = ScaleStateCache(options, selection.scale)

        for decl in context.stylesheet.walk_decls():
            prop = decl.prop.lower()
            if not is_translation_property(prop):
                continue

            state = scales.get(prop)
            for node, _ in collect_candidate_nodes(decl, options):
                length = parse_length_token(node.value)
                if length is None or length.number == 0 or not length.unit:
                    continue
                if length.unit == "%" and options.allow_percentages:
                    continue
                if length.is_negative and not options.allow_negative:
                    continue
                if not is_unit_in_scope(length, options.units):
                    continue

                match = match_scale(length, options, state)
                if match is None:
                    continue

                replacement = (
                    get_fixed_value(length, match.nearest.nearest, options)
                    if options.fix_to_scale
                    else None
                )
                findings.append(
                    self._create_finding(
                        context,
                        rejected_message(node.value, match.lower_text, match.upper_text),
                        decl,
                        node,
                        replacement,
                    )
                )

        return findings
