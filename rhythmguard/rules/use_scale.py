"""rhythmguard/use-scale: spacing values must sit on the scale.

Off-scale lengths are reported with their bounding scale members and, when
``fixToScale`` is on, fixed to the nearest member in the source unit.
"""

from ..length import parse_length_token
from ..models import Finding
from ..options import UseScaleOptions
from ..presets import list_scale_preset_names
from ..properties import property_matches
from ..walker import create_token_regex
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
        f'Unexpected off-scale spacing value "{value}". '
        f"Use spacing scale values (nearest: {lower} or {upper})."
    )


def negative_message(value: str) -> str:
    return (
        f'Unexpected negative spacing value "{value}". '
        "Negative values are not allowed."
    )


class UseScaleRule(BaseRule):
    """Enforce scale membership for spacing-like properties."""

    @property
    def rule_id(self) -> str:
        return "rhythmguard/use-scale"

    @property
    def options_model(self) -> type[UseScaleOptions]:
        return UseScaleOptions

    @property
    def description(self) -> str:
        return "Spacing values must come from the configured scale"

    def check(self, context: RuleContext) -> list[Finding]:
        options: UseScaleOptions = context.options
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

        token_regex, pattern_error = create_token_regex(options.token_pattern)
        if pattern_error:
            findings.append(self._create_configuration_finding(context, pattern_error))

        matchers = options.property_matchers()
        scales = ScaleStateCache(options, selection.scale)

        for decl in context.stylesheet.walk_decls():
            prop = decl.prop.lower()
            if prop.startswith("--") or not property_matches(prop, matchers):
                continue

            state = scales.get(prop)
            for node, _ in collect_candidate_nodes(
                decl,
                options,
                token_functions=options.token_functions,
                token_regex=token_regex,
                ignore_values=options.ignore_values,
            ):
                length = parse_length_token(node.value)
                if length is None or length.number == 0 or not length.unit:
                    continue
                if length.unit == "%" and options.allow_percentages:
                    continue
                if length.is_negative and not options.allow_negative:
                    findings.append(
                        self._create_finding(context, negative_message(node.value), decl, node)
                    )
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
