"""rhythmguard/prefer-token: scale decisions should go through design tokens.

Raw lengths are reported; when the effective token map knows a token for
the value, the finding's fix replaces the raw value with that token.
"""

from ..length import parse_length_token
from ..models import Finding
from ..options import PreferTokenOptions
from ..presets import list_scale_preset_names
from ..properties import property_matches
from ..token_map import build_effective_token_map, resolve_token_replacement
from ..walker import create_token_regex
from .base import BaseRule, RuleContext
from .scale_check import (
    ScaleStateCache,
    collect_candidate_nodes,
    invalid_preset_message,
    is_numeric_on_scale,
    is_unit_in_scope,
)


def rejected_message(value: str) -> str:
    return (
        f'Unexpected raw scale value "{value}". '
        "Use design tokens for scale decisions."
    )


class PreferTokenRule(BaseRule):
    """Require token references instead of raw spacing lengths."""

    @property
    def rule_id(self) -> str:
        return "rhythmguard/prefer-token"

    @property
    def options_model(self) -> type[PreferTokenOptions]:
        return PreferTokenOptions

    @property
    def description(self) -> str:
        return "Spacing values must use design tokens"

    def check(self, context: RuleContext) -> list[Finding]:
        options: PreferTokenOptions = context.options
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

        token_map = build_effective_token_map(
            options,
            context.stylesheet,
            token_regex,
            context.cwd,
            context.spacing_loader,
        )
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
                if not is_unit_in_scope(length, options.units):
                    continue
                if options.allow_numeric_scale and is_numeric_on_scale(
                    length, options, state
                ):
                    continue

                replacement = resolve_token_replacement(
                    token_map,
                    node.value,
                    length,
                    options.unit_strategy,
                    options.base_font_size,
                )
                findings.append(
                    self._create_finding(
                        context, rejected_message(node.value), decl, node, replacement
                    )
                )

        return findings
