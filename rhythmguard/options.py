"""Rule option models and validation.

Each rule has one pydantic model enumerating its options under the
camelCase names used in stylelint-style configs. Validation is lenient
at the document level: every invalid option produces a configuration
message, the option is dropped, and the rule runs with defaults for it.
"""

import json
import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from .constants import (
    DEFAULT_BASE_FONT_SIZE,
    DEFAULT_IGNORE_KEYWORDS,
    DEFAULT_TOKEN_FUNCTIONS,
    DEFAULT_TOKEN_PATTERN,
    DEFAULT_UNITS,
    PROPERTY_GROUP_NAMES,
    SUPPORTED_SCALE_UNITS,
)
from .guard_logging import get_logger
from .length import parse_length_token
from .presets import ScaleSelection, resolve_scale_selection
from .properties import (
    PropertyMatcher,
    PropertyScale,
    build_property_matchers,
    build_property_scales,
    compile_property_pattern,
    is_known_property,
    is_regex_literal,
)

logger = get_logger()


def _check_scale_entry(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value) or value < 0:
            raise ValueError("scale entries must be finite and non-negative")
        return value

    parsed = parse_length_token(value)
    if parsed is None or parsed.number < 0:
        raise ValueError("scale entries must be non-negative lengths")
    if parsed.unit and parsed.unit not in SUPPORTED_SCALE_UNITS:
        raise ValueError(f"unsupported scale unit {parsed.unit!r}")
    return value


def _check_property_entry(value: str) -> str:
    if is_regex_literal(value):
        if compile_property_pattern(value) is None:
            raise ValueError("unparsable property pattern")
        return value
    if not is_known_property(value):
        raise ValueError(f"unknown property {value!r}")
    return value


def _check_unit(value: str) -> str:
    unit = value.strip().lower()
    if unit not in SUPPORTED_SCALE_UNITS:
        raise ValueError(f"unsupported unit {value!r}")
    return unit


def _check_property_group(value: str) -> str:
    group = value.strip().lower()
    if group not in PROPERTY_GROUP_NAMES:
        raise ValueError(f"unknown property group {value!r}")
    return group


def _check_non_empty(value: str) -> str:
    if not value.strip():
        raise ValueError("value must not be empty")
    return value


def _check_argument_index(value: int) -> int:
    if value < 1:
        raise ValueError("argument indices are 1-based")
    return value


ScaleValue = Annotated[
    StrictInt | StrictFloat | StrictStr, AfterValidator(_check_scale_entry)
]
PropertyEntry = Annotated[StrictStr, AfterValidator(_check_property_entry)]
UnitEntry = Annotated[StrictStr, AfterValidator(_check_unit)]
PropertyGroupEntry = Annotated[StrictStr, AfterValidator(_check_property_group)]
NonEmptyStr = Annotated[StrictStr, AfterValidator(_check_non_empty)]
ArgumentIndex = Annotated[StrictInt, AfterValidator(_check_argument_index)]


class RuleOptions(BaseModel):
    """Options shared by every rule."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    severity: Literal["error", "warning"] = Field(default="error")


class ScaleOptions(RuleOptions):
    """Scale selection and numeric matching options."""

    allow_percentages: StrictBool = Field(default=True, alias="allowPercentages")
    base_font_size: float = Field(
        default=DEFAULT_BASE_FONT_SIZE,
        alias="baseFontSize",
        gt=0,
        allow_inf_nan=False,
        strict=True,
    )
    custom_scale: list[ScaleValue] | None = Field(default=None, alias="customScale")
    enforce_inside_math_functions: StrictBool = Field(
        default=False, alias="enforceInsideMathFunctions"
    )
    ignore_math_function_arguments: dict[StrictStr, list[ArgumentIndex]] = Field(
        default_factory=dict, alias="ignoreMathFunctionArguments"
    )
    math_function_arguments: dict[StrictStr, list[ArgumentIndex]] = Field(
        default_factory=dict, alias="mathFunctionArguments"
    )
    preset: NonEmptyStr | None = Field(default=None)
    property_scales: dict[StrictStr, list[ScaleValue]] | None = Field(
        default=None, alias="propertyScales"
    )
    scale: list[ScaleValue] | None = Field(default=None)
    unit_strategy: Literal["convert", "exact"] = Field(
        default="convert", alias="unitStrategy"
    )
    units: list[UnitEntry] = Field(default_factory=lambda: list(DEFAULT_UNITS))

    @field_validator("math_function_arguments", "ignore_math_function_arguments")
    @classmethod
    def _lowercase_function_names(cls, value: dict[str, list[int]]) -> dict[str, list[int]]:
        return {name.strip().lower(): indices for name, indices in value.items()}

    def scale_selection(self) -> ScaleSelection:
        return resolve_scale_selection(
            preset=self.preset, scale=self.scale, custom_scale=self.custom_scale
        )

    def property_scale_overrides(self) -> list[PropertyScale]:
        return build_property_scales(self.property_scales)

    def should_lint_math_kwargs(self) -> dict[str, Any]:
        return {
            "enforce_inside_math_functions": self.enforce_inside_math_functions,
            "math_function_arguments": self.math_function_arguments,
            "ignore_math_function_arguments": self.ignore_math_function_arguments,
        }


class ValueFilterOptions(RuleOptions):
    """Property scoping, ignored keywords and token recognition options."""

    ignore_values: list[StrictStr] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_KEYWORDS), alias="ignoreValues"
    )
    properties: list[PropertyEntry] | None = Field(default=None)
    property_groups: list[PropertyGroupEntry] | None = Field(
        default=None, alias="propertyGroups"
    )
    token_functions: list[NonEmptyStr] = Field(
        default_factory=lambda: list(DEFAULT_TOKEN_FUNCTIONS), alias="tokenFunctions"
    )
    token_pattern: NonEmptyStr = Field(default=DEFAULT_TOKEN_PATTERN, alias="tokenPattern")

    @field_validator("ignore_values", "token_functions")
    @classmethod
    def _lowercase(cls, value: list[str]) -> list[str]:
        return [entry.strip().lower() for entry in value]

    def property_matchers(self) -> list[PropertyMatcher]:
        return build_property_matchers(self.properties, self.property_groups)


class UseScaleOptions(ScaleOptions, ValueFilterOptions):
    """Options for rhythmguard/use-scale."""

    allow_negative: StrictBool = Field(default=True, alias="allowNegative")
    fix_to_scale: StrictBool = Field(default=True, alias="fixToScale")


class NoOffscaleTransformOptions(ScaleOptions):
    """Options for rhythmguard/no-offscale-transform."""

    allow_negative: StrictBool = Field(default=True, alias="allowNegative")
    fix_to_scale: StrictBool = Field(default=True, alias="fixToScale")


class PreferTokenOptions(ScaleOptions, ValueFilterOptions):
    """Options for rhythmguard/prefer-token."""

    allow_numeric_scale: StrictBool = Field(default=False, alias="allowNumericScale")
    token_map: dict[StrictStr, NonEmptyStr] = Field(
        default_factory=dict, alias="tokenMap"
    )
    token_map_file: NonEmptyStr | None = Field(default=None, alias="tokenMapFile")
    token_map_from_css_custom_properties: StrictBool = Field(
        default=False, alias="tokenMapFromCssCustomProperties"
    )
    token_map_from_tailwind_spacing: StrictBool = Field(
        default=False,
        validation_alias=AliasChoices(
            "tokenMapFromTailwindSpacing",
            "tokenMapFromExternalSpacingConfig",
            "token_map_from_tailwind_spacing",
        ),
    )
    tailwind_config_path: NonEmptyStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "tailwindConfigPath", "spacingConfigPath", "tailwind_config_path"
        ),
    )


def stringify_option_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    try:
        return f'"{json.dumps(value)}"'
    except (TypeError, ValueError):
        return f'"{value!r}"'


def _field_input_names(model_cls: type[BaseModel]) -> dict[str, set[str]]:
    """Map each field name to every input key that populates it."""
    names: dict[str, set[str]] = {}
    for name, info in model_cls.model_fields.items():
        keys = {name}
        if info.alias:
            keys.add(info.alias)
        if isinstance(info.validation_alias, AliasChoices):
            keys.update(c for c in info.validation_alias.choices if isinstance(c, str))
        elif isinstance(info.validation_alias, str):
            keys.add(info.validation_alias)
        names[name] = keys
    return names


def _input_key(model_cls: type[BaseModel], loc_key: Any, data: Mapping[str, Any]) -> Any:
    if loc_key in data:
        return loc_key
    for keys in _field_input_names(model_cls).values():
        if loc_key in keys:
            for key in keys:
                if key in data:
                    return key
    return None


def validate_rule_options(
    model_cls: type[RuleOptions], rule_id: str, raw_options: Any
) -> tuple[RuleOptions, list[str]]:
    """Validate secondary options for a rule.

    Invalid options are reported and dropped one round at a time until the
    remainder validates.

    Args:
        model_cls: Options model of the rule.
        rule_id: Rule identifier used in messages.
        raw_options: Options mapping from configuration, or None.

    Returns:
        Tuple of (validated options, list of configuration messages).
    """
    messages: list[str] = []
    if raw_options is None:
        return model_cls(), messages

    if not isinstance(raw_options, Mapping):
        messages.append(
            f"Invalid value {stringify_option_value(raw_options)} for rule \"{rule_id}\""
        )
        return model_cls(), messages

    data = dict(raw_options)
    while True:
        try:
            return model_cls.model_validate(data), messages
        except ValidationError as e:
            invalid_keys: set[str] = set()
            for error in e.errors():
                loc = error.get("loc") or ()
                key = _input_key(model_cls, loc[0], data) if loc else None
                if key is None:
                    continue
                if error["type"] == "extra_forbidden":
                    messages.append(f'Invalid option name "{key}" for rule "{rule_id}"')
                else:
                    value = data[key]
                    if (
                        len(loc) > 1
                        and isinstance(loc[1], int)
                        and isinstance(value, list)
                        and loc[1] < len(value)
                    ):
                        value = value[loc[1]]
                    messages.append(
                        f"Invalid value {stringify_option_value(value)} "
                        f'for option "{key}" of rule "{rule_id}"'
                    )
                invalid_keys.add(key)

            if not invalid_keys:
                logger.debug(f"Unattributed option errors for {rule_id}: {e}")
                return model_cls(), messages

            for key in invalid_keys:
                data.pop(key, None)
