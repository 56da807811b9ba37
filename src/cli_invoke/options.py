"""Option schemas and command-line serialization.

A schema maps a logical option name to one or more encoding rules. Each
rule names the literal flag and how the option value is encoded:

    schema = {
        "tags": {"param": "--tag", "type": "array"},
        "verbose": {"param": "--verbose", "type": "boolean"},
        "color": {"param": "--no-color", "type": "inverted-boolean"},
        "org": [
            {"param": "--org", "type": "string"},
            {"param": "--organization", "type": "string"},
        ],
    }

    prepare_command(["releases", "new"], schema, {"tags": ["a", "b"]})
    # -> ["releases", "new", "--tag", "a", "--tag", "b"]
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .errors import InvalidOptionValue

__all__ = [
    "OptionType",
    "OptionRule",
    "OptionsSchema",
    "normalize_schema",
    "serialize_options",
    "prepare_command",
]


class OptionType(str, Enum):
    """Encoding of an option value on the command line.

    - ARRAY: one ``param value`` pair per element
    - STRING: ``param value``, value passed through untouched
    - BOOLEAN: ``param`` when the value is True
    - INVERTED_BOOLEAN: ``param`` when the value is False
    """

    ARRAY = "array"
    STRING = "string"
    BOOLEAN = "boolean"
    INVERTED_BOOLEAN = "inverted-boolean"

    @classmethod
    def from_string(cls, value: str) -> "OptionType":
        """Parse a type name.

        Unknown names map to STRING, which encodes the value verbatim.
        """
        value = value.lower().strip()
        for option_type in cls:
            if option_type.value == value:
                return option_type
        return cls.STRING


@dataclass(frozen=True)
class OptionRule:
    """One flag emitted for a logical option.

    Attributes:
        param: Literal flag including dashes, e.g. ``--org``
        type: Value encoding
    """

    param: str
    type: OptionType = OptionType.STRING

    def __post_init__(self) -> None:
        if not isinstance(self.type, OptionType):
            object.__setattr__(self, "type", OptionType.from_string(str(self.type)))


RuleLike = Union[OptionRule, Mapping[str, Any]]
OptionsSchema = Mapping[str, Union[RuleLike, Sequence[RuleLike]]]


def _to_rule(option: str, rule: RuleLike) -> OptionRule:
    if isinstance(rule, OptionRule):
        return rule
    if isinstance(rule, Mapping):
        if "param" not in rule:
            raise ValueError(f"schema rule for {option} has no param")
        return OptionRule(param=rule["param"], type=rule.get("type", OptionType.STRING))
    raise ValueError(f"schema rule for {option} must be a mapping or OptionRule")


def normalize_schema(schema: OptionsSchema | None) -> dict[str, tuple[OptionRule, ...]]:
    """Normalize a schema to ``{option: (OptionRule, ...)}``.

    Each option may be declared with a single rule or a sequence of
    rules, and each rule may be an OptionRule or a ``{"param", "type"}``
    mapping. Key order and rule order are preserved.

    Args:
        schema: Schema in any accepted form (None means empty)

    Returns:
        Normalized schema

    Raises:
        ValueError: A rule is malformed
    """
    if not schema:
        return {}

    normalized: dict[str, tuple[OptionRule, ...]] = {}
    for option, rules in schema.items():
        if isinstance(rules, (OptionRule, Mapping)):
            normalized[option] = (_to_rule(option, rules),)
        else:
            normalized[option] = tuple(_to_rule(option, rule) for rule in rules)
    return normalized


def _stringify(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def serialize_options(
    schema: OptionsSchema | None,
    options: Mapping[str, Any] | None,
) -> list[str]:
    """Serialize an options mapping into command-line arguments.

    Only options present in both the schema and ``options`` are emitted,
    in schema order. A missing key or a None value skips the option.

    Args:
        schema: Options schema
        options: Option values keyed by logical option name

    Returns:
        Flat argument list (possibly empty)

    Raises:
        InvalidOptionValue: A value does not match its declared type
    """
    options = options or {}
    args: list[str] = []

    for option, rules in normalize_schema(schema).items():
        value = options.get(option)
        if value is None:
            continue

        for rule in rules:
            if rule.type is OptionType.ARRAY:
                if not _is_array(value):
                    raise InvalidOptionValue(option, "an array", value)
                for item in value:
                    args.extend([rule.param, _stringify(item)])
            elif rule.type is OptionType.BOOLEAN:
                if not isinstance(value, bool):
                    raise InvalidOptionValue(option, "a bool", value)
                if value:
                    args.append(rule.param)
            elif rule.type is OptionType.INVERTED_BOOLEAN:
                if not isinstance(value, bool):
                    raise InvalidOptionValue(option, "a bool", value)
                if not value:
                    args.append(rule.param)
            else:
                args.extend([rule.param, value])

    return args


def prepare_command(
    command: Sequence[str] | str,
    schema: OptionsSchema | None = None,
    options: Mapping[str, Any] | None = None,
) -> list[str]:
    """Build the argument vector for one command invocation.

    Args:
        command: Subcommand tokens, e.g. ``["releases", "new"]``
        schema: Options schema for the command
        options: Option values

    Returns:
        ``command`` followed by the serialized options
    """
    if isinstance(command, str):
        command = [command]
    return list(command) + serialize_options(schema, options)
