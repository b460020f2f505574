"""Option resolution for menu items.

Each item kind declares an ordered schema of ``OptionSpec`` entries. The
schema is evaluated once at construction: present keys are parsed and
assigned onto the item, missing required keys raise ``OptionRequiredError``,
and missing optional keys leave the class-level default in place.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from menukit.errors import InvalidConfigurationError, OptionRequiredError


@dataclass(frozen=True)
class OptionSpec:
    """One entry of an item option schema.

    Attributes:
        key: Option key in the configuration map
        field: Attribute name on the item (defaults to key)
        required: Raise OptionRequiredError when the key is absent
        parse: Coercion applied to the configured value
        fetch: Name of an item method that resolves this option itself
    """

    key: str
    field: str | None = None
    required: bool = False
    parse: Callable[[Any], Any] | None = None
    fetch: str | None = None

    @property
    def target(self) -> str:
        return self.field or self.key


def has_option(options: Mapping[str, Any], key: str) -> bool:
    """Check presence of an option, independent of its value."""
    return key in options


def get_option(options: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Return the configured value or the default, without coercion."""
    if key in options:
        return options[key]
    return default


def fetch_option(
    target: object,
    options: Mapping[str, Any],
    spec: OptionSpec,
    *,
    item_key: str | None = None,
) -> None:
    """Assign a single option onto target following its spec."""
    if spec.key in options:
        value = options[spec.key]
        if spec.parse is not None:
            value = spec.parse(value)
        setattr(target, spec.target, value)
    elif spec.required:
        raise OptionRequiredError(spec.key, item_key)


def resolve_options(
    target: object,
    options: Mapping[str, Any],
    specs: tuple[OptionSpec, ...],
    *,
    item_key: str | None = None,
) -> None:
    """Resolve every spec in declared order.

    Specs with a ``fetch`` method name delegate to that method on the
    target, which receives the OptionSpec and does the assignment itself.
    Later specs may rely on fields resolved by earlier ones.
    """
    for spec in specs:
        if spec.fetch is not None:
            getattr(target, spec.fetch)(spec)
        else:
            fetch_option(target, options, spec, item_key=item_key)


def as_bool(value: Any) -> bool:
    return bool(value)


def as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def as_str_list(value: Any) -> list[str]:
    """Accept a single name or a list of names."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise InvalidConfigurationError(
        f"Expected a string or list of strings, got {value!r}"
    )


def as_mapping(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidConfigurationError(f"Expected a mapping, got {value!r}")
    return {str(key): item for key, item in value.items()}
