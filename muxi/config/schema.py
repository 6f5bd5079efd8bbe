"""
Settings Schema.

Type checks for the settings keys read by the plugin subsystem. Keys not
declared here belong to other parts of muxi and are left alone.
"""

import copy
from dataclasses import dataclass
from typing import Any


class ValidationError(Exception):
    """Raised when a settings value has the wrong shape."""

    pass


@dataclass
class ConfigField:
    """
    A settings key with its expected type.

    Attributes:
        type_: The expected type of the value
        default: Value used when the key is absent
        description: Human-readable description
    """

    type_: type
    default: Any
    description: str = ""

    def validate(self, value: Any) -> None:
        if not isinstance(value, self.type_):
            raise ValidationError(
                f"Expected type {self.type_.__name__}, got {type(value).__name__}"
            )


def validate_settings(settings: dict[str, Any], schema: dict[str, ConfigField]) -> dict[str, Any]:
    """
    Validate known keys and fill in defaults.

    Args:
        settings: Parsed settings table
        schema: Known keys (name -> ConfigField)

    Returns:
        Mapping with one value per schema key

    Raises:
        ValidationError: If a known key has the wrong type
    """
    values = {}
    for name, field in schema.items():
        if name not in settings:
            values[name] = copy.deepcopy(field.default)
            continue
        try:
            field.validate(settings[name])
        except ValidationError as e:
            hint = f" ({field.description})" if field.description else ""
            raise ValidationError(f"Field '{name}'{hint}: {e}") from e
        values[name] = settings[name]
    return values
