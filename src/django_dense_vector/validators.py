from typing import Any, Mapping

from .exceptions import ConfigurationError

MAX_DIMS_COUNT = 2048

MAX_META_ENTRIES = 5
MAX_META_KEY_LENGTH = 20
MAX_META_VALUE_LENGTH = 50


def _integer_value(value: Any) -> int:
    # Schema nodes may carry numbers as strings or integral floats
    if isinstance(value, bool):
        raise TypeError("booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value} is not an integer")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"{type(value).__name__} is not an integer")


def validate_dims(dims: Any, *, field_name: str | None) -> int:
    """Validate the declared number of dimensions for a dense vector field.

    Returns the dimension count as an int.

    Raises:
        ConfigurationError: dims is missing, not an integer or outside [1, 2048]
    """
    if dims is None:
        raise ConfigurationError(
            f"Missing required parameter [dims] for field [{field_name}]"
        )

    try:
        value = _integer_value(dims)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"The number of dimensions for field [{field_name}] must be an integer "
            f"but was [{dims!r}]"
        ) from e

    if value < 1 or value > MAX_DIMS_COUNT:
        raise ConfigurationError(
            f"The number of dimensions for field [{field_name}] should be in the "
            f"range [1, {MAX_DIMS_COUNT}] but was [{value}]"
        )

    return value


def validate_meta(
    meta: Mapping[str, Any] | None, *, field_name: str | None
) -> dict[str, str]:
    """Validate the free-form metadata attached to a field."""
    if meta is None:
        return {}

    if not isinstance(meta, Mapping):
        raise ConfigurationError(
            f"[meta] for field [{field_name}] must be a mapping of strings"
        )

    if len(meta) > MAX_META_ENTRIES:
        raise ConfigurationError(
            f"[meta] for field [{field_name}] can't have more than "
            f"{MAX_META_ENTRIES} entries, but got {len(meta)}"
        )

    for key, value in meta.items():
        if not isinstance(key, str) or len(key) > MAX_META_KEY_LENGTH:
            raise ConfigurationError(
                f"[meta] keys for field [{field_name}] can't be longer than "
                f"{MAX_META_KEY_LENGTH} chars, but got [{key}]"
            )
        if not isinstance(value, str):
            raise ConfigurationError(
                f"[meta] values for field [{field_name}] can only be strings, "
                f"but got {type(value).__name__} for key [{key}]"
            )
        if len(value) > MAX_META_VALUE_LENGTH:
            raise ConfigurationError(
                f"[meta] values for field [{field_name}] can't be longer than "
                f"{MAX_META_VALUE_LENGTH} chars, but got [{value}] for key [{key}]"
            )

    return dict(meta)
