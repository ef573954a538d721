from django.conf import settings

IndexVersion = tuple[int, int, int]

# Index versions from this one onwards append the vector magnitude to each blob
NORM_SUFFIX_VERSION: IndexVersion = (7, 5, 0)

DEFAULT_INDEX_VERSION: IndexVersion = (7, 10, 0)


def parse_index_version(value: str | tuple | list) -> IndexVersion:
    """Parse "7.5.0" or (7, 5, 0) in to a comparable version tuple.

    Missing minor/patch parts are treated as zero.
    """
    if isinstance(value, str):
        parts = value.strip().split(".")
    else:
        parts = list(value)

    if not 1 <= len(parts) <= 3:
        raise ValueError(f"Invalid index version: {value!r}")

    try:
        numbers = [int(part) for part in parts]
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid index version: {value!r}") from e

    numbers.extend([0] * (3 - len(numbers)))
    return (numbers[0], numbers[1], numbers[2])


def get_current_index_version() -> IndexVersion:
    """The index version new fields are created with."""
    value = getattr(settings, "DENSE_VECTOR_INDEX_VERSION", None)
    if value is None:
        return DEFAULT_INDEX_VERSION
    return parse_index_version(value)


def supports_norm_suffix(index_version: IndexVersion) -> bool:
    return index_version >= NORM_SUFFIX_VERSION
