"""
Binary encoding for dense vectors.

A blob is ``dims`` big-endian IEEE-754 single-precision floats, optionally
followed by one more float holding the vector's magnitude:

    +----------+----------+-----+----------------+-------------+
    | value[0] | value[1] | ... | value[dims-1]  | [magnitude] |
    +----------+----------+-----+----------------+-------------+
      4 bytes    4 bytes           4 bytes          4 bytes

The magnitude suffix is written for fields created on index version 7.5.0 or
later (see ``conf.NORM_SUFFIX_VERSION``).
"""

import math
import struct
from typing import Iterable

import numpy as np

FLOAT_BYTES = 4

# Big-endian to stay compatible with blobs written by earlier implementations
FLOAT_FORMAT = struct.Struct(">f")
NUMPY_DTYPE = np.dtype(">f4")


def blob_length(dims: int, norm_suffix: bool) -> int:
    length = dims * FLOAT_BYTES
    if norm_suffix:
        length += FLOAT_BYTES
    return length


def encode_vector(values: Iterable[float], *, dims: int, norm_suffix: bool) -> bytes:
    """Encode exactly ``dims`` values in to a blob.

    ``values`` is consumed lazily and the sum of squares is accumulated while
    the values are written, so a parser can feed values in as it reads them.
    Any error raised while iterating propagates and no blob is returned.
    """
    buffer = bytearray(blob_length(dims, norm_suffix))
    sum_of_squares = 0.0
    offset = 0

    with np.errstate(over="ignore", invalid="ignore"):
        for value in values:
            if offset >= dims * FLOAT_BYTES:
                raise ValueError(f"More than {dims} values supplied")
            value = np.float32(value)
            FLOAT_FORMAT.pack_into(buffer, offset, value)
            offset += FLOAT_BYTES
            sum_of_squares += float(value * value)

        if offset != dims * FLOAT_BYTES:
            raise ValueError(f"Expected {dims} values, got {offset // FLOAT_BYTES}")

        if norm_suffix:
            magnitude = np.float32(math.sqrt(sum_of_squares))
            FLOAT_FORMAT.pack_into(buffer, offset, magnitude)

    return bytes(buffer)


def _check_length(blob: bytes, dims: int, norm_suffix: bool):
    expected = blob_length(dims, norm_suffix)
    if len(blob) != expected:
        raise ValueError(
            f"Blob of {len(blob)} bytes does not hold a {dims} dimension vector "
            f"(expected {expected} bytes)"
        )


def decode_vector(blob: bytes, *, dims: int, norm_suffix: bool) -> list[float]:
    """Read the vector values back out of a blob."""
    _check_length(blob, dims, norm_suffix)
    return np.frombuffer(blob, dtype=NUMPY_DTYPE, count=dims).tolist()


def decode_magnitude(blob: bytes, *, dims: int, norm_suffix: bool) -> float:
    """The vector's magnitude, read from the suffix or computed when absent."""
    _check_length(blob, dims, norm_suffix)
    if norm_suffix:
        (magnitude,) = FLOAT_FORMAT.unpack_from(blob, dims * FLOAT_BYTES)
        return magnitude

    values = np.frombuffer(blob, dtype=NUMPY_DTYPE, count=dims).astype(np.float64)
    return float(np.float32(math.sqrt(float(np.dot(values, values)))))
