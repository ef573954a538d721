"""
A lazy token stream over decoded document sources.

Documents arrive as JSON text or already-decoded Python values. Rather than
handing whole lists to the field, the source is walked lazily as a sequence of
tokens, so a field can stop reading as soon as the value is known to be bad.
"""

import enum
import json
import math
import numbers
from typing import Any, Iterable, Iterator, Mapping

import numpy as np


class Token(enum.Enum):
    START_OBJECT = "START_OBJECT"
    END_OBJECT = "END_OBJECT"
    START_ARRAY = "START_ARRAY"
    END_ARRAY = "END_ARRAY"
    FIELD_NAME = "FIELD_NAME"
    VALUE_NUMBER = "VALUE_NUMBER"
    VALUE_STRING = "VALUE_STRING"
    VALUE_BOOLEAN = "VALUE_BOOLEAN"
    VALUE_NULL = "VALUE_NULL"


Event = tuple[Token, Any]


class ObjectPairs(list):
    """A JSON object decoded as a list of (key, value) pairs, keeping repeated keys."""


def iter_tokens(value: Any) -> Iterator[Event]:
    """Walk a decoded value, yielding (token, value) events."""
    if isinstance(value, (Mapping, ObjectPairs)):
        items = value.items() if isinstance(value, Mapping) else value
        yield Token.START_OBJECT, None
        for key, item in items:
            yield Token.FIELD_NAME, key
            yield from iter_tokens(item)
        yield Token.END_OBJECT, None
    elif isinstance(value, np.ndarray):
        yield from iter_tokens(value.tolist())
    elif isinstance(value, (list, tuple)):
        yield Token.START_ARRAY, None
        for item in value:
            yield from iter_tokens(item)
        yield Token.END_ARRAY, None
    elif value is None:
        yield Token.VALUE_NULL, None
    elif isinstance(value, bool):
        yield Token.VALUE_BOOLEAN, value
    elif isinstance(value, numbers.Real):
        yield Token.VALUE_NUMBER, value
    else:
        yield Token.VALUE_STRING, value


def loads(raw: str | bytes) -> Any:
    """Decode JSON text, keeping repeated object keys."""
    return json.loads(raw, object_pairs_hook=ObjectPairs)


class TokenParser:
    """Pull parser over a stream of token events."""

    def __init__(self, events: Iterable[Event]):
        self._events = iter(events)
        self.current_token: Token | None = None
        self.current_value: Any = None
        self.tokens_consumed = 0

    @classmethod
    def from_value(cls, value: Any) -> "TokenParser":
        return cls(iter_tokens(value))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "TokenParser":
        return cls.from_value(loads(raw))

    def next_token(self) -> Token | None:
        """Advance to the next token, or None once the stream is exhausted."""
        try:
            self.current_token, self.current_value = next(self._events)
        except StopIteration:
            self.current_token, self.current_value = None, None
        else:
            self.tokens_consumed += 1
        return self.current_token

    def float_value(self) -> float:
        """The current number rounded to single precision."""
        if self.current_token is not Token.VALUE_NUMBER:
            raise ValueError(f"Current token [{self.current_token}] is not a number")
        try:
            value = float(self.current_value)
        except OverflowError:
            value = math.inf if self.current_value > 0 else -math.inf
        with np.errstate(over="ignore"):
            return float(np.float32(value))

    def skip_children(self):
        """Skip past the end of the object or array the parser is positioned on."""
        if self.current_token not in (Token.START_OBJECT, Token.START_ARRAY):
            return
        depth = 1
        while depth:
            token = self.next_token()
            if token is None:
                raise ValueError("Unexpected end of token stream")
            if token in (Token.START_OBJECT, Token.START_ARRAY):
                depth += 1
            elif token in (Token.END_OBJECT, Token.END_ARRAY):
                depth -= 1
