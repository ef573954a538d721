import numpy as np
import pytest

from django_dense_vector.tokens import ObjectPairs, Token, TokenParser, iter_tokens, loads


def tokens_of(value):
    return [token for token, _ in iter_tokens(value)]


def test_object_tokens():
    assert list(iter_tokens({"vector": [1, 2.5]})) == [
        (Token.START_OBJECT, None),
        (Token.FIELD_NAME, "vector"),
        (Token.START_ARRAY, None),
        (Token.VALUE_NUMBER, 1),
        (Token.VALUE_NUMBER, 2.5),
        (Token.END_ARRAY, None),
        (Token.END_OBJECT, None),
    ]


def test_scalar_tokens():
    assert tokens_of([None, True, "a", 1]) == [
        Token.START_ARRAY,
        Token.VALUE_NULL,
        Token.VALUE_BOOLEAN,
        Token.VALUE_STRING,
        Token.VALUE_NUMBER,
        Token.END_ARRAY,
    ]


def test_numpy_values_are_numbers():
    assert tokens_of(np.array([1.0, 2.0], dtype=np.float32)) == [
        Token.START_ARRAY,
        Token.VALUE_NUMBER,
        Token.VALUE_NUMBER,
        Token.END_ARRAY,
    ]
    assert tokens_of(np.float32(1.5)) == [Token.VALUE_NUMBER]


def test_tokens_are_produced_lazily():
    events = iter_tokens([1, 2, 3])
    assert next(events) == (Token.START_ARRAY, None)
    assert next(events) == (Token.VALUE_NUMBER, 1)


def test_loads_keeps_repeated_keys():
    source = loads('{"vector": [1], "vector": [2]}')

    assert isinstance(source, ObjectPairs)
    assert source == [("vector", [1]), ("vector", [2])]
    assert tokens_of(source).count(Token.FIELD_NAME) == 2


class TestTokenParser:
    def test_next_token(self):
        parser = TokenParser.from_value([1])

        assert parser.next_token() is Token.START_ARRAY
        assert parser.next_token() is Token.VALUE_NUMBER
        assert parser.current_value == 1
        assert parser.next_token() is Token.END_ARRAY
        assert parser.next_token() is None
        assert parser.tokens_consumed == 3

    def test_from_json(self):
        parser = TokenParser.from_json(b'{"v": [0.5]}')

        assert parser.next_token() is Token.START_OBJECT
        assert parser.next_token() is Token.FIELD_NAME
        assert parser.current_value == "v"

    def test_float_value_is_single_precision(self):
        parser = TokenParser.from_value(0.1)
        parser.next_token()

        assert parser.float_value() == float(np.float32(0.1))
        assert parser.float_value() != 0.1

    def test_float_value_of_huge_integer(self):
        parser = TokenParser.from_value(10**400)
        parser.next_token()

        assert parser.float_value() == float("inf")

    def test_float_value_requires_a_number(self):
        parser = TokenParser.from_value("1.0")
        parser.next_token()

        with pytest.raises(ValueError):
            parser.float_value()

    def test_skip_children(self):
        parser = TokenParser.from_value({"a": {"b": [1, [2]]}, "c": 3})
        parser.next_token()  # START_OBJECT
        parser.next_token()  # FIELD_NAME a
        parser.next_token()  # START_OBJECT

        parser.skip_children()

        assert parser.current_token is Token.END_OBJECT
        assert parser.next_token() is Token.FIELD_NAME
        assert parser.current_value == "c"

    def test_skip_children_on_scalar_does_nothing(self):
        parser = TokenParser.from_value([1])
        parser.next_token()
        parser.next_token()

        parser.skip_children()

        assert parser.current_token is Token.VALUE_NUMBER
