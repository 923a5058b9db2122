import pytest

from core.exceptions import ValidationError
from utils.pairs import canonical_pair, conversation_key, parse_conversation_key


def test_canonical_pair_orders_ids():
    assert canonical_pair(7, 3) == (3, 7)
    assert canonical_pair(3, 7) == (3, 7)


def test_conversation_key_is_order_independent():
    assert conversation_key(2, 1) == conversation_key(1, 2) == "1:2"


def test_parse_accepts_reversed_key():
    assert parse_conversation_key("9:4") == (4, 9)


@pytest.mark.parametrize("key", ["", "1", "1:2:3", "a:b", "-1:2", "0:5", "3:3"])
def test_parse_rejects_malformed_keys(key):
    with pytest.raises(ValidationError):
        parse_conversation_key(key)
