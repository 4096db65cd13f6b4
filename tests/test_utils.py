from typing import Any
from typing import Mapping
from typing import Type

import pytest

from ihexparse.utils import hexlify
from ihexparse.utils import is_hex
from ihexparse.utils import parse_int
from ihexparse.utils import unhexlify

PARSE_INT_PASS: Mapping[Any, int] = {
    '123': 123,
    ' 123 ': 123,
    '0': 0,

    '0xDEADBEEF': 0xDEADBEEF,
    '0XDEADBEEF': 0xDEADBEEF,
    'DEADBEEFh': 0xDEADBEEF,
    'FFH': 0xFF,

    '0b101100111000': 0b101100111000,
    '0o1234567': 0o1234567,

    123: 123,
    135.7: 135,
}

PARSE_INT_FAIL: Mapping[Any, Type[BaseException]] = {
    None: TypeError,
    Ellipsis: TypeError,
    'x': ValueError,
    '': ValueError,
    '-1': ValueError,
    '1k': ValueError,
    '12ab': ValueError,
    '0b12': ValueError,
    '0b1h': ValueError,
    '0o1h': ValueError,
    (1,): TypeError,
}


def test_hexlify():
    assert hexlify(b'') == b''
    assert hexlify(b'\xAA\xBB\xCC') == b'AABBCC'
    assert hexlify(bytearray(b'\x01\x02')) == b'0102'
    assert hexlify(b'\xAA\xBB\xCC', upper=False) == b'aabbcc'


def test_is_hex():
    assert is_hex('') is True
    assert is_hex('0123456789ABCDEFabcdef') is True
    assert is_hex(b'00FF') is True
    assert is_hex(bytearray(b'12')) is True
    assert is_hex('0x12') is False
    assert is_hex('+1') is False
    assert is_hex('-1') is False
    assert is_hex(' 1') is False
    assert is_hex('1_2') is False
    assert is_hex('GG') is False
    assert is_hex('١٢') is False
    assert is_hex(b'\xff\xff') is False


def test_parse_int_pass():
    for value_in, value_out in PARSE_INT_PASS.items():
        assert parse_int(value_in) == value_out


def test_parse_int_fail():
    for value_in, raised_exception in PARSE_INT_FAIL.items():
        with pytest.raises(raised_exception):
            parse_int(value_in)


def test_unhexlify():
    assert unhexlify('') == b''
    assert unhexlify('AABBCC') == b'\xAA\xBB\xCC'
    assert unhexlify('aabbcc') == b'\xAA\xBB\xCC'
    assert unhexlify(b'1234') == b'\x12\x34'
    assert unhexlify(bytearray(b'00FF')) == b'\x00\xFF'


def test_unhexlify_raises():
    with pytest.raises(ValueError, match='invalid hexadecimal string'):
        unhexlify('XX')

    with pytest.raises(ValueError, match='invalid hexadecimal string'):
        unhexlify('+1')

    with pytest.raises(ValueError, match='invalid hexadecimal string'):
        unhexlify('AA BB')

    with pytest.raises(ValueError):
        unhexlify('ABC')
