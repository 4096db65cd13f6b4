# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

r"""Hexadecimal and integer helpers."""

import binascii
import re
from typing import Any
from typing import Union

from .base import AnyBytes

HEX_DIGITS: str = '0123456789ABCDEFabcdef'
r"""Characters allowed within a hexadecimal field."""

INT_REGEX = re.compile(r'^\s*(?P<prefix>0x|0b|0o)?(?P<digits>[0-9a-f]+)(?P<suffix>h?)\s*$')


def hexlify(bytestr: AnyBytes, upper: bool = True) -> bytes:
    r"""Converts raw bytes into a hexadecimal byte string.

    Examples:
        >>> from ihexparse.utils import hexlify
        >>> hexlify(b'\xAA\xBB\xCC')
        b'AABBCC'
        >>> hexlify(b'\xAA\xBB\xCC', upper=False)
        b'aabbcc'
    """

    hexstr = binascii.hexlify(bytestr)
    return hexstr.upper() if upper else hexstr


def is_hex(text: Union[str, AnyBytes]) -> bool:
    r"""Tells whether a string is made of hexadecimal digits only.

    Signs, whitespace, underscores and prefixes are all rejected, unlike
    :func:`int` with base 16.

    Examples:
        >>> is_hex('00FFab')
        True
        >>> is_hex('+1')
        False
        >>> is_hex('')
        True
    """

    if not isinstance(text, str):
        text = bytes(text).decode('latin-1')
    return all(c in HEX_DIGITS for c in text)


def parse_int(value: Union[str, Any]) -> int:
    r"""Parses an integer option value.

    Strings are case-insensitive: decimal by default, hexadecimal with a
    ``0x`` prefix or an ``h`` suffix, binary with ``0b``, octal with ``0o``.
    Any other object is passed to :func:`int`.

    Examples:
        >>> parse_int('0xFF')
        255
        >>> parse_int('FFh')
        255
        >>> parse_int('0b1010')
        10
    """

    if not isinstance(value, str):
        return int(value)

    m = INT_REGEX.match(value.lower())
    if not m:
        raise ValueError(f'invalid syntax: {value!r}')
    prefix, digits, suffix = m.group('prefix', 'digits', 'suffix')

    if prefix and suffix:
        raise ValueError(f'invalid syntax: {value!r}')
    elif prefix == '0x' or suffix:
        return int(digits, 16)
    elif prefix == '0b':
        return int(digits, 2)
    elif prefix == '0o':
        return int(digits, 8)
    else:
        return int(digits, 10)


def unhexlify(hexstr: Union[str, AnyBytes]) -> bytes:
    r"""Converts a hexadecimal string into raw bytes.

    Each couple of hexadecimal digits becomes one byte, in the same order
    (i.e. big-endian).

    Raises:
        ValueError: Odd length, or non-hexadecimal characters.

    Examples:
        >>> from ihexparse.utils import unhexlify
        >>> unhexlify(b'AABBCC')
        b'\xaa\xbb\xcc'
        >>> unhexlify('XY')
        Traceback (most recent call last):
            ...
        ValueError: invalid hexadecimal string
    """

    if not is_hex(hexstr):
        raise ValueError('invalid hexadecimal string')

    return binascii.unhexlify(hexstr)
