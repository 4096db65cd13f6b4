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

r"""Base types and error hierarchy."""

import enum
import os
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Union

import colorama

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    TypeAlias = Any  # Python < 3.10

AnyBytes: TypeAlias = Union[bytes, bytearray, memoryview]
AnyText: TypeAlias = Union[str, bytes, bytearray, memoryview]
AnyPath: TypeAlias = Union[bytes, bytearray, str, os.PathLike]

TOKEN_COLOR_CODES: Mapping[str, bytes] = {
    '':         colorama.Style.RESET_ALL.encode(),
    '<':        colorama.Style.RESET_ALL.encode(),
    '>':        colorama.Style.RESET_ALL.encode(),
    'address':  colorama.Fore.RED.encode(),
    'begin':    colorama.Fore.YELLOW.encode(),
    'checksum': colorama.Fore.MAGENTA.encode(),
    'count':    colorama.Fore.BLUE.encode(),
    'data':     colorama.Fore.CYAN.encode(),
    'dataalt':  colorama.Fore.LIGHTCYAN_EX.encode(),
    'tag':      colorama.Fore.GREEN.encode(),
}
r"""ANSI color codes for each possible token type."""


def colorize_tokens(
    tokens: Mapping[str, bytes],
    altdata: bool = True,
) -> Mapping[str, bytes]:
    r"""Prepends ANSI color codes to record field tokens.

    For each token within `tokens`, its key is used to look up the ANSI color
    code from :data:`TOKEN_COLOR_CODES`.
    The retrieved code (byte string) is prepended to the token.
    All the modified tokens are then collected and returned.

    Args:
        tokens (dict):
            A mapping of each token key name to token byte string.

        altdata (bool):
            If true, it alternates each byte (two hex digits) between the ANSI
            color codes mapped with keys ``data`` (even byte index) and
            ``dataalt`` (odd byte index).
            If false, only the ``data`` code is prepended.

    Returns:
        dict: `tokens` with prepended ANSI color codes, wrapped by the reset
        codes ``'<'`` and ``'>'``.
    """

    codes = TOKEN_COLOR_CODES
    colorized = {}
    colorized.setdefault('<', codes['<'])

    for key, value in tokens.items():
        if key not in codes:
            key = ''
        if value:
            code = codes[key]

            if key == 'data' and altdata:
                altcode = codes['dataalt']
                buffer = bytearray()
                length = len(value)
                i = 0

                for i in range(0, length - 1, 2):
                    buffer.extend(altcode if i & 2 else code)
                    buffer.append(value[i])
                    buffer.append(value[i + 1])

                if length & 1:
                    buffer.extend(code if i & 2 else altcode)
                    buffer.append(value[length - 1])

                colorized[key] = bytes(buffer)
            else:
                colorized[key] = code + value

    colorized.setdefault('>', codes['>'])
    return colorized


class ErrorKind(enum.Enum):
    r"""Parse failure kind.

    Each member names one reason for rejecting an Intel HEX text.
    The value is the human readable description of the failure.
    """

    INVALID_LENGTH = "The record's length is invalid."
    r"""Record shorter than the minimum frame, or not matching its count."""

    INVALID_CHECKSUM = "The record's checksum is invalid."
    r"""Sum of the record bytes modulo 256 is not zero."""

    INVALID_BYTE_COUNT = "The record's byte count is invalid."
    r"""Byte count field is not hexadecimal."""

    INVALID_ADDRESS = "The record's address field is invalid."
    r"""Address field is not hexadecimal."""

    INVALID_TYPE = "The record's type field is invalid."
    r"""Type field is not hexadecimal, or not a known record type."""

    INVALID_DATA = "The record's data field is invalid."
    r"""Data field is not hexadecimal."""

    INVALID_END_OF_FILE = ('The file does not contain an EOF record '
                           'or contains multiple EOF records.')
    r"""Not exactly one End Of File record."""


class ParseError(ValueError):
    r"""Intel HEX parse error.

    Root of the parser exceptions.
    It derives from :class:`ValueError`, so that callers can keep catching
    plain value errors.

    Args:
        message (str):
            Custom message; defaults to the :attr:`kind` description.

        line (int):
            1-based position of the offending record, if known.

    Attributes:
        kind (:class:`ErrorKind`):
            Failure kind, overridden by each subclass.

        line (int):
            1-based position of the offending record, or ``None``.
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: Optional[str] = None,
        line: Optional[int] = None,
    ):

        if message is None:
            message = self.kind.value if self.kind is not None else 'parse error'
        super().__init__(message)
        self.message: str = message
        self.line: Optional[int] = line

    def __str__(self) -> str:

        if self.line is None:
            return self.message
        return f'record {self.line}: {self.message}'


class InvalidLengthError(ParseError):
    kind = ErrorKind.INVALID_LENGTH


class InvalidChecksumError(ParseError):
    kind = ErrorKind.INVALID_CHECKSUM


class InvalidByteCountError(ParseError):
    kind = ErrorKind.INVALID_BYTE_COUNT


class InvalidAddressError(ParseError):
    kind = ErrorKind.INVALID_ADDRESS


class InvalidTypeError(ParseError):
    kind = ErrorKind.INVALID_TYPE


class InvalidDataError(ParseError):
    kind = ErrorKind.INVALID_DATA


class InvalidEndOfFileError(ParseError):
    kind = ErrorKind.INVALID_END_OF_FILE
