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

r"""Intel HEX records.

Decoding of a single Intel HEX record line into an :class:`IhexRecord`.

See Also:
    `<https://en.wikipedia.org/wiki/Intel_HEX>`_
"""

import enum
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Mapping
from typing import Optional
from typing import Type

from .base import AnyText
from .base import InvalidAddressError
from .base import InvalidByteCountError
from .base import InvalidChecksumError
from .base import InvalidDataError
from .base import InvalidLengthError
from .base import InvalidTypeError
from .base import ParseError
from .utils import hexlify
from .utils import unhexlify

logger = logging.getLogger(__name__)

COUNT_LENGTH: int = 2
r"""Hexadecimal digits of the byte count field."""

ADDRESS_LENGTH: int = 4
r"""Hexadecimal digits of the address field."""

TAG_LENGTH: int = 2
r"""Hexadecimal digits of the record type field."""

CHECKSUM_LENGTH: int = 2
r"""Hexadecimal digits of the checksum field."""

MIN_LENGTH: int = COUNT_LENGTH + ADDRESS_LENGTH + TAG_LENGTH + CHECKSUM_LENGTH
r"""Hexadecimal digits of a record without data."""

DATA_OFFSET: int = COUNT_LENGTH + ADDRESS_LENGTH + TAG_LENGTH
r"""Offset of the data field within a record line."""


class IhexTag(enum.IntEnum):
    r"""Intel HEX record type."""

    DATA = 0
    r"""Binary data."""

    END_OF_FILE = 1
    r"""End Of File."""

    EXTENDED_SEGMENT_ADDRESS = 2
    r"""Extended Segment Address."""

    START_SEGMENT_ADDRESS = 3
    r"""Start Segment Address."""

    EXTENDED_LINEAR_ADDRESS = 4
    r"""Extended Linear Address."""

    START_LINEAR_ADDRESS = 5
    r"""Start Linear Address."""

    def is_data(self) -> bool:
        r"""Tells whether this is a Data record tag.

        Returns:
            bool: This is a Data record tag.

        Examples:
            >>> from ihexparse.records import IhexTag
            >>> IhexTag.DATA.is_data()
            True
            >>> IhexTag.END_OF_FILE.is_data()
            False
        """

        return self == self.DATA

    def is_eof(self) -> bool:
        r"""Tells whether this is an End Of File record tag.

        Returns:
            bool: This is an End Of File record tag.

        Examples:
            >>> from ihexparse.records import IhexTag
            >>> IhexTag.END_OF_FILE.is_eof()
            True
            >>> IhexTag.DATA.is_eof()
            False
        """

        return self == self.END_OF_FILE

    def is_extension(self) -> bool:
        r"""Tells whether this is an Extended Address record tag.

        Returns:
            bool: This is an Extended Address record tag.

        Examples:
            >>> from ihexparse.records import IhexTag
            >>> IhexTag.EXTENDED_LINEAR_ADDRESS.is_extension()
            True
            >>> IhexTag.EXTENDED_SEGMENT_ADDRESS.is_extension()
            True
            >>> IhexTag.DATA.is_extension()
            False
        """

        return ((self == self.EXTENDED_SEGMENT_ADDRESS) or
                (self == self.EXTENDED_LINEAR_ADDRESS))

    def is_start(self) -> bool:
        r"""Tells whether this is a Start Address record tag.

        Returns:
            bool: This is a Start Address record tag.

        Examples:
            >>> from ihexparse.records import IhexTag
            >>> IhexTag.START_LINEAR_ADDRESS.is_start()
            True
            >>> IhexTag.START_SEGMENT_ADDRESS.is_start()
            True
            >>> IhexTag.DATA.is_start()
            False
        """

        return ((self == self.START_SEGMENT_ADDRESS) or
                (self == self.START_LINEAR_ADDRESS))


def _decode_field(
    text: str,
    error_type: Type[ParseError],
    row: Optional[int],
) -> bytes:

    try:
        return unhexlify(text)
    except ValueError:
        logger.debug('record %s: bad field %r', row, text)
        raise error_type(line=row) from None


@dataclass(frozen=True)
class IhexRecord:
    r"""Intel HEX record object.

    A record is built once by :meth:`parse` out of a line of text, and never
    changes afterwards.

    Attributes:
        count (int):
            Byte count, i.e. the length of :attr:`data`.

        address (int):
            16-bit load address; its meaning depends on :attr:`tag`.

        tag (:class:`IhexTag`):
            Record type.

        data (bytes):
            Payload bytes, in file order.

        checksum (int):
            Checksum byte, as found in the record.

        row (int):
            1-based position of the record within its file, if known.
            Not taken into account by equality checks.
    """

    count: int
    address: int
    tag: IhexTag
    data: bytes
    checksum: int
    row: Optional[int] = field(default=None, compare=False)

    @classmethod
    def build(
        cls,
        tag: IhexTag,
        address: int = 0,
        data: bytes = b'',
    ) -> 'IhexRecord':
        r"""Builds a record with consistent count and checksum.

        Args:
            tag (:class:`IhexTag`):
                Record type.

            address (int):
                16-bit load address.

            data (bytes):
                Payload bytes.

        Returns:
            :class:`IhexRecord`: Record object.

        Raises:
            ValueError: Field overflow.

        Examples:
            >>> from ihexparse.records import IhexRecord, IhexTag
            >>> record = IhexRecord.build(IhexTag.END_OF_FILE)
            >>> record.checksum
            255
        """

        address = address.__index__()
        if not 0 <= address <= 0xFFFF:
            raise ValueError('address overflow')

        data = bytes(data)
        count = len(data)
        if count > 0xFF:
            raise ValueError('data size overflow')

        tag = IhexTag(tag)
        checksum = cls.compute_checksum_of(count, address, tag, data)
        return cls(count, address, tag, data, checksum)

    @staticmethod
    def compute_checksum_of(
        count: int,
        address: int,
        tag: int,
        data: bytes,
    ) -> int:

        sum_address = (address >> 8) + (address & 0xFF)
        checksum = count + sum_address + tag + sum(data)
        checksum = (0x100 - (checksum & 0xFF)) & 0xFF
        return checksum

    def compute_checksum(self) -> int:
        r"""Computes the checksum the record fields require.

        Returns:
            int: Two's complement of the sum of the record fields.

        Examples:
            >>> from ihexparse.records import IhexRecord
            >>> record = IhexRecord.parse(':0B0010006164647265737320676170A7')
            >>> record.compute_checksum()
            167
        """

        return self.compute_checksum_of(self.count, self.address, self.tag, self.data)

    def data_to_int(self) -> int:
        r"""Interprets data bytes as a big-endian unsigned integer.

        Examples:
            >>> from ihexparse.records import IhexRecord
            >>> record = IhexRecord.parse(':020000041234B4')
            >>> hex(record.data_to_int())
            '0x1234'
        """

        return int.from_bytes(self.data, byteorder='big')

    @classmethod
    def parse(
        cls,
        line: AnyText,
        row: Optional[int] = None,
    ) -> 'IhexRecord':
        r"""Parses a record from a line of text.

        Surrounding whitespace and one leading colon are ignored.

        Fields are checked in a fixed order, so that each malformation is
        reported by its own exception class:

        #. at least the fixed fields must be present
           (:class:`InvalidLengthError`);
        #. the byte count must be hexadecimal
           (:class:`InvalidByteCountError`);
        #. the line length must match the byte count exactly
           (:class:`InvalidLengthError`);
        #. the address must be hexadecimal (:class:`InvalidAddressError`);
        #. the type must be a known hexadecimal tag
           (:class:`InvalidTypeError`);
        #. the data must be hexadecimal (:class:`InvalidDataError`);
        #. the sum of all the record bytes, checksum included, must be zero
           modulo 256 (:class:`InvalidChecksumError`).

        Args:
            line (str or bytes):
                Line of text to parse.

            row (int):
                1-based position of the record, stored into :attr:`row` and
                into any raised exception.

        Returns:
            :class:`IhexRecord`: Parsed record.

        Raises:
            ParseError: Malformed record.

        Examples:
            >>> from ihexparse.records import IhexRecord
            >>> record = IhexRecord.parse(':00000001FF')
            >>> record.tag
            <IhexTag.END_OF_FILE: 1>
            >>> IhexRecord.parse(':00000001FE')
            Traceback (most recent call last):
                ...
            ihexparse.base.InvalidChecksumError: The record's checksum is invalid.
        """

        if not isinstance(line, str):
            line = bytes(line).decode('latin-1')
        text = line.strip()
        if text.startswith(':'):
            text = text[1:]

        if len(text) < MIN_LENGTH:
            logger.debug('record %s: too short (%d)', row, len(text))
            raise InvalidLengthError(line=row)

        count = _decode_field(text[:COUNT_LENGTH], InvalidByteCountError, row)[0]

        if len(text) != MIN_LENGTH + (count * 2):
            logger.debug('record %s: length %d does not match count %d', row, len(text), count)
            raise InvalidLengthError(line=row)

        address_text = text[COUNT_LENGTH:(COUNT_LENGTH + ADDRESS_LENGTH)]
        address = int.from_bytes(_decode_field(address_text, InvalidAddressError, row), 'big')

        tag_text = text[(COUNT_LENGTH + ADDRESS_LENGTH):DATA_OFFSET]
        tag_value = _decode_field(tag_text, InvalidTypeError, row)[0]
        try:
            tag = IhexTag(tag_value)
        except ValueError:
            logger.debug('record %s: unknown type 0x%02X', row, tag_value)
            raise InvalidTypeError(line=row) from None

        data_text = text[DATA_OFFSET:(DATA_OFFSET + (count * 2))]
        data = _decode_field(data_text, InvalidDataError, row)

        raw = _decode_field(text, InvalidDataError, row)
        if sum(raw) & 0xFF:
            logger.debug('record %s: checksum mismatch, expected 0x%02X',
                         row, cls.compute_checksum_of(count, address, tag, data))
            raise InvalidChecksumError(line=row)

        record = cls(count, address, tag, data, raw[-1], row=row)
        logger.debug('record %s: %s @ 0x%04X, %d bytes', row, tag.name, address, count)
        return record

    def to_tokens(self) -> Mapping[str, bytes]:
        r"""Splits the record into field tokens, for display.

        Returns:
            dict: Hexadecimal text of each field.

        Examples:
            >>> from ihexparse.records import IhexRecord
            >>> record = IhexRecord.parse(':00000001FF')
            >>> record.to_tokens()['tag']
            b'01'
        """

        return {
            'begin': b':',
            'count': b'%02X' % (self.count & 0xFF),
            'address': b'%04X' % (self.address & 0xFFFF),
            'tag': b'%02X' % (self.tag & 0xFF),
            'data': hexlify(self.data),
            'checksum': b'%02X' % (self.checksum & 0xFF),
        }
