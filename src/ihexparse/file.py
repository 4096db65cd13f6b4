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

r"""Intel HEX file object."""

import codecs
import io
import logging
import sys
from typing import IO
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

from bytesparse import Memory

from .base import AnyPath
from .base import AnyText
from .base import InvalidEndOfFileError
from .blocks import Block
from .blocks import reassemble
from .records import IhexRecord
from .records import IhexTag

logger = logging.getLogger(__name__)


def split_records(text: str) -> List[str]:
    r"""Splits text into record strings.

    Records are delimited by colons; whitespace around them is removed, and
    chunks left empty are skipped.

    Args:
        text (str):
            Intel HEX text.

    Returns:
        list of str: Record strings, without the leading colon.

    Examples:
        >>> split_records(':00000001FF\n')
        ['00000001FF']
        >>> split_records('\n:020000021000EC\r\n:00000001FF\r\n')
        ['020000021000EC', '00000001FF']
    """

    chunks = (chunk.strip() for chunk in text.split(':'))
    return [chunk for chunk in chunks if chunk]


class IhexFile:
    r"""Intel HEX file object.

    Holds the decoded :attr:`records` of an Intel HEX text, and the
    :attr:`blocks` of binary data they describe.

    Instances are created by :meth:`parse` or :meth:`load`; a file object is
    only ever returned whole, or not at all.

    Examples:
        >>> from ihexparse import IhexFile
        >>> file = IhexFile.parse(':0300300002337A1E\n:00000001FF\n')
        >>> hex(file.start_address)
        '0x30'
        >>> file.consolidated_data
        b'\x023z'
    """

    FILE_EXT: Sequence[str] = [
        # https://en.wikipedia.org/wiki/Intel_HEX
        '.hex', '.mcs', '.int', '.ihex', '.ihe', '.ihx',
        '.h80', '.h86', '.a43', '.a90',
        '.obj', '.obl', '.obh', '.rom', '.eep',
    ]

    def __init__(
        self,
        records: Sequence[IhexRecord],
        blocks: Sequence[Block],
    ):

        self._records: Tuple[IhexRecord, ...] = tuple(records)
        self._blocks: Tuple[Block, ...] = tuple(blocks)

    def __repr__(self) -> str:

        return (f'<{self.__class__.__name__} records={len(self._records)} '
                f'blocks={len(self._blocks)}>')

    @property
    def blocks(self) -> Tuple[Block, ...]:
        r"""tuple of :class:`Block`: Data blocks, in file order."""

        return self._blocks

    @property
    def consolidated_data(self) -> Optional[bytes]:
        r"""bytes: Data of all the blocks, concatenated in order.

        Holes between blocks are not represented: the result is meaningful
        only if the blocks follow each other.
        See :meth:`to_bytes` for an address-preserving image.

        ``None`` if there are no blocks.
        """

        if not self._blocks:
            return None
        return b''.join(block.data for block in self._blocks)

    @property
    def entry_point(self) -> Optional[int]:
        r"""int: Program entry point.

        Data of the last *Start Segment Address* or *Start Linear Address*
        record, as a big-endian integer.

        ``None`` if there is no such record.

        Examples:
            >>> from ihexparse import IhexFile
            >>> file = IhexFile.parse(':040000050000CAFE2F\n:00000001FF\n')
            >>> hex(file.entry_point)
            '0xcafe'
        """

        record = self.entry_record
        if record is None:
            return None
        return record.data_to_int()

    @property
    def entry_record(self) -> Optional[IhexRecord]:
        r""":class:`IhexRecord`: Last start address record, if any."""

        entry = None
        for record in self._records:
            if record.tag.is_eof():
                break
            if record.tag.is_start():
                entry = record
        return entry

    @property
    def entry_tag(self) -> Optional[IhexTag]:
        r""":class:`IhexTag`: Type of the record setting :attr:`entry_point`."""

        record = self.entry_record
        return None if record is None else record.tag

    def get_spans(self) -> List[Tuple[int, int]]:
        r"""Address ranges holding data.

        Returns:
            list of (int, int): ``(start, endex)`` of each contiguous range of
            the memory image.
        """

        spans = []
        for start, data in self.to_memory().to_blocks():
            spans.append((start, start + len(data)))
        return spans

    @classmethod
    def load(
        cls,
        in_path_or_stream: Optional[Union[AnyPath, IO]],
    ) -> 'IhexFile':
        r"""Loads a file object from the filesystem.

        Args:
            in_path_or_stream (str or IO):
                Path of the file within the filesystem, or input stream.
                If ``None``, ``sys.stdin.buffer`` is used.

        Returns:
            :class:`IhexFile`: Loaded file object.

        Raises:
            ParseError: Malformed Intel HEX text.
        """

        if in_path_or_stream is None:
            in_path_or_stream = sys.stdin.buffer

        if isinstance(in_path_or_stream, io.IOBase):
            return cls.parse(in_path_or_stream)
        else:
            path = str(in_path_or_stream)
            logger.info('loading %s', path)
            with open(path, 'rb') as stream:
                return cls.parse(stream)

    @classmethod
    def parse(
        cls,
        text_or_stream: Union[AnyText, IO],
    ) -> 'IhexFile':
        r"""Parses an Intel HEX text.

        A leading UTF-8 byte order mark is ignored.
        Each record is decoded by :meth:`IhexRecord.parse`; the first failure
        aborts the whole parse.
        Then the records must hold exactly one *End Of File* record.
        Finally, the records are reassembled into blocks by
        :func:`ihexparse.blocks.reassemble`.

        Args:
            text_or_stream (str, bytes or IO):
                Intel HEX text, or a text/binary stream to read it from.

        Returns:
            :class:`IhexFile`: Parsed file object.

        Raises:
            ParseError: Malformed Intel HEX text; :attr:`ParseError.line`
                tells which record, where applicable.

        Examples:
            >>> from ihexparse import IhexFile
            >>> IhexFile.parse(':0300300002337A1E\n')
            Traceback (most recent call last):
                ...
            ihexparse.base.InvalidEndOfFileError: The file does not contain an EOF record or contains multiple EOF records.
        """

        if not isinstance(text_or_stream, (str, bytes, bytearray, memoryview)):
            text_or_stream = text_or_stream.read()
        if isinstance(text_or_stream, str):
            text = text_or_stream
        else:
            data = bytes(text_or_stream)
            if data.startswith(codecs.BOM_UTF8):
                data = data[len(codecs.BOM_UTF8):]
            text = data.decode('latin-1')

        if text.startswith('\ufeff'):
            text = text[1:]

        records = []
        for row, line in enumerate(split_records(text), start=1):
            records.append(IhexRecord.parse(line, row=row))

        eof_count = sum(1 for record in records if record.tag.is_eof())
        if eof_count != 1:
            logger.debug('found %d end of file records', eof_count)
            raise InvalidEndOfFileError()

        blocks = reassemble(records)
        logger.debug('parsed %d records, %d blocks', len(records), len(blocks))
        return cls(records, blocks)

    @property
    def records(self) -> Tuple[IhexRecord, ...]:
        r"""tuple of :class:`IhexRecord`: Decoded records, in file order."""

        return self._records

    @property
    def start_address(self) -> Optional[int]:
        r"""int: Start address of the first block; ``None`` if no blocks."""

        if not self._blocks:
            return None
        return self._blocks[0].start_address

    def to_bytes(
        self,
        fill: int = 0xFF,
    ) -> bytes:
        r"""Flattens the memory image.

        The image spans from the lowest to the highest address holding data.
        Holes are flooded with the `fill` byte.

        Args:
            fill (int):
                Byte value for holes.

        Returns:
            bytes: Memory image, starting at the lowest address.

        Examples:
            >>> from ihexparse import IhexFile
            >>> text = ':02000000ABCD86\n:02000400EF010A\n:00000001FF\n'
            >>> IhexFile.parse(text).to_bytes(fill=0)
            b'\xab\xcd\x00\x00\xef\x01'
        """

        if not 0 <= fill <= 0xFF:
            raise ValueError('invalid fill byte')

        if not self._blocks:
            return b''

        memory = self.to_memory()
        memory.flood(pattern=bytes([fill]))
        with memory.view() as view:
            return bytes(view)

    def to_memory(self) -> Memory:
        r"""Builds the memory image.

        Each block is written at its start address, in order; overlapping
        data of later blocks wins.

        Returns:
            :class:`bytesparse.Memory`: Memory image.
        """

        memory = Memory()
        for block in self._blocks:
            memory.write(block.start_address, block.data)
        return memory


def parse(text_or_stream: Union[AnyText, IO]) -> IhexFile:
    r"""Parses an Intel HEX text.

    Shortcut to :meth:`IhexFile.parse`.
    """

    return IhexFile.parse(text_or_stream)


def load(in_path_or_stream: Optional[Union[AnyPath, IO]]) -> IhexFile:
    r"""Loads an Intel HEX file.

    Shortcut to :meth:`IhexFile.load`.
    """

    return IhexFile.load(in_path_or_stream)
