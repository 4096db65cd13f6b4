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

r"""Reassembly of Intel HEX records into binary blocks.

Data records are scanned in file order, extended to absolute addresses, and
merged into :class:`Block` objects as long as their addresses follow each
other without gaps.

The scanner state is an explicit :class:`ScanState` accumulator, advanced
by :func:`scan_record` one record at a time; :func:`reassemble` folds it
over a whole record sequence.
"""

import enum
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Iterable
from typing import List

from .records import IhexRecord
from .records import IhexTag

logger = logging.getLogger(__name__)


class ExtensionKind(enum.Enum):
    r"""Address extension mechanism."""

    NONE = 'none'
    r"""No extension: addresses are plain 16-bit offsets."""

    SEGMENT = 'segment'
    r"""Segment extension: 20-bit addresses, ``value * 16 + offset``."""

    LINEAR = 'linear'
    r"""Linear extension: 32-bit addresses, ``(value << 16) + offset``."""


@dataclass(frozen=True)
class Extension:
    r"""Active address extension.

    Segment and linear extensions exclude each other: a single tagged value
    holds whichever was set last.

    Attributes:
        kind (:class:`ExtensionKind`):
            Extension mechanism.

        value (int):
            16-bit extension value; zero for :attr:`ExtensionKind.NONE`.

    Examples:
        >>> from ihexparse.blocks import Extension
        >>> hex(Extension.segment(0x1234).apply(0x1234))
        '0x13574'
        >>> hex(Extension.linear(0x1234).apply(0x1234))
        '0x12341234'
        >>> hex(Extension.none().apply(0x1234))
        '0x1234'
    """

    kind: ExtensionKind = ExtensionKind.NONE
    value: int = 0

    @classmethod
    def none(cls) -> 'Extension':

        return cls(ExtensionKind.NONE, 0)

    @classmethod
    def segment(cls, value: int) -> 'Extension':

        return cls(ExtensionKind.SEGMENT, value & 0xFFFF)

    @classmethod
    def linear(cls, value: int) -> 'Extension':

        return cls(ExtensionKind.LINEAR, value & 0xFFFF)

    @classmethod
    def from_record(cls, record: IhexRecord) -> 'Extension':
        r"""Reads the extension set by an Extended Address record.

        The value is made of the first two data bytes, big-endian.
        Shorter data is padded with zeros on the right.

        Args:
            record (:class:`IhexRecord`):
                Extended Segment Address or Extended Linear Address record.

        Returns:
            :class:`Extension`: The new active extension.

        Raises:
            ValueError: Not an extension record.
        """

        value = int.from_bytes(record.data[:2].ljust(2, b'\0'), byteorder='big')

        if record.tag == IhexTag.EXTENDED_SEGMENT_ADDRESS:
            return cls.segment(value)
        elif record.tag == IhexTag.EXTENDED_LINEAR_ADDRESS:
            return cls.linear(value)
        else:
            raise ValueError('not an extension record')

    def apply(self, offset: int) -> int:
        r"""Computes the absolute address of an offset.

        Args:
            offset (int):
                16-bit load address of a record.

        Returns:
            int: Absolute address.
        """

        if self.kind is ExtensionKind.SEGMENT:
            return (self.value * 16) + offset
        elif self.kind is ExtensionKind.LINEAR:
            return (self.value << 16) + offset
        else:
            return offset


@dataclass(frozen=True)
class Block:
    r"""Contiguous binary data at an absolute address.

    Attributes:
        start_address (int):
            Absolute address of the first byte.

        data (bytes):
            Block data.
    """

    start_address: int
    data: bytes

    def __len__(self) -> int:

        return len(self.data)

    @property
    def endex(self) -> int:
        r"""int: Exclusive end address."""

        return self.start_address + len(self.data)


@dataclass
class ScanState:
    r"""Block reassembly accumulator.

    Attributes:
        start (int):
            Load address of the block in progress.

        next_address (int):
            Load address a data record must have to extend the block in
            progress.

        pending (bytearray):
            Data accumulated by the block in progress.

        extension (:class:`Extension`):
            Active address extension.

        blocks (list of :class:`Block`):
            Finished blocks, in order.

        done (bool):
            The End Of File record was reached.
    """

    start: int = 0
    next_address: int = 0
    pending: bytearray = field(default_factory=bytearray)
    extension: Extension = field(default_factory=Extension.none)
    blocks: List[Block] = field(default_factory=list)
    done: bool = False

    def flush(self) -> 'ScanState':
        r"""Finishes the block in progress.

        The pending data, if any, is turned into a :class:`Block` at the
        absolute address given by the active extension.
        Empty blocks are discarded.

        Returns:
            :class:`ScanState`: *self*.
        """

        if self.pending:
            address = self.extension.apply(self.start)
            block = Block(address, bytes(self.pending))
            self.blocks.append(block)
            logger.debug('block @ 0x%08X, %d bytes', address, len(block))

        self.start = 0
        self.next_address = 0
        self.pending = bytearray()
        return self


def scan_record(state: ScanState, record: IhexRecord) -> ScanState:
    r"""Advances the reassembly by one record.

    * *Data*: a record not starting at :attr:`ScanState.next_address` finishes
      the block in progress and starts a new one at its own address; its data
      is then appended.
    * *End Of File*: finishes the block in progress and marks the scan as
      :attr:`ScanState.done`.
    * *Extended Segment/Linear Address*: finishes the block in progress and
      replaces the active extension.
    * *Start Segment/Linear Address*: finishes the block in progress.

    Args:
        state (:class:`ScanState`):
            Current state; updated in place.

        record (:class:`IhexRecord`):
            Next record.

    Returns:
        :class:`ScanState`: The updated `state`.
    """

    tag = record.tag

    if tag == IhexTag.DATA:
        if record.address != state.next_address:
            state.flush()
            state.start = record.address
            state.next_address = record.address

        state.pending += record.data
        state.next_address += record.count

    elif tag == IhexTag.END_OF_FILE:
        state.flush()
        state.done = True

    elif tag.is_extension():
        state.flush()
        state.extension = Extension.from_record(record)
        logger.debug('extension: %s 0x%04X', state.extension.kind.value, state.extension.value)

    else:
        state.flush()

    return state


def reassemble(records: Iterable[IhexRecord]) -> List[Block]:
    r"""Reassembles records into contiguous blocks.

    Records are scanned in order by :func:`scan_record`, up to the End Of
    File record; any records after it are ignored.
    If the records run out before an End Of File record, the block in
    progress is finished anyway.

    Args:
        records (list of :class:`IhexRecord`):
            Record sequence.

    Returns:
        list of :class:`Block`: Blocks, in record order.

    Examples:
        >>> from ihexparse.blocks import reassemble
        >>> from ihexparse.records import IhexRecord
        >>> records = [IhexRecord.parse(line) for line in [
        ...     ':020000021000EC',
        ...     ':0400000001020304F2',
        ...     ':00000001FF',
        ... ]]
        >>> reassemble(records)
        [Block(start_address=65536, data=b'\x01\x02\x03\x04')]
    """

    state = ScanState()

    for record in records:
        state = scan_record(state, record)
        if state.done:
            break
    else:
        state.flush()

    return state.blocks
