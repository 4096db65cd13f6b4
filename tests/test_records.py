import pytest
from test_base import make_record

from ihexparse.base import InvalidAddressError
from ihexparse.base import InvalidByteCountError
from ihexparse.base import InvalidChecksumError
from ihexparse.base import InvalidDataError
from ihexparse.base import InvalidLengthError
from ihexparse.base import InvalidTypeError
from ihexparse.records import MIN_LENGTH
from ihexparse.records import IhexRecord
from ihexparse.records import IhexTag

DATA = IhexTag.DATA
EOF = IhexTag.END_OF_FILE
ESA = IhexTag.EXTENDED_SEGMENT_ADDRESS
SSA = IhexTag.START_SEGMENT_ADDRESS
ELA = IhexTag.EXTENDED_LINEAR_ADDRESS
SLA = IhexTag.START_LINEAR_ADDRESS

DATA_LINE = ':10010000214601360121470136007EFE09D2190140'
DATA_BYTES = bytes.fromhex('214601360121470136007EFE09D21901')


class TestIhexTag:

    def test_enum(self):
        assert IhexTag.DATA == 0
        assert IhexTag.END_OF_FILE == 1
        assert IhexTag.EXTENDED_SEGMENT_ADDRESS == 2
        assert IhexTag.START_SEGMENT_ADDRESS == 3
        assert IhexTag.EXTENDED_LINEAR_ADDRESS == 4
        assert IhexTag.START_LINEAR_ADDRESS == 5
        assert len(IhexTag) == 6

    def test_is_data(self):
        assert DATA.is_data() is True
        assert EOF.is_data() is False
        assert ESA.is_data() is False
        assert SSA.is_data() is False
        assert ELA.is_data() is False
        assert SLA.is_data() is False

    def test_is_eof(self):
        assert DATA.is_eof() is False
        assert EOF.is_eof() is True
        assert ESA.is_eof() is False
        assert SSA.is_eof() is False
        assert ELA.is_eof() is False
        assert SLA.is_eof() is False

    def test_is_extension(self):
        assert DATA.is_extension() is False
        assert EOF.is_extension() is False
        assert ESA.is_extension() is True
        assert SSA.is_extension() is False
        assert ELA.is_extension() is True
        assert SLA.is_extension() is False

    def test_is_start(self):
        assert DATA.is_start() is False
        assert EOF.is_start() is False
        assert ESA.is_start() is False
        assert SSA.is_start() is True
        assert ELA.is_start() is False
        assert SLA.is_start() is True


class TestIhexRecord:

    def test_build(self):
        record = IhexRecord.build(DATA, 0x0100, DATA_BYTES)
        assert record.count == 16
        assert record.address == 0x0100
        assert record.tag is DATA
        assert record.data == DATA_BYTES
        assert record.checksum == 0x40
        assert record.row is None
        assert record == IhexRecord.parse(DATA_LINE)

    def test_build_eof(self):
        record = IhexRecord.build(EOF)
        assert record == IhexRecord(0, 0, EOF, b'', 0xFF)

    def test_build_raises(self):
        with pytest.raises(ValueError, match='address overflow'):
            IhexRecord.build(DATA, -1)

        with pytest.raises(ValueError, match='address overflow'):
            IhexRecord.build(DATA, 0x10000)

        with pytest.raises(ValueError, match='data size overflow'):
            IhexRecord.build(DATA, 0, bytes(256))

        with pytest.raises(ValueError):
            IhexRecord.build(6)

    # https://en.wikipedia.org/wiki/Intel_HEX#Record_types
    def test_compute_checksum(self):
        vector = [
            (0xA7, ':0B0010006164647265737320676170A7'),
            (0xFF, ':00000001FF'),
            (0xEA, ':020000021200EA'),
            (0xC1, ':0400000300003800C1'),
            (0xF2, ':020000040800F2'),
            (0x2A, ':04000005000000CD2A'),
        ]
        for expected, line in vector:
            record = IhexRecord.parse(line)
            assert record.checksum == expected
            assert record.compute_checksum() == expected

    def test_data_to_int(self):
        assert IhexRecord.parse(':020000041234B4').data_to_int() == 0x1234
        assert IhexRecord.parse(':04000005000000CD2A').data_to_int() == 0xCD
        assert IhexRecord.parse(':00000001FF').data_to_int() == 0

    def test_frozen(self):
        record = IhexRecord.parse(DATA_LINE)
        with pytest.raises(AttributeError):
            record.address = 0  # type: ignore

    def test_parse(self):
        record = IhexRecord.parse(DATA_LINE)
        assert record.count == 16
        assert record.address == 0x0100
        assert record.tag is DATA
        assert record.data == DATA_BYTES
        assert record.checksum == 0x40

    def test_parse_bytes(self):
        record = IhexRecord.parse(DATA_LINE.encode())
        assert record == IhexRecord.parse(DATA_LINE)

        record = IhexRecord.parse(bytearray(b':00000001FF'))
        assert record.tag is EOF

    def test_parse_lowercase(self):
        record = IhexRecord.parse(':020000021000ec')
        assert record.tag is ESA
        assert record.data == b'\x10\x00'

    def test_parse_no_colon(self):
        record = IhexRecord.parse('00000001FF')
        assert record.tag is EOF

    def test_parse_row(self):
        record = IhexRecord.parse(DATA_LINE, row=3)
        assert record.row == 3

    def test_parse_whitespace(self):
        record = IhexRecord.parse('  :00000001FF \r\n')
        assert record.tag is EOF
        record = IhexRecord.parse('\t020000021000EC\n')
        assert record.tag is ESA

    def test_parse_wikipedia(self):
        lines = [
            ':0B0010006164647265737320676170A7',
            ':00000001FF',
            ':020000021200EA',
            ':0400000300003800C1',
            ':020000040800F2',
            ':04000005000000CD2A',
        ]
        expected = [
            IhexRecord(0x0B, 0x0010, DATA, b'address gap', 0xA7),
            IhexRecord(0x00, 0x0000, EOF, b'', 0xFF),
            IhexRecord(0x02, 0x0000, ESA, b'\x12\x00', 0xEA),
            IhexRecord(0x04, 0x0000, SSA, b'\x00\x00\x38\x00', 0xC1),
            IhexRecord(0x02, 0x0000, ELA, b'\x08\x00', 0xF2),
            IhexRecord(0x04, 0x0000, SLA, b'\x00\x00\x00\xCD', 0x2A),
        ]
        actual = [IhexRecord.parse(line) for line in lines]
        assert actual == expected

    def test_parse_zero_count(self):
        record = IhexRecord.parse(':00000001FF')
        assert record.count == 0
        assert record.data == b''

        record = IhexRecord.parse(make_record('1234', '00', ''))
        assert record.tag is DATA
        assert record.count == 0
        assert record.address == 0x1234

    def test_parse_max_count(self):
        line = make_record('0000', '00', 'A5' * 255)
        record = IhexRecord.parse(line)
        assert record.count == 255
        assert record.data == b'\xA5' * 255

    def test_parse_idempotent(self):
        record1 = IhexRecord.parse(DATA_LINE, row=1)
        record2 = IhexRecord.parse(DATA_LINE, row=2)
        assert record1 is not record2
        assert record1 == record2
        assert hash(record1) == hash(record2)

    def test_parse_raises_length_min(self):
        for line in ['', ':', ':00', ':000000', ':00000001F']:
            with pytest.raises(InvalidLengthError):
                IhexRecord.parse(line)
        assert MIN_LENGTH == 10

    def test_parse_raises_length_exact(self):
        with pytest.raises(InvalidLengthError):
            IhexRecord.parse(':10010000214601360121470136007EFE09D219014000')

        with pytest.raises(InvalidLengthError):
            IhexRecord.parse(':10010000214601360121470136007EFE09D21940')

        with pytest.raises(InvalidLengthError):
            IhexRecord.parse(':0000000100FF')

    def test_parse_raises_byte_count(self):
        with pytest.raises(InvalidByteCountError):
            IhexRecord.parse(':XX010000214601360121470136007EFE09D2190140')

        with pytest.raises(InvalidByteCountError):
            IhexRecord.parse(':+0000001FF')

    def test_parse_raises_byte_count_before_length(self):
        with pytest.raises(InvalidByteCountError):
            IhexRecord.parse(':ZZ00000001FF00')

    def test_parse_raises_address(self):
        with pytest.raises(InvalidAddressError):
            IhexRecord.parse(':10XXXX00214601360121470136007EFE09D2190140')

        with pytest.raises(InvalidAddressError):
            IhexRecord.parse(':00 00001FF')

    def test_parse_raises_type(self):
        with pytest.raises(InvalidTypeError):
            IhexRecord.parse(':10010006214601360121470136007EFE09D2190140')

        with pytest.raises(InvalidTypeError):
            IhexRecord.parse(':000000ZZFF')

        with pytest.raises(InvalidTypeError):
            IhexRecord.parse(':00000006F9')

        with pytest.raises(InvalidTypeError):
            IhexRecord.parse(':000000FF01')

    def test_parse_raises_data(self):
        with pytest.raises(InvalidDataError):
            IhexRecord.parse(':10010000XXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX40')

        with pytest.raises(InvalidDataError):
            IhexRecord.parse(':020000001G0000')

    def test_parse_raises_checksum_not_hex(self):
        with pytest.raises(InvalidDataError):
            IhexRecord.parse(':00000001XX')

    def test_parse_raises_checksum(self):
        with pytest.raises(InvalidChecksumError):
            IhexRecord.parse(':10010000214601360121470136007EFE09D2190100')

        with pytest.raises(InvalidChecksumError):
            IhexRecord.parse(':00000001FE')

    def test_parse_raises_checksum_any_flip(self):
        head, checksum = DATA_LINE[:-2], DATA_LINE[-2:]
        for index in range(2):
            for digit in '0123456789ABCDEF':
                if digit == checksum[index]:
                    continue
                flipped = list(checksum)
                flipped[index] = digit
                line = head + ''.join(flipped)
                with pytest.raises(InvalidChecksumError):
                    IhexRecord.parse(line)

    def test_parse_raises_checksum_data_flip(self):
        line = DATA_LINE[:10] + '3' + DATA_LINE[11:]
        with pytest.raises(InvalidChecksumError):
            IhexRecord.parse(line)

    def test_parse_raises_row(self):
        with pytest.raises(InvalidChecksumError) as info:
            IhexRecord.parse(':00000001FE', row=5)
        assert info.value.line == 5
        assert str(info.value).startswith('record 5: ')

    def test_parse_raises_not_value_error_only(self):
        with pytest.raises(ValueError):
            IhexRecord.parse(':00000001FE')

    def test_to_tokens(self):
        record = IhexRecord.parse(':0B0010006164647265737320676170A7')
        tokens = record.to_tokens()
        assert tokens == {
            'begin': b':',
            'count': b'0B',
            'address': b'0010',
            'tag': b'00',
            'data': b'6164647265737320676170',
            'checksum': b'A7',
        }
        assert b''.join(tokens.values()) == b':0B0010006164647265737320676170A7'
