"""
Tests for the declarative binary schema decoder
"""

import struct

import pytest

from jkconvert.decoders.base import (
    DecodedRecord,
    InvalidLength,
    TruncatedInput,
    ValidationFailed,
)
from jkconvert.decoders.schema import (
    FLOAT32LE,
    INT8,
    INT32LE,
    UINT8,
    UINT16BE,
    UINT16LE,
    Schema,
    array_of,
    fixed_string,
    mipmap_skip,
    remainder,
    scalar,
    skip,
)


class TestPrimitives:
    """Fixed-width fields"""

    def test_endianness(self):
        record = Schema(scalar('le', UINT16LE), scalar('be', UINT16BE)).parse(b'\x01\x00\x00\x01')
        assert record['le'] == 1
        assert record['be'] == 1

    def test_signed_and_float(self):
        data = struct.pack('<if', -5, 1.5)
        record = Schema(scalar('i', INT32LE), scalar('f', FLOAT32LE)).parse(data)
        assert record['i'] == -5
        assert record['f'] == 1.5

    def test_fixed_string(self):
        record = Schema(fixed_string('tag', 4)).parse(b'MAT \x00')
        assert record['tag'] == 'MAT '

    def test_truncated_input(self):
        with pytest.raises(TruncatedInput) as info:
            Schema(scalar('a', UINT8), scalar('b', INT32LE)).parse(b'\x01\x00\x00')
        assert info.value.field == 'b'
        assert info.value.needed == 4
        assert info.value.available == 2
        assert info.value.offset == 1

    def test_declaration_order_and_positions(self):
        record = Schema(scalar('a', UINT8), scalar('b', UINT8), scalar('c', UINT8)).parse(b'\x01\x02\x03')
        assert list(record) == ['a', 'b', 'c']
        assert record[0] == 1
        assert record.at(2) == 3
        assert record.b == 2
        assert isinstance(record, DecodedRecord)


class TestArrays:
    """Static and dynamic repetitions"""

    def test_static_primitive_array(self):
        record = Schema(array_of('values', INT32LE, 3)).parse(struct.pack('<3i', 1, -2, 3))
        assert record['values'] == [1, -2, 3]

    def test_byte_array_is_bytes(self):
        record = Schema(array_of('pixels', UINT8, 4)).parse(b'\x00\x01\x02\x03\x04')
        assert record['pixels'] == b'\x00\x01\x02\x03'

    def test_dynamic_length_uses_earlier_fields(self):
        schema = Schema(
            scalar('count', UINT8),
            array_of('items', UINT16LE, lambda rec: rec['count']),
        )
        record = schema.parse(b'\x02\x01\x00\x02\x00')
        assert record['items'] == [1, 2]

    def test_negative_length(self):
        schema = Schema(scalar('count', INT8), array_of('items', UINT8, lambda rec: rec['count']))
        with pytest.raises(InvalidLength) as info:
            schema.parse(b'\xff')
        assert info.value.length == -1

    def test_length_exceeding_buffer(self):
        schema = Schema(scalar('count', UINT8), array_of('items', UINT16LE, lambda rec: rec['count']))
        with pytest.raises(InvalidLength):
            schema.parse(b'\x05\x00\x00')

    def test_fixed_array_past_end_is_truncation(self):
        schema = Schema(scalar('a', UINT8), array_of('values', INT32LE, 3))
        with pytest.raises(TruncatedInput) as info:
            schema.parse(b'\x01' + struct.pack('<2i', 1, 2))
        assert info.value.field == 'values'
        assert info.value.needed == 12
        assert info.value.available == 8
        assert info.value.offset == 1

    def test_fixed_nested_array_past_end_is_truncation(self):
        point = Schema(scalar('x', INT8), scalar('y', INT8))
        with pytest.raises(TruncatedInput) as info:
            Schema(array_of('points', point, 3)).parse(b'\x01\x02\x03')
        assert info.value.needed == 6

    def test_forward_reference_rejected(self):
        schema = Schema(
            array_of('items', UINT8, lambda rec: rec['count']),
            scalar('count', UINT8),
        )
        with pytest.raises(InvalidLength):
            schema.parse(b'\x01\x01')

    def test_nested_schema_array(self):
        point = Schema(scalar('x', INT8), scalar('y', INT8))
        record = Schema(array_of('points', point, 2)).parse(b'\x01\x02\x03\x04')
        assert [(p['x'], p['y']) for p in record['points']] == [(1, 2), (3, 4)]

    def test_nested_validation_reports_path(self):
        entry = Schema(scalar('magic', UINT8, expected=7))
        schema = Schema(array_of('entries', entry, 3))
        with pytest.raises(ValidationFailed) as info:
            schema.parse(b'\x07\x08\x07')
        assert info.value.field == 'entries[1].magic'
        assert info.value.expected == 7
        assert info.value.actual == 8


class TestValidation:
    """Magic values and predicates"""

    def test_expected_value(self):
        with pytest.raises(ValidationFailed) as info:
            Schema(scalar('version', INT32LE, expected=0x32)).parse(struct.pack('<i', 0x31))
        assert info.value.field == 'version'
        assert info.value.expected == 0x32
        assert info.value.actual == 0x31

    def test_predicate(self):
        def even(value):
            return value % 2 == 0

        schema = Schema(scalar('a', UINT8, validator=even))
        assert schema.parse(b'\x04')['a'] == 4
        with pytest.raises(ValidationFailed) as info:
            schema.parse(b'\x03')
        assert info.value.expected == 'even'

    def test_failure_aborts_record(self):
        schema = Schema(scalar('a', UINT8), scalar('b', UINT8, expected=0), scalar('c', UINT8))
        with pytest.raises(ValidationFailed):
            schema.parse(b'\x01\x01\x01')


class TestSkipAndRemainder:
    """Cursor moves without output, and buffer hand-off"""

    def test_skip_is_not_stored(self):
        schema = Schema(scalar('n', UINT8), skip(lambda rec: rec.n), scalar('after', UINT8))
        record = schema.parse(b'\x02\xaa\xbb\x07')
        assert record['after'] == 7
        assert list(record) == ['n', 'after']

    def test_skip_past_end(self):
        schema = Schema(scalar('n', UINT8), skip(lambda rec: rec.n))
        with pytest.raises(InvalidLength):
            schema.parse(b'\x09\x00')

    def test_fixed_skip_past_end_is_truncation(self):
        schema = Schema(scalar('n', UINT8), skip(4, name='gap'))
        with pytest.raises(TruncatedInput) as info:
            schema.parse(b'\x09\x00')
        assert info.value.field == 'gap'
        assert info.value.available == 1

    def test_remainder_feeds_next_pass(self):
        first = Schema(scalar('a', UINT8), remainder('rest'))
        second = Schema(scalar('b', UINT8), remainder('rest'))
        outer = first.parse(b'\x01\x02\x03\x04')
        inner = second.parse(outer['rest'])
        assert inner['b'] == 2
        assert inner['rest'] == b'\x03\x04'
        # the same schema objects can be reused
        assert first.parse(b'\x09')['rest'] == b''

    def test_parse_stream_offsets(self):
        schema = Schema(scalar('a', UINT16LE))
        record, end = schema.parse_stream(b'\x00\x01\x00\x02\x00', offset=1)
        assert record['a'] == 1
        assert end == 3

    def test_static_size(self):
        assert Schema(scalar('a', INT32LE), array_of('b', UINT8, 3), skip(2)).size == 9
        assert Schema(array_of('b', UINT8, lambda rec: 1)).size is None


class TestMipmapSkip:
    """Byte count of mip levels after the base image"""

    def test_three_levels_four_by_four(self):
        assert mipmap_skip(4, 4, 3) == 12

    def test_single_level_skips_nothing(self):
        assert mipmap_skip(64, 64, 1) == 0
        assert mipmap_skip(64, 64, 0) == 0

    def test_floor_division(self):
        assert mipmap_skip(3, 3, 4) == 4 + 2 + 1
