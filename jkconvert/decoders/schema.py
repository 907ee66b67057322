"""Declarative binary schema decoder.

A :class:`Schema` is an ordered list of field specs walked over a byte
buffer with a single cursor::

    header = Schema(
        fixed_string("tag", 4, expected="MAT "),
        scalar("version", UINT32LE, expected=0x32),
        scalar("count", INT32LE),
        array_of("offsets", UINT32LE, length=lambda rec: rec["count"]),
        skip(8),
        remainder("data"),
    )
    record = header.parse(buffer)

Lengths and skips may be callables; they receive the record decoded so far
(earlier siblings only). Schemas keep no per-call state, so the remainder of
one pass can be fed straight into another schema.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union
import logging

from construct import (
    Construct,
    Float32b,
    Float32l,
    Int8sl,
    Int8ul,
    Int16sb,
    Int16sl,
    Int16ub,
    Int16ul,
    Int32sb,
    Int32sl,
    Int32ub,
    Int32ul,
)

from .base import DecodedRecord, InvalidLength, TruncatedInput, ValidationFailed

logger = logging.getLogger(__name__)

Length = Union[int, Callable[[DecodedRecord], int]]

_MISSING = object()


@dataclass(frozen=True)
class Primitive:
    """Fixed-width scalar backed by a construct format field."""
    name: str
    subcon: Construct

    @property
    def size(self) -> int:
        return self.subcon.sizeof()

    def decode(self, buffer: bytes, offset: int) -> Any:
        return self.subcon.parse(buffer[offset:offset + self.size])


INT8 = Primitive("int8", Int8sl)
UINT8 = Primitive("uint8", Int8ul)
INT16LE = Primitive("int16le", Int16sl)
UINT16LE = Primitive("uint16le", Int16ul)
INT16BE = Primitive("int16be", Int16sb)
UINT16BE = Primitive("uint16be", Int16ub)
INT32LE = Primitive("int32le", Int32sl)
UINT32LE = Primitive("uint32le", Int32ul)
INT32BE = Primitive("int32be", Int32sb)
UINT32BE = Primitive("uint32be", Int32ub)
FLOAT32LE = Primitive("float32le", Float32l)
FLOAT32BE = Primitive("float32be", Float32b)


@dataclass(frozen=True)
class FixedString:
    """Fixed-length string; the raw bytes are decoded without stripping."""
    length: int
    encoding: str = "ascii"

    @property
    def size(self) -> int:
        return self.length


@dataclass(frozen=True)
class ArrayOf:
    """Repetition of a primitive or nested schema, static or dynamic length."""
    element: Union[Primitive, "Schema"]
    length: Length


@dataclass(frozen=True)
class Remainder:
    """All bytes from the cursor to the end of the buffer."""
    pass


@dataclass(frozen=True)
class FieldSpec:
    """One decoded unit of a schema."""
    name: str
    kind: Union[Primitive, FixedString, ArrayOf, Remainder]
    validator: Optional[Callable[[Any], bool]] = None
    expected: Any = _MISSING

    def check(self, value: Any) -> None:
        if self.validator is None:
            return
        if not self.validator(value):
            expected = self.expected
            if expected is _MISSING:
                expected = getattr(self.validator, "__name__", repr(self.validator))
            raise ValidationFailed(self.name, expected, value)


@dataclass(frozen=True)
class SkipSpec:
    """Advance the cursor without producing output."""
    length: Length
    name: str = "skip"


Spec = Union[FieldSpec, SkipSpec]


def scalar(name: str, primitive: Primitive, expected: Any = _MISSING,
           validator: Optional[Callable[[Any], bool]] = None) -> FieldSpec:
    """Scalar field, optionally checked against an expected value or predicate."""
    if expected is not _MISSING and validator is None:
        validator = _equals(expected)
    return FieldSpec(name, primitive, validator, expected)


def fixed_string(name: str, length: int, encoding: str = "ascii",
                 expected: Any = _MISSING) -> FieldSpec:
    validator = _equals(expected) if expected is not _MISSING else None
    return FieldSpec(name, FixedString(length, encoding), validator, expected)


def array_of(name: str, element: Union[Primitive, "Schema"], length: Length,
             validator: Optional[Callable[[Any], bool]] = None) -> FieldSpec:
    return FieldSpec(name, ArrayOf(element, length), validator)


def skip(length: Length, name: str = "skip") -> SkipSpec:
    return SkipSpec(length, name)


def remainder(name: str) -> FieldSpec:
    return FieldSpec(name, Remainder())


def mipmap_skip(size_x: int, size_y: int, mipmap_count: int) -> int:
    """Bytes taken by mip levels 1..mipmap_count-1 of a size_x*size_y image.

    Level 0 is the base image and is never part of the skip.
    """
    base = size_x * size_y
    return sum(base // (2 ** level) for level in range(1, mipmap_count))


def _equals(expected: Any) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return value == expected
    check.__name__ = f"equals_{expected!r}"
    return check


class Schema:
    """Ordered sequence of field and skip specs."""

    def __init__(self, *specs: Spec, name: Optional[str] = None):
        self.specs: Tuple[Spec, ...] = tuple(specs)
        self.name = name or "schema"

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, {len(self.specs)} specs)"

    @property
    def size(self) -> Optional[int]:
        """Byte size when every spec has a static width, else None."""
        total = 0
        for spec in self.specs:
            width = _static_width(spec)
            if width is None:
                return None
            total += width
        return total

    def parse(self, buffer: bytes, offset: int = 0) -> DecodedRecord:
        record, _ = self.parse_stream(buffer, offset)
        return record

    def parse_stream(self, buffer: bytes, offset: int = 0) -> Tuple[DecodedRecord, int]:
        """Decode one record starting at ``offset``; returns (record, end offset)."""
        if not isinstance(buffer, bytes):
            buffer = bytes(buffer)
        record = DecodedRecord()
        cursor = offset
        for spec in self.specs:
            if isinstance(spec, SkipSpec):
                cursor = self._skip(spec, buffer, cursor, record)
                continue
            value, cursor = self._decode_field(spec, buffer, cursor, record)
            spec.check(value)
            record[spec.name] = value
        return record, cursor

    def _skip(self, spec: SkipSpec, buffer: bytes, cursor: int, record: DecodedRecord) -> int:
        count = _resolve_length(spec.name, spec.length, record)
        available = len(buffer) - cursor
        if count > available:
            if callable(spec.length):
                raise InvalidLength(spec.name, count, available)
            raise TruncatedInput(spec.name, count, available, cursor)
        logger.debug(f"{self.name}: skipping {count} bytes at offset {cursor}")
        return cursor + count

    def _decode_field(self, spec: FieldSpec, buffer: bytes, cursor: int,
                      record: DecodedRecord) -> Tuple[Any, int]:
        kind = spec.kind
        if isinstance(kind, Primitive):
            _require(spec.name, buffer, cursor, kind.size)
            return kind.decode(buffer, cursor), cursor + kind.size

        if isinstance(kind, FixedString):
            _require(spec.name, buffer, cursor, kind.length)
            raw = buffer[cursor:cursor + kind.length]
            return raw.decode(kind.encoding, "replace"), cursor + kind.length

        if isinstance(kind, Remainder):
            return buffer[cursor:], len(buffer)

        if isinstance(kind, ArrayOf):
            return self._decode_array(spec.name, kind, buffer, cursor, record)

        raise TypeError(f"Unsupported field kind for '{spec.name}': {kind!r}")

    def _decode_array(self, name: str, kind: ArrayOf, buffer: bytes, cursor: int,
                      record: DecodedRecord) -> Tuple[Any, int]:
        count = _resolve_length(name, kind.length, record)
        element = kind.element
        available = len(buffer) - cursor
        width = element.size
        if width is not None and count * width > available:
            # a computed count that overruns is a bad length, a fixed one is a short buffer
            if callable(kind.length):
                raise InvalidLength(name, count, available)
            raise TruncatedInput(name, count * width, available, cursor)

        if element == UINT8:
            return buffer[cursor:cursor + count], cursor + count

        if isinstance(element, Primitive):
            values = []
            for _ in range(count):
                values.append(element.decode(buffer, cursor))
                cursor += width
            return values, cursor

        items = []
        for index in range(count):
            try:
                item, cursor = element.parse_stream(buffer, cursor)
            except ValidationFailed as e:
                raise ValidationFailed(f"{name}[{index}].{e.field}", e.expected, e.actual) from e
            items.append(item)
        return items, cursor


def _static_width(spec: Spec) -> Optional[int]:
    if isinstance(spec, SkipSpec):
        return spec.length if isinstance(spec.length, int) else None
    kind = spec.kind
    if isinstance(kind, (Primitive, FixedString)):
        return kind.size
    if isinstance(kind, ArrayOf) and isinstance(kind.length, int):
        width = kind.element.size
        return None if width is None else width * kind.length
    return None


def _resolve_length(name: str, length: Length, record: DecodedRecord) -> int:
    if callable(length):
        try:
            value = length(record)
        except (KeyError, AttributeError) as e:
            # Only earlier siblings are visible to a length function
            raise InvalidLength(name, f"unresolved reference {e}") from e
    else:
        value = length
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidLength(name, value)
    return value


def _require(name: str, buffer: bytes, cursor: int, needed: int) -> None:
    available = len(buffer) - cursor
    if available < needed:
        raise TruncatedInput(name, needed, max(available, 0), cursor)
