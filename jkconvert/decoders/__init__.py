# jkconvert/decoders/__init__.py
"""Generic binary and text decoders."""
from .base import (
    DanglingReference,
    DecodedRecord,
    DecodeError,
    InvalidLength,
    SectionNotFound,
    SubDecodeFailed,
    TruncatedInput,
    UnknownSubsection,
    ValidationFailed,
    VertexCountMismatch,
)
from .schema import (
    ArrayOf,
    FieldSpec,
    FixedString,
    Primitive,
    Remainder,
    Schema,
    SkipSpec,
    array_of,
    fixed_string,
    mipmap_skip,
    remainder,
    scalar,
    skip,
)
from .matcher import FULL_MATCH, TextMatcher, TextMatcherBuilder

__all__ = [
    'DanglingReference',
    'DecodedRecord',
    'DecodeError',
    'InvalidLength',
    'SectionNotFound',
    'SubDecodeFailed',
    'TruncatedInput',
    'UnknownSubsection',
    'ValidationFailed',
    'VertexCountMismatch',
    'ArrayOf',
    'FieldSpec',
    'FixedString',
    'Primitive',
    'Remainder',
    'Schema',
    'SkipSpec',
    'array_of',
    'fixed_string',
    'mipmap_skip',
    'remainder',
    'scalar',
    'skip',
    'FULL_MATCH',
    'TextMatcher',
    'TextMatcherBuilder',
]
