# jkconvert/formats/mat/structures.py
"""MAT container layout and decoded structures."""
from dataclasses import dataclass, field
from typing import List

from ...decoders.base import DecodedRecord
from ...decoders.schema import (
    INT32LE,
    UINT8,
    UINT32LE,
    Schema,
    array_of,
    fixed_string,
    mipmap_skip,
    remainder,
    scalar,
    skip,
)

MAT_TAG = "MAT "
MAT_VERSION = 0x32
MAGIC_ONE = 0x3F800000  # 1.0f


def non_negative(value: int) -> bool:
    return value >= 0


HEADER_SCHEMA = Schema(
    fixed_string("tag", 4, expected=MAT_TAG),
    scalar("version", UINT32LE, expected=MAT_VERSION),
    scalar("type", INT32LE),
    scalar("numTex", INT32LE),
    scalar("numTex1", INT32LE),
    scalar("_zero", INT32LE, expected=0),
    scalar("_eight", INT32LE, expected=8),
    array_of("_pad", INT32LE, 12),
    remainder("data"),
    name="mat_header",
)

MAGIC_VALUE_SCHEMA = Schema(
    scalar("_magicValue", INT32LE, expected=MAGIC_ONE),
    name="mat_magic",
)

TEXTURE_ENTRY_SCHEMA = Schema(
    scalar("texType", INT32LE),
    scalar("_colornum", INT32LE),
    array_of("_magicValues", MAGIC_VALUE_SCHEMA, 4),
    array_of("_unknown", INT32LE, 2),
    # Documented as 0xBFF78482 but real files disagree; left unchecked
    scalar("_magicValue2", INT32LE),
    scalar("texNum", INT32LE),
    name="mat_texture_entry",
)

TEXTURE_DATA_SCHEMA = Schema(
    scalar("sizeX", INT32LE, validator=non_negative),
    scalar("sizeY", INT32LE, validator=non_negative),
    array_of("_pad", UINT32LE, 3),
    scalar("mipMaps", INT32LE),
    array_of("data", UINT8, lambda rec: rec.sizeX * rec.sizeY),
    skip(lambda rec: mipmap_skip(rec.sizeX, rec.sizeY, rec.mipMaps), name="mipmaps"),
    name="mat_texture_data",
)


def directory_schema(texture_count: int) -> Schema:
    """Texture directory followed by the pixel payload."""
    return Schema(
        array_of("textures", TEXTURE_ENTRY_SCHEMA, texture_count),
        remainder("data"),
        name="mat_directory",
    )


def texture_data_schema(texture_count: int) -> Schema:
    return Schema(
        array_of("textureData", TEXTURE_DATA_SCHEMA, texture_count),
        name="mat_texture_payload",
    )


@dataclass(frozen=True)
class TextureDirEntry:
    """One entry of the texture directory."""
    texture_type: int
    color_count: int
    texture_index: int

    @classmethod
    def from_record(cls, record: DecodedRecord) -> 'TextureDirEntry':
        return cls(
            texture_type=record["texType"],
            color_count=record["_colornum"],
            texture_index=record["texNum"],
        )


@dataclass(frozen=True)
class TextureHeader:
    """Base mip level of one texture; further levels are never kept."""
    size_x: int
    size_y: int
    mipmap_count: int
    pixel_data: bytes

    def __post_init__(self):
        if len(self.pixel_data) != self.size_x * self.size_y:
            raise ValueError(
                f"Pixel data length {len(self.pixel_data)} != "
                f"{self.size_x}x{self.size_y}"
            )

    @classmethod
    def from_record(cls, record: DecodedRecord) -> 'TextureHeader':
        return cls(
            size_x=record["sizeX"],
            size_y=record["sizeY"],
            mipmap_count=record["mipMaps"],
            pixel_data=bytes(record["data"]),
        )


@dataclass(frozen=True)
class MaterialContainer:
    """Fully decoded MAT file."""
    magic_tag: str
    version: int
    material_type: int
    texture_count: int
    directory: List[TextureDirEntry] = field(default_factory=list)
    textures: List[TextureHeader] = field(default_factory=list)
