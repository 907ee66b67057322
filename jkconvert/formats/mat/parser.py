# jkconvert/formats/mat/parser.py
from pathlib import Path
from typing import Union
import logging

from ...decoders.base import DecodeError, InvalidLength
from .structures import (
    HEADER_SCHEMA,
    MaterialContainer,
    TextureDirEntry,
    TextureHeader,
    directory_schema,
    texture_data_schema,
)

logger = logging.getLogger(__name__)


class MatFileParser:
    """MAT (material) container parser.

    Decodes in three passes over progressively narrower slices: the fixed
    header, the texture directory, then the pixel payloads. Any failure
    aborts the whole import; no partial container is returned.
    """

    def parse(self, data: bytes) -> MaterialContainer:
        header = HEADER_SCHEMA.parse(data)
        texture_count = header["numTex"]
        if texture_count < 0:
            raise InvalidLength("numTex", texture_count)
        logger.debug(f"MAT header: type={header['type']} textures={texture_count}")

        directory = directory_schema(texture_count).parse(header["data"])
        payload = texture_data_schema(texture_count).parse(directory["data"])

        entries = [TextureDirEntry.from_record(r) for r in directory["textures"]]
        textures = [TextureHeader.from_record(r) for r in payload["textureData"]]

        logger.info(f"Decoded {len(textures)} textures")
        return MaterialContainer(
            magic_tag=header["tag"],
            version=header["version"],
            material_type=header["type"],
            texture_count=texture_count,
            directory=entries,
            textures=textures,
        )

    def parse_file(self, file_path: Union[str, Path]) -> MaterialContainer:
        """Read and decode a MAT file."""
        with open(file_path, 'rb') as f:
            data = f.read()
        try:
            return self.parse(data)
        except DecodeError as e:
            logger.error(f"Failed to decode {file_path}: {e}")
            raise


def decode_material(data: bytes) -> MaterialContainer:
    return MatFileParser().parse(data)


def import_mat(file_path: Union[str, Path]) -> MaterialContainer:
    return MatFileParser().parse_file(file_path)
