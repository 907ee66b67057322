# jkconvert/formats/jkl/parser.py
from pathlib import Path
from typing import Callable, Dict, List, Union
import logging
import re

from ...decoders.base import (
    DecodeError,
    SectionNotFound,
    UnknownSubsection,
    VertexCountMismatch,
)
from ...decoders.matcher import TextMatcher
from .structures import LevelGeometry, Sector, Surface

logger = logging.getLogger(__name__)

GEORESOURCE = "GEORESOURCE"
BLOCK_DELIMITER = "World"

NUMBER = r'(-?\d+(?:\.\d+)?)'

GEORESOURCE_REGEX = re.compile(
    r'SECTION:[ \t]*GEORESOURCE\b(.*?)(?=SECTION:|\Z)',
    re.IGNORECASE | re.DOTALL,
)
SUBSECTION_REGEX = re.compile(r'^\s+(\w+)', re.MULTILINE)

VERTEX_MATCHER = (
    TextMatcher.builder()
    .with_regex(rf'^[ \t]*\d+:[ \t]+{NUMBER}[ \t]+{NUMBER}[ \t]+{NUMBER}[ \t]*\r?$', re.MULTILINE)
    .with_group('x', float)
    .with_group('y', float)
    .with_group('z', float)
    .bake()
)

UV_MATCHER = (
    TextMatcher.builder()
    .with_regex(rf'^[ \t]*\d+:[ \t]+{NUMBER}[ \t]+{NUMBER}[ \t]*\r?$', re.MULTILINE)
    .with_group('u', float)
    .with_group('v', float)
    .bake()
)

PALETTE_MATCHER = (
    TextMatcher.builder()
    .with_regex(r'\d+:\s+([\w\-]+\.cmp)', re.IGNORECASE)
    .with_group('filename')
    .bake()
)

VERTEX_REF_MATCHER = (
    TextMatcher.builder()
    .with_regex(r'(\d+),(-?\d+)')
    .with_group('vertex', int)
    .with_group('uv', int)
    .bake()
)

# num: mat surfflags faceflags geo light tex adjoin extralight nverts refs... intensities...
SURFACE_MATCHER = (
    TextMatcher.builder()
    .with_regex(
        r'(\d+):\s+(-?\d+)\s+\S+\s+\S+\s+\d+\s+\d+\s+(-?\d+)\s+(-?\d+)\s+'
        r'\d+(?:\.\d+)?\s+(\d+)\s+((?:\d+,-?\d+\s+)+)(?:\d*\.\d+(?:\s+|$))+'
    )
    .with_group('index', int)
    .with_group('material', int)
    .with_group('texture', int)
    .with_group('adjoin', int)
    .with_group('nverts', int)
    .with_group('refs', VERTEX_REF_MATCHER)
    .bake()
)

SECTOR_MATCHER = (
    TextMatcher.builder()
    .with_regex(r'^[ \t]*SURFACES[ \t]+(\d+)[ \t]+(\d+)[ \t]*\r?$', re.MULTILINE)
    .with_group('start', int)
    .with_group('count', int)
    .bake()
)


class JklFileParser:
    """JKL (level) document parser.

    Extracts the georesource geometry and the sector surface ranges. Each
    call builds fresh state, so one instance can parse many documents.
    """

    def __init__(self):
        self._extractors: Dict[str, Callable[[str, dict], None]] = {
            'vertices': self._extract_vertices,
            'texture': self._extract_uvs,
            'Colormaps': self._extract_palette,
            'surfaces': self._extract_surfaces,
        }

    def parse(self, text: str) -> LevelGeometry:
        """Decode a level document into geometry."""
        section = self.find_georesource(text)
        found = {
            'vertices': [],
            'uvs': [],
            'palette': [],
            'surfaces': [],
            'normals': [],
            'notices': [],
        }

        for block in section.split(BLOCK_DELIMITER):
            match = SUBSECTION_REGEX.search(block)
            if not match:
                continue
            kind = match.group(1)
            extractor = self._extractors.get(kind)
            if extractor is None:
                notice = UnknownSubsection(kind)
                logger.info(str(notice))
                found['notices'].append(notice)
                continue
            extractor(block, found)

        sectors = self.parse_sectors(text)
        logger.info(
            f"Decoded {len(found['vertices'])} vertices, {len(found['uvs'])} uvs, "
            f"{len(found['surfaces'])} surfaces, {len(sectors)} sectors"
        )
        return LevelGeometry(
            vertices=tuple(found['vertices']),
            uvs=tuple(found['uvs']),
            palette=tuple(found['palette']),
            surfaces=tuple(found['surfaces']),
            normals=tuple(found['normals']),
            sectors=tuple(sectors),
            notices=tuple(found['notices']),
        )

    def parse_file(self, file_path: Union[str, Path]) -> LevelGeometry:
        """Read and decode a JKL file."""
        with open(file_path, 'r', encoding='latin-1') as f:
            text = f.read()
        try:
            return self.parse(text)
        except DecodeError as e:
            logger.error(f"Failed to decode {file_path}: {e}")
            raise

    @staticmethod
    def find_georesource(text: str) -> str:
        """Text between the georesource marker and the next section marker."""
        match = GEORESOURCE_REGEX.search(text)
        if not match:
            raise SectionNotFound(GEORESOURCE)
        return match.group(1)

    @staticmethod
    def parse_sectors(text: str) -> List[Sector]:
        """Every ``SURFACES <start> <count>`` declaration, in document order."""
        return [
            Sector(start=record['start'], count=record['count'], name=f"sector{index}")
            for index, record in enumerate(SECTOR_MATCHER.parse(text))
        ]

    def _extract_vertices(self, block: str, found: dict) -> None:
        found['vertices'] = parse_triplets(block)
        logger.debug(f"vertices: {len(found['vertices'])}")

    def _extract_uvs(self, block: str, found: dict) -> None:
        found['uvs'] = [(r['u'], r['v']) for r in UV_MATCHER.parse(block)]
        logger.debug(f"texture vertices: {len(found['uvs'])}")

    def _extract_palette(self, block: str, found: dict) -> None:
        found['palette'] = [r['filename'] for r in PALETTE_MATCHER.parse(block)]
        logger.debug(f"colormaps: {found['palette']}")

    def _extract_surfaces(self, block: str, found: dict) -> None:
        surfaces, notices = parse_surfaces(block)
        found['surfaces'] = surfaces
        found['notices'].extend(notices)
        # The surface normals sit in the same block as plain index: x y z rows
        found['normals'] = parse_triplets(block)
        logger.debug(f"surfaces: {len(surfaces)}, normals: {len(found['normals'])}")


def parse_triplets(block: str) -> List[tuple]:
    """``n: x y z`` rows as float triplets."""
    return [(r['x'], r['y'], r['z']) for r in VERTEX_MATCHER.parse(block)]


def parse_surfaces(block: str):
    """Surface rows of a ``surfaces`` block.

    Returns (surfaces, notices); a surface listing fewer or more vertex refs
    than it declares is kept with the refs that were found.
    """
    surfaces = []
    notices = []
    for record in SURFACE_MATCHER.parse(block):
        refs = tuple((ref['vertex'], ref['uv']) for ref in record['refs'])
        surface = Surface(
            index=record['index'],
            material_ref=record['material'],
            texture_ref=record['texture'],
            adjoin=record['adjoin'],
            declared_vertex_count=record['nverts'],
            vertex_refs=refs,
        )
        if len(refs) != surface.declared_vertex_count:
            notice = VertexCountMismatch(surface.index, surface.declared_vertex_count, len(refs))
            logger.warning(str(notice))
            notices.append(notice)
        surfaces.append(surface)
    return surfaces, notices


def decode_level(text: str) -> LevelGeometry:
    return JklFileParser().parse(text)


def import_jkl(file_path: Union[str, Path]) -> LevelGeometry:
    return JklFileParser().parse_file(file_path)
