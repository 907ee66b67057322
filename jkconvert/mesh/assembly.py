# jkconvert/mesh/assembly.py
"""Turn decoded level geometry into an exportable indexed mesh."""
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple
import logging

from ..decoders.base import DanglingReference
from ..formats.jkl.structures import LevelGeometry, Vertex

logger = logging.getLogger(__name__)

UNSECTORED_GROUP = "unsectored"


@dataclass(frozen=True)
class MeshFace:
    """One exported polygon; corners are 1-based (vertex, normal) pairs."""
    surface_index: int
    corners: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class MeshGroup:
    name: str
    faces: Tuple[MeshFace, ...]


@dataclass(frozen=True)
class ExportMesh:
    """Deduplicated vertices, per-face normals and sector-grouped faces."""
    vertices: Tuple[Vertex, ...]
    vertex_order: Tuple[int, ...]
    index_map: Dict[int, int]
    normals: Tuple[Vertex, ...]
    groups: Tuple[MeshGroup, ...]

    @property
    def face_count(self) -> int:
        return sum(len(group.faces) for group in self.groups)


def assemble_mesh(geometry: LevelGeometry) -> ExportMesh:
    """Build the export mesh for the visible (non-adjoining) surfaces.

    Vertex order is first-seen order across visible surfaces. A face's
    normal index is its 1-based position among all visible surfaces, not
    within its sector.
    """
    surfaces = geometry.surfaces
    visible = [(pos, s) for pos, s in enumerate(surfaces) if s.is_visible]
    logger.debug(f"{len(visible)} of {len(surfaces)} surfaces are visible")

    vertex_order = _first_seen_vertices(s for _, s in visible)
    vertices = tuple(_lookup(geometry.vertices, index, 'vertex') for index in vertex_order)
    index_map = {original: position + 1 for position, original in enumerate(vertex_order)}

    normals = tuple(_lookup(geometry.normals, s.index, 'normal') for _, s in visible)
    normal_index = {pos: number + 1 for number, (pos, _) in enumerate(visible)}

    def build_face(pos: int) -> MeshFace:
        surface = surfaces[pos]
        n = normal_index[pos]
        return MeshFace(surface.index, tuple((index_map[v], n) for v in surface.vertex_indices))

    groups: List[MeshGroup] = []
    covered: Set[int] = set()
    for sector in geometry.sectors:
        if sector.is_clamped(len(surfaces)):
            logger.warning(
                f"{sector.name} range {sector.start}+{sector.count} exceeds "
                f"{len(surfaces)} surfaces; clamping"
            )
        span = sector.surface_range(len(surfaces))
        shared = covered.intersection(span)
        if shared:
            logger.warning(
                f"{sector.name} overlaps earlier sectors on {len(shared)} surfaces; "
                f"keeping them in the first sector"
            )
        faces = tuple(
            build_face(pos) for pos in span if pos in normal_index and pos not in covered
        )
        covered.update(span)
        groups.append(MeshGroup(sector.name, faces))

    leftover = tuple(build_face(pos) for pos, _ in visible if pos not in covered)
    if leftover:
        if geometry.sectors:
            logger.warning(f"{len(leftover)} visible surfaces belong to no sector")
        groups.append(MeshGroup(UNSECTORED_GROUP, leftover))

    return ExportMesh(
        vertices=vertices,
        vertex_order=tuple(vertex_order),
        index_map=index_map,
        normals=normals,
        groups=tuple(groups),
    )


def _first_seen_vertices(surfaces) -> List[int]:
    seen: Dict[int, None] = {}
    for surface in surfaces:
        for vertex in surface.vertex_indices:
            seen.setdefault(vertex, None)
    return list(seen)


def _lookup(table: Tuple[Vertex, ...], index: int, kind: str) -> Vertex:
    if not 0 <= index < len(table):
        raise DanglingReference(kind, index, len(table))
    return table[index]
