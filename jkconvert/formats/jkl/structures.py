# jkconvert/formats/jkl/structures.py
"""Decoded level geometry."""
from dataclasses import dataclass
from typing import List, Tuple, Union

from ...decoders.base import UnknownSubsection, VertexCountMismatch

Vertex = Tuple[float, float, float]
UV = Tuple[float, float]
VertexRef = Tuple[int, int]
Notice = Union[VertexCountMismatch, UnknownSubsection]

NO_ADJOIN = -1


@dataclass(frozen=True)
class Surface:
    """A polygon of the level.

    ``adjoin`` is -1 for an exterior (visible) surface; any other value links
    the surface to the matching face of a neighbouring sector.
    """
    index: int
    material_ref: int
    texture_ref: int
    adjoin: int
    declared_vertex_count: int
    vertex_refs: Tuple[VertexRef, ...]

    @property
    def is_visible(self) -> bool:
        return self.adjoin == NO_ADJOIN

    @property
    def vertex_indices(self) -> List[int]:
        return [vertex for vertex, _ in self.vertex_refs]


@dataclass(frozen=True)
class Sector:
    """Contiguous half-open range [start, start + count) of surfaces."""
    start: int
    count: int
    name: str

    @property
    def end(self) -> int:
        return self.start + self.count

    def surface_range(self, surface_count: int) -> range:
        """Range of surface indices clamped to a table of ``surface_count``."""
        start = min(self.start, surface_count)
        return range(start, min(self.end, surface_count))

    def is_clamped(self, surface_count: int) -> bool:
        return self.end > surface_count


@dataclass(frozen=True)
class LevelGeometry:
    """Everything decoded from one level document."""
    vertices: Tuple[Vertex, ...] = ()
    uvs: Tuple[UV, ...] = ()
    palette: Tuple[str, ...] = ()
    surfaces: Tuple[Surface, ...] = ()
    normals: Tuple[Vertex, ...] = ()
    sectors: Tuple[Sector, ...] = ()
    notices: Tuple[Notice, ...] = ()

    def visible_surfaces(self) -> List[Surface]:
        return [surface for surface in self.surfaces if surface.is_visible]
