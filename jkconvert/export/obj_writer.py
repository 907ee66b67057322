# jkconvert/export/obj_writer.py
"""Wavefront OBJ output for assembled meshes."""
from pathlib import Path
from typing import TextIO, Union
import logging

from ..mesh.assembly import ExportMesh

logger = logging.getLogger(__name__)


def _coords(values) -> str:
    return ' '.join(str(value) for value in values)


def write_obj_stream(mesh: ExportMesh, stream: TextIO) -> None:
    """Write vertices, then normals, then grouped faces.

    Faces refer back to vertex and normal lines by 1-based index, so every
    ``v`` and ``vn`` line must come before the first ``f`` line.
    """
    for vertex in mesh.vertices:
        stream.write(f"v {_coords(vertex)}\n")
    stream.write("\n")

    for normal in mesh.normals:
        stream.write(f"vn {_coords(normal)}\n")
    stream.write("\n")

    for group in mesh.groups:
        stream.write(f"o {group.name}\n")
        for face in group.faces:
            corners = ' '.join(f"{v}//{n}" for v, n in face.corners)
            stream.write(f"f {corners}\n")
        stream.write("\n")


def write_obj(mesh: ExportMesh, output_path: Union[str, Path]) -> Path:
    """Write ``mesh`` to ``output_path`` and return the path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8', newline='\n') as f:
        write_obj_stream(mesh, f)
    logger.info(
        f"Wrote {len(mesh.vertices)} vertices, {len(mesh.normals)} normals, "
        f"{mesh.face_count} faces to {output_path}"
    )
    return output_path
