# jkconvert/mesh/__init__.py
"""Mesh assembly from decoded level geometry."""
from .assembly import ExportMesh, MeshFace, MeshGroup, assemble_mesh

__all__ = [
    'ExportMesh',
    'MeshFace',
    'MeshGroup',
    'assemble_mesh',
]
