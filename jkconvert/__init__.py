# jkconvert/__init__.py
"""Jedi Knight level and material converter package."""
from .decoders import DecodeError
from .export import read_obj, write_obj, write_textures
from .formats.jkl import JklFileParser, LevelGeometry, decode_level, import_jkl
from .formats.mat import MatFileParser, MaterialContainer, decode_material, import_mat
from .mesh import ExportMesh, assemble_mesh

__version__ = '0.1.0'

__all__ = [
    'DecodeError',
    'read_obj',
    'write_obj',
    'write_textures',
    'JklFileParser',
    'LevelGeometry',
    'decode_level',
    'import_jkl',
    'MatFileParser',
    'MaterialContainer',
    'decode_material',
    'import_mat',
    'ExportMesh',
    'assemble_mesh',
]
