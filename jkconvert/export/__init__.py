# jkconvert/export/__init__.py
"""Writers for the portable output formats."""
from .image_writer import format_pgm, write_pgm, write_png, write_textures
from .obj_reader import ObjSummary, read_obj, read_obj_text
from .obj_writer import write_obj, write_obj_stream

__all__ = [
    'format_pgm',
    'write_pgm',
    'write_png',
    'write_textures',
    'ObjSummary',
    'read_obj',
    'read_obj_text',
    'write_obj',
    'write_obj_stream',
]
