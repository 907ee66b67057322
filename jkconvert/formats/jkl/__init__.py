# jkconvert/formats/jkl/__init__.py
"""JKL (level document) geometry decoder."""
from .parser import JklFileParser, decode_level, import_jkl
from .structures import LevelGeometry, Sector, Surface

__all__ = [
    'JklFileParser',
    'decode_level',
    'import_jkl',
    'LevelGeometry',
    'Sector',
    'Surface',
]
