# jkconvert/formats/mat/__init__.py
"""MAT (material/texture container) decoder."""
from .parser import MatFileParser, decode_material, import_mat
from .structures import MaterialContainer, TextureDirEntry, TextureHeader

__all__ = [
    'MatFileParser',
    'decode_material',
    'import_mat',
    'MaterialContainer',
    'TextureDirEntry',
    'TextureHeader',
]
