"""
Shared fixtures: synthetic MAT buffers and JKL documents
"""

import logging
import struct

import pytest

from jkconvert.decoders.schema import mipmap_skip

MAGIC_ONE = 0x3F800000


def build_texture_entry(index: int, magic_values=(MAGIC_ONE,) * 4, tex_type: int = 0) -> bytes:
    """One 40-byte texture directory entry"""
    return (
        struct.pack('<ii', tex_type, 0)
        + struct.pack('<4i', *magic_values)
        + struct.pack('<2i', 0, 0)
        + struct.pack('<i', -1074297726)  # unchecked
        + struct.pack('<i', index)
    )


def build_texture_data(size_x: int, size_y: int, mipmaps: int, pixels: bytes = None) -> bytes:
    """Texture header, base image and filler bytes for the extra mip levels"""
    if pixels is None:
        pixels = bytes(i % 256 for i in range(size_x * size_y))
    return (
        struct.pack('<ii3Ii', size_x, size_y, 0, 0, 0, mipmaps)
        + pixels
        + b'\xAA' * mipmap_skip(size_x, size_y, mipmaps)
    )


def build_mat(textures, tag: bytes = b'MAT ', version: int = 0x32, zero: int = 0,
              eight: int = 8, entries=None, count: int = None) -> bytes:
    """Build a MAT buffer from (size_x, size_y, mipmaps[, pixels]) tuples"""
    count = len(textures) if count is None else count
    header = tag + struct.pack('<Iiiiii', version, 1, count, count, zero, eight)
    header += struct.pack('<12i', *([0] * 12))
    if entries is None:
        entries = [build_texture_entry(i) for i in range(len(textures))]
    data = b''.join(build_texture_data(*texture) for texture in textures)
    return header + b''.join(entries) + data


def build_jkl(surface_lines, normal_lines, vertex_count: int = 10, sectors=((0, 3),),
              extra_blocks: str = '') -> str:
    """A small level document with the usual sections"""
    vertices = '\n'.join(
        f"{i}:\t{float(i)}\t{i + 0.5}\t-1.0" for i in range(vertex_count)
    )
    sector_text = '\n'.join(
        f"SECTOR\t{n}\nFLAGS\t0x0\nSURFACES\t{start}\t{count}\n"
        for n, (start, count) in enumerate(sectors)
    )
    return f"""# Jedi Knight level
SECTION: JK

Version 1

SECTION: GEORESOURCE

World Colormaps 1
#num:\tfile:
0:\t01narsh.cmp

World vertices {vertex_count}
#num:\tvertex:
{vertices}

World texture vertices 3
#num:\tu:\tv:
0:\t0.0\t0.0
1:\t1.0\t0.0
2:\t1.0\t1.0

World adjoins 1
#num:\tflags:\tmirror:\tdist:
0:\t0x7\t1\t0.00
{extra_blocks}
World surfaces {len(surface_lines)}
#num:\tmat:\tsurfflags:\tfaceflags:\tgeo:\tlight:\ttex:\tadjoin:\textralight:\tnverts:\tvertices:\tintensities:
{chr(10).join(surface_lines)}

#--- Surface normals ---
{chr(10).join(normal_lines)}

SECTION: SECTORS

World sectors {len(sectors)}

{sector_text}
end
"""


SURFACE_LINES = [
    "0:\t0\t0x4\t0x4\t4\t3\t3\t-1\t0.00\t3\t5,0\t2,1\t7,2\t0.5000\t0.5000\t0.5000",
    "1:\t0\t0x4\t0x4\t4\t3\t3\t-1\t0.00\t3\t2,0\t7,1\t9,2\t0.5000\t0.5000\t0.5000",
    "2:\t0\t0x4\t0x4\t4\t3\t3\t0\t0.00\t3\t5,0\t2,1\t7,2\t0.5000\t0.5000\t0.5000",
]

NORMAL_LINES = [
    "0:\t0.0\t0.0\t1.0",
    "1:\t0.0\t1.0\t0.0",
    "2:\t1.0\t0.0\t0.0",
]


@pytest.fixture
def mat_builder():
    return build_mat


@pytest.fixture
def entry_builder():
    return build_texture_entry


@pytest.fixture
def jkl_builder():
    return build_jkl


@pytest.fixture
def sample_jkl() -> str:
    return build_jkl(SURFACE_LINES, NORMAL_LINES)


@pytest.fixture
def restore_logging():
    """Undo the root handlers installed by setup_logging"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def surface_lines():
    return list(SURFACE_LINES)


@pytest.fixture
def normal_lines():
    return list(NORMAL_LINES)
