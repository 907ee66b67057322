# jkconvert/export/image_writer.py
"""Grayscale dumps of decoded textures."""
from pathlib import Path
from typing import List, Union
import logging

import numpy as np
from PIL import Image

from ..formats.mat.structures import MaterialContainer, TextureHeader

logger = logging.getLogger(__name__)

MAX_SAMPLE = 255


def texture_array(texture: TextureHeader) -> np.ndarray:
    """Pixel data as a (rows, columns) uint8 array."""
    pixels = np.frombuffer(texture.pixel_data, dtype=np.uint8)
    return pixels.reshape(texture.size_y, texture.size_x)


def format_pgm(texture: TextureHeader) -> str:
    """Plain (P2) PGM text for one texture."""
    header = '\n'.join(['P2', str(texture.size_x), str(texture.size_y), str(MAX_SAMPLE)])
    samples = ' '.join(str(sample) for sample in texture_array(texture).ravel().tolist())
    return header + '\n' + samples


def write_pgm(texture: TextureHeader, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    with open(output_path, 'w', encoding='ascii', newline='\n') as f:
        f.write(format_pgm(texture))
    return output_path


def write_png(texture: TextureHeader, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    image = Image.fromarray(texture_array(texture))
    image.save(output_path, 'PNG')
    return output_path


def write_textures(container: MaterialContainer, output_root: Union[str, Path],
                   png: bool = False) -> List[Path]:
    """Write ``<root>-<index>.pgm`` (and ``.png``) for every texture.

    ``output_root`` may include the start of a file name: ``out/wall``
    gives ``out/wall-0.pgm``, ``out/wall-1.pgm``...
    """
    output_root = Path(output_root)
    output_root.parent.mkdir(parents=True, exist_ok=True)
    written = []
    for index, texture in enumerate(container.textures):
        stem = f"{output_root.name}-{index}"
        written.append(write_pgm(texture, output_root.with_name(stem + '.pgm')))
        if png:
            if texture.size_x == 0 or texture.size_y == 0:
                logger.warning(f"Texture {index} is empty; skipping PNG")
                continue
            written.append(write_png(texture, output_root.with_name(stem + '.png')))
    logger.info(f"Wrote {len(written)} image files for {len(container.textures)} textures")
    return written
