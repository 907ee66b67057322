# main.py
import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from jkconvert.decoders.base import DecodeError
from jkconvert.export.image_writer import write_textures
from jkconvert.export.obj_writer import write_obj
from jkconvert.formats.jkl.parser import JklFileParser
from jkconvert.formats.mat.parser import MatFileParser
from jkconvert.mesh.assembly import assemble_mesh
from jkconvert.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class ConvertOptions:
    """Settings for one conversion run."""
    command: str
    input_path: Path
    output_path: Path
    png: bool = False
    verbose: bool = False
    log_dir: Optional[str] = None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'ConvertOptions':
        return cls(
            command=args.command,
            input_path=Path(args.input),
            output_path=Path(args.output),
            png=getattr(args, 'png', False),
            verbose=args.verbose,
            log_dir=args.log_dir,
        )


def convert_level(input_path: Path, output_path: Path) -> Path:
    """JKL level -> OBJ mesh."""
    geometry = JklFileParser().parse_file(input_path)
    mesh = assemble_mesh(geometry)
    return write_obj(mesh, output_path)


def convert_material(input_path: Path, output_root: Path, png: bool = False) -> List[Path]:
    """MAT container -> one PGM (and optionally PNG) per texture."""
    container = MatFileParser().parse_file(input_path)
    return write_textures(container, output_root, png=png)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='jkconvert',
        description='Convert JKL levels to OBJ meshes and MAT textures to PGM images'
    )
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable verbose logging')
    parser.add_argument('--log-dir',
                        default=None,
                        help='Write a timestamped log file to this directory')

    commands = parser.add_subparsers(dest='command', required=True)

    level = commands.add_parser('level', help='Convert a JKL level to OBJ')
    level.add_argument('input', help='Input .jkl file')
    level.add_argument('output', help='Output .obj file')

    material = commands.add_parser(
        'material',
        help='Convert a MAT file to PGM images',
        description='outFileRoot may include part of a file name: out/wall '
                    'gives out/wall-0.pgm, out/wall-1.pgm...'
    )
    material.add_argument('input', help='Input .mat file')
    material.add_argument('output', help='Output file root')
    material.add_argument('--png',
                          action='store_true',
                          help='Also write grayscale PNG images')
    return parser


def run(options: ConvertOptions) -> int:
    if not options.input_path.is_file():
        logger.error(f"Input not found: {options.input_path}")
        return 1

    try:
        if options.command == 'level':
            convert_level(options.input_path, options.output_path)
        else:
            convert_material(options.input_path, options.output_path, options.png)
    except DecodeError as e:
        logger.error(f"Decoding failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1

    logger.info("Conversion complete")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    options = ConvertOptions.from_args(args)

    log_level = logging.DEBUG if options.verbose else logging.INFO
    setup_logging(options.log_dir, log_level)

    return run(options)


if __name__ == "__main__":
    sys.exit(main())
