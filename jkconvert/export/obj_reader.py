# jkconvert/export/obj_reader.py
"""Minimal OBJ re-import, enough to check what an export contains."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Union
import logging
import re

from ..decoders.matcher import TextMatcher

logger = logging.getLogger(__name__)

CORNER_MATCHER = (
    TextMatcher.builder()
    .with_regex(r'(-?\d+)(?:/(-?\d*))?(?:/(-?\d+))?')
    .with_group('vertex', int)
    .with_group('uv')
    .with_group('normal', int)
    .bake()
)

LINE_MATCHER = (
    TextMatcher.builder()
    .with_regex(r'^[ \t]*(v|vn|vt|o|g|f)[ \t]+([^\r\n]*?)[ \t]*\r?$', re.MULTILINE)
    .with_group('keyword')
    .with_group('body')
    .bake()
)


@dataclass
class ObjSummary:
    """Counts and references found in an OBJ document."""
    vertices: List[Tuple[float, ...]] = field(default_factory=list)
    normals: List[Tuple[float, ...]] = field(default_factory=list)
    faces: List[List[Tuple[int, int]]] = field(default_factory=list)
    groups: Dict[str, int] = field(default_factory=dict)

    @property
    def referenced_vertices(self) -> set:
        return {vertex for face in self.faces for vertex, _ in face}


def read_obj_text(text: str) -> ObjSummary:
    summary = ObjSummary()
    current = None
    for line in LINE_MATCHER.parse(text):
        keyword, body = line['keyword'], line['body']
        if keyword == 'v':
            summary.vertices.append(tuple(float(x) for x in body.split()))
        elif keyword == 'vn':
            summary.normals.append(tuple(float(x) for x in body.split()))
        elif keyword in ('o', 'g'):
            current = body
            summary.groups.setdefault(current, 0)
        elif keyword == 'f':
            corners = CORNER_MATCHER.parse(body)
            summary.faces.append([(c['vertex'], c['normal']) for c in corners])
            if current is not None:
                summary.groups[current] += 1
    logger.debug(
        f"OBJ: {len(summary.vertices)} v, {len(summary.normals)} vn, {len(summary.faces)} f"
    )
    return summary


def read_obj(path: Union[str, Path]) -> ObjSummary:
    with open(path, 'r', encoding='utf-8') as f:
        return read_obj_text(f.read())
