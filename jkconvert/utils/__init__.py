# jkconvert/utils/__init__.py
"""Shared helpers."""
from .logging import setup_logging

__all__ = [
    'setup_logging',
]
