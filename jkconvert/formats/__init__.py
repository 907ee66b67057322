# jkconvert/formats/__init__.py
"""Decoders for the concrete asset formats."""
