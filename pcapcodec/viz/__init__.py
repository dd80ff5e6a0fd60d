"""Visualization helpers for capture files."""

from .timeline import render

__all__ = ["render"]
