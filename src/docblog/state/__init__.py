"""Batch state tracking for docblog."""

from .manager import StateManager

__all__ = ["StateManager"]
