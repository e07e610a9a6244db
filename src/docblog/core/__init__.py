"""Batch orchestration for docblog."""

from .orchestrator import BatchOrchestrator, convert_blocking

__all__ = ["BatchOrchestrator", "convert_blocking"]
