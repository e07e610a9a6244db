"""Pipeline steps for document conversion."""

from .assemble import AssembleStep
from .fetch import FetchStep
from .normalize import NormalizeStep
from .refine import RefineStep
from .relocate import RelocateStep
from .structure import StructureStep
from .translate import TranslateStep

__all__ = [
    "AssembleStep",
    "FetchStep",
    "NormalizeStep",
    "RefineStep",
    "RelocateStep",
    "StructureStep",
    "TranslateStep",
]
