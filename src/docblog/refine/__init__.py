"""Optional Markdown refinement for docblog."""

from .openai_chat import OpenAIRewriter
from .protocols import TextRewriter
from .refiner import ContentRefiner, RefinementResult

__all__ = ["ContentRefiner", "OpenAIRewriter", "RefinementResult", "TextRewriter"]
