"""LLM-backed writing helpers."""

from .llm_client import TextGenerator, TextGenerationError
from .writer import generate_about, career_suggestions, clean_about_text

__all__ = [
    "TextGenerator",
    "TextGenerationError",
    "generate_about",
    "career_suggestions",
    "clean_about_text",
]
