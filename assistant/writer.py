"""Profile-writing helpers backed by the text generator."""

import re
from typing import Any, Dict, List, Union

from assistant.llm_client import TextGenerator, TextGenerationError
from core.errors import ValidationError

MAX_ABOUT_WORDS = 100


def _skill_list(skills: Union[str, List[str], None]) -> List[str]:
    if isinstance(skills, str):
        skills = skills.split(",")
    return [s.strip() for s in (skills or []) if s and s.strip()]


def clean_about_text(text: str, max_words: int = MAX_ABOUT_WORDS) -> str:
    """Strip markdown bold and line breaks, then cap the word count."""
    text = re.sub(r"[\r\n]+", " ", text.replace("**", "")).strip()
    words = text.split()
    if len(words) > max_words:
        text = " ".join(words[:max_words]) + "..."
    return text


def generate_about(generator: TextGenerator, job_title: str,
                   skills: Union[str, List[str], None]) -> str:
    skill_list = _skill_list(skills)
    if not job_title or not skill_list:
        raise ValidationError("Job title and skills are required.")
    prompt = (
        f"Generate a professional 'About Me' section for a job seeker with the title '{job_title}' "
        f"and skills: {', '.join(skill_list)}. Keep it concise, human-readable, under 100 words, "
        "and without markdown."
    )
    try:
        return clean_about_text(generator.generate(prompt))
    except TextGenerationError:
        raise TextGenerationError("Failed to generate About Me text.")


def career_suggestions(generator: TextGenerator, skills: List[str],
                       experience: List[Dict[str, Any]]) -> str:
    if not skills and not experience:
        raise ValidationError("Skills or experience must be provided.")
    experience_text = "; ".join(
        f"{e.get('position') or ''} at {e.get('company') or ''}" for e in experience
    )
    prompt = (
        "You are a career coach AI.\n"
        f"Based on these skills: {', '.join(skills)}\n"
        f"And experience: {experience_text}\n"
        "Suggest:\n"
        "- 3 suitable job roles\n"
        "- 3 trending/advanced skills to learn\n"
        "- 3 useful online courses with platforms and benefits\n"
        "Format each section as a bullet list."
    )
    try:
        return generator.generate(prompt).replace("**", "").strip()
    except TextGenerationError:
        raise TextGenerationError("Failed to generate career suggestions.")
