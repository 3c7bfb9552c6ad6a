"""Matcher module for job recommendations."""

from .recommender import recommendation_keywords, is_recommended, rank_jobs

__all__ = [
    "recommendation_keywords",
    "is_recommended",
    "rank_jobs",
]
