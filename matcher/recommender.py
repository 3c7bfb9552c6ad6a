"""Keyword-based job recommendations for job seekers."""

from typing import Any, Dict, Iterable, List, Set


def recommendation_keywords(skill_names: Iterable[str], search_queries: Iterable[str]) -> Set[str]:
    """Lowercased tokens from profile skills and past searches.

    Skills are kept whole ("machine learning"); searches are split on spaces.
    """
    keywords = {name.strip().lower() for name in skill_names if name and name.strip()}
    for query in search_queries:
        keywords.update(word.lower() for word in (query or '').split() if word)
    return keywords


def is_recommended(job: Dict[str, Any], keywords: Set[str]) -> bool:
    """True when any keyword is a substring of the title or of one of the skills."""
    if not keywords:
        return False
    title = (job.get('job_title') or '').lower()
    skills = [s.lower() for s in (job.get('skills') or []) if isinstance(s, str)]
    for keyword in keywords:
        if keyword in title:
            return True
        if any(keyword in skill for skill in skills):
            return True
    return False


def rank_jobs(jobs: List[Dict[str, Any]], keywords: Set[str]) -> List[Dict[str, Any]]:
    """Flag each job and put recommended ones first, newest first within each group."""
    for job in jobs:
        job['is_recommended'] = is_recommended(job, keywords)
    by_recency = sorted(jobs, key=lambda j: j.get('created_at') or '', reverse=True)
    return sorted(by_recency, key=lambda j: not j['is_recommended'])
