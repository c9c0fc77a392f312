"""Substring matching of activity names against planned tasks."""

from collections.abc import Sequence

from src.domain.task import TaggedTask


def _task_matches(task: TaggedTask, search_name: str) -> bool:
    """Return True if the task's title or description overlaps the search name."""
    title = (task.title or "").lower()
    description = task.description.lower()
    return search_name in title or search_name in description or title in search_name or description in search_name


def find_matching_task(candidate_name: str, tasks: Sequence[TaggedTask]) -> TaggedTask | None:
    """Find the first task whose title or description overlaps the candidate name.

    Comparison is case-insensitive and works in both directions: the task text
    may contain the candidate, or the candidate may contain the task text. An
    untitled task compares with an empty title, which every candidate contains.

    Ties are broken by input order (first match wins), not by similarity.

    Args:
        candidate_name: Activity name or matched-task reference from the classifier
        tasks: Flattened tasks in Strength, Intelligence, Charisma order

    Returns:
        First matching task or None
    """
    search_name = candidate_name.lower()
    return next((task for task in tasks if _task_matches(task, search_name)), None)
