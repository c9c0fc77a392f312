"""Pytest configuration and shared fixtures."""

import pytest

from src.domain.task import Task, UserTasks
from tests.unit.mocks import FakeClassifier, make_match


@pytest.fixture
def user_tasks() -> UserTasks:
    """A small task catalogue covering all three categories."""
    return UserTasks(
        Strength=[
            Task(id="s1", title="Run 5k", description="Run five kilometres at an easy pace", xp=100, shards=20),
            Task(id="s2", title="Push-ups", description="Do 50 push-ups", xp=50, shards=10),
        ],
        Intelligence=[
            Task(id="i1", title="Read a chapter", description="Read one chapter of a book", xp=40, shards=5),
            Task(id="i2", title="Practice Spanish", description="Complete a language lesson", xp=60, shards=15),
        ],
        Charisma=[
            Task(id="c1", title="Call a friend", description="Catch up with a friend by phone", xp=30, shards=7.5),
        ],
    )


@pytest.fixture
def fake_classifier() -> FakeClassifier:
    """Classifier returning a single exact match for the 5k run."""
    return FakeClassifier(
        matches=[make_match("Morning run", matched_task="Run 5k", effort_ratio=0.5, notes="Ran 2.5k")],
    )
