"""Task domain models and enums for the planned-task catalogue."""

from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Category(StrEnum):
    """Skill category partitioning both tasks and activities."""

    STRENGTH = "Strength"
    INTELLIGENCE = "Intelligence"
    CHARISMA = "Charisma"


class Task(BaseModel):
    """Planned task assigned to a user."""

    id: str = Field(..., description="Unique task ID")
    title: str | None = Field(default=None, description="Short task name (absent for uncustomized AI tasks)")
    description: str = Field(..., description="Task description")
    category: Category | None = Field(default=None, description="Category the task was filed under")
    xp: int = Field(..., ge=0, description="XP for completing the task as planned")
    shards: float = Field(..., ge=0, allow_inf_nan=False, description="Shards for completing the task as planned")


class TaggedTask(Task):
    """Task tagged with the category bucket it was listed under."""

    category: Category


class UserTasks(BaseModel):
    """Snapshot of a user's current tasks grouped by category."""

    model_config = ConfigDict(populate_by_name=True)

    strength: list[Task] = Field(default_factory=list, alias="Strength")
    intelligence: list[Task] = Field(default_factory=list, alias="Intelligence")
    charisma: list[Task] = Field(default_factory=list, alias="Charisma")

    def for_category(self, category: Category) -> list[Task]:
        """Return the tasks listed under a category."""
        return getattr(self, category.value.lower())

    def items(self) -> Iterator[tuple[Category, list[Task]]]:
        """Iterate (category, tasks) pairs in Strength, Intelligence, Charisma order."""
        for category in Category:
            yield category, self.for_category(category)
