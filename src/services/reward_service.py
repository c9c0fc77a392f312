"""Reward calculation for analyzed daily activities.

Turns the activity classifier's matches into XP and shard rewards using the
user's planned tasks as the basis:

- exact: matched task reward scaled by effort ratio
- similar: 80% of the matched task reward scaled by effort ratio
- goal-aligned: category average reward scaled by effort ratio
- unrelated: skipped

Exact and similar matches whose task cannot be found fall back to the
goal-aligned rule. Rewards are never clamped, so a negative effort ratio
produces a negative contribution.

Everything here is pure: no logging, no I/O, no shared state.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from src.core.config import constants
from src.core.fuzzy_match import find_matching_task
from src.domain.activity import ActivityMatch, MatchType
from src.domain.reward import (
    ActivityReward,
    CategoryBreakdown,
    CategoryRewards,
    RewardCalculationResult,
    SkippedActivity,
)
from src.domain.task import Category, TaggedTask, UserTasks


SKIP_REASON_NO_TASKS = "No tasks available for comparison"
SKIP_REASON_UNRELATED = "Unrelated to goals and tasks"


class UnknownMatchTypeError(ValueError):
    """Raised when a match carries a match type outside the reward rules."""

    def __init__(self, match_type: object) -> None:
        self.match_type = match_type
        super().__init__(f"Unknown match type: {match_type!r}")


class NonFiniteRewardError(ValueError):
    """Raised when a reward amount is NaN or infinite and cannot be rounded."""

    def __init__(self, quantity: str, value: float) -> None:
        self.quantity = quantity
        self.value = value
        super().__init__(f"Reward {quantity} is not finite: {value!r}")


@dataclass(frozen=True)
class CategoryAverage:
    """Mean task reward within a category."""

    avg_xp: float
    avg_shards: float


def _require_finite(value: float, quantity: str) -> float:
    if not math.isfinite(value):
        raise NonFiniteRewardError(quantity, value)
    return value


def floor_xp(value: float) -> int:
    """Round XP down to a whole number.

    Raises:
        NonFiniteRewardError: If the value is NaN or infinite
    """
    if isinstance(value, int):
        return value
    return math.floor(_require_finite(value, "XP"))


def round_shards(value: float) -> float:
    """Round shards to one decimal place, halves rounding up.

    Raises:
        NonFiniteRewardError: If the value is NaN, infinite, or overflows once scaled
    """
    scale = 10**constants.SHARDS_DECIMAL_PLACES
    return math.floor(_require_finite(value * scale + 0.5, "shards")) / scale


def flatten_tasks(user_tasks: UserTasks) -> list[TaggedTask]:
    """Flatten grouped tasks, tagging each with the category it is listed under.

    Order is Strength, Intelligence, Charisma, each in its original order.
    """
    return [
        TaggedTask(**task.model_dump(exclude={"category"}), category=category)
        for category, tasks in user_tasks.items()
        for task in tasks
    ]


def calculate_category_average(tasks: Sequence[TaggedTask], category: Category) -> CategoryAverage:
    """Calculate mean XP and shards of the tasks in a category.

    Args:
        tasks: Flattened tasks
        category: Category to average

    Returns:
        Unrounded averages, or zeros when the category has no tasks
    """
    category_tasks = [task for task in tasks if task.category == category]
    if not category_tasks:
        return CategoryAverage(avg_xp=0.0, avg_shards=0.0)

    count = len(category_tasks)
    return CategoryAverage(
        avg_xp=sum(task.xp for task in category_tasks) / count,
        avg_shards=sum(task.shards for task in category_tasks) / count,
    )


def _fmt(value: float) -> str:
    return f"{value:g}"


def _category_average_reward(
    tasks: Sequence[TaggedTask], match: ActivityMatch, *, label: str
) -> tuple[float, float, str]:
    avg = calculate_category_average(tasks, match.category)
    xp = avg.avg_xp * match.effort_ratio
    shards = avg.avg_shards * match.effort_ratio
    notes = f"{label}: {avg.avg_xp:.1f} XP × {_fmt(match.effort_ratio)} effort = {xp:.1f} XP"
    return xp, shards, notes


def _task_reward(
    tasks: Sequence[TaggedTask], match: ActivityMatch, *, multiplier: float, label: str
) -> tuple[float, float, str]:
    task = find_matching_task(match.matched_task or match.name, tasks)
    if task is None:
        return _category_average_reward(tasks, match, label="Task not found, using category average")

    xp = task.xp * multiplier * match.effort_ratio
    shards = task.shards * multiplier * match.effort_ratio
    factor = f" × {_fmt(multiplier)}" if multiplier != 1 else ""
    notes = f"{label}: {task.xp} XP{factor} × {_fmt(match.effort_ratio)} effort = {xp:.1f} XP"
    return xp, shards, notes


def calculate_activity_reward(tasks: Sequence[TaggedTask], match: ActivityMatch) -> ActivityReward:
    """Calculate the reward for a single non-skipped activity.

    Args:
        tasks: Flattened tasks to match against
        match: Activity match (must not be unrelated)

    Returns:
        Activity reward with rounded XP and shards

    Raises:
        UnknownMatchTypeError: If the match type has no reward rule
        NonFiniteRewardError: If the reward is NaN or infinite (e.g. an overflowing effort ratio)
    """
    if match.match_type == MatchType.EXACT:
        xp, shards, notes = _task_reward(tasks, match, multiplier=1, label="Exact match")
    elif match.match_type == MatchType.SIMILAR:
        xp, shards, notes = _task_reward(
            tasks, match, multiplier=constants.SIMILAR_MATCH_MULTIPLIER, label="Similar match (80%)"
        )
    elif match.match_type == MatchType.GOAL_ALIGNED:
        xp, shards, notes = _category_average_reward(tasks, match, label="Goal-aligned (category avg)")
    else:
        raise UnknownMatchTypeError(match.match_type)

    return ActivityReward(
        activity_name=match.name,
        match_type=match.match_type,
        category=match.category,
        matched_task=match.matched_task or None,
        goal_link=match.goal_link or None,
        effort_ratio=match.effort_ratio,
        xp_earned=floor_xp(xp),
        shards_earned=round_shards(shards),
        calculation_notes=notes,
    )


def _skip(match: ActivityMatch, reason: str) -> SkippedActivity:
    return SkippedActivity(activity_name=match.name, category=match.category, reason=reason, notes=match.notes)


def calculate_rewards_from_analysis(
    matches: Sequence[ActivityMatch],
    user_tasks: UserTasks | None,
) -> RewardCalculationResult:
    """Calculate XP and shard rewards from an activity analysis.

    Args:
        matches: Activity matches from the classifier, in input order
        user_tasks: User's current tasks grouped by category, or None if unavailable

    Returns:
        Totals, per-category breakdown, per-activity rewards and skipped activities

    Raises:
        UnknownMatchTypeError: If a match carries a match type with no reward rule
        NonFiniteRewardError: If a reward or total is NaN or infinite
    """
    if user_tasks is None:
        skipped = [_skip(match, SKIP_REASON_NO_TASKS) for match in matches]
        return RewardCalculationResult(skipped_activities=skipped, skipped_count=len(skipped))

    tasks = flatten_tasks(user_tasks)
    rewards: list[ActivityReward] = []
    skipped: list[SkippedActivity] = []
    subtotals = {category: [0, 0.0] for category in Category}
    total_xp = 0
    total_shards = 0.0

    for match in matches:
        if match.match_type == MatchType.UNRELATED:
            skipped.append(_skip(match, SKIP_REASON_UNRELATED))
            continue

        reward = calculate_activity_reward(tasks, match)
        total_xp += reward.xp_earned
        total_shards += reward.shards_earned
        subtotals[match.category][0] += reward.xp_earned
        subtotals[match.category][1] += reward.shards_earned
        rewards.append(reward)

    breakdown = CategoryBreakdown(
        **{
            category.value: CategoryRewards(xp=floor_xp(xp), shards=round_shards(shards))
            for category, (xp, shards) in subtotals.items()
        }
    )
    return RewardCalculationResult(
        total_xp=floor_xp(total_xp),
        total_shards=round_shards(total_shards),
        category_breakdown=breakdown,
        activity_rewards=rewards,
        skipped_activities=skipped,
        processed_count=len(rewards),
        skipped_count=len(skipped),
    )
