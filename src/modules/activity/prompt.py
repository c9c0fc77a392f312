"""Activity analysis prompts for the activity classifier agent."""

from src.domain.task import UserTasks


ACTIVITY_ANALYSIS_PROMPT = """
You are an activity analyst for a gamified self-improvement app. Users describe what they did today,
and you compare each activity with their planned tasks and long-term goals.

## Categories

Every activity belongs to exactly one category:
- **Strength**: physical activity, exercise, sport, health, sleep, nutrition
- **Intelligence**: study, reading, learning, focused work, problem solving
- **Charisma**: social contact, communication, networking, helping others, public speaking

## Match Types

Classify every activity you detect with one match type:
- **exact**: the activity is one of the planned tasks. Set `matched_task` to that task's title
  (or its description when it has no title), copied verbatim from the task list.
- **similar**: the activity closely resembles a planned task but differs in form or scope.
  Set `matched_task` to the closest task, copied verbatim.
- **goal-aligned**: the activity supports a long-term goal but matches no planned task.
  Set `goal_link` to a short explanation of which goal it supports.
- **unrelated**: the activity supports neither a planned task nor a goal (e.g. watching TV).

## Effort Ratio

`effort_ratio` expresses how much of the task's full effort the activity represents:
1.0 is the full planned effort, 0.5 is half, values above 1.0 mean the user did more than planned.
For goal-aligned activities, compare with a typical task of the same category.

## Rules

1. Report one match per distinct activity. Do not merge unrelated activities.
2. Never invent activities the user did not describe.
3. Keep `notes` to one short sentence explaining your classification.
4. If the description contains no activities, return an empty `matches` list.
"""


def _format_tasks(user_tasks: UserTasks | None) -> str:
    if user_tasks is None:
        return "No planned tasks"

    lines = []
    for category, tasks in user_tasks.items():
        for task in tasks:
            label = task.title or task.description
            detail = f" ({task.description})" if task.title and task.description else ""
            lines.append(f"- [{category}] {label}{detail}: {task.xp} XP, {task.shards:g} shards")
    return "\n".join(lines) if lines else "No planned tasks"


def build_activity_prompt(
    *,
    daily_activity: str,
    user_tasks: UserTasks | None,
    long_term_goals: str | None,
) -> str:
    """Build the user message for an activity analysis run.

    Args:
        daily_activity: User's free-text description of their day
        user_tasks: Planned tasks grouped by category, if available
        long_term_goals: User's long-term goals text, if available

    Returns:
        Prompt text listing the activity description, planned tasks and goals
    """
    goals = long_term_goals.strip() if long_term_goals and long_term_goals.strip() else "No long-term goals provided"
    return (
        f"## What I did today\n{daily_activity.strip()}\n\n"
        f"## My planned tasks\n{_format_tasks(user_tasks)}\n\n"
        f"## My long-term goals\n{goals}\n"
    )
