"""Base utilities and dependencies for the activity classifier agent."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ActivityDeps:
    """Dependencies injected into the classifier's RunContext."""

    current_time: datetime
