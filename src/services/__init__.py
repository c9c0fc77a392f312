from src.services import (
    activity_analysis_service,
    reward_service,
)


__all__ = [
    "activity_analysis_service",
    "reward_service",
]
