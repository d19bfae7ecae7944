"""Financial goal progress."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class GoalProgress:
    goal: Decimal | None
    achievement_rate: Decimal  # percent of goal reached
    distance_to_goal: Decimal  # > 0 below goal, < 0 above it
    is_reached: bool


def achievement_rate(total_value: Decimal, goal: Decimal | None) -> Decimal:
    if goal is None or goal <= 0:
        return Decimal("0")
    return total_value / goal * 100


def distance_to_goal(total_value: Decimal, goal: Decimal | None) -> Decimal:
    if goal is None:
        return Decimal("0")
    return goal - total_value


def goal_progress(total_value: Decimal, goal: Decimal | None) -> GoalProgress:
    if goal is not None and not goal.is_finite():
        goal = None
    return GoalProgress(
        goal=goal,
        achievement_rate=achievement_rate(total_value, goal),
        distance_to_goal=distance_to_goal(total_value, goal),
        is_reached=goal is not None and total_value >= goal,
    )
