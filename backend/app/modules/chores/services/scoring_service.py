"""Weekly chore scoring.

DONE earns the template's base points (1 when unset), plus 1 when done without a
reminder and minus 1 when a complaint was logged. MISSED costs 2, or 3 with a
complaint. A pending task logged as extra earns 2. Weekly totals of 40 and up are
green, 25 to 39 yellow, anything lower red.
"""

from __future__ import annotations

from enum import Enum

from app.modules.chores.services.stores import STATUS_DONE, STATUS_MISSED

DEFAULT_POINTS_BASE = 1
MISSED_POINTS = -2
EXTRA_POINTS = 2
GREEN_THRESHOLD = 40
YELLOW_THRESHOLD = 25


class WeekClassification(str, Enum):
    Green = "green"
    Yellow = "yellow"
    Red = "red"


def _PointsBase(template) -> int:
    if template is None or template.PointsBase is None:
        return DEFAULT_POINTS_BASE
    return template.PointsBase


def PointsForInstance(instance, template=None) -> int:
    if instance.Status == STATUS_DONE:
        points = _PointsBase(template)
        if instance.DoneWithoutReminder:
            points += 1
        if instance.ComplaintLogged:
            points -= 1
        return points
    if instance.Status == STATUS_MISSED:
        points = MISSED_POINTS
        if instance.ComplaintLogged:
            points -= 1
        return points
    if instance.IsExtra:
        return EXTRA_POINTS
    return 0


def ClassifyWeek(total_points: int) -> WeekClassification:
    if total_points >= GREEN_THRESHOLD:
        return WeekClassification.Green
    if total_points >= YELLOW_THRESHOLD:
        return WeekClassification.Yellow
    return WeekClassification.Red
