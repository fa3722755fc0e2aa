"""Recurrence rules for chore templates.

A template row carries one nullable column per kind of rule. ``BuildFrequencyRule``
folds those columns into a single rule object holding only what that kind needs,
and ``ShouldGenerateForDate`` evaluates it. Anything that cannot be folded into a
rule (unknown frequency type, missing field, unreadable month list) produces no
rule, and no rule means no instance.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Union

FREQUENCY_DAILY = "DAILY"
FREQUENCY_EVERY_OTHER_DAY = "EVERY_OTHER_DAY"
FREQUENCY_WEEKLY = "WEEKLY"
FREQUENCY_MONTHLY = "MONTHLY"
FREQUENCY_SEMIANNUAL = "SEMIANNUAL"
FREQUENCY_CONDITIONAL = "CONDITIONAL_SCHEDULE"

FREQUENCY_TYPES = {
    FREQUENCY_DAILY,
    FREQUENCY_EVERY_OTHER_DAY,
    FREQUENCY_WEEKLY,
    FREQUENCY_MONTHLY,
    FREQUENCY_SEMIANNUAL,
    FREQUENCY_CONDITIONAL,
}

EVERY_OTHER_DAY_EPOCH = date(2020, 1, 1)

logger = logging.getLogger("chores.schedule")


@dataclass(frozen=True)
class DailyRule:
    pass


@dataclass(frozen=True)
class EveryOtherDayRule:
    pass


@dataclass(frozen=True)
class WeeklyRule:
    DayOfWeek: int


@dataclass(frozen=True)
class MonthlyWeekRule:
    WeekOfMonth: int


@dataclass(frozen=True)
class MonthlyDayRule:
    DayOfMonth: int


@dataclass(frozen=True)
class SemiannualRule:
    Months: tuple[int, ...]


@dataclass(frozen=True)
class ConditionalRule:
    DayOfWeek: int
    AfterTime: str | None = None


FrequencyRule = Union[
    DailyRule,
    EveryOtherDayRule,
    WeeklyRule,
    MonthlyWeekRule,
    MonthlyDayRule,
    SemiannualRule,
    ConditionalRule,
]


@dataclass(frozen=True)
class GenerationDecision:
    Generate: bool
    AvailableAfter: str | None = None


def DayOfWeekSundayFirst(value: date) -> int:
    # date.weekday() is Monday=0; templates store Sunday=0.
    return (value.weekday() + 1) % 7


def WeekOfMonth(value: date) -> int:
    if value.day <= 7:
        return 1
    if value.day <= 14:
        return 2
    if value.day <= 21:
        return 3
    return 4


def DaysSinceEpoch(value: date) -> int:
    return (value - EVERY_OTHER_DAY_EPOCH).days


def ParseSemiannualMonths(raw: str | None) -> tuple[int, ...] | None:
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, list):
        return None
    months = []
    for value in parsed:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        months.append(value)
    return tuple(months)


def BuildFrequencyRule(template) -> FrequencyRule | None:
    frequency = template.FrequencyType
    if frequency == FREQUENCY_DAILY:
        return DailyRule()
    if frequency == FREQUENCY_EVERY_OTHER_DAY:
        return EveryOtherDayRule()
    if frequency == FREQUENCY_WEEKLY:
        if template.DayOfWeek is None:
            return None
        return WeeklyRule(DayOfWeek=template.DayOfWeek)
    if frequency == FREQUENCY_MONTHLY:
        if template.WeekOfMonth is not None:
            return MonthlyWeekRule(WeekOfMonth=template.WeekOfMonth)
        if template.DayOfMonth is not None:
            return MonthlyDayRule(DayOfMonth=template.DayOfMonth)
        return None
    if frequency == FREQUENCY_SEMIANNUAL:
        months = ParseSemiannualMonths(template.SemiannualMonths)
        if months is None:
            return None
        return SemiannualRule(Months=months)
    if frequency == FREQUENCY_CONDITIONAL:
        if template.DayOfWeek is None:
            return None
        return ConditionalRule(DayOfWeek=template.DayOfWeek, AfterTime=template.ConditionalAfterTime)
    return None


def RuleMatchesDate(rule: FrequencyRule, task_date: date) -> bool:
    if isinstance(rule, DailyRule):
        return True
    if isinstance(rule, EveryOtherDayRule):
        return DaysSinceEpoch(task_date) % 2 == 0
    if isinstance(rule, (WeeklyRule, ConditionalRule)):
        return DayOfWeekSundayFirst(task_date) == rule.DayOfWeek
    if isinstance(rule, MonthlyWeekRule):
        return WeekOfMonth(task_date) == rule.WeekOfMonth
    if isinstance(rule, MonthlyDayRule):
        return task_date.day == rule.DayOfMonth
    if isinstance(rule, SemiannualRule):
        return task_date.month in rule.Months
    return False


def ShouldGenerateForDate(template, task_date: date) -> GenerationDecision:
    rule = BuildFrequencyRule(template)
    if rule is None:
        logger.debug(
            "template has no usable rule template_id=%s frequency=%s",
            getattr(template, "Id", None),
            template.FrequencyType,
        )
        return GenerationDecision(Generate=False)
    if not RuleMatchesDate(rule, task_date):
        return GenerationDecision(Generate=False)
    if isinstance(rule, ConditionalRule):
        return GenerationDecision(Generate=True, AvailableAfter=rule.AfterTime)
    return GenerationDecision(Generate=True)
