from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from app.modules.chores.services.scoring_service import (
    ClassifyWeek,
    PointsForInstance,
    WeekClassification,
)
from app.modules.chores.services.stores import STATUS_MISSED, InstanceRecord, InstanceStore


@dataclass
class WeeklySummaryRow:
    MemberId: int
    MemberName: str | None
    TotalPoints: int = 0
    Classification: WeekClassification = WeekClassification.Red
    Instances: list[InstanceRecord] = field(default_factory=list)
    Missed: list[InstanceRecord] = field(default_factory=list)


@dataclass(frozen=True)
class WeeklySummary:
    WeekStart: date
    WeekEnd: date
    ByUser: list[WeeklySummaryRow]


def WeekBounds(week_start: date) -> tuple[date, date]:
    return week_start, week_start + timedelta(days=6)


def SummarizeRecords(records: list[InstanceRecord]) -> list[WeeklySummaryRow]:
    rows: dict[int, WeeklySummaryRow] = {}
    for record in records:
        instance = record.Instance
        row = rows.get(instance.AssignedToId)
        if row is None:
            row = WeeklySummaryRow(
                MemberId=instance.AssignedToId,
                MemberName=record.Member.Name if record.Member else None,
            )
            rows[instance.AssignedToId] = row
        row.Instances.append(record)
        if instance.Status == STATUS_MISSED:
            row.Missed.append(record)
        row.TotalPoints += PointsForInstance(instance, record.Template)

    for row in rows.values():
        row.Classification = ClassifyWeek(row.TotalPoints)
    return [rows[member_id] for member_id in sorted(rows)]


def BuildWeeklySummary(instances: InstanceStore, week_start: date) -> WeeklySummary:
    start, end = WeekBounds(week_start)
    records = instances.QueryInstances(start, end)
    return WeeklySummary(WeekStart=start, WeekEnd=end, ByUser=SummarizeRecords(records))
