from datetime import date

from app.modules.chores.models import HouseholdMember, TaskInstance, TaskTemplate
from app.modules.chores.services.scoring_service import WeekClassification
from app.modules.chores.services.stores import InstanceRecord
from app.modules.chores.services.weekly_summary_service import (
    BuildWeeklySummary,
    SummarizeRecords,
    WeekBounds,
)


def _Record(member_id: int, status: str, points_base: int = 1, name: str | None = None, **flags) -> InstanceRecord:
    instance = TaskInstance(
        TemplateId=1,
        AssignedToId=member_id,
        TaskDate=date(2025, 2, 10),
        Status=status,
        DoneWithoutReminder=flags.get("DoneWithoutReminder", False),
        ComplaintLogged=flags.get("ComplaintLogged", False),
        IsExtra=flags.get("IsExtra", False),
    )
    template = TaskTemplate(Id=1, Name="Chore", PointsBase=points_base)
    member = HouseholdMember(Id=member_id, Name=name or f"Member {member_id}")
    return InstanceRecord(Instance=instance, Template=template, Member=member)


class _FakeInstanceStore:
    def __init__(self, records):
        self._records = records
        self.queried = None

    def QueryInstances(self, start, end, assigned_to_id=None):
        self.queried = (start, end)
        return self._records

    def UpsertInstanceIfAbsent(self, template_id, task_date, defaults):
        return False


def test_week_bounds_are_inclusive_seven_days():
    assert WeekBounds(date(2025, 2, 10)) == (date(2025, 2, 10), date(2025, 2, 16))
    assert WeekBounds(date(2024, 12, 30)) == (date(2024, 12, 30), date(2025, 1, 5))


def test_week_start_is_not_forced_to_monday():
    assert WeekBounds(date(2025, 2, 12)) == (date(2025, 2, 12), date(2025, 2, 18))


def test_summarize_groups_by_member_and_keeps_missed():
    records = [
        _Record(2, "DONE", points_base=20, name="Teen"),
        _Record(1, "DONE", points_base=30, DoneWithoutReminder=True),
        _Record(1, "DONE", points_base=10),
        _Record(1, "MISSED"),
        _Record(2, "MISSED", ComplaintLogged=True, name="Teen"),
        _Record(2, "PENDING", IsExtra=True, name="Teen"),
        _Record(3, "PENDING"),
    ]

    rows = SummarizeRecords(records)

    assert [row.MemberId for row in rows] == [1, 2, 3]
    first, second, third = rows
    assert first.TotalPoints == 31 + 10 - 2
    assert first.Classification == WeekClassification.Yellow
    assert len(first.Instances) == 3
    assert len(first.Missed) == 1

    assert second.MemberName == "Teen"
    assert second.TotalPoints == 20 - 3 + 2
    assert second.Classification == WeekClassification.Red
    assert len(second.Missed) == 1

    assert third.TotalPoints == 0
    assert third.Classification == WeekClassification.Red
    assert third.Missed == []


def test_summarize_green_band():
    rows = SummarizeRecords([_Record(1, "DONE", points_base=40)])
    assert rows[0].Classification == WeekClassification.Green


def test_build_weekly_summary_queries_week_range():
    store = _FakeInstanceStore([_Record(1, "DONE")])

    summary = BuildWeeklySummary(store, date(2025, 2, 10))

    assert store.queried == (date(2025, 2, 10), date(2025, 2, 16))
    assert summary.WeekStart == date(2025, 2, 10)
    assert summary.WeekEnd == date(2025, 2, 16)
    assert summary.ByUser[0].TotalPoints == 1


def test_build_weekly_summary_empty_week():
    summary = BuildWeeklySummary(_FakeInstanceStore([]), date(2025, 2, 10))
    assert summary.ByUser == []
