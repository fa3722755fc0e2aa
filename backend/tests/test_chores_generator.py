from datetime import date

import pytest

from app.modules.chores.models import HouseholdMember, TaskInstance, TaskTemplate
from app.modules.chores.services.stores import SqlInstanceStore, SqlTemplateStore
from app.modules.chores.services.task_generator_service import (
    BuildInstanceDefaults,
    EnsureInstancesForDate,
)

THURSDAY = date(2025, 2, 13)


def _BuildTemplate(**overrides) -> TaskTemplate:
    data = {
        "Id": 1,
        "Name": "Chore",
        "Category": "",
        "AssignedToId": 7,
        "FrequencyType": "DAILY",
        "TimeBlock": "ANY",
        "PointsBase": 1,
        "Active": True,
    }
    data.update(overrides)
    return TaskTemplate(**data)


class _FakeTemplateStore:
    def __init__(self, templates):
        self._templates = templates

    def ListActiveTemplates(self):
        return [template for template in self._templates if template.Active]


class _FakeInstanceStore:
    def __init__(self, fail_on_template_id=None):
        self.rows = {}
        self.calls = []
        self._fail_on_template_id = fail_on_template_id

    def UpsertInstanceIfAbsent(self, template_id, task_date, defaults):
        self.calls.append(template_id)
        if template_id == self._fail_on_template_id:
            raise RuntimeError("store unavailable")
        key = (template_id, task_date)
        if key in self.rows:
            return False
        self.rows[key] = dict(defaults)
        return True

    def QueryInstances(self, start, end, assigned_to_id=None):
        return []


def test_materializer_creates_pending_instances_for_due_templates():
    templates = _FakeTemplateStore(
        [
            _BuildTemplate(Id=1, FrequencyType="DAILY"),
            _BuildTemplate(Id=2, FrequencyType="WEEKLY", DayOfWeek=4),
            _BuildTemplate(Id=3, FrequencyType="WEEKLY", DayOfWeek=5),
        ]
    )
    instances = _FakeInstanceStore()

    result = EnsureInstancesForDate(templates, instances, THURSDAY)

    assert set(instances.rows) == {(1, THURSDAY), (2, THURSDAY)}
    assert instances.rows[(1, THURSDAY)]["Status"] == "PENDING"
    assert instances.rows[(1, THURSDAY)]["AssignedToId"] == 7
    assert result.Considered == 3
    assert result.Generated == 2
    assert result.Created == 2


def test_materializer_skips_inactive_templates():
    templates = _FakeTemplateStore(
        [
            _BuildTemplate(Id=1, Active=True),
            _BuildTemplate(Id=2, Active=False),
        ]
    )
    instances = _FakeInstanceStore()

    EnsureInstancesForDate(templates, instances, THURSDAY)

    assert set(instances.rows) == {(1, THURSDAY)}


def test_materializer_is_idempotent():
    templates = _FakeTemplateStore([_BuildTemplate(Id=1), _BuildTemplate(Id=2)])
    instances = _FakeInstanceStore()

    first = EnsureInstancesForDate(templates, instances, THURSDAY)
    snapshot = {key: dict(value) for key, value in instances.rows.items()}
    second = EnsureInstancesForDate(templates, instances, THURSDAY)

    assert instances.rows == snapshot
    assert first.Created == 2
    assert second.Created == 0
    assert second.Generated == 2


def test_materializer_copies_conditional_after_time():
    templates = _FakeTemplateStore(
        [
            _BuildTemplate(
                Id=1,
                FrequencyType="CONDITIONAL_SCHEDULE",
                DayOfWeek=4,
                ConditionalAfterTime="18:00",
            ),
            _BuildTemplate(Id=2, FrequencyType="DAILY"),
        ]
    )
    instances = _FakeInstanceStore()

    EnsureInstancesForDate(templates, instances, THURSDAY)

    assert instances.rows[(1, THURSDAY)]["AvailableAfter"] == "18:00"
    assert instances.rows[(2, THURSDAY)]["AvailableAfter"] is None


def test_materializer_propagates_store_failures_and_resumes():
    templates = _FakeTemplateStore([_BuildTemplate(Id=1), _BuildTemplate(Id=2), _BuildTemplate(Id=3)])
    failing = _FakeInstanceStore(fail_on_template_id=2)

    with pytest.raises(RuntimeError):
        EnsureInstancesForDate(templates, failing, THURSDAY)

    assert set(failing.rows) == {(1, THURSDAY)}

    failing._fail_on_template_id = None
    result = EnsureInstancesForDate(templates, failing, THURSDAY)

    assert set(failing.rows) == {(1, THURSDAY), (2, THURSDAY), (3, THURSDAY)}
    assert result.Created == 2


def _SeedMemberAndTemplates(db_session):
    member = HouseholdMember(Name="Kid", CanEditChores=False)
    db_session.add(member)
    db_session.flush()
    daily = TaskTemplate(
        Name="Dishes",
        Category="Kitchen",
        AssignedToId=member.Id,
        FrequencyType="DAILY",
        TimeBlock="NIGHT",
        PointsBase=1,
        Active=True,
    )
    trash = TaskTemplate(
        Name="Trash",
        Category="Trash",
        AssignedToId=member.Id,
        FrequencyType="CONDITIONAL_SCHEDULE",
        DayOfWeek=4,
        ConditionalAfterTime="18:00",
        TimeBlock="ANY",
        PointsBase=1,
        Active=True,
    )
    retired = TaskTemplate(
        Name="Old chore",
        Category="",
        AssignedToId=member.Id,
        FrequencyType="DAILY",
        TimeBlock="ANY",
        PointsBase=1,
        Active=False,
    )
    db_session.add_all([daily, trash, retired])
    db_session.commit()
    return member, daily, trash


def test_sql_store_materializes_once_and_keeps_status(db_session):
    member, daily, trash = _SeedMemberAndTemplates(db_session)
    templates = SqlTemplateStore(db_session)
    instances = SqlInstanceStore(db_session)

    first = EnsureInstancesForDate(templates, instances, THURSDAY)
    assert first.Created == 2

    done = (
        db_session.query(TaskInstance)
        .filter(TaskInstance.TemplateId == daily.Id, TaskInstance.TaskDate == THURSDAY)
        .one()
    )
    done.Status = "DONE"
    db_session.commit()

    second = EnsureInstancesForDate(templates, instances, THURSDAY)
    assert second.Created == 0

    rows = db_session.query(TaskInstance).filter(TaskInstance.TaskDate == THURSDAY).all()
    assert len(rows) == 2
    by_template = {row.TemplateId: row for row in rows}
    assert by_template[daily.Id].Status == "DONE"
    assert by_template[trash.Id].Status == "PENDING"
    assert by_template[trash.Id].AvailableAfter == "18:00"
    assert by_template[trash.Id].AssignedToId == member.Id


def test_sql_store_query_returns_template_and_member(db_session):
    member, daily, _trash = _SeedMemberAndTemplates(db_session)
    EnsureInstancesForDate(SqlTemplateStore(db_session), SqlInstanceStore(db_session), date(2025, 2, 14))

    records = SqlInstanceStore(db_session).QueryInstances(date(2025, 2, 10), date(2025, 2, 16))

    assert len(records) == 1
    assert records[0].Template.Id == daily.Id
    assert records[0].Member.Name == "Kid"
    assert records[0].Instance.AssignedToId == member.Id


def test_sql_store_losing_insert_race_keeps_existing_row(db_session, monkeypatch):
    _member, daily, _trash = _SeedMemberAndTemplates(db_session)
    store = SqlInstanceStore(db_session)
    EnsureInstancesForDate(SqlTemplateStore(db_session), store, THURSDAY)
    existing = (
        db_session.query(TaskInstance)
        .filter(TaskInstance.TemplateId == daily.Id, TaskInstance.TaskDate == THURSDAY)
        .one()
    )
    existing.Status = "DONE"
    db_session.commit()

    # Lookup misses as if another writer inserted between check and commit.
    monkeypatch.setattr(store, "_FindInstanceId", lambda template_id, task_date: None)
    created = store.UpsertInstanceIfAbsent(daily.Id, THURSDAY, BuildInstanceDefaults(daily, None))

    assert created is False
    rows = (
        db_session.query(TaskInstance)
        .filter(TaskInstance.TemplateId == daily.Id, TaskInstance.TaskDate == THURSDAY)
        .all()
    )
    assert len(rows) == 1
    assert rows[0].Status == "DONE"
