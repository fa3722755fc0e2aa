from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Iterable

from sqlalchemy.orm import Session

from app.modules.chores.models import HouseholdMember, TaskInstance, TaskTemplate
from app.modules.chores.services.schedule_service import FREQUENCY_TYPES, ParseSemiannualMonths
from app.modules.chores.services.stores import (
    STATUS_DONE,
    STATUS_MISSED,
    InstanceRecord,
    SqlInstanceStore,
)

TIME_BLOCK_ORDER = {"MORNING": 0, "AFTERNOON": 1, "NIGHT": 2, "ANY": 3}
SEMIANNUAL_MONTH_COUNT = 2

logger = logging.getLogger("chores.service")


class ChoreNotFoundError(ValueError):
    pass


class ChoreValidationError(ValueError):
    pass


def _NowUtc() -> datetime:
    return datetime.now(tz=timezone.utc)


def _EnumValue(value):
    return getattr(value, "value", value)


def SerializeSemiannualMonths(values: Iterable[int] | None) -> str | None:
    if values is None:
        return None
    months = [int(value) for value in values]
    if len(months) != SEMIANNUAL_MONTH_COUNT:
        raise ChoreValidationError("SemiannualMonths must list exactly two months")
    if any(month < 1 or month > 12 for month in months):
        raise ChoreValidationError("SemiannualMonths values must be between 1 and 12")
    return json.dumps(months, separators=(",", ":"))


def DeserializeSemiannualMonths(value: str | None) -> list[int] | None:
    months = ParseSemiannualMonths(value)
    return list(months) if months is not None else None


def ListMembers(db: Session) -> list[HouseholdMember]:
    return db.query(HouseholdMember).order_by(HouseholdMember.Id).all()


def GetMember(db: Session, member_id: int) -> HouseholdMember | None:
    return db.query(HouseholdMember).filter(HouseholdMember.Id == member_id).first()


def CreateMember(db: Session, name: str, can_edit_chores: bool) -> HouseholdMember:
    member = HouseholdMember(Name=name.strip(), CanEditChores=can_edit_chores)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("household member created member_id=%s", member.Id)
    return member


def _LoadMembers(db: Session, member_ids: set[int]) -> dict[int, HouseholdMember]:
    if not member_ids:
        return {}
    members = db.query(HouseholdMember).filter(HouseholdMember.Id.in_(member_ids)).all()
    return {member.Id: member for member in members}


def ListTemplates(db: Session) -> list[tuple[TaskTemplate, HouseholdMember | None]]:
    templates = (
        db.query(TaskTemplate)
        .order_by(TaskTemplate.Category, TaskTemplate.Name, TaskTemplate.Id)
        .all()
    )
    members = _LoadMembers(db, {template.AssignedToId for template in templates})
    return [(template, members.get(template.AssignedToId)) for template in templates]


def GetTemplate(db: Session, template_id: int) -> tuple[TaskTemplate, HouseholdMember | None]:
    template = db.query(TaskTemplate).filter(TaskTemplate.Id == template_id).first()
    if not template:
        raise ChoreNotFoundError("Template not found")
    return template, GetMember(db, template.AssignedToId)


def _ApplyTemplateFields(db: Session, template: TaskTemplate, payload: dict) -> None:
    if "AssignedToId" in payload and payload["AssignedToId"] is not None:
        if not GetMember(db, payload["AssignedToId"]):
            raise ChoreValidationError("Assigned member not found")
        template.AssignedToId = payload["AssignedToId"]
    if "FrequencyType" in payload and payload["FrequencyType"] is not None:
        frequency = _EnumValue(payload["FrequencyType"])
        if frequency not in FREQUENCY_TYPES:
            raise ChoreValidationError("Unsupported frequency type")
        template.FrequencyType = frequency
    if "SemiannualMonths" in payload:
        template.SemiannualMonths = SerializeSemiannualMonths(payload["SemiannualMonths"])

    for key in ("DayOfWeek", "WeekOfMonth", "DayOfMonth", "ConditionalAfterTime"):
        if key in payload:
            setattr(template, key, payload[key])
    for key in ("Name", "Category", "PointsBase", "Active"):
        if key in payload and payload[key] is not None:
            setattr(template, key, payload[key])
    if "TimeBlock" in payload and payload["TimeBlock"] is not None:
        template.TimeBlock = _EnumValue(payload["TimeBlock"])


def CreateTemplate(db: Session, payload: dict) -> tuple[TaskTemplate, HouseholdMember | None]:
    if payload.get("AssignedToId") is None:
        raise ChoreValidationError("AssignedToId required")
    template = TaskTemplate(Category="", TimeBlock="ANY", PointsBase=1, Active=True)
    _ApplyTemplateFields(db, template, payload)
    now = _NowUtc()
    template.CreatedAt = now
    template.UpdatedAt = now
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info(
        "template created template_id=%s frequency=%s",
        template.Id,
        template.FrequencyType,
    )
    return template, GetMember(db, template.AssignedToId)


def UpdateTemplate(db: Session, template_id: int, payload: dict) -> tuple[TaskTemplate, HouseholdMember | None]:
    template = db.query(TaskTemplate).filter(TaskTemplate.Id == template_id).first()
    if not template:
        raise ChoreNotFoundError("Template not found")
    _ApplyTemplateFields(db, template, payload)
    template.UpdatedAt = _NowUtc()
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info("template updated template_id=%s", template.Id)
    return template, GetMember(db, template.AssignedToId)


def DeleteTemplate(db: Session, template_id: int) -> None:
    template = db.query(TaskTemplate).filter(TaskTemplate.Id == template_id).first()
    if not template:
        raise ChoreNotFoundError("Template not found")
    removed = (
        db.query(TaskInstance)
        .filter(TaskInstance.TemplateId == template_id)
        .delete(synchronize_session=False)
    )
    db.delete(template)
    db.commit()
    logger.info("template deleted template_id=%s instances_removed=%s", template_id, removed)


def _SortKey(record: InstanceRecord) -> tuple[int, str]:
    template = record.Template
    if template is None:
        return (len(TIME_BLOCK_ORDER), "")
    return (TIME_BLOCK_ORDER.get(template.TimeBlock, len(TIME_BLOCK_ORDER)), template.Name or "")


def ListTasksForDate(db: Session, task_date: date, assigned_to_id: int | None = None) -> list[InstanceRecord]:
    records = SqlInstanceStore(db).QueryInstances(task_date, task_date, assigned_to_id)
    return sorted(records, key=_SortKey)


def GetInstanceRecord(db: Session, instance_id: int) -> InstanceRecord:
    instance = db.query(TaskInstance).filter(TaskInstance.Id == instance_id).first()
    if not instance:
        raise ChoreNotFoundError("Task not found")
    template = db.query(TaskTemplate).filter(TaskTemplate.Id == instance.TemplateId).first()
    return InstanceRecord(Instance=instance, Template=template, Member=GetMember(db, instance.AssignedToId))


def _SaveInstance(db: Session, instance: TaskInstance) -> InstanceRecord:
    db.add(instance)
    db.commit()
    db.refresh(instance)
    return GetInstanceRecord(db, instance.Id)


def CompleteInstance(db: Session, instance_id: int, done_without_reminder: bool) -> InstanceRecord:
    record = GetInstanceRecord(db, instance_id)
    instance = record.Instance
    instance.Status = STATUS_DONE
    instance.DoneAt = _NowUtc()
    instance.DoneWithoutReminder = done_without_reminder
    logger.info("task completed instance_id=%s without_reminder=%s", instance_id, done_without_reminder)
    return _SaveInstance(db, instance)


def MissInstance(db: Session, instance_id: int) -> InstanceRecord:
    record = GetInstanceRecord(db, instance_id)
    instance = record.Instance
    instance.Status = STATUS_MISSED
    logger.info("task missed instance_id=%s", instance_id)
    return _SaveInstance(db, instance)


def UpdateInstanceModifiers(db: Session, instance_id: int, payload: dict) -> InstanceRecord:
    record = GetInstanceRecord(db, instance_id)
    instance = record.Instance
    for key in ("ComplaintLogged", "IsExtra"):
        if payload.get(key) is not None:
            setattr(instance, key, payload[key])
    if "Notes" in payload:
        instance.Notes = payload["Notes"]
    return _SaveInstance(db, instance)
