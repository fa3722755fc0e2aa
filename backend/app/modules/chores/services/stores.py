from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.modules.chores.models import HouseholdMember, TaskInstance, TaskTemplate

STATUS_PENDING = "PENDING"
STATUS_DONE = "DONE"
STATUS_MISSED = "MISSED"

logger = logging.getLogger("chores.stores")


@dataclass
class InstanceRecord:
    Instance: TaskInstance
    Template: TaskTemplate | None
    Member: HouseholdMember | None


class TemplateStore(Protocol):
    def ListActiveTemplates(self) -> list[TaskTemplate]:
        ...


class InstanceStore(Protocol):
    def UpsertInstanceIfAbsent(self, template_id: int, task_date: date, defaults: dict) -> bool:
        """Insert the (template_id, task_date) row when absent; never touch an existing row."""
        ...

    def QueryInstances(
        self,
        start: date,
        end: date,
        assigned_to_id: int | None = None,
    ) -> list[InstanceRecord]:
        ...


class SqlTemplateStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def ListActiveTemplates(self) -> list[TaskTemplate]:
        return (
            self._db.query(TaskTemplate)
            .filter(TaskTemplate.Active.is_(True))
            .order_by(TaskTemplate.Id)
            .all()
        )


class SqlInstanceStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def _FindInstanceId(self, template_id: int, task_date: date) -> int | None:
        row = (
            self._db.query(TaskInstance.Id)
            .filter(TaskInstance.TemplateId == template_id, TaskInstance.TaskDate == task_date)
            .first()
        )
        return row[0] if row else None

    def UpsertInstanceIfAbsent(self, template_id: int, task_date: date, defaults: dict) -> bool:
        if self._FindInstanceId(template_id, task_date) is not None:
            return False

        instance = TaskInstance(TemplateId=template_id, TaskDate=task_date, **defaults)
        self._db.add(instance)
        try:
            self._db.commit()
        except IntegrityError:
            # Another writer inserted the same (template, date) first.
            self._db.rollback()
            logger.info(
                "instance already created concurrently template_id=%s date=%s",
                template_id,
                task_date.isoformat(),
            )
            return False
        return True

    def QueryInstances(
        self,
        start: date,
        end: date,
        assigned_to_id: int | None = None,
    ) -> list[InstanceRecord]:
        query = (
            self._db.query(TaskInstance, TaskTemplate, HouseholdMember)
            .outerjoin(TaskTemplate, TaskTemplate.Id == TaskInstance.TemplateId)
            .outerjoin(HouseholdMember, HouseholdMember.Id == TaskInstance.AssignedToId)
            .filter(TaskInstance.TaskDate >= start, TaskInstance.TaskDate <= end)
        )
        if assigned_to_id is not None:
            query = query.filter(TaskInstance.AssignedToId == assigned_to_id)
        rows = query.order_by(TaskInstance.TaskDate, TaskInstance.Id).all()
        return [
            InstanceRecord(Instance=instance, Template=template, Member=member)
            for instance, template, member in rows
        ]
