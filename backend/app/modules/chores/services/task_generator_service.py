from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from app.modules.chores.services.schedule_service import ShouldGenerateForDate
from app.modules.chores.services.stores import STATUS_PENDING, InstanceStore, TemplateStore

logger = logging.getLogger("chores.generator")


@dataclass(frozen=True)
class MaterializeResult:
    TaskDate: date
    Considered: int
    Generated: int
    Created: int


def BuildInstanceDefaults(template, available_after: str | None) -> dict:
    return {
        "AssignedToId": template.AssignedToId,
        "Status": STATUS_PENDING,
        "AvailableAfter": available_after or template.ConditionalAfterTime or None,
        "DoneWithoutReminder": False,
        "ComplaintLogged": False,
        "IsExtra": False,
    }


def EnsureInstancesForDate(
    templates: TemplateStore,
    instances: InstanceStore,
    task_date: date,
) -> MaterializeResult:
    """Make sure every active template due on ``task_date`` has its instance.

    Rows that already exist are left exactly as they are, so calling this twice for
    the same date is harmless. Store errors are not caught: templates handled before
    the failure keep their rows and a rerun completes the rest.
    """
    active = templates.ListActiveTemplates()
    generated = 0
    created = 0
    for template in active:
        decision = ShouldGenerateForDate(template, task_date)
        if not decision.Generate:
            continue
        generated += 1
        defaults = BuildInstanceDefaults(template, decision.AvailableAfter)
        if instances.UpsertInstanceIfAbsent(template.Id, task_date, defaults):
            created += 1

    logger.info(
        "materialized chores date=%s templates=%s due=%s created=%s",
        task_date.isoformat(),
        len(active),
        generated,
        created,
    )
    return MaterializeResult(
        TaskDate=task_date,
        Considered=len(active),
        Generated=generated,
        Created=created,
    )
