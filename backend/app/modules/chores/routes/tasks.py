import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from app.db import GetDb
from app.modules.chores.schemas import (
    MaterializeResponse,
    TaskCompleteRequest,
    TaskInstanceOut,
    TaskInstanceUpdate,
)
from app.modules.chores.services.chores_service import (
    ChoreNotFoundError,
    CompleteInstance,
    ListTasksForDate,
    MissInstance,
    UpdateInstanceModifiers,
)
from app.modules.chores.services.stores import SqlInstanceStore, SqlTemplateStore
from app.modules.chores.services.task_generator_service import EnsureInstancesForDate
from app.modules.chores.utils.builders import BuildTaskInstanceOut

router = APIRouter()
logger = logging.getLogger("chores.tasks")


def _handle_db_error(exc: Exception) -> None:
    logger.exception("tasks database error")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Chores storage not initialized. Run alembic upgrade head.",
    ) from exc


def _handle_not_found(exc: ChoreNotFoundError) -> None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/materialize", response_model=MaterializeResponse)
def MaterializeTasks(
    task_date: date = Query(alias="date"),
    db: Session = Depends(GetDb),
) -> MaterializeResponse:
    try:
        result = EnsureInstancesForDate(SqlTemplateStore(db), SqlInstanceStore(db), task_date)
        return MaterializeResponse(
            TaskDate=result.TaskDate,
            Considered=result.Considered,
            Generated=result.Generated,
            Created=result.Created,
        )
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.get("/today", response_model=list[TaskInstanceOut])
def ListTodayTasks(
    task_date: date | None = Query(default=None, alias="date"),
    user_id: int | None = Query(default=None, alias="userId"),
    db: Session = Depends(GetDb),
) -> list[TaskInstanceOut]:
    target = task_date or date.today()
    try:
        EnsureInstancesForDate(SqlTemplateStore(db), SqlInstanceStore(db), target)
        records = ListTasksForDate(db, target, user_id)
        return [BuildTaskInstanceOut(record) for record in records]
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.post("/{instance_id}/complete", response_model=TaskInstanceOut)
def CompleteTask(
    instance_id: int,
    payload: TaskCompleteRequest | None = None,
    db: Session = Depends(GetDb),
) -> TaskInstanceOut:
    done_without_reminder = payload.DoneWithoutReminder if payload else False
    try:
        return BuildTaskInstanceOut(CompleteInstance(db, instance_id, done_without_reminder))
    except ChoreNotFoundError as exc:
        _handle_not_found(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.post("/{instance_id}/miss", response_model=TaskInstanceOut)
def MissTask(instance_id: int, db: Session = Depends(GetDb)) -> TaskInstanceOut:
    try:
        return BuildTaskInstanceOut(MissInstance(db, instance_id))
    except ChoreNotFoundError as exc:
        _handle_not_found(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.patch("/{instance_id}", response_model=TaskInstanceOut)
def UpdateTask(
    instance_id: int,
    payload: TaskInstanceUpdate,
    db: Session = Depends(GetDb),
) -> TaskInstanceOut:
    try:
        record = UpdateInstanceModifiers(db, instance_id, payload.model_dump(exclude_unset=True))
        return BuildTaskInstanceOut(record)
    except ChoreNotFoundError as exc:
        _handle_not_found(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)
