import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from app.db import GetDb
from app.modules.chores.models import HouseholdMember
from app.modules.chores.schemas import TaskTemplateCreate, TaskTemplateOut, TaskTemplateUpdate
from app.modules.chores.services.chores_service import (
    ChoreNotFoundError,
    ChoreValidationError,
    CreateTemplate,
    DeleteTemplate,
    GetTemplate,
    ListTemplates,
    UpdateTemplate,
)
from app.modules.chores.utils.builders import BuildTemplateOut
from app.modules.chores.utils.rbac import RequireChoresEditor

router = APIRouter()
logger = logging.getLogger("chores.templates")


def _handle_db_error(exc: Exception) -> None:
    logger.exception("templates database error")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Chores storage not initialized. Run alembic upgrade head.",
    ) from exc


def _handle_chore_error(exc: Exception) -> None:
    detail = str(exc) or "Invalid request"
    if isinstance(exc, ChoreNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail) from exc


@router.get("", response_model=list[TaskTemplateOut])
def ListTaskTemplates(db: Session = Depends(GetDb)) -> list[TaskTemplateOut]:
    try:
        return [BuildTemplateOut(template, member) for template, member in ListTemplates(db)]
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.get("/{template_id}", response_model=TaskTemplateOut)
def GetTaskTemplate(template_id: int, db: Session = Depends(GetDb)) -> TaskTemplateOut:
    try:
        template, member = GetTemplate(db, template_id)
        return BuildTemplateOut(template, member)
    except ChoreNotFoundError as exc:
        _handle_chore_error(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.post("", response_model=TaskTemplateOut, status_code=status.HTTP_201_CREATED)
def CreateTaskTemplate(
    payload: TaskTemplateCreate,
    db: Session = Depends(GetDb),
    editor: HouseholdMember = Depends(RequireChoresEditor()),
) -> TaskTemplateOut:
    try:
        template, member = CreateTemplate(db, payload.model_dump())
        return BuildTemplateOut(template, member)
    except (ChoreNotFoundError, ChoreValidationError) as exc:
        _handle_chore_error(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.put("/{template_id}", response_model=TaskTemplateOut)
def UpdateTaskTemplate(
    template_id: int,
    payload: TaskTemplateUpdate,
    db: Session = Depends(GetDb),
    editor: HouseholdMember = Depends(RequireChoresEditor()),
) -> TaskTemplateOut:
    try:
        template, member = UpdateTemplate(db, template_id, payload.model_dump(exclude_unset=True))
        return BuildTemplateOut(template, member)
    except (ChoreNotFoundError, ChoreValidationError) as exc:
        _handle_chore_error(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def DeleteTaskTemplate(
    template_id: int,
    db: Session = Depends(GetDb),
    editor: HouseholdMember = Depends(RequireChoresEditor()),
) -> None:
    try:
        DeleteTemplate(db, template_id)
    except ChoreNotFoundError as exc:
        _handle_chore_error(exc)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)
