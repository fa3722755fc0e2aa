import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from app.db import GetDb
from app.modules.chores.models import HouseholdMember
from app.modules.chores.schemas import HouseholdMemberCreate, HouseholdMemberOut
from app.modules.chores.services.chores_service import CreateMember, ListMembers
from app.modules.chores.utils.builders import BuildMemberOut
from app.modules.chores.utils.rbac import RequireChoresEditor

router = APIRouter()
logger = logging.getLogger("chores.members")


def _handle_db_error(exc: Exception) -> None:
    logger.exception("household members database error")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Chores storage not initialized. Run alembic upgrade head.",
    ) from exc


@router.get("", response_model=list[HouseholdMemberOut])
def ListHouseholdMembers(db: Session = Depends(GetDb)) -> list[HouseholdMemberOut]:
    try:
        return [BuildMemberOut(member) for member in ListMembers(db)]
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)


@router.post("", response_model=HouseholdMemberOut, status_code=status.HTTP_201_CREATED)
def CreateHouseholdMember(
    payload: HouseholdMemberCreate,
    db: Session = Depends(GetDb),
    editor: HouseholdMember = Depends(RequireChoresEditor()),
) -> HouseholdMemberOut:
    try:
        member = CreateMember(db, payload.Name, payload.CanEditChores)
        logger.info("member added by editor_id=%s", editor.Id)
        return BuildMemberOut(member)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)
