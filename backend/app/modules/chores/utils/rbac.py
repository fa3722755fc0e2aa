from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.db import GetDb
from app.modules.chores.models import HouseholdMember

EDITOR_HEADER = "X-Editor-User-Id"


def CanEditChores(member: HouseholdMember | None) -> bool:
    return bool(member and member.CanEditChores)


def RequireChoresEditor():
    def _checker(
        editor_id: str | None = Header(default=None, alias=EDITOR_HEADER),
        db: Session = Depends(GetDb),
    ) -> HouseholdMember:
        if not editor_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only a member with edit permission can change chores. Set {EDITOR_HEADER}.",
            )
        try:
            member_id = int(editor_id)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Invalid {EDITOR_HEADER}",
            ) from exc
        member = db.query(HouseholdMember).filter(HouseholdMember.Id == member_id).first()
        if not CanEditChores(member):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="This member cannot edit chores.",
            )
        return member

    return _checker
