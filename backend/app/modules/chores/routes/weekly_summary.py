import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from app.db import GetDb
from app.modules.chores.schemas import (
    WeeklySummaryMemberOut,
    WeeklySummaryResponse,
    WeeklySummaryRowOut,
)
from app.modules.chores.services.stores import SqlInstanceStore
from app.modules.chores.services.weekly_summary_service import BuildWeeklySummary
from app.modules.chores.utils.builders import BuildTaskInstanceOut

router = APIRouter()
logger = logging.getLogger("chores.weekly_summary")


def _handle_db_error(exc: Exception) -> None:
    logger.exception("weekly summary database error")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Chores storage not initialized. Run alembic upgrade head.",
    ) from exc


@router.get("", response_model=WeeklySummaryResponse)
def GetWeeklySummary(
    week_start: date | None = Query(default=None, alias="weekStart"),
    db: Session = Depends(GetDb),
) -> WeeklySummaryResponse:
    if week_start is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="weekStart (YYYY-MM-DD) required",
        )
    try:
        summary = BuildWeeklySummary(SqlInstanceStore(db), week_start)
    except (ProgrammingError, OperationalError) as exc:
        _handle_db_error(exc)

    return WeeklySummaryResponse(
        WeekStart=summary.WeekStart,
        WeekEnd=summary.WeekEnd,
        ByUser=[
            WeeklySummaryRowOut(
                Member=WeeklySummaryMemberOut(Id=row.MemberId, Name=row.MemberName),
                TotalPoints=row.TotalPoints,
                Classification=row.Classification.value,
                Instances=[BuildTaskInstanceOut(record) for record in row.Instances],
                Missed=[BuildTaskInstanceOut(record) for record in row.Missed],
            )
            for row in summary.ByUser
        ],
    )
