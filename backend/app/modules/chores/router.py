import logging
from threading import Lock

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from app.core.migrations import RunMigrations
from app.db import GetDb, StorageSchema
from app.modules.chores.models import CHORES_TABLES, CreateChoresTables
from app.modules.chores.routes.members import router as members_router
from app.modules.chores.routes.tasks import router as tasks_router
from app.modules.chores.routes.templates import router as templates_router
from app.modules.chores.routes.weekly_summary import router as weekly_summary_router

_chores_storage_lock = Lock()
_chores_storage_ready = False
logger = logging.getLogger("chores")


def _MissingTables(db: Session) -> list[str]:
    bind = db.get_bind()
    inspector = inspect(bind)
    schema = StorageSchema(bind)
    return [
        table.__tablename__
        for table in CHORES_TABLES
        if not inspector.has_table(table.__tablename__, schema=schema)
    ]


def _RepairStorage(db: Session) -> None:
    CreateChoresTables(db.get_bind())


def EnsureChoresStorageReady(db: Session = Depends(GetDb)) -> None:
    global _chores_storage_ready
    if _chores_storage_ready:
        return

    with _chores_storage_lock:
        if _chores_storage_ready:
            return
        missing = _MissingTables(db)
        if not missing:
            _chores_storage_ready = True
            return

        logger.info("chores storage missing tables=%s", ",".join(missing))
        try:
            RunMigrations()
        except Exception:
            logger.exception("chores storage migration failed")

        missing = _MissingTables(db)
        if not missing:
            _chores_storage_ready = True
            return

        logger.warning("chores storage still missing tables=%s, attempting repair", ",".join(missing))
        try:
            _RepairStorage(db)
        except Exception as exc:
            logger.exception("chores storage repair failed")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Chores storage migration failed. Check server logs.",
            ) from exc

        missing = _MissingTables(db)
        if missing:
            logger.error("chores storage still missing tables=%s", ",".join(missing))
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Chores storage migration failed. Check server logs.",
            )
        _chores_storage_ready = True


router = APIRouter(
    prefix="/api/chores",
    tags=["chores"],
    dependencies=[Depends(EnsureChoresStorageReady)],
)


@router.get("/status")
async def chores_status() -> dict:
    logger.debug("chores status ok")
    return {"status": "ok", "module": "chores"}


router.include_router(members_router, prefix="/members", tags=["chores-members"])
router.include_router(templates_router, prefix="/templates", tags=["chores-templates"])
router.include_router(tasks_router, prefix="/tasks", tags=["chores-tasks"])
router.include_router(weekly_summary_router, prefix="/weekly-summary", tags=["chores-weekly-summary"])
