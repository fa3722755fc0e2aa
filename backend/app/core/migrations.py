from pathlib import Path
import logging
import os
import threading
import time
import traceback

from alembic import command
from alembic.config import Config

from app.db import BuildAdminConnectionUrl, IsSqliteUrl

logger = logging.getLogger("app.migrations")

BACKEND_DIR = Path(__file__).resolve().parents[2]


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def BuildAlembicConfig(url: str | None = None) -> Config:
    script_location = BACKEND_DIR / "alembic"
    if not script_location.exists():
        raise RuntimeError("Missing alembic directory for migrations")
    # No ini file here so env.py leaves the application's logging alone.
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(script_location))
    alembic_cfg.set_main_option("sqlalchemy.url", (url or BuildAdminConnectionUrl()).replace("%", "%%"))
    return alembic_cfg


def RunMigrations() -> None:
    url = BuildAdminConnectionUrl()
    if IsSqliteUrl(url):
        # Migrations target schema-aware databases; SQLite tables are created directly.
        raise RuntimeError("alembic migrations are not used with SQLite")

    alembic_cfg = BuildAlembicConfig(url)
    timeout_seconds = _read_int_env("MIGRATIONS_TIMEOUT_SECONDS", 600)
    progress_seconds = _read_int_env("MIGRATIONS_PROGRESS_LOG_SECONDS", 20)

    logger.info(
        "running migrations (timeout=%ss, progress_log=%ss)",
        timeout_seconds,
        progress_seconds,
    )

    error: dict[str, str] = {}
    done = threading.Event()

    def _run() -> None:
        try:
            command.upgrade(alembic_cfg, "head")
        except Exception:  # noqa: BLE001
            error["trace"] = traceback.format_exc()
        finally:
            done.set()

    thread = threading.Thread(target=_run, name="alembic-upgrade", daemon=True)
    thread.start()
    start = time.monotonic()

    while not done.wait(timeout=progress_seconds):
        elapsed = int(time.monotonic() - start)
        logger.info("migrations still running (%ss elapsed)", elapsed)
        if timeout_seconds > 0 and elapsed >= timeout_seconds:
            logger.error("migrations timed out after %ss", elapsed)
            raise TimeoutError(f"migrations timed out after {elapsed}s")

    if "trace" in error:
        logger.error("migrations failed:\n%s", error["trace"])
        raise RuntimeError("migrations failed")

    logger.info("migrations complete")
