import json
import logging
import os
import time
from logging.handlers import RotatingFileHandler


class LocalTimeFormatter(logging.Formatter):
    converter = time.localtime


def _build_file_handler(
    path: str,
    level: str,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int,
) -> RotatingFileHandler | None:
    if not path:
        return None
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_file_path = os.getenv("LOG_FILE_PATH", "").strip()
    frontend_log_file_path = os.getenv("FRONTEND_LOG_FILE_PATH", "").strip()
    max_bytes = int(os.getenv("LOG_MAX_BYTES", "5000000"))
    backup_count = int(os.getenv("LOG_BACKUP_COUNT", "5"))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = LocalTimeFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    backend_file_handler = _build_file_handler(
        log_file_path, log_level, formatter, max_bytes, backup_count
    )
    if backend_file_handler:
        root_logger.addHandler(backend_file_handler)

    frontend_logger = logging.getLogger("frontend")
    frontend_logger.handlers.clear()
    frontend_logger.propagate = False
    frontend_logger.setLevel(log_level)
    frontend_logger.addHandler(console_handler)
    frontend_file_handler = _build_file_handler(
        frontend_log_file_path, log_level, formatter, max_bytes, backup_count
    )
    if frontend_file_handler:
        frontend_logger.addHandler(frontend_file_handler)

    logging.getLogger("uvicorn.access").handlers.clear()


def format_frontend_message(message: str, context: dict | None = None) -> str:
    if not context:
        return message
    payload = {"message": message, "context": context}
    return json.dumps(payload, separators=(",", ":"))
