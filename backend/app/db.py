import os
from urllib.parse import quote_plus

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

CHORES_SCHEMA = "chores"

Base = declarative_base()
engine = None
SessionLocal = None


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _build_connection_url(login_env: str, password_env: str, database_override: str | None = None) -> str:
    override = os.getenv("DATABASE_URL", "").strip()
    if override:
        return override

    driver = os.getenv("SQLSERVER_DRIVER", "")
    host = os.getenv("SQLSERVER_HOST", "")
    port = os.getenv("SQLSERVER_PORT", "")
    database = database_override or os.getenv("SQLSERVER_DB", "")
    user = os.getenv(login_env, "")
    password = os.getenv(password_env, "")

    missing = [key for key, value in {
        "SQLSERVER_HOST": host,
        "SQLSERVER_PORT": port,
        "SQLSERVER_DB": database,
        "SQLSERVER_DRIVER": driver,
        login_env: user,
        password_env: password,
    }.items() if not value]
    if missing:
        raise RuntimeError(f"Missing database configuration: {', '.join(missing)}")

    driver_encoded = quote_plus(driver)
    password_encoded = quote_plus(password)
    return (
        f"mssql+pyodbc://{user}:{password_encoded}@{host}:{port}/{database}"
        f"?driver={driver_encoded}&Encrypt=yes&TrustServerCertificate=yes"
    )


def BuildUserConnectionUrl() -> str:
    return _build_connection_url("SQLSERVER_USER_LOGIN", "SQLSERVER_USER_PASSWORD")


def BuildAdminConnectionUrl(database_override: str | None = None) -> str:
    return _build_connection_url("SQLSERVER_ADMIN_LOGIN", "SQLSERVER_ADMIN_PASSWORD", database_override)


def IsSqliteUrl(url: str) -> bool:
    return url.startswith("sqlite")


def EngineOptions(url: str) -> dict:
    # SQLite has no schemas; tables live in the main database there.
    if IsSqliteUrl(url):
        return {
            "execution_options": {
                "schema_translate_map": {CHORES_SCHEMA: None},
            },
        }
    return {
        "pool_pre_ping": True,
        "pool_size": _read_int_env("SQLALCHEMY_POOL_SIZE", 10),
        "max_overflow": _read_int_env("SQLALCHEMY_MAX_OVERFLOW", 20),
        "pool_timeout": _read_int_env("SQLALCHEMY_POOL_TIMEOUT", 60),
    }


def StorageSchema(bind: Engine, schema: str = CHORES_SCHEMA) -> str | None:
    if bind.dialect.name == "sqlite":
        return None
    return schema


def _ensure_engine():
    global engine, SessionLocal
    if engine is None:
        url = BuildUserConnectionUrl()
        engine = create_engine(url, **EngineOptions(url))
        SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def GetEngine() -> Engine:
    _ensure_engine()
    return engine


def GetDb():
    if SessionLocal is None:
        _ensure_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def EnsureSchema(connection, schema: str = CHORES_SCHEMA) -> None:
    dialect = connection.dialect.name
    if dialect == "mssql":
        connection.execute(
            text(
                f"IF NOT EXISTS (SELECT 1 FROM sys.schemas WHERE name = '{schema}') "
                f"EXEC('CREATE SCHEMA {schema}')"
            )
        )
    elif dialect == "postgresql":
        connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
