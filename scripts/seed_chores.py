#!/usr/bin/env python3
"""
seed_chores.py - Create the chores tables and load a default household.

Usage examples:
  python scripts/seed_chores.py
  python scripts/seed_chores.py --env-file /path/to/.env
  python scripts/seed_chores.py --create-tables
  python scripts/seed_chores.py --dry-run

Flags:
  --env-file PATH
    Load environment variables from PATH (default: .env when present).
  --create-tables
    Create the chores tables directly instead of relying on alembic.
  --dry-run
    Print the members and templates that would be seeded and exit.
"""
import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.append(str(BACKEND_DIR))

from app.core.logging import setup_logging  # noqa: E402
from app.db import GetDb, GetEngine  # noqa: E402
from app.modules.chores.models import CreateChoresTables  # noqa: E402
from app.modules.chores.services.seed_service import (  # noqa: E402
    DEFAULT_MEMBERS,
    DEFAULT_TEMPLATES,
    SeedDefaultHousehold,
)

DEFAULT_ENV_PATH = ".env"


def LoadEnvFile(EnvPath: str, Required: bool) -> None:
    if not EnvPath:
        return
    if not os.path.exists(EnvPath):
        if Required:
            raise RuntimeError(f"Env file not found: {EnvPath}")
        return
    load_dotenv(dotenv_path=EnvPath)


def CreateTables(Engine=None) -> None:
    CreateChoresTables(Engine or GetEngine())


def PrintPlan() -> None:
    Plan = {
        "Members": DEFAULT_MEMBERS,
        "Templates": [
            {
                "Name": Name,
                "Category": Category,
                "AssignedTo": Assignee,
                "FrequencyType": Frequency,
                "TimeBlock": TimeBlock,
                **Fields,
            }
            for Name, Category, Assignee, Frequency, TimeBlock, Fields in DEFAULT_TEMPLATES
        ],
    }
    print(json.dumps(Plan, indent=2))


def Main() -> int:
    Parser = argparse.ArgumentParser(description="Seed the chores tables with a default household.")
    Parser.add_argument("--env-file", help=f"Env file to load (default: {DEFAULT_ENV_PATH} when present).")
    Parser.add_argument("--create-tables", action="store_true", help="Create chores tables before seeding.")
    Parser.add_argument("--dry-run", action="store_true", help="Print the seed plan and exit.")
    Args = Parser.parse_args()

    if Args.dry_run:
        PrintPlan()
        return 0

    try:
        LoadEnvFile(Args.env_file or DEFAULT_ENV_PATH, Required=bool(Args.env_file))
        setup_logging()
        if Args.create_tables:
            CreateTables()
        Session = GetDb()
        Db = next(Session)
        try:
            Result = SeedDefaultHousehold(Db)
        finally:
            Session.close()
        print(f"Members created: {Result.MembersCreated}")
        print(f"Templates created: {Result.TemplatesCreated}")
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as Ex:
        print("\nError:")
        print(textwrap.indent(str(Ex), "  "))
        return 1


if __name__ == "__main__":
    raise SystemExit(Main())
