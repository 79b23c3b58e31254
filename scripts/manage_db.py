#!/usr/bin/env python
# scripts/manage_db.py

"""
Database management CLI for the Agent Dashboard Service.
- Creates the Postgres database if missing
- Runs Alembic migrations
- Creates or drops tables directly from the models
- Seeds sample models, prompts, labels, tools and an MCP server
"""

import argparse
import asyncio
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict

# --- Path Setup ---
service_dir = Path(__file__).parent.parent.absolute()
sys.path.insert(0, str(service_dir / "src"))

from dotenv import load_dotenv

# --- Logging and Helpers ---
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("manage_db")


def colored(text: str, color: str) -> str:
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "reset": "\033[0m",
    }
    return f"{colors.get(color, '')}{text}{colors['reset']}"


def run_command(command: str, check: bool = True):
    logger.info(colored(f"--- Running: {command} ---", "yellow"))
    try:
        result = subprocess.run(
            command,
            shell=True,
            check=check,
            text=True,
            capture_output=True,
            cwd=service_dir,
        )
        if result.stdout:
            print(result.stdout)
        if result.stderr:
            print(colored(result.stderr, "yellow"), file=sys.stderr)
        if check:
            result.check_returncode()
    except subprocess.CalledProcessError as e:
        logger.error(colored(f"Command failed with exit code {e.returncode}", "red"))
        if e.stderr:
            print(colored(e.stderr, "red"), file=sys.stderr)
        raise


def get_db_params_from_url(db_url: str) -> dict:
    from urllib.parse import urlparse

    parsed = urlparse(str(db_url))
    return {
        "user": parsed.username or "postgres",
        "password": parsed.password or "postgres",
        "host": parsed.hostname or "localhost",
        "port": parsed.port or 5432,
        "dbname": parsed.path.lstrip("/"),
    }


def create_db(db_params: Dict):
    db_name = db_params["dbname"]
    logger.info(f"Ensuring database '{db_name}' exists on host '{db_params['host']}'...")
    conn_str_admin = (
        f"postgresql://{db_params['user']}:{db_params['password']}"
        f"@{db_params['host']}:{db_params['port']}/postgres"
    )
    # check=False: CREATE DATABASE fails harmlessly when it already exists
    run_command(f'psql "{conn_str_admin}" -c "CREATE DATABASE {db_name}"', check=False)
    logger.info(colored(f"Database '{db_name}' created or already exists.", "green"))


def delete_db(db_params: Dict):
    db_name = db_params["dbname"]
    logger.info(f"Deleting database '{db_name}'...")
    conn_str_admin = (
        f"postgresql://{db_params['user']}:{db_params['password']}"
        f"@{db_params['host']}:{db_params['port']}/postgres"
    )
    run_command(
        f'psql "{conn_str_admin}" -c "SELECT pg_terminate_backend(pid) FROM pg_stat_activity WHERE datname = \'{db_name}\';"',
        check=False,
    )
    run_command(f'psql "{conn_str_admin}" -c "DROP DATABASE IF EXISTS {db_name}"')
    logger.info(colored(f"Database '{db_name}' deleted.", "green"))


async def create_tables():
    """Create every table from the models, bypassing migrations."""
    from agent_dashboard_service.db import Base, dispose_engine, get_engine
    from agent_dashboard_service import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await dispose_engine()
    logger.info(colored("Tables created.", "green"))


async def drop_tables():
    from agent_dashboard_service.db import Base, dispose_engine, get_engine
    from agent_dashboard_service import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await dispose_engine()
    logger.info(colored("Tables dropped.", "green"))


async def seed(tenant_id: str):
    """Insert sample records through the CRUD layer so validation applies."""
    from agent_dashboard_service.crud import (
        create_mcp,
        create_model,
        create_prompt,
        create_prompt_label,
        create_tool,
    )
    from agent_dashboard_service.db import dispose_engine, get_session_factory
    from agent_dashboard_service.schemas import (
        McpCreate,
        ModelCreate,
        PromptCreate,
        PromptLabelCreate,
        ToolCreate,
    )

    async with get_session_factory()() as db:
        for name, provider in (
            ("gpt-4o", "OPENAI"),
            ("claude-sonnet-4", "ANTHROPIC"),
            ("gemini-2.5-pro", "GOOGLE"),
        ):
            await create_model(db, ModelCreate(name=name, provider=provider))

        production = await create_prompt_label(db, PromptLabelCreate(name="production"), tenant_id)
        await create_prompt_label(db, PromptLabelCreate(name="staging"), tenant_id)

        await create_prompt(
            db,
            PromptCreate(
                name="Support assistant",
                description="Answers customer support questions",
                content="You are a helpful support assistant. Answer concisely.",
                prompt_label_id=str(production.id),
            ),
            tenant_id,
        )
        await create_tool(db, ToolCreate(name="web-search", description="Search the web"))
        await create_mcp(db, McpCreate(name="local-mcp", url="http://localhost:8931/mcp"))

    await dispose_engine()
    logger.info(colored(f"Sample data seeded for tenant '{tenant_id}'.", "green"))


async def main():
    dotenv_path = service_dir / ".env.dev"
    if dotenv_path.exists():
        logger.info(f"Loading environment variables from {dotenv_path}")
        load_dotenv(dotenv_path=dotenv_path, override=True)
    else:
        logger.warning(f"{dotenv_path} not found. Relying on shell environment variables.")

    from agent_dashboard_service.config import settings

    parser = argparse.ArgumentParser(
        description=f"{settings.PROJECT_NAME} Database Management Tool"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create the database and apply all migrations.")
    subparsers.add_parser("recreate", help="Delete the database, then run init.")
    subparsers.add_parser("delete-db", help="Drop the database for this service.")
    subparsers.add_parser("create-tables", help="Create tables directly from the models.")
    subparsers.add_parser("drop-tables", help="Drop every table of the models.")
    seed_parser = subparsers.add_parser("seed", help="Insert sample data.")
    seed_parser.add_argument(
        "-t", "--tenant", default=settings.TENANT_ID, help="Tenant for labels."
    )
    create_mig_parser = subparsers.add_parser(
        "create-migration", help="Create a new Alembic migration file."
    )
    create_mig_parser.add_argument("-m", "--message", required=True, help="Migration description.")
    subparsers.add_parser("upgrade", help="Apply all pending migrations to the database.")
    downgrade_parser = subparsers.add_parser(
        "downgrade", help="Downgrade migrations by a number of steps."
    )
    downgrade_parser.add_argument(
        "-s", "--step", type=int, default=1, help="Number of steps to downgrade (default: 1)."
    )

    args = parser.parse_args()

    db_params = get_db_params_from_url(str(settings.DATABASE_URL))
    os.environ["PGPASSWORD"] = db_params["password"]

    try:
        if args.command == "init":
            create_db(db_params)
            run_command("alembic upgrade head")
        elif args.command == "recreate":
            delete_db(db_params)
            create_db(db_params)
            run_command("alembic upgrade head")
        elif args.command == "delete-db":
            delete_db(db_params)
        elif args.command == "create-tables":
            await create_tables()
        elif args.command == "drop-tables":
            await drop_tables()
        elif args.command == "seed":
            await seed(args.tenant)
        elif args.command == "create-migration":
            run_command(f'alembic revision --autogenerate -m "{args.message}"')
        elif args.command == "upgrade":
            run_command("alembic upgrade head")
        elif args.command == "downgrade":
            run_command(f"alembic downgrade -{args.step}")

        print(colored("\nOperation completed successfully.", "green"))

    except Exception as e:
        logger.error(colored(f"\nOperation failed: {e}", "red"), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
