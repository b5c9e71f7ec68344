"""Command-line interface for GroupScope.

This module provides the CLI commands for running and managing
the GroupScope application.
"""

import asyncio
import uuid
from typing import NoReturn

import click

from groupscope.core.config import get_settings
from groupscope.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="GroupScope")
def cli() -> None:
    """GroupScope - hierarchical group-based access control for a CRM.

    Settings are read from GROUPSCOPE_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the GroupScope API server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting GroupScope server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "groupscope.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development; production schemas are managed outside
    the application.
    """
    from groupscope.infrastructure.persistence.database import get_db_manager, init_database

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Refusing to create tables without --force.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = get_db_manager()
        try:
            await init_database()
            # init_database only creates tables in development
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--email", type=str, default=None, help="Super admin email (prompts if not provided)")
@click.option("--name", type=str, default="", help="Display name")
@click.option(
    "--root-group",
    type=str,
    default=None,
    help="Name of a root group to create and make the super admin a member of",
)
def create_superadmin(email: str | None, name: str, root_group: str | None) -> None:
    """Create a super admin user, optionally with a root group to anchor on."""
    from groupscope.infrastructure.persistence.database import get_db_manager
    from groupscope.infrastructure.persistence.models import GroupModel, UserModel
    from groupscope.infrastructure.persistence.repositories import (
        GroupRepository,
        UserRepository,
    )

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    if email is None:
        email = click.prompt("Super admin email", type=str)
    if "@" not in email or "." not in email.split("@")[-1]:
        click.echo("Error: Invalid email format", err=True)
        raise SystemExit(1)

    async def create() -> str:
        db = get_db_manager()
        try:
            async with db.session() as session:
                user_repo = UserRepository(session)
                if await user_repo.email_exists(email):
                    click.echo(f"Error: A user with email '{email}' already exists", err=True)
                    raise SystemExit(1)

                user = UserModel(
                    id=str(uuid.uuid4()),
                    email=email,
                    name=name,
                    is_super_admin=True,
                    is_group_admin=False,
                    is_active=True,
                )
                await user_repo.create(user)

                if root_group:
                    group = GroupModel(id=str(uuid.uuid4()), name=root_group, is_active=True)
                    await GroupRepository(session).create(group)
                    await user_repo.add_membership(user.id, group.id)

                await session.commit()
                return user.id
        finally:
            await db.disconnect()

    user_id = asyncio.run(create())
    logger.info("Super admin created via CLI", user_id=user_id, email=email)
    click.echo(f"\nSuper admin created successfully!\n  User ID: {user_id}\n  Email:   {email}\n")


@cli.command()
def tree() -> None:
    """Print the active group hierarchy."""
    from groupscope.application.services import AccessContextService
    from groupscope.domain.services.group_tree import calculate_group_stats, iter_nodes
    from groupscope.infrastructure.persistence.database import get_db_manager

    configure_logging(get_settings())

    async def load():
        db = get_db_manager()
        try:
            async with db.session() as session:
                return await AccessContextService(session).load_snapshot()
        finally:
            await db.disconnect()

    snapshot = asyncio.run(load())
    for node, depth in iter_nodes(snapshot.forest):
        click.echo(f"{'  ' * (depth - 1)}{node.name} ({node.id})")

    stats = calculate_group_stats(snapshot.forest)
    click.echo(
        f"\n{stats.total_groups} groups, {stats.root_groups} roots, max depth {stats.max_depth}"
    )


@cli.command()
def info() -> None:
    """Display GroupScope configuration."""
    settings = get_settings()

    click.echo(f"""
GroupScope v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Access Control:
  Scope Mode:   {settings.membership_scope_mode}
  Actor Header: {settings.actor_header}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called when the `groupscope` command is run or when using
    `python -m groupscope`.
    """
    cli()


if __name__ == "__main__":
    main()
