"""Command-line interface for UpTask.

Provides commands to run the server and maintain the auth database.
"""

import asyncio

import click

from uptask.core.config import get_settings
from uptask.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="UpTask")
def cli() -> None:
    """UpTask - authentication and account management service."""


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Enable auto-reload (defaults to on in development)",
)
def serve(host: str | None, port: int | None, reload: bool | None) -> None:
    """Start the UpTask server."""
    import uvicorn

    settings = get_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port
    if reload is None:
        reload = settings.is_development

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting UpTask server",
        host=bind_host,
        port=bind_port,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "uptask.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def init_db() -> None:
    """Create the users and tokens tables if they are missing."""
    from uptask.infrastructure.persistence.database import close_database, init_database

    configure_logging(get_settings())

    async def initialize():
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await close_database()

    asyncio.run(initialize())


@cli.command()
@click.option(
    "--minutes",
    type=int,
    default=None,
    help="Age in minutes after which codes are deleted (defaults to token_expire_minutes)",
)
def purge_tokens(minutes: int | None) -> None:
    """Delete confirmation and reset codes older than their lifetime."""
    from uptask.infrastructure.persistence.database import close_database, get_db_manager
    from uptask.infrastructure.persistence.repositories import TokenRepository

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)
    max_age = minutes if minutes is not None else settings.token_expire_minutes

    async def purge() -> int:
        try:
            async with get_db_manager().session() as session:
                deleted = await TokenRepository(session).delete_older_than(max_age)
                await session.commit()
                return deleted
        finally:
            await close_database()

    deleted = asyncio.run(purge())
    logger.info("Expired tokens purged", deleted=deleted, minutes=max_age)
    click.echo(f"Deleted {deleted} token(s) older than {max_age} minutes.")


def main() -> None:
    """Main entry point for the CLI.

    Called by the `uptask` console script and by `python -m uptask`.
    """
    cli()


if __name__ == "__main__":
    main()
