import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from config.settings import settings
from chatcmd.core.bot import ChatBot

app = typer.Typer(
    name="chatcmd",
    help="Chat command interpreter bot",
    add_completion=False,
)

ENV_TEMPLATE = """# Chat bot configuration
DISCORD_TOKEN=your_discord_bot_token_here
BOT_PREFIX=!
DATABASE_URL=sqlite:///data/bot.db
OWNER_ID=
ADMIN_IDS=[]
TEST_MODE=false
ENVIRONMENT=development
LOG_LEVEL=INFO
"""


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@app.command()
def run(
    dev: bool = typer.Option(False, "--dev", help="Run in development mode"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Set log level"),
) -> None:
    """Run the bot."""
    if dev:
        settings.environment = "development"
        settings.debug = True

    setup_logging(log_level or ("DEBUG" if dev else settings.log_level))

    if not settings.discord_token:
        typer.echo("❌ DISCORD_TOKEN is not set, run `chatcmd init` and edit the .env file")
        raise typer.Exit(code=1)

    ChatBot().run()


@app.command()
def init(directory: Optional[str] = typer.Option(None, help="Directory to initialize")) -> None:
    """Initialize a new bot project."""
    target_dir = Path(directory) if directory else Path.cwd()

    if not target_dir.exists():
        target_dir.mkdir(parents=True)

    (target_dir / "data").mkdir(exist_ok=True)

    env_file = target_dir / ".env"
    if not env_file.exists():
        env_file.write_text(ENV_TEMPLATE)

    typer.echo(f"✅ Bot project initialized in {target_dir}")


@app.command()
def commands() -> None:
    """List the built-in commands."""
    from chatcmd.builtins import BUILTIN_COMMANDS

    typer.echo("📦 Built-in commands:")
    for command in BUILTIN_COMMANDS:
        flags = []
        if command.admin:
            flags.append("admin")
        if command.dm:
            flags.append("dm")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        typer.echo(f"  {settings.bot_prefix}{command.usage}{suffix} - {command.description}")


@app.command()
def db(
    action: str = typer.Argument(help="Action: create, reset"),
) -> None:
    """Database management commands."""

    async def run_db_command():
        from chatcmd.database import db_manager

        if action == "create":
            await db_manager.create_tables()
            typer.echo("✅ Database tables created")
        elif action == "reset":
            confirm = typer.confirm("⚠️  This will delete all data. Continue?")
            if confirm:
                await db_manager.drop_tables()
                await db_manager.create_tables()
                typer.echo("✅ Database reset completed")
        else:
            typer.echo(f"Unknown action: {action}")

        await db_manager.close()

    asyncio.run(run_db_command())


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
