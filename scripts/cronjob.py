#!/usr/bin/env python3
"""
Cron job runner.

Runs walletSummary, checkLimits and updateAmount once, or keeps them
running on their configured schedules.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

from foxtagger.core.config import Config
from foxtagger.handlers.cronjob import JOB_NAMES, CronjobDispatcher, UnsupportedJobError
from foxtagger.handlers.scheduler import build_scheduler

app = typer.Typer(help="Run FoxTagger spending-limit cron jobs")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cronjob")


@app.command()
def run(
    job: str = typer.Argument(..., help=f"Job name ({', '.join(JOB_NAMES)})"),
):
    """
    Run one job now.

    Example:
        python scripts/cronjob.py run updateAmount
    """
    load_dotenv()
    config = Config.from_env()
    dispatcher = CronjobDispatcher.from_config(config)

    try:
        dispatcher.handle(job)
    except UnsupportedJobError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {job} finished[/green]")


@app.command()
def serve():
    """
    Run all jobs on their cron schedules until interrupted.
    """
    load_dotenv()
    config = Config.from_env()
    dispatcher = CronjobDispatcher.from_config(config)
    scheduler = build_scheduler(config, dispatcher)

    console.print(Panel(config.get_summary_text(), title="FoxTagger scheduler"))

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


@app.command("config")
def show_config():
    """
    Show the active configuration.
    """
    load_dotenv()
    config = Config.from_env()
    console.print(Panel(config.get_summary_text(), title="FoxTagger config"))


if __name__ == "__main__":
    app()
