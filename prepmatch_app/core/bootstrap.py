"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging
import os

from flask import Flask

from ..extensions import scheduler
from .error_handlers import register_error_handlers as _register_error_handlers
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure the ``prepmatch`` logger and the Flask app logger."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
        log_to_file=app.config.get("LOG_TO_FILE", True),
    )

    if app.logger.handlers:
        return

    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("Scheduler disabled by configuration.")
        return

    # Avoid a second scheduler in the reloader parent process.
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        return

    from apscheduler.schedulers import SchedulerAlreadyRunningError

    try:
        scheduler.init_app(app)
        if not scheduler.running:
            scheduler.start()

        from ..modules.matching.interface import MatchingInterface

        interval = app.config.get("MATCHING_PRUNE_INTERVAL_MINUTES", 5)
        if not scheduler.get_job("matching_prune_idle_games"):
            scheduler.add_job(
                id="matching_prune_idle_games",
                func=MatchingInterface.prune_idle_games,
                trigger="interval",
                minutes=interval,
                replace_existing=True,
            )
            app.logger.info("Registered job matching_prune_idle_games (every %s min).", interval)

        tick_seconds = app.config.get("MATCHING_TICK_INTERVAL_SECONDS", 1)
        if not scheduler.get_job("matching_tick_games"):
            scheduler.add_job(
                id="matching_tick_games",
                func=MatchingInterface.tick_games,
                trigger="interval",
                seconds=tick_seconds,
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
            app.logger.info("Registered job matching_tick_games (every %s s).", tick_seconds)
    except SchedulerAlreadyRunningError:
        app.logger.info("Scheduler already running, skipping re-initialisation.")


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def register_error_handlers(app: Flask) -> None:
    """Attach the JSON error handlers."""

    _register_error_handlers(app)
