"""Application-wide extensions.

This module centralizes extension instances so they can be imported without
causing circular dependencies.
"""

from flask_apscheduler import APScheduler

scheduler = APScheduler()

__all__ = ["scheduler"]
