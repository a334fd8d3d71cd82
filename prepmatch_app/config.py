# File: prepmatch_app/config.py
# Application configuration, read from the environment (.env supported).

import os
from dotenv import load_dotenv

load_dotenv()

# prepmatch_app/ sits directly under the project root.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


class Config:
    """Cấu hình ứng dụng PrepMatch."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = os.environ.get('LOG_JSON', '0') == '1'
    LOG_TO_FILE = True

    # Background jobs (idle game pruning)
    SCHEDULER_ENABLED = os.environ.get('SCHEDULER_ENABLED', '1') == '1'
    SCHEDULER_API_ENABLED = False

    # Matching games held in memory
    MATCHING_IDLE_TIMEOUT_MINUTES = int(os.environ.get('MATCHING_IDLE_TIMEOUT_MINUTES', 30))
    MATCHING_PRUNE_INTERVAL_MINUTES = int(os.environ.get('MATCHING_PRUNE_INTERVAL_MINUTES', 5))
    MATCHING_MAX_GAMES = int(os.environ.get('MATCHING_MAX_GAMES', 500))
    MATCHING_TICK_INTERVAL_SECONDS = float(os.environ.get('MATCHING_TICK_INTERVAL_SECONDS', 1))
