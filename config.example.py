# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "QWIX_APP_NAME": "App display name (default: qwix).",
    "QWIX_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "QWIX_DATA_DIR": "Local data directory, also holds qwix.log (default: .local/qwix).",
    "QWIX_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Scheduler tuning
    "QWIX_SPREAD_FACTOR": "Share of a prerequisite's activation passed to each dependent per round (default: 0.3).",
    "QWIX_SPREAD_ITERATIONS": "Number of spreading-activation rounds (default: 3).",
    "QWIX_CHART_LIMIT": "How many tasks /activation shows (default: 8).",
}
