import os

BACKEND = os.getenv("CONFIGSTORE_BACKEND", "file")  # "file" or "sql"
DATA_DIR = os.getenv("CONFIGSTORE_DATA_DIR", "/var/tmp/data")
DATABASE_URL = os.getenv("CONFIGSTORE_DATABASE_URL", "sqlite:///snapshots.db")

HOST = os.getenv("CONFIGSTORE_HOST", "0.0.0.0")
PORT = int(os.getenv("CONFIGSTORE_PORT", "8080"))
STATIC_DIR = os.getenv("CONFIGSTORE_STATIC_DIR", "static")

# dashboard badge thresholds, in hours
WARNING_HOURS = int(os.getenv("DASHBOARD_WARNING_HOURS", "24"))
DANGER_HOURS = int(os.getenv("DASHBOARD_DANGER_HOURS", "72"))

# budget for matching a changed region: (lines in both sides) x (edits searched)
DIFF_MAX_WORK = int(os.getenv("DIFF_MAX_WORK", "1000000"))

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TEMPLATE_DIR = os.getenv(
    "CONFIGSTORE_TEMPLATE_DIR",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates"),
)
