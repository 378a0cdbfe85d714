"""Static configuration for smsledger.

All user-editable settings (banks, scan limits, inbox, storage, logging) live
in a single JSON file for quick edits without touching Python.
"""

import json
import os

from dotenv import load_dotenv

from smsledger.core.banks import build_bank_profiles
from smsledger.core.config import ScanConfig

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

# SMSLEDGER_CONFIG points at another config file (e.g. on the phone).
CONFIG_PATH = os.getenv("SMSLEDGER_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")
CONFIG_DIR = os.path.dirname(os.path.abspath(CONFIG_PATH))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(CONFIG_DIR, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Bank profiles feed the sender whitelist. No banks means no scanning.
BANKS = build_bank_profiles(_CONFIG.get("banks", []))

# Scan limits and failure policy.
# - max_messages: newest inbox messages read per scan
# - fetch_timeout_seconds: give up on an inbox that never answers
# - partial_results: keep good messages when one fails instead of failing all
_scan = _CONFIG.get("scan", {})
SCAN_CONFIG = ScanConfig(
    max_messages=int(_scan.get("max_messages", 500)),
    fetch_timeout_seconds=float(_scan.get("fetch_timeout_seconds", 30)),
    partial_results=bool(_scan.get("partial_results", False)),
)

# Inbox provider switches adapters without changing core logic.
_inbox = _CONFIG.get("inbox", {})
INBOX_PROVIDER = _inbox.get("provider", "termux")
INBOX_PATH = _resolve_path(_inbox["path"]) if _inbox.get("path") else None

# Where to store the SQLite database.
_storage = _CONFIG.get("storage", {})
DB_PATH = _resolve_path(_storage.get("db_path", "smsledger.db"))

# Display language for bank names ("en" or "ar").
LANGUAGE = _CONFIG.get("language", "en")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
