"""Collection names used by the custody store."""

ACCOUNTS = "accounts"
KEYS = "keys"
TASKS = "tasks"
KEY_HISTORY = "key_history"
REPORTS = "reports"
