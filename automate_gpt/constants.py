"""Shared defaults for automate-gpt."""

INPUT_MARKER = "{input}"

HISTORY_KEY = "automate_gpt_history"
SETTINGS_KEY = "automate_gpt_settings"
USERS_KEY = "automate_gpt_users"
SESSION_KEY = "automate_gpt_auth"

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_MAX_FIELD_CHARS = 10_000
TRUNCATION_SUFFIX = "\n...(truncated)"

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_MAX_TOKENS = 1000
MIN_MAX_TOKENS = 100
MAX_MAX_TOKENS = 4000
SUPPORTED_MODELS = ("gpt-3.5-turbo", "gpt-4", "gpt-4-turbo-preview")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
