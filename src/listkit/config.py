"""Default configuration values for listkit."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Query defaults
# ---------------------------------------------------------------------------

DEFAULT_PAGE_SIZE: Final[int] = 25
MAX_PAGE_SIZE: Final[int] = 500

# Search input is committed this many milliseconds after the last keystroke.
DEFAULT_DEBOUNCE_MS: Final[int] = 300

# Committed search text shorter than this is treated as an empty search.
DEFAULT_MIN_CHARS: Final[int] = 0
TYPEAHEAD_MIN_CHARS: Final[int] = 2

# Default identifier field for mapping/attribute records.
DEFAULT_ID_FIELD: Final[str] = "id"

# ---------------------------------------------------------------------------
# Theme preference
# ---------------------------------------------------------------------------

AVAILABLE_THEMES: Final[dict[str, str]] = {
    "light": "Light Mode",
    "dark": "Dark Mode",
    "synaptic-glow": "Synaptic Glow",
    "protanopia": "Protanopia Colors",
    "deuteranopia": "Deuteranopia Colors",
}
DEFAULT_THEME: Final[str] = "light"

SETTINGS_DIR_NAME: Final[str] = "listkit"
SETTINGS_FILE_NAME: Final[str] = "settings.json"
SETTINGS_SCHEMA_ID: Final[str] = "listkit/settings@1"
