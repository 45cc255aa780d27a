"""
Configuration constants for gpacalc.

Everything that is a policy value rather than logic lives here:
store keys, default settings, the predefined weighting methods
and the location of the on-disk store.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any


APP_NAME = "gpacalc"

# Keys inside the key-value store (kept compatible with existing snapshots)
STATE_KEY = "gpa_calc_state_vanilla_v1"
SAVE_PREF_KEY = "gpa_calc_save_pref_vanilla"

PAGES = ("main", "semester-calculator", "annual-calculator", "settings")
THEMES = ("light", "dark", "automatic")
LANGUAGES = ("ar", "fr", "en")
CREDIT_OPTIONS = (30, 45)

PASS_MARK = 10.0
EXCELLENT_MARK = 18.0
SEMESTER_CREDITS = 30
ANNUAL_CREDITS = 60

DEFAULT_STATE: dict[str, Any] = {
    "language": "ar",
    "theme": "automatic",
    "calculationMethodId": "simple-0.6",
    "customCalculationMethods": [],
    "requiredCreditsForDebt": 30,
    "saveSettingsEnabled": True,
    "modules": [],
    "s1AvgText": "",
    "s1CreditsText": "",
    "s2AvgText": "",
    "s2CreditsText": "",
}

# Serialized form of the built-in methods; the first one is the fallback.
PREDEFINED_METHODS: list[dict[str, Any]] = [
    {"id": "simple-0.6", "type": "simple", "label": "60% / 40%", "weights": {"exam": 0.6, "continuous": 0.4}},
    {"id": "simple-0.5", "type": "simple", "label": "50% / 50%", "weights": {"exam": 0.5, "continuous": 0.5}},
    {
        "id": "complex-25-25-50",
        "type": "complex",
        "label": "25%|25% / 50%",
        "weights": {"td": 0.25, "tp": 0.25, "exam": 0.5},
    },
    {
        "id": "complex-20-20-60",
        "type": "complex",
        "label": "20%|20% / 60%",
        "weights": {"td": 0.2, "tp": 0.2, "exam": 0.6},
    },
]


def default_store_path() -> Path:
    """
    Return the path of the JSON file that backs the key-value store.

    Set GPACALC_DATA_DIR to override the directory (tests, portable installs).
    """
    env_override = os.getenv("GPACALC_DATA_DIR")
    if env_override:
        return Path(env_override) / "store.json"

    if os.name == "nt":
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    return base / APP_NAME / "store.json"
