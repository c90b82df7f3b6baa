from __future__ import annotations
import sys
from pathlib import Path

APP_NAME = "Furniture Quote Builder"
WORKBOOK_CREATOR = "Furnish by Isabey Interiors"

# PyInstaller (--onefile) unpacks bundled files under sys._MEIPASS
if getattr(sys, "frozen", False):
    BASE_DIR = Path(sys._MEIPASS) / "quote_builder"
else:
    BASE_DIR = Path(__file__).resolve().parent


# Default output folder, created on first use
def _default_output_dir() -> Path:
    preferred = Path.home() / "Documents" / "Quote_Builder_Output"
    try:
        preferred.mkdir(parents=True, exist_ok=True)
        return preferred
    except OSError:
        if getattr(sys, "frozen", False):
            fallback = Path(sys.executable).resolve().parent / "output"
        else:
            fallback = BASE_DIR / "output"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


DEFAULT_OUTPUT_DIR = _default_output_dir()

DRAFT_JSON = DEFAULT_OUTPUT_DIR / "quote_draft.json"
DRAFT_SAVE_DELAY = 0.5  # seconds

DEFAULT_PROJECT_NAME = "New Furniture Quote"
DEFAULT_ROOMS = ["Living Room", "Bedroom", "Dining Room", "Office"]
