"""Configuration: env, record store endpoint, map constants."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of datespots package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so DATESPOTS_STORE_URL etc. are set
load_dotenv(BASE_DIR / ".env")

# API
API_HOST = os.getenv("DATESPOTS_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("DATESPOTS_API_PORT", "8000"))
LOG_LEVEL = os.getenv("DATESPOTS_LOG_LEVEL", "INFO").upper()

# Record store (SheetDB-style spreadsheet API; GET lists rows, POST {"data": row} appends)
STORE_URL = os.getenv("DATESPOTS_STORE_URL", "https://sheetdb.io/api/v1/3s63hxbbg4u9w")
STORE_TIMEOUT_SEC = float(os.getenv("DATESPOTS_STORE_TIMEOUT_SEC", "10"))
LOAD_ON_STARTUP = os.getenv("DATESPOTS_LOAD_ON_STARTUP", "1").lower() in ("1", "true", "yes")

# Each visitor (cookie) gets its own filters and form; the story list is shared
SESSION_COOKIE = "datespots_session"
SESSION_LIMIT = int(os.getenv("DATESPOTS_SESSION_LIMIT", "1000"))

# Categories shown as filter buttons; submissions may use any text
ALL_TYPES = "All Types"
DATE_TYPES = (
    "drinks and snacks",
    "Food centric",
    "sit back and watch",
    "activity and adventure",
    "walk and talk",
)
ALL_RATINGS = "All Ratings"
RATING_OPTIONS = ("1", "2", "3", "4", "5")

# List view shows only the first few visible stories; the map shows all of them
LIST_LIMIT = 5

# Map: initial viewport is Bangalore's extent ([south, west], [north, east])
CITY_BOUNDS = ((12.7342, 77.4098), (13.1739, 77.8566))
TILE_URL = "https://tiles.wmflabs.org/bw-mapnik/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = "&copy; OpenStreetMap contributors"
DEFAULT_ICON_URL = "https://cdnjs.cloudflare.com/ajax/libs/leaflet/1.7.1/images/marker-icon.png"
ICON_SIZE = (32, 32)
ICON_ANCHOR = (16, 32)
POPUP_ANCHOR = (0, -32)
OVERLAY_COLOR = "#a3a3a3"
OVERLAY_OPACITY = 0.3
STAR_COUNT = 5

# New stories are placed near the city center (no geocoding); span 0.1 = +/-0.05 degrees
JITTER_CENTER = (12.9716, 77.5946)
JITTER_SPAN = 0.1
COORD_DIGITS = 6

# User notices
NOTICE_FILL_ALL_FIELDS = "Please fill in all fields"
NOTICE_SHARED = "Your date story has been shared! 💕"
NOTICE_FAILED = "Something went wrong."
