"""アプリケーション設定"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).parent.parent

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{BASE_DIR / 'data' / 'kissa.db'}"
)

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ジオコーディング（Nominatim互換）
GEOCODER_BASE_URL = os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org")
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "Kissa-App/1.0 (https://kissa.example.com)")
GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "5"))

# チェックイン距離（m）
DEFAULT_CHECKIN_DISTANCE_METERS = 500
MAX_CHECKIN_DISTANCE_METERS = 10_000
DUPLICATE_CHECKIN_WINDOW_HOURS = 24

# 検索半径（km）
MIN_SEARCH_RADIUS_KM = 0.1
MAX_SEARCH_RADIUS_KM = 50
MAX_REGION_SEARCH_RADIUS_KM = 100

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
