import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
STATIC_DIR = BASE_DIR / "static"
DB_PATH = Path(os.getenv("DATABASE_PATH", str(DATA_DIR / "poems.db")))

# Server
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))

# OpenRouter
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "anthropic/claude-3.5-sonnet")
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
APP_URL = os.getenv("APP_URL", f"http://localhost:{PORT}")
_timeout = os.getenv("POEM_CLOCK_REQUEST_TIMEOUT")
REQUEST_TIMEOUT = float(_timeout) if _timeout else None  # None = wait indefinitely

# Poems
POEM_RETENTION_HOURS = int(os.getenv("POEM_RETENTION_HOURS", "24"))
PREFETCH_SECOND = 45
STARTUP_PREFETCH_DELAY = 2.0
HISTORY_DEFAULT_LIMIT = 60
