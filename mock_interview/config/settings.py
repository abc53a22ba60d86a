import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Google Gemini Configuration
PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "")
LOCATION = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
USE_VERTEX = os.getenv("USE_VERTEX_AI", "0")
API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
# Unset means no client-side timeout on generateContent calls
GEMINI_TIMEOUT_MS = int(os.getenv("GEMINI_TIMEOUT_MS", "0")) or None

# Persistence
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///mock_interview.db")

# Chat flow
THINKING_DELAY_SEC = float(os.getenv("THINKING_DELAY_SEC", "1.0"))
AUTO_END_INTERVIEW = _env_flag("AUTO_END_INTERVIEW")

# Speech Configuration
ENABLE_SPEECH = _env_flag("ENABLE_SPEECH")
LANG_STT = os.getenv("LANG_STT", "en-US")
LANG_TTS = os.getenv("GOOGLE_TTS_LANGUAGE", "en-US")
VOICE_NAME = os.getenv("VOICE_NAME", "en-US-Studio-Q")

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "8000"))


def validate_config():
    """Validate required configuration."""
    if USE_VERTEX != "1" and not API_KEY:
        raise RuntimeError("Set GEMINI_API_KEY/GOOGLE_API_KEY or set USE_VERTEX_AI=1 with ADC.")
    if USE_VERTEX == "1" and not PROJECT_ID:
        raise RuntimeError("USE_VERTEX_AI=1 requires GOOGLE_CLOUD_PROJECT.")
