import os

from dotenv import load_dotenv

# Load .env locally; in production env vars are injected automatically.
load_dotenv()


def _flag(name, default="0"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///mindmitra.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CORS: restrict to the deployed frontend when set, otherwise allow all
    FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN")

    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_API_URL = os.getenv(
        "OPENAI_API_URL",
        "https://api.openai.com/v1/chat/completions",
    )

    # Points: read-modify-write unless an atomic UPDATE is requested
    ATOMIC_POINTS = _flag("ATOMIC_POINTS")

    ALLOW_INIT_DB = _flag("ALLOW_INIT_DB")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    PORT = int(os.getenv("PORT", "5000"))
