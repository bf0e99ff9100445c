import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    try:
        return max(minimum, int(os.getenv(name, str(default))))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        value = float(os.getenv(name, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


SUPABASE_URL = str(os.getenv("SUPABASE_URL") or "").strip()
SUPABASE_KEY = str(os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_KEY") or "").strip()

MINDMAP_RADIUS_STEP = _float_env("MINDMAP_RADIUS_STEP", 140.0)
CAREER_TOP_ROLES = _int_env("CAREER_TOP_ROLES", 3)
CAREER_TOP_MISSING = _int_env("CAREER_TOP_MISSING", 2)
CAREER_MAX_RECOMMENDATIONS = _int_env("CAREER_MAX_RECOMMENDATIONS", 5)

QA_MODE = os.getenv("QA_MODE", "false").lower() == "true"
