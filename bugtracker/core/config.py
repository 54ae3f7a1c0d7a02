"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    SUPABASE_URL         — Supabase project URL (storage + findings table)
    SUPABASE_ANON_KEY    — Supabase anon/service key
    HUGGINGFACE_API_KEY  — Bearer token for the remote code classifier
    CLASSIFIER_URL       — Inference endpoint (default: bigcode/starcoder)
    PORT                 — HTTP port (default: 5000)
    HOST                 — Bind address (default: 0.0.0.0)
    LINT_COMMAND         — Static-analysis command fed via stdin (default: pyflakes)
    LINT_TIMEOUT         — Seconds before the lint command is abandoned (default: 60)
    LOG_LEVEL            — Root log level (default: INFO)
    LOG_DIR              — Directory for the daily log file (default: logs)

Settings are read once per process by get_settings() and handed to the
orchestrator and adapters explicitly. Nothing else reads os.environ.
"""
import os
import shlex
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CLASSIFIER_URL = "https://api-inference.huggingface.co/models/bigcode/starcoder"
DEFAULT_PORT = 5000


def _default_lint_command() -> Tuple[str, ...]:
    return (sys.executable, "-m", "pyflakes")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, constructed once at start-up."""
    supabase_url: str = ""
    supabase_key: str = ""
    classifier_api_key: str = ""
    classifier_url: str = DEFAULT_CLASSIFIER_URL
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    lint_command: Tuple[str, ...] = field(default_factory=_default_lint_command)
    lint_timeout: float = 60.0
    log_level: str = "INFO"
    log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        lint_raw = os.getenv("LINT_COMMAND", "").strip()
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=os.getenv("SUPABASE_ANON_KEY", ""),
            classifier_api_key=os.getenv("HUGGINGFACE_API_KEY", ""),
            classifier_url=os.getenv("CLASSIFIER_URL", DEFAULT_CLASSIFIER_URL),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", DEFAULT_PORT)),
            lint_command=tuple(shlex.split(lint_raw)) if lint_raw else _default_lint_command(),
            lint_timeout=float(os.getenv("LINT_TIMEOUT", 60)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("LOG_DIR", "logs"),
        )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
