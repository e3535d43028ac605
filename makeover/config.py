import os
from dataclasses import dataclass

API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 120.0


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv(API_KEY_ENV) or None,
            model=os.getenv("GEMINI_IMAGE_MODEL") or DEFAULT_MODEL,
            api_base=(os.getenv("GEMINI_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
            timeout=_float_env("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT),
        )

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"
