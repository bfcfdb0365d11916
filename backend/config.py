import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from data.models import Mode


TRUTHY = {"1", "true", "True", "yes"}


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup and never mutated."""

    api_key: Optional[str] = None
    force_mock: bool = False
    model: str = "openai/gpt-4.1-mini"
    base_url: str = "https://openrouter.ai/api/v1/chat/completions"
    temperature: float = 0.2
    timeout: float = 60.0
    http_referer: str = "http://localhost"
    app_title: str = "Diabetes Risk Predictor"
    cors_origins: Tuple[str, ...] = ("*",)
    port: int = 3001
    log_level: str = "INFO"
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None

    @property
    def default_mode(self) -> Mode:
        if self.api_key and not self.force_mock:
            return Mode.ASSISTED
        return Mode.MOCK

    @property
    def tracing_enabled(self) -> bool:
        return bool(self.langfuse_public_key and self.langfuse_secret_key)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        load_dotenv()
        environ = os.environ

    def get(name: str) -> Optional[str]:
        value = environ.get(name, "").strip()
        return value or None

    origins = tuple(o.strip() for o in (get("CORS_ORIGINS") or "*").split(",") if o.strip())
    return Settings(
        api_key=get("OPENROUTER_API_KEY"),
        force_mock=(get("USE_MOCK_MODE") or "0") in TRUTHY,
        model=get("OPENROUTER_MODEL") or Settings.model,
        base_url=get("OPENROUTER_BASE_URL") or Settings.base_url,
        temperature=float(get("OPENROUTER_TEMPERATURE") or Settings.temperature),
        timeout=float(get("OPENROUTER_TIMEOUT") or Settings.timeout),
        http_referer=get("OPENROUTER_HTTP_REFERER") or Settings.http_referer,
        app_title=get("OPENROUTER_APP_TITLE") or Settings.app_title,
        cors_origins=origins or ("*",),
        port=int(get("PORT") or Settings.port),
        log_level=(get("LOG_LEVEL") or Settings.log_level).upper(),
        langfuse_public_key=get("LANGFUSE_PUBLIC_KEY"),
        langfuse_secret_key=get("LANGFUSE_SECRET_KEY"),
    )
