from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

log = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientConfig:
    """Runtime settings, read from REPOFEED_* environment variables."""
    api_url:      str   = "http://localhost:5000"
    debounce_ms:  int   = 300
    timeout_secs: float = 30.0
    render_html:  bool  = False

    @property
    def debounce_wait(self) -> float:
        return self.debounce_ms / 1000


def _number(environ: Mapping[str, str], name: str, cast, default):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        log.error("%s must be a number, got %r", name, raw)
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def load_config(environ: Mapping[str, str] | None = None) -> ClientConfig:
    env = os.environ if environ is None else environ
    defaults = ClientConfig()
    return ClientConfig(
        api_url      = env.get("REPOFEED_API_URL") or defaults.api_url,
        debounce_ms  = _number(env, "REPOFEED_DEBOUNCE_MS", int, defaults.debounce_ms),
        timeout_secs = _number(env, "REPOFEED_TIMEOUT_SECS", float, defaults.timeout_secs),
        render_html  = env.get("REPOFEED_RENDER_HTML", "").strip().lower() in _TRUTHY,
    )
