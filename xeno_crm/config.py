from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml


def _project_root_from_this_file(this_file: Path) -> Path:
    # xeno_crm/config.py -> project root is parent of "xeno_crm"
    return this_file.resolve().parents[1]


def _default_settings_path() -> Path:
    return _project_root_from_this_file(Path(__file__)) / "config" / "settings.yaml"


def _load_yaml(cfg_path: Path) -> dict:
    if not cfg_path.exists():
        raise FileNotFoundError(f"Missing config file: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class Settings:
    backend_url: str
    timeout_seconds: float
    auth_provider: str
    log_level: str

    @staticmethod
    def from_config(cfg: dict, env: Mapping[str, str]) -> "Settings":
        backend = cfg.get("backend", {})
        auth = cfg.get("auth", {})
        log = cfg.get("logging", {})

        url = env.get("XENO_BACKEND_URL") or backend.get("base_url", "http://localhost:8000")
        timeout = env.get("XENO_BACKEND_TIMEOUT") or backend.get("timeout_seconds", 10)
        provider = env.get("XENO_AUTH_PROVIDER") or auth.get("provider", "google")
        level = env.get("XENO_LOG_LEVEL") or log.get("level", "INFO")

        return Settings(
            backend_url=str(url).rstrip("/"),
            timeout_seconds=float(timeout),
            auth_provider=str(provider),
            log_level=str(level).upper(),
        )


def load_settings(path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    if path is None:
        override = env.get("XENO_SETTINGS_PATH")
        path = Path(override) if override else _default_settings_path()
    return Settings.from_config(_load_yaml(path), env)


_logging_configured = False


def configure_logging(level: str) -> None:
    # Streamlit re-executes pages on every interaction; install handlers once.
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logging_configured = True
