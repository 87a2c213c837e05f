"""Metadata provider configuration — JSON-based, with file locking."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

from loguru import logger

_instance: "Config | None" = None

# Default config directory
_DEFAULT_CONFIG_DIR = Path.home() / ".itchmeta"

MIN_SEARCH_RESULTS = 1
MAX_SEARCH_RESULTS = 100
DEFAULT_SEARCH_RESULTS = 20


def get_config() -> Config:
    """Module-level factory — single global Config instance."""
    global _instance
    if _instance is None:
        _instance = Config()
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


def clamp_search_results(value: Any) -> int:
    """Coerce a max-results value into [1, 100], falling back to the default."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        return DEFAULT_SEARCH_RESULTS
    return max(MIN_SEARCH_RESULTS, min(MAX_SEARCH_RESULTS, count))


class Config:
    """JSON-based provider configuration with file locking."""

    _DEFAULTS: dict[str, Any] = {
        # Search / disambiguation
        "max_search_results": DEFAULT_SEARCH_RESULTS,
        "prefer_first_search_result": False,
        # Field policy
        "prefer_itchio_description": True,
        "download_screenshots": True,
        # Transport
        "request_timeout": 30,
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "proxy_protocol": "http",
        "proxy_host": "",
        "proxy_port": "",
    }

    def __init__(self, config_dir: Path | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._dir = config_dir or _DEFAULT_CONFIG_DIR
        self._path = self._dir / "config.json"
        self._lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        """Load config from disk, merging with defaults."""
        self._data = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    user_data = json.load(f)
                self._deep_merge(self._data, user_data)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load config, using defaults: {e}")

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _save(self) -> None:
        """Persist config to disk with file locking."""
        with self._lock:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                tmp_path.replace(self._path)
            except OSError as e:
                logger.error(f"Failed to save config: {e}")
                if tmp_path.exists():
                    tmp_path.unlink(missing_ok=True)

    # ── Generic access ──

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key path."""
        parts = key.split(".")
        node = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a config value by dot-separated key path."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def validate(self) -> list[str]:
        """Return a list of human-readable problems with the current settings."""
        errors: list[str] = []
        raw = self.get("max_search_results")
        try:
            count = int(raw)
        except (TypeError, ValueError):
            errors.append(f"Max search results must be a number, got {raw!r}")
        else:
            if count < MIN_SEARCH_RESULTS or count > MAX_SEARCH_RESULTS:
                errors.append(
                    f"Max search results must be between {MIN_SEARCH_RESULTS} and {MAX_SEARCH_RESULTS}"
                )
        try:
            if float(self.get("request_timeout", 30)) <= 0:
                errors.append("Request timeout must be positive")
        except (TypeError, ValueError):
            errors.append("Request timeout must be a number")
        return errors

    # ── Typed properties ──

    @property
    def config_dir(self) -> Path:
        return self._dir

    @property
    def max_search_results(self) -> int:
        return clamp_search_results(self.get("max_search_results", DEFAULT_SEARCH_RESULTS))

    @max_search_results.setter
    def max_search_results(self, value: int) -> None:
        self.set("max_search_results", value)

    @property
    def prefer_first_search_result(self) -> bool:
        return bool(self.get("prefer_first_search_result", False))

    @prefer_first_search_result.setter
    def prefer_first_search_result(self, value: bool) -> None:
        self.set("prefer_first_search_result", value)

    @property
    def prefer_itchio_description(self) -> bool:
        return bool(self.get("prefer_itchio_description", True))

    @prefer_itchio_description.setter
    def prefer_itchio_description(self, value: bool) -> None:
        self.set("prefer_itchio_description", value)

    @property
    def download_screenshots(self) -> bool:
        return bool(self.get("download_screenshots", True))

    @download_screenshots.setter
    def download_screenshots(self, value: bool) -> None:
        self.set("download_screenshots", value)

    @property
    def request_timeout(self) -> float:
        try:
            timeout = float(self.get("request_timeout", 30))
        except (TypeError, ValueError):
            return 30.0
        return timeout if timeout > 0 else 30.0

    @property
    def user_agent(self) -> str:
        return self.get("user_agent") or self._DEFAULTS["user_agent"]

    @property
    def proxy_url(self) -> str:
        """Assemble proxy URL from config fields (protocol/host/port)."""
        host = self.get("proxy_host", "")
        if not host:
            return ""
        proto = self.get("proxy_protocol", "http")
        port = self.get("proxy_port", "")
        return f"{proto}://{host}:{port}" if port else f"{proto}://{host}"
