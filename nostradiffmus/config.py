"""Configuration loading for nostradiffmus (.nostradiffmus.yml and environment)."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

TONES: tuple[str, ...] = ("tragic", "cryptic", "sarcastic", "biblical", "clinical")
ADVISORS: tuple[str, ...] = ("copilot", "local")

CONFIG_FILENAMES: tuple[str, ...] = (".nostradiffmus.yml", ".nostradiffmus.yaml")
JSON_CONFIG_FILENAME = ".nostradiffmus.json"

_MIN_ADVISORY_TIMEOUT = 5.0


@dataclass(frozen=True)
class Limits:
    """Size and time budgets applied around the analysis core."""

    max_diff_chars: int = 500_000
    max_advisory_chars: int = 4_000
    max_lines_processed: int = 10_000
    warn_threshold: int = 100_000
    git_timeout: float = 30.0
    advisory_timeout: float = 35.0


@dataclass(frozen=True)
class NostradiffmusConfig:
    """Resolved settings for a single run."""

    root: Path
    limits: Limits = field(default_factory=Limits)
    tone: str = "tragic"
    quiet: bool = False
    use_advisory: bool = True
    advisor: str = "copilot"
    advisory_model: Optional[str] = None
    advisory_base_url: Optional[str] = None


def load_config(config_path: Path) -> NostradiffmusConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    root = _resolve_root(config_path)
    data = _find_config_data(root)
    if data is None:
        return NostradiffmusConfig(root=root)
    if not isinstance(data, dict):
        raise ConfigError("nostradiffmus configuration must contain a mapping at the root")

    tone = _as_str(data.get("tone"))
    if tone is not None and tone not in TONES:
        raise ConfigError(
            f"Invalid tone in config: {tone}. Must be one of: {', '.join(TONES)}"
        )

    advisory_data = _as_dict(data.get("advisory"))
    advisor = _as_str(advisory_data.get("provider")) or "copilot"
    if advisor not in ADVISORS:
        raise ConfigError(
            f"Invalid advisory provider in config: {advisor}. Must be one of: {', '.join(ADVISORS)}"
        )
    use_advisory = _as_bool(advisory_data.get("enabled"))
    if use_advisory is None:
        use_advisory = _as_bool(data.get("useCopilot"))

    defaults = Limits()
    limits = Limits(
        max_diff_chars=_positive_int(data, "maxDiffChars", defaults.max_diff_chars),
        max_advisory_chars=_positive_int(data, "copilotChars", defaults.max_advisory_chars),
        max_lines_processed=_positive_int(data, "maxLines", defaults.max_lines_processed),
        warn_threshold=_positive_int(data, "warnThreshold", defaults.warn_threshold),
        git_timeout=defaults.git_timeout,
        advisory_timeout=_as_float(advisory_data.get("timeout")) or defaults.advisory_timeout,
    )

    return NostradiffmusConfig(
        root=root,
        limits=limits,
        tone=tone or "tragic",
        quiet=_as_bool(data.get("quiet")) or False,
        use_advisory=True if use_advisory is None else use_advisory,
        advisor=advisor,
        advisory_model=_as_str(advisory_data.get("model")),
        advisory_base_url=_as_str(advisory_data.get("base_url")),
    )


def apply_env_overrides(
    config: NostradiffmusConfig, environ: Mapping[str, str] | None = None
) -> NostradiffmusConfig:
    """Return a copy of ``config`` with NOSTRADIFFMUS_* environment values applied."""
    env = os.environ if environ is None else environ
    limits = config.limits
    limits = replace(
        limits,
        max_diff_chars=_env_int(env, "NOSTRADIFFMUS_MAX_DIFF_CHARS", limits.max_diff_chars),
        max_advisory_chars=_env_int(env, "NOSTRADIFFMUS_COPILOT_CHARS", limits.max_advisory_chars),
        max_lines_processed=_env_int(env, "NOSTRADIFFMUS_MAX_LINES", limits.max_lines_processed),
        warn_threshold=_env_int(env, "NOSTRADIFFMUS_WARN_THRESHOLD", limits.warn_threshold),
        git_timeout=_env_millis(env, "NOSTRADIFFMUS_GIT_TIMEOUT_MS", limits.git_timeout),
        advisory_timeout=_env_millis(
            env,
            "NOSTRADIFFMUS_COPILOT_TIMEOUT_MS",
            limits.advisory_timeout,
            minimum=_MIN_ADVISORY_TIMEOUT,
        ),
    )

    use_advisory = config.use_advisory
    preference = env.get("NOSTRADIFFMUS_USE_COPILOT")
    if preference is not None:
        use_advisory = preference.strip().lower() not in {"0", "false", "off"}

    return replace(config, limits=limits, use_advisory=use_advisory)


def resolve_config(
    path: Path, environ: Mapping[str, str] | None = None
) -> NostradiffmusConfig:
    """Load the file configuration for ``path`` and layer environment overrides on top."""
    return apply_env_overrides(load_config(path), environ)


def _resolve_root(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return config_path.resolve()
    return config_path.parent.resolve()


def _find_config_data(root: Path) -> Optional[Any]:
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.exists():
            return _read_yaml(candidate)

    json_path = root / JSON_CONFIG_FILENAME
    if json_path.exists():
        try:
            return json.loads(json_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {json_path.name}: {exc}") from exc

    package_path = root / "package.json"
    if package_path.exists():
        try:
            package = json.loads(package_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            # package.json is only an optional carrier for settings.
            return None
        if isinstance(package, dict) and package.get("nostradiffmus"):
            return package["nostradiffmus"]

    return None


def _read_yaml(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _positive_int(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"Invalid {key} in config: must be a positive number")
    return int(value)


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        parsed = float(raw)
    except ValueError:
        return default
    return int(parsed) if math.isfinite(parsed) and parsed > 0 else default


def _env_millis(
    env: Mapping[str, str], key: str, default: float, *, minimum: float = 0.0
) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        seconds = float(raw) / 1000.0
    except ValueError:
        return default
    if not math.isfinite(seconds) or seconds <= 0 or seconds < minimum:
        return default
    return seconds


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


__all__ = [
    "ADVISORS",
    "ConfigError",
    "Limits",
    "NostradiffmusConfig",
    "TONES",
    "apply_env_overrides",
    "load_config",
    "resolve_config",
]
