from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config" / "defaults.yaml"
load_dotenv()


def _bool_from_env(value: str | None) -> Optional[bool]:
    if value is None:
        return None
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return None


def _merge_dicts(base: Dict, overrides: Mapping) -> Dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            merged[key] = _merge_dicts(base[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text()) or {}


@dataclass
class SchedulerConfig:
    cron: str = "0 */3 * * *"
    enabled: bool = True
    run_on_start: bool = True
    misfire_grace_time: int = 600


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = True


@dataclass
class FetchConfig:
    data_url: str = "https://snowscraper.camdvr.org/all"
    timeout: float = 10.0
    max_attempts: int = 3
    backoff_factor: float = 0.5


@dataclass
class DefaultsConfig:
    elevation: str = "base"
    sort: str = "temperature"
    sort_day: int = 0
    selected_resorts: List[str] = field(default_factory=list)


@dataclass
class ResortSettings:
    id: str
    name: str
    region: str = ""
    webcam_url: Optional[str] = None


@dataclass
class AppConfig:
    resorts: List[ResortSettings] = field(default_factory=list)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(*, config_path: str | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    env = dict(os.environ if env is None else env)
    data = _load_yaml(_DEFAULT_CONFIG_PATH)

    explicit_path = config_path or env.get("SNOWFORECAST_CONFIG_PATH")
    if explicit_path:
        data = _merge_dicts(data, _load_yaml(Path(explicit_path)))

    scheduler_data = dict(data.get("scheduler") or {})
    cron_override = env.get("SNOWFORECAST_SCHEDULER_CRON")
    if cron_override:
        scheduler_data["cron"] = cron_override
    enabled_override = _bool_from_env(env.get("SNOWFORECAST_SCHEDULER_ENABLED"))
    if enabled_override is not None:
        scheduler_data["enabled"] = enabled_override

    logging_data = dict(data.get("logging") or {})
    level_override = env.get("SNOWFORECAST_LOG_LEVEL")
    if level_override:
        logging_data["level"] = level_override
    json_override = _bool_from_env(env.get("SNOWFORECAST_LOG_JSON"))
    if json_override is not None:
        logging_data["json"] = json_override

    fetch_data = dict(data.get("fetch") or {})
    url_override = env.get("SNOWFORECAST_DATA_URL")
    if url_override:
        fetch_data["data_url"] = url_override

    defaults_data = dict(data.get("defaults") or {})
    elevation_override = env.get("SNOWFORECAST_DEFAULT_ELEVATION")
    if elevation_override:
        defaults_data["elevation"] = elevation_override
    sort_override = env.get("SNOWFORECAST_DEFAULT_SORT")
    if sort_override:
        defaults_data["sort"] = sort_override

    resorts = [ResortSettings(**resort) for resort in data.get("resorts", [])]

    return AppConfig(
        resorts=resorts,
        defaults=DefaultsConfig(**defaults_data),
        fetch=FetchConfig(**fetch_data),
        scheduler=SchedulerConfig(**scheduler_data),
        logging=LoggingConfig(**logging_data),
    )


app_config = load_config()
