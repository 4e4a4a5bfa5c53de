"""Read, merge and persist lazy-clockify settings.

Values come from the ``[clockify]`` section of an INI file, then from
environment variables, and command-line flags override both. The result is
a frozen ``Settings`` handed to the workflow.
"""
import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import PreconditionError, ResolutionError

SECTION = "clockify"
DEFAULT_START = "9:00"
DEFAULT_END = "17:00"
DEFAULT_PREFIX = "JIRA"


def default_config_path() -> str:
    env = os.environ.get("LAZY_CLOCKIFY_CONFIG", "").strip()
    if env:
        return env
    return str(Path.home() / ".config" / "lazy-clockify" / "config.ini")


@dataclass(frozen=True)
class Settings:
    api_key: str
    start_time: str = DEFAULT_START
    end_time: str = DEFAULT_END
    date: str = ""
    message: str = ""
    ticket_prefix: str = DEFAULT_PREFIX
    project: Optional[int] = None
    workspace_id: str = ""
    project_id: str = ""
    skip: bool = False
    verbose: bool = False
    timeout: int = 10
    verify_ssl: bool = True
    ca_bundle: str = ""
    http_proxy: str = ""
    https_proxy: str = ""


def read_config(path: str) -> Dict[str, Any]:
    """Read the [clockify] section of path with environment fallbacks.

    A missing file or section yields defaults; nothing here is fatal.
    """
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    sec = cp[SECTION] if SECTION in cp else {}

    def get(key: str, default: str = "") -> str:
        return (sec.get(key, default) or default).strip()

    api_key = get("api_key") or os.environ.get("CLOCKIFY_API_KEY", "").strip()
    verify_ssl = get("verify_ssl", "true").lower() in ("1", "true", "yes", "on")

    return {
        "api_key": api_key,
        "start_time": get("start_time"),
        "end_time": get("end_time"),
        "date": get("date"),
        "message": get("message"),
        "ticket_prefix": get("ticket_prefix"),
        "project": get("project"),
        "workspace_id": get("workspace_id"),
        "project_id": get("project_id"),
        "verify_ssl": verify_ssl,
        "ca_bundle": get("ca_bundle"),
        "http_proxy": get("http_proxy"),
        "https_proxy": get("https_proxy"),
    }


def parse_project_index(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ResolutionError(f"invalid project index: {value!r}", field="project") from None


def build_settings(args: Any, cfg: Dict[str, Any]) -> Settings:
    """Merge parsed flags over file values; flags left unset fall through."""
    def pick(flag: str, key: str, default: str = "") -> str:
        v = getattr(args, flag, None)
        if v is not None and str(v).strip():
            return str(v).strip()
        return cfg.get(key) or default

    api_key = pick("api_key", "api_key")
    if not api_key:
        raise PreconditionError(
            "api_key not found in configuration. Set it in the config file, "
            "CLOCKIFY_API_KEY or --api-key")

    project_flag = getattr(args, "project", None)
    project = parse_project_index(project_flag if project_flag is not None else cfg.get("project"))

    return Settings(
        api_key=api_key,
        start_time=pick("start_time", "start_time", DEFAULT_START),
        end_time=pick("end_time", "end_time", DEFAULT_END),
        date=pick("date", "date"),
        message=pick("message", "message"),
        ticket_prefix=pick("ticket_prefix", "ticket_prefix", DEFAULT_PREFIX),
        project=project,
        workspace_id=cfg.get("workspace_id", ""),
        project_id=cfg.get("project_id", ""),
        skip=bool(getattr(args, "yes", False)),
        verbose=bool(getattr(args, "verbose", False)),
        timeout=max(1, int(getattr(args, "timeout", 10) or 10)),
        verify_ssl=False if getattr(args, "insecure", False) else bool(cfg.get("verify_ssl", True)),
        ca_bundle=cfg.get("ca_bundle", ""),
        http_proxy=cfg.get("http_proxy", ""),
        https_proxy=cfg.get("https_proxy", ""),
    )


def write_config(path: str, values: Dict[str, str]) -> None:
    """Set keys in the [clockify] section of path, keeping everything else."""
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    if SECTION not in cp:
        cp.add_section(SECTION)
    for k, v in values.items():
        cp[SECTION][k] = v
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            cp.write(fh)
    except OSError as e:
        raise PreconditionError(f"failed to write config file: {e}") from e
