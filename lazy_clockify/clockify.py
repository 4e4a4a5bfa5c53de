"""Thin Clockify REST client.

Only the four calls the entry workflow needs are implemented. There is no
retry: a timeout, connection problem or non-2xx answer becomes a
``TransportError`` carrying the status and raw body for diagnostics.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from .errors import TransportError

BASE_URL = "https://api.clockify.me/api/v1"
DEFAULT_TIMEOUT = 10
UTC_LAYOUT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str
    default_workspace: str = ""


@dataclass(frozen=True)
class Workspace:
    id: str
    name: str


@dataclass(frozen=True)
class Project:
    id: str
    name: str


@dataclass(frozen=True)
class TimeEntryRequest:
    """Body of ``POST /workspaces/{id}/time-entries``.

    ``start`` and ``end`` must be timezone-aware; they are always sent in UTC.
    ``workspace_id`` travels in the URL, not in the body.
    """
    start: datetime
    end: datetime
    description: str
    project_id: str
    workspace_id: str
    billable: bool = True

    def to_payload(self) -> Dict[str, Any]:
        return {
            "start": format_utc(self.start),
            "end": format_utc(self.end),
            "billable": self.billable,
            "description": self.description,
            "projectId": self.project_id,
        }


@dataclass(frozen=True)
class TimeEntry:
    id: str
    description: str
    start: str
    end: str
    workspace_id: str
    user_id: str


def format_utc(dt: datetime) -> str:
    """Render an aware datetime as the ISO-8601 'Z' form Clockify expects."""
    return dt.astimezone(timezone.utc).strftime(UTC_LAYOUT)


def make_session(api_key: str, verify: Optional[bool] = True, ca_bundle: Optional[str] = "",
                 http_proxy: str = "", https_proxy: str = "") -> requests.Session:
    """Create a requests.Session authenticated with the Clockify API key.

    Applies JSON headers, optional proxies, and SSL verification or a custom
    CA bundle (the bundle wins over the boolean).
    """
    s = requests.Session()
    s.headers.update({
        "X-Api-Key": api_key,
        "Accept": "application/json",
        "Content-Type": "application/json",
    })
    if http_proxy or https_proxy:
        proxies = {}
        if http_proxy:
            proxies["http"] = http_proxy
        if https_proxy:
            proxies["https"] = https_proxy
        s.proxies.update(proxies)
    if ca_bundle:
        s.verify = ca_bundle
    else:
        s.verify = verify
    return s


class ClockifyClient:
    """Calls the Clockify API through a prepared session."""

    def __init__(self, session: requests.Session, base_url: str = BASE_URL, timeout: int = DEFAULT_TIMEOUT):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"request to {path} failed: {e}") from e
        if r.status_code < 200 or r.status_code >= 300:
            text = getattr(r, "text", "")
            raise TransportError(f"API error (status {r.status_code}): {text}",
                                 status_code=r.status_code, body=text)
        try:
            return r.json()
        except ValueError as e:
            raise TransportError(f"could not decode response from {path}: {e}",
                                 status_code=r.status_code, body=getattr(r, "text", "")) from e

    def endpoint(self, workspace_id: str) -> str:
        return f"{self.base_url}/workspaces/{workspace_id}/time-entries"

    def get_user(self) -> User:
        data = self._request("GET", "/user") or {}
        return User(
            id=data.get("id", ""),
            email=data.get("email", ""),
            name=data.get("name", ""),
            default_workspace=data.get("defaultWorkspace") or "",
        )

    def get_workspaces(self) -> List[Workspace]:
        data = self._request("GET", "/workspaces") or []
        return [Workspace(id=w.get("id", ""), name=w.get("name", "")) for w in data]

    def get_projects(self, workspace_id: str) -> List[Project]:
        data = self._request("GET", f"/workspaces/{workspace_id}/projects") or []
        return [Project(id=p.get("id", ""), name=p.get("name", "")) for p in data]

    def create_time_entry(self, workspace_id: str, entry: TimeEntryRequest) -> TimeEntry:
        data = self._request("POST", f"/workspaces/{workspace_id}/time-entries", body=entry.to_payload()) or {}
        interval = data.get("timeInterval") or {}
        return TimeEntry(
            id=data.get("id", ""),
            description=data.get("description") or "",
            start=interval.get("start") or "",
            end=interval.get("end") or "",
            workspace_id=data.get("workspaceId", ""),
            user_id=data.get("userId", ""),
        )
