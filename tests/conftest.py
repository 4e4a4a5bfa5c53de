import os
import sys
# Ensure project root is importable for tests, regardless of runner CWD
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
from dateutil import tz

from lazy_clockify.clockify import Project, TimeEntry, User, Workspace
from lazy_clockify.config import Settings

_NO_JSON = object()

# Fixed offset so tests do not depend on the machine timezone
TEST_TZ = tz.tzoffset("CEST", 2 * 3600)
TEST_NOW = datetime(2025, 10, 17, 12, 30, tzinfo=TEST_TZ)


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = _NO_JSON,
        text: str = "",
        headers: Optional[Dict[str, str]] = None,
    ):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self.headers = headers or {}

    def json(self):
        if self._json_data is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakeSession:
    """Records requests and answers from a list of canned responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


class FakeClient:
    """Stands in for ClockifyClient and counts every call."""

    def __init__(self, user=None, workspaces=None, projects=None, create_error=None):
        self.user = user or User(id="u1", email="dev@example.com", name="Dev", default_workspace="ws1")
        self.workspaces = workspaces if workspaces is not None else [Workspace("ws1", "Main")]
        self.projects = projects if projects is not None else [
            Project("p1", "Alpha"), Project("p2", "Beta"), Project("p3", "Gamma"),
        ]
        self.create_error = create_error
        self.calls: List[str] = []
        self.created = []

    def endpoint(self, workspace_id):
        return f"https://api.clockify.me/api/v1/workspaces/{workspace_id}/time-entries"

    def get_user(self):
        self.calls.append("get_user")
        return self.user

    def get_workspaces(self):
        self.calls.append("get_workspaces")
        return self.workspaces

    def get_projects(self, workspace_id):
        self.calls.append(f"get_projects:{workspace_id}")
        return self.projects

    def create_time_entry(self, workspace_id, entry):
        self.calls.append(f"create_time_entry:{workspace_id}")
        if self.create_error is not None:
            raise self.create_error
        self.created.append(entry)
        return TimeEntry(id="te-1", description=entry.description, start="", end="",
                         workspace_id=workspace_id, user_id=self.user.id)


def answers(*values):
    """Build a prompt callable returning values in order; EOFError when exhausted."""
    it = iter(values)
    asked: List[str] = []

    def prompt(text=""):
        asked.append(text)
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    prompt.asked = asked
    return prompt


@pytest.fixture
def settings():
    return Settings(api_key="key123", ticket_prefix="EL")


@pytest.fixture
def tmp_config_file(tmp_path):
    """Create a minimal valid config.ini and return its path."""
    p = tmp_path / "config.ini"
    p.write_text(
        "[clockify]\n"
        "api_key = key123\n"
        "start_time = 8:30\n"
        "ticket_prefix = EL\n"
        "verify_ssl = true\n",
        encoding="utf-8",
    )
    return p


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv("CLOCKIFY_API_KEY", raising=False)
    monkeypatch.delenv("LAZY_CLOCKIFY_CONFIG", raising=False)


# Expose utilities for tests
__all__ = ["FakeResponse", "FakeSession", "FakeClient", "answers", "TEST_TZ", "TEST_NOW"]
