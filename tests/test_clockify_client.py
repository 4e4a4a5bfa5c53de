from datetime import datetime, timezone

import pytest
import requests

import lazy_clockify.clockify as mod
from lazy_clockify.errors import TransportError
from tests.conftest import FakeResponse, FakeSession, TEST_TZ


def test_make_session_sets_api_key_proxies_and_verify():
    s = mod.make_session(
        "key123",
        verify=False,
        ca_bundle="",
        http_proxy="http://proxy.local:8080",
        https_proxy="http://proxy.local:8080",
    )
    assert s.headers["X-Api-Key"] == "key123"
    assert s.headers["Content-Type"] == "application/json"
    assert s.proxies["http"] == "http://proxy.local:8080"
    assert s.proxies["https"] == "http://proxy.local:8080"
    assert s.verify is False

    s2 = mod.make_session("k", verify=True, ca_bundle="/etc/ssl/corp.pem")
    # the CA bundle replaces the boolean
    assert s2.verify == "/etc/ssl/corp.pem"


def test_get_user_maps_default_workspace_and_uses_timeout():
    sess = FakeSession([FakeResponse(json_data={
        "id": "u1", "email": "dev@example.com", "name": "Dev", "defaultWorkspace": "ws9",
    })])
    client = mod.ClockifyClient(sess, timeout=7)
    user = client.get_user()
    assert user == mod.User(id="u1", email="dev@example.com", name="Dev", default_workspace="ws9")
    assert sess.calls[0]["method"] == "GET"
    assert sess.calls[0]["url"] == "https://api.clockify.me/api/v1/user"
    assert sess.calls[0]["timeout"] == 7


def test_get_user_without_default_workspace():
    sess = FakeSession([FakeResponse(json_data={"id": "u1", "email": "e", "name": "n", "defaultWorkspace": None})])
    assert mod.ClockifyClient(sess).get_user().default_workspace == ""


def test_get_workspaces_and_projects_keep_order():
    sess = FakeSession([
        FakeResponse(json_data=[{"id": "w1", "name": "One"}, {"id": "w2", "name": "Two"}]),
        FakeResponse(json_data=[{"id": "p2", "name": "B"}, {"id": "p1", "name": "A"}]),
    ])
    client = mod.ClockifyClient(sess)
    assert [w.id for w in client.get_workspaces()] == ["w1", "w2"]
    assert [p.name for p in client.get_projects("w1")] == ["B", "A"]
    assert sess.calls[1]["url"].endswith("/workspaces/w1/projects")


def test_non_2xx_raises_transport_error_with_status_and_body():
    sess = FakeSession([FakeResponse(status_code=401, text='{"message":"bad key"}')])
    with pytest.raises(TransportError) as ei:
        mod.ClockifyClient(sess).get_workspaces()
    assert ei.value.status_code == 401
    assert "bad key" in ei.value.body
    assert "status 401" in str(ei.value)


def test_timeout_becomes_transport_error_without_status():
    sess = FakeSession([requests.exceptions.Timeout("read timed out")])
    with pytest.raises(TransportError) as ei:
        mod.ClockifyClient(sess).get_user()
    assert ei.value.status_code is None
    # no retry was attempted
    assert len(sess.calls) == 1


def test_undecodable_body_is_transport_error():
    sess = FakeSession([FakeResponse(status_code=200, text="<html>")])
    with pytest.raises(TransportError):
        mod.ClockifyClient(sess).get_user()


def test_create_time_entry_posts_utc_payload_and_reads_interval():
    start = datetime(2025, 10, 17, 9, 0, tzinfo=TEST_TZ)
    end = datetime(2025, 10, 17, 17, 0, tzinfo=TEST_TZ)
    req = mod.TimeEntryRequest(start=start, end=end, description="EL-1", project_id="p1", workspace_id="w1")
    sess = FakeSession([FakeResponse(status_code=201, json_data={
        "id": "te1",
        "description": "EL-1",
        "workspaceId": "w1",
        "userId": "u1",
        "timeInterval": {"start": "2025-10-17T07:00:00Z", "end": "2025-10-17T15:00:00Z"},
    })])
    entry = mod.ClockifyClient(sess).create_time_entry("w1", req)

    call = sess.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.clockify.me/api/v1/workspaces/w1/time-entries"
    assert call["json"] == {
        "start": "2025-10-17T07:00:00Z",
        "end": "2025-10-17T15:00:00Z",
        "billable": True,
        "description": "EL-1",
        "projectId": "p1",
    }
    assert entry.id == "te1"
    assert entry.start == "2025-10-17T07:00:00Z"
    assert entry.user_id == "u1"


def test_format_utc_converts_aware_datetimes():
    dt = datetime(2025, 1, 1, 0, 30, tzinfo=TEST_TZ)
    assert mod.format_utc(dt) == "2024-12-31T22:30:00Z"
    assert mod.format_utc(datetime(2025, 1, 1, tzinfo=timezone.utc)) == "2025-01-01T00:00:00Z"
