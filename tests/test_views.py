"""Tests of the Gitee webhook views."""

import base64
import json

import pytest

from openeuler_webhooks.events import NOTE_HOOK, PULL_REQUEST_HOOK
from openeuler_webhooks.utils import gitee_signature

BASE_URL = "https://openeuler-webhooks.example.com"


@pytest.fixture
def client(configure_flask_app):
    return configure_flask_app.test_client()


@pytest.fixture
def queued(mocker):
    """Mock the Celery task, and return the mock to check what was queued."""
    task = mocker.patch("openeuler_webhooks.gitee_views.gitee_event_task")
    delay = task.delay
    delay.return_value.id = "task-1234"
    return delay


def post_hook(client, event_type, payload, token="webhook-secret", timestamp=None):
    headers = {"X-Gitee-Event": event_type, "X-Gitee-Token": token}
    if timestamp is not None:
        headers["X-Gitee-Timestamp"] = timestamp
    return client.post(
        "/gitee/hook-receiver",
        data=json.dumps(payload),
        content_type="application/json",
        headers=headers,
        base_url=BASE_URL,
    )


def test_bad_token(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    resp = post_hook(client, PULL_REQUEST_HOOK, pr.hook_payload("open"), token="guessing")
    assert resp.status_code == 403
    queued.assert_not_called()


def test_missing_token(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    resp = post_hook(client, PULL_REQUEST_HOOK, pr.hook_payload("open"), token="")
    assert resp.status_code == 403
    queued.assert_not_called()


def test_pull_request_queued(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    payload = pr.hook_payload("update", "source_branch_changed")
    resp = post_hook(client, PULL_REQUEST_HOOK, payload)
    assert resp.status_code == 202
    assert resp.json["message"] == "queued"
    assert resp.json["status_url"] == f"{BASE_URL}/tasks/status/task-1234"
    assert resp.headers["Location"] == resp.json["status_url"]
    queued.assert_called_once()
    args, kwargs = queued.call_args
    assert args == (PULL_REQUEST_HOOK, payload)
    assert kwargs["wsgi_environ"]["wsgi.url_scheme"] == "https"


def test_signed_token(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    timestamp = "1700000000000"
    token = gitee_signature("webhook-secret", timestamp)
    resp = post_hook(client, PULL_REQUEST_HOOK, pr.hook_payload("open"), token=token, timestamp=timestamp)
    assert resp.status_code == 202
    queued.assert_called_once()


def test_comment_queued(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    payload = pr.note_payload("/rebase", commenter="committer")
    resp = post_hook(client, NOTE_HOOK, payload)
    assert resp.status_code == 202
    queued.assert_called_once()
    assert queued.call_args.args == (NOTE_HOOK, payload)


def test_own_comment_ignored(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    resp = post_hook(client, NOTE_HOOK, pr.note_payload("/retest", commenter="webhook-bot"))
    assert resp.status_code == 202
    assert resp.text == "No thanks"
    queued.assert_not_called()


def test_issue_comment_ignored(client, fake_gitee, queued):
    pr = fake_gitee.make_pull_request()
    payload = pr.note_payload("/rebase", commenter="committer")
    payload["noteable_type"] = "Issue"
    del payload["pull_request"]
    resp = post_hook(client, NOTE_HOOK, payload)
    assert resp.status_code == 202
    assert resp.text == "No thanks"
    queued.assert_not_called()


@pytest.mark.parametrize("event_type", ["Push Hook", "Issue Hook", ""])
def test_other_events_ignored(client, fake_gitee, queued, event_type):
    pr = fake_gitee.make_pull_request()
    resp = post_hook(client, event_type, pr.hook_payload("open"))
    assert resp.status_code == 202
    assert resp.text == "Thank you"
    queued.assert_not_called()


def test_bad_payload(client, queued):
    resp = client.post(
        "/gitee/hook-receiver",
        data="this isn't json",
        content_type="application/json",
        headers={"X-Gitee-Event": PULL_REQUEST_HOOK, "X-Gitee-Token": "webhook-secret"},
        base_url=BASE_URL,
    )
    assert resp.status_code == 400
    queued.assert_not_called()


@pytest.fixture
def basic_auth(monkeypatch):
    monkeypatch.setenv("HTTP_BASIC_AUTH_USERNAME", "ops")
    monkeypatch.setenv("HTTP_BASIC_AUTH_PASSWORD", "s3cret")
    creds = base64.b64encode(b"ops:s3cret").decode()
    return {"Authorization": f"Basic {creds}"}


def get_merge_method(client, headers, **params):
    return client.get("/gitee/merge-method", query_string=params, headers=headers, base_url=BASE_URL)


def test_merge_method_needs_auth(client, basic_auth):
    resp = get_merge_method(client, {}, repo="openeuler/kernel", number="7")
    assert resp.status_code == 401


def test_merge_method_from_label(client, basic_auth, fake_gitee):
    fake_gitee.make_pull_request("openeuler", "kernel", number=7, labels={"rebase/merge", "lgtm"})
    resp = get_merge_method(client, basic_auth, repo="openeuler/kernel", number="7")
    assert resp.status_code == 200
    assert resp.json == {
        "repo": "openeuler/kernel",
        "number": 7,
        "labels": ["lgtm", "rebase/merge"],
        "merge_method": "rebase",
    }


def test_merge_method_from_sig_file(client, basic_auth, fake_gitee):
    fake_gitee.make_pull_request("openeuler", "kernel", number=7, labels={"sig/Kernel"})
    fake_gitee.community_repo().add_file(
        "sig/Kernel/openeuler/k/kernel.yaml", "MergeMethod: squash\n",
    )
    resp = get_merge_method(client, basic_auth, repo="openeuler/kernel", number="7")
    assert resp.json["merge_method"] == "squash"


@pytest.mark.parametrize("params", [
    {"repo": "kernel", "number": "7"},
    {"repo": "openeuler/kernel", "number": "seven"},
    {"repo": "openeuler/kernel"},
    {},
])
def test_merge_method_bad_request(client, basic_auth, fake_gitee, params):
    resp = get_merge_method(client, basic_auth, **params)
    assert resp.status_code == 400
    assert "error" in resp.json


def test_merge_method_no_such_pr(client, basic_auth, fake_gitee):
    fake_gitee.make_repo("openeuler", "kernel")
    resp = get_merge_method(client, basic_auth, repo="openeuler/kernel", number="99")
    assert resp.status_code == 400
    assert "error" in resp.json
