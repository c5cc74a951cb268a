"""
These are the views that process webhook events coming from Gitee.
"""

import logging

from flask import current_app as app
from flask import Blueprint, jsonify, request

from openeuler_webhooks import settings
from openeuler_webhooks.events import NOTE_HOOK, PULL_REQUEST_HOOK
from openeuler_webhooks.gitee import GiteeClient
from openeuler_webhooks.info import merge_method_for_pr
from openeuler_webhooks.tasks.gitee import gitee_event_task
from openeuler_webhooks.types import PullRequest
from openeuler_webhooks.utils import (
    RequestFailed, is_valid_payload, queue_task, requires_auth, sentry_extra_context
)

gitee_bp = Blueprint('gitee_views', __name__)
logger = logging.getLogger(__name__)


@gitee_bp.route('/hook-receiver', methods=('POST',))
def hook_receiver():
    """
    Process incoming Gitee webhook events.

    1.  Make sure the X-Gitee-Token matches our secret. If not, reject the
        request with http status of 403.
    2.  Send a job to the queue with details of the event.
    3.  Respond with http status 202.

    Returns:
        A response, or Tuple[str, int]: Message payload and HTTP status code
    """
    token = request.headers.get("X-Gitee-Token", "")
    timestamp = request.headers.get("X-Gitee-Timestamp")
    secret = app.config.get('GITEE_WEBHOOKS_SECRET')
    if not is_valid_payload(secret, token, timestamp):    # type: ignore[arg-type]
        msg = "Rejecting because the token doesn't match!"
        logger.info(msg)
        return msg, 403

    event_type = request.headers.get("X-Gitee-Event", "")
    event = request.get_json(silent=True)
    if not isinstance(event, dict):
        return "Bad payload", 400

    repo = event.get("repository", {}).get("full_name")
    who = event.get("sender", {}).get("login", "someone")
    logger.info(f"Incoming Gitee event: {event_type=!r}, {repo=!r}, action={event.get('action')!r}, {who=!r}")
    sentry_extra_context({"event": event})

    match event_type:
        case "Merge Request Hook":
            return handle_pull_request_event(event)

        case "Note Hook":
            return handle_note_event(event)

        case _:
            # Ignore all other events.
            return "Thank you", 202


def handle_pull_request_event(event):
    """Handle a webhook event about a pull request."""
    return queue_task(gitee_event_task, PULL_REQUEST_HOOK, event)


def handle_note_event(event):
    """Handle a webhook event about a comment."""
    match event:
        case {"comment": {"user": {"login": who}}} if who == settings.GITEE_BOT_LOGIN:
            # Our own comments come back to us as events. Nothing to do.
            pass

        case {"noteable_type": "PullRequest", "pull_request": _}:
            return queue_task(gitee_event_task, NOTE_HOOK, event)

    return "No thanks", 202


@gitee_bp.route("/merge-method", methods=("GET",))
@requires_auth
def merge_method():
    """
    Report how a pull request would be merged.
    """
    repo = request.args.get("repo", "")
    if "/" not in repo:
        resp = jsonify({"error": "Pull request repo required, as org/name"})
        resp.status_code = 400
        return resp
    num = request.args.get("number", "")
    if not num.isdigit():
        resp = jsonify({"error": "Pull request number required"})
        resp.status_code = 400
        return resp

    org, _, name = repo.partition("/")
    client = GiteeClient()
    try:
        pr_dict = client.get_pull_request(org, name, int(num))
    except RequestFailed as exc:
        resp = jsonify({"error": str(exc)})
        resp.status_code = 400
        return resp

    pr = PullRequest.from_pr_dict(org, name, pr_dict)
    return jsonify({
        "repo": repo,
        "number": pr.prid.number,
        "labels": sorted(pr.labels),
        "merge_method": merge_method_for_pr(pr.labels, org, name, client=client),
    })
