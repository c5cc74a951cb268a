"""
Webhook events from Gitee, parsed into the two kinds the bot handles.

Gitee names the event kind in the ``X-Gitee-Event`` header.  Pull request
events arrive as "Merge Request Hook", comments as "Note Hook".  Anything
else parses to None.
"""

from __future__ import annotations

import dataclasses
from typing import Optional, Union

from glom import glom

from openeuler_webhooks.types import PayloadDict, PullRequest

PULL_REQUEST_HOOK = "Merge Request Hook"
NOTE_HOOK = "Note Hook"

# Pull request actions, as reported by PullRequestEvent.pr_action().
PR_ACTION_OPEN = "open"
PR_ACTION_CLOSE = "close"
PR_ACTION_MERGE = "merge"
PR_ACTION_UPDATE = "update"
PR_ACTION_SOURCE_BRANCH_CHANGED = "source_branch_changed"
PR_ACTION_TARGET_BRANCH_CHANGED = "target_branch_changed"
PR_ACTION_LABEL_UPDATED = "update_label"

# "update" events are refined by their action_desc.
_UPDATE_DESCRIPTIONS = {
    PR_ACTION_SOURCE_BRANCH_CHANGED,
    PR_ACTION_TARGET_BRANCH_CHANGED,
    PR_ACTION_LABEL_UPDATED,
}


def _org_repo(payload: PayloadDict) -> tuple[str, str]:
    org = glom(payload, "repository.namespace", default="")
    repo = glom(payload, "repository.path", default="")
    if not (org and repo):
        org, _, repo = glom(payload, "repository.full_name", default="/").partition("/")
    return org, repo


@dataclasses.dataclass(frozen=True)
class PullRequestEvent:
    """A pull request was opened, updated, closed, ..."""
    pull_request: PullRequest
    action: str
    action_desc: str = ""

    @classmethod
    def from_payload(cls, payload: PayloadDict) -> PullRequestEvent:
        org, repo = _org_repo(payload)
        return cls(
            pull_request=PullRequest.from_pr_dict(org, repo, payload["pull_request"]),
            action=(payload.get("action") or "").lower(),
            action_desc=payload.get("action_desc") or "",
        )

    def pr_action(self) -> str:
        if self.action == PR_ACTION_UPDATE and self.action_desc in _UPDATE_DESCRIPTIONS:
            return self.action_desc
        return self.action


@dataclasses.dataclass(frozen=True)
class NoteEvent:
    """A comment was made on a pull request, an issue, or a commit."""
    comment_body: str
    commenter: str
    noteable_type: str
    action: str
    pull_request: Optional[PullRequest] = None

    @classmethod
    def from_payload(cls, payload: PayloadDict) -> NoteEvent:
        org, repo = _org_repo(payload)
        pr = payload.get("pull_request")
        return cls(
            comment_body=glom(payload, "comment.body", default="") or "",
            commenter=glom(payload, "comment.user.login", default=""),
            noteable_type=payload.get("noteable_type") or "",
            action=payload.get("action") or "",
            pull_request=PullRequest.from_pr_dict(org, repo, pr) if pr else None,
        )

    def is_pull_request(self) -> bool:
        return self.noteable_type == "PullRequest" and self.pull_request is not None

    def is_pr_open(self) -> bool:
        return self.pull_request is not None and self.pull_request.is_open()

    def is_creating_comment(self) -> bool:
        return self.action == "comment"


Event = Union[PullRequestEvent, NoteEvent]


def parse_event(event_type: str, payload: PayloadDict) -> Optional[Event]:
    """
    Make an Event from the ``X-Gitee-Event`` header value and the payload.

    Returns None for event kinds the bot doesn't handle.
    """
    match event_type:
        case "Merge Request Hook":
            return PullRequestEvent.from_payload(payload)
        case "Note Hook":
            return NoteEvent.from_payload(payload)
        case _:
            return None
