"""
The rules the bot applies to events.

Each rule looks at one event and decides whether it applies.  If it
doesn't, the rule returns without doing anything.  If it does, the rule
makes one or two Gitee calls.  Errors from Gitee are raised; nothing is
retried or rolled back.
"""

from __future__ import annotations

from openeuler_webhooks.bot_comments import (
    RETEST_COMMENT,
    labels_cleared_comment,
    merge_label_conflict_comment,
    not_set_reviewer_comment,
)
from openeuler_webhooks.events import (
    NoteEvent,
    PR_ACTION_OPEN,
    PR_ACTION_SOURCE_BRANCH_CHANGED,
    PullRequestEvent,
)
from openeuler_webhooks.gitee import GiteeClient
from openeuler_webhooks.labels import (
    APPROVED_LABEL,
    CLA_LABEL,
    FLATTENED_LABEL,
    REBASE_LABEL,
    lgtm_labels,
)
from openeuler_webhooks.permissions import PermissionChecker, has_permission
from openeuler_webhooks.tasks import logger
from openeuler_webhooks.types import RepoConfig

REMOVE_CLA_COMMAND = "/cla cancel"
REBASE_COMMAND = "/rebase"
REMOVE_REBASE_COMMAND = "/rebase cancel"
FLATTENED_COMMAND = "/flattened"
REMOVE_FLATTENED_COMMAND = "/flattened cancel"


def _is_command(event: NoteEvent, command: str) -> bool:
    """Is this a new comment on an open pull request saying exactly `command`?"""
    return (
        event.is_pull_request() and
        event.is_pr_open() and
        event.is_creating_comment() and
        event.comment_body == command
    )


def _commenter_may_command(
        event: NoteEvent,
        config: RepoConfig,
        client: GiteeClient,
        check_permission: PermissionChecker,
    ) -> bool:
    pr = event.pull_request
    assert pr is not None
    return check_permission(
        pr.prid.org, pr.prid.repo, event.commenter, False, pr, config, client,
    )


def _remove_label_command(
        event: NoteEvent,
        command: str,
        label: str,
        config: RepoConfig,
        client: GiteeClient,
        check_permission: PermissionChecker,
    ) -> None:
    if not _is_command(event, command):
        return
    if not _commenter_may_command(event, config, client, check_permission):
        return
    prid = event.pull_request.prid   # type: ignore[union-attr]
    logger.info(f"@{event.commenter} said {command!r} on {prid}")
    client.remove_pr_label(prid.org, prid.repo, prid.number, label)


def _add_merge_label_command(
        event: NoteEvent,
        command: str,
        label: str,
        other_command: str,
        other_label: str,
        config: RepoConfig,
        client: GiteeClient,
        check_permission: PermissionChecker,
    ) -> None:
    """
    Add a merge-strategy label, unless the other strategy's label is there.
    """
    if not _is_command(event, command):
        return
    if not _commenter_may_command(event, config, client, check_permission):
        return
    pr = event.pull_request
    assert pr is not None
    prid = pr.prid
    logger.info(f"@{event.commenter} said {command!r} on {prid}")
    if other_label in pr.labels:
        body = merge_label_conflict_comment(
            command=command.lstrip("/"),
            other_command=other_command.lstrip("/"),
            other_label=other_label,
        )
        client.create_pr_comment(prid.org, prid.repo, prid.number, body)
        return
    client.add_pr_label(prid.org, prid.repo, prid.number, label)


def remove_invalid_cla(event, config, client, check_permission=has_permission) -> None:
    """``/cla cancel`` takes the signed-CLA label off."""
    _remove_label_command(
        event, REMOVE_CLA_COMMAND, CLA_LABEL, config, client, check_permission,
    )


def handle_rebase(event, config, client, check_permission=has_permission) -> None:
    """``/rebase`` asks for a rebase merge."""
    _add_merge_label_command(
        event, REBASE_COMMAND, REBASE_LABEL, FLATTENED_COMMAND, FLATTENED_LABEL,
        config, client, check_permission,
    )


def handle_flattened(event, config, client, check_permission=has_permission) -> None:
    """``/flattened`` asks for a squash merge."""
    _add_merge_label_command(
        event, FLATTENED_COMMAND, FLATTENED_LABEL, REBASE_COMMAND, REBASE_LABEL,
        config, client, check_permission,
    )


def remove_rebase(event, config, client, check_permission=has_permission) -> None:
    _remove_label_command(
        event, REMOVE_REBASE_COMMAND, REBASE_LABEL, config, client, check_permission,
    )


def remove_flattened(event, config, client, check_permission=has_permission) -> None:
    _remove_label_command(
        event, REMOVE_FLATTENED_COMMAND, FLATTENED_LABEL, config, client, check_permission,
    )


def do_retest(event: PullRequestEvent, config: RepoConfig, client: GiteeClient) -> None:  # pylint: disable=unused-argument
    """New commits were pushed: ask the CI to test again."""
    if event.pr_action() != PR_ACTION_SOURCE_BRANCH_CHANGED:
        return
    prid = event.pull_request.prid
    client.create_pr_comment(prid.org, prid.repo, prid.number, RETEST_COMMENT)


def check_reviewer(event: PullRequestEvent, config: RepoConfig, client: GiteeClient) -> None:
    """
    A new pull request with nobody assigned gets a comment asking the
    author to choose a reviewer.
    """
    if config.unable_checking_reviewer_for_pr or event.pr_action() != PR_ACTION_OPEN:
        return
    pr = event.pull_request
    if pr.assignees:
        return
    prid = pr.prid
    client.create_pr_comment(
        prid.org, prid.repo, prid.number, not_set_reviewer_comment(pr.author),
    )


def clear_labels(event: PullRequestEvent, config: RepoConfig, client: GiteeClient) -> None:  # pylint: disable=unused-argument
    """
    New commits invalidate earlier reviews: take off the LGTM and
    approved labels, and say so.
    """
    if event.pr_action() != PR_ACTION_SOURCE_BRANCH_CHANGED:
        return
    pr = event.pull_request
    to_remove = lgtm_labels(pr.labels)
    if APPROVED_LABEL in pr.labels:
        to_remove.append(APPROVED_LABEL)
    if not to_remove:
        return
    prid = pr.prid
    client.remove_pr_labels(prid.org, prid.repo, prid.number, to_remove)
    client.create_pr_comment(
        prid.org, prid.repo, prid.number, labels_cleared_comment(to_remove),
    )


# The rules for each kind of event, in the order they run.
NOTE_RULES = [
    remove_invalid_cla,
    handle_rebase,
    handle_flattened,
    remove_rebase,
    remove_flattened,
]

PULL_REQUEST_RULES = [
    do_retest,
    check_reviewer,
    clear_labels,
]
