"""
Queuable background tasks to handle Gitee events.
"""

from __future__ import annotations

import contextlib
from typing import List, Optional

from openeuler_webhooks import celery
from openeuler_webhooks.events import Event, NoteEvent, PullRequestEvent, parse_event
from openeuler_webhooks.gitee import GiteeClient
from openeuler_webhooks.info import config_for_repo
from openeuler_webhooks.permissions import PermissionChecker, has_permission
from openeuler_webhooks.tasks import logger
from openeuler_webhooks.tasks.rules import NOTE_RULES, PULL_REQUEST_RULES
from openeuler_webhooks.types import PayloadDict
from openeuler_webhooks.utils import sentry_extra_context


@celery.task(bind=True)
def gitee_event_task(_, event_type, payload):
    """A bound Celery task to call gitee_event_received."""
    try:
        gitee_event_received(event_type, payload)
    except Exception:
        logger.exception("Couldn't gitee_event_task")
        raise


def gitee_event_received(event_type: str, payload: PayloadDict) -> None:
    """Parse a webhook payload and handle it."""
    sentry_extra_context({"event_type": event_type})
    event = parse_event(event_type, payload)
    if event is None:
        logger.info(f"Ignoring {event_type!r} event")
        return
    handle_event(event)


class RuleRunner:
    """
    Run rules over an event, keeping going when one of them fails.
    """

    def __init__(self) -> None:
        self.exceptions: List[Exception] = []

    @contextlib.contextmanager
    def saved_exceptions(self):
        """
        A context manager to wrap around each rule.

        An exception raised in the with-block will be added to `self.exceptions`.
        """
        try:
            yield
        except Exception as exc:    # pylint: disable=broad-exception-caught
            logger.exception("Rule failed")
            self.exceptions.append(exc)

    def raise_failures(self) -> None:
        if self.exceptions:
            raise ExceptionGroup("Some rules failed", self.exceptions)


def handle_event(
        event: Event,
        client: Optional[GiteeClient] = None,
        check_permission: PermissionChecker = has_permission,
    ) -> None:
    """
    Apply every rule for this kind of event.

    All the rules run even if some fail.  Failures are raised together
    afterwards as an ExceptionGroup.
    """
    pr = event.pull_request
    if pr is None:
        # Comments on issues and commits.
        logger.info("Event isn't about a pull request, nothing to do")
        return

    prid = pr.prid
    config = config_for_repo(prid.org, prid.repo)
    client = client or GiteeClient()
    runner = RuleRunner()

    match event:
        case NoteEvent():
            logger.info(f"Comment by @{event.commenter} on {prid}")
            for rule in NOTE_RULES:
                with runner.saved_exceptions():
                    rule(event, config, client, check_permission)

        case PullRequestEvent():
            logger.info(f"Pull request {prid} {event.pr_action()!r}")
            for rule in PULL_REQUEST_RULES:
                with runner.saved_exceptions():
                    rule(event, config, client)

    runner.raise_failures()
