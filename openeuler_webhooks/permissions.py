"""
Who may give the bot commands.
"""

from __future__ import annotations

import logging
from typing import Callable

from openeuler_webhooks.gitee import GiteeClient
from openeuler_webhooks.info import sig_maintainers, sig_name
from openeuler_webhooks.types import PullRequest, RepoConfig

logger = logging.getLogger(__name__)

# Repo permissions that can always command the bot.
COMMANDING_PERMISSIONS = {"admin", "write"}

# The signature of has_permission, for injecting another checker.
PermissionChecker = Callable[
    [str, str, str, bool, PullRequest, RepoConfig, GiteeClient],
    bool,
]


def has_permission(
        org: str,
        repo: str,
        commenter: str,
        require_owner: bool,
        pr: PullRequest,
        config: RepoConfig,     # pylint: disable=unused-argument
        client: GiteeClient,
    ) -> bool:
    """
    Can `commenter` give commands on this pull request?

    Repo admins and committers can.  With `require_owner`, so can the
    maintainers of the pull request's sig.

    Raises RequestFailed if Gitee can't tell us.
    """
    commenter = commenter.lower()
    permission = client.get_user_permission(org, repo, commenter)
    if permission in COMMANDING_PERMISSIONS:
        return True

    if require_owner:
        sig = sig_name(pr.labels)
        if sig is not None and commenter in sig_maintainers(sig, client):
            return True

    logger.info(f"@{commenter} ({permission}) can't command the bot on {pr.prid}")
    return False
