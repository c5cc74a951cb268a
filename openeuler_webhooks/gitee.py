"""
The Gitee REST calls the bot makes.

Every method raises RequestFailed if Gitee doesn't accept the request.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable
from urllib.parse import quote

from openeuler_webhooks.auth import get_gitee_session
from openeuler_webhooks.utils import RequestFailed, log_check_response, text_summary

logger = logging.getLogger(__name__)


class ContentNotFound(RequestFailed):
    """A file asked for with get_path_content doesn't exist."""


def _label_path(labels: Iterable[str]) -> str:
    # Gitee removes several labels at once when given a comma-joined list.
    return ",".join(quote(lbl, safe="") for lbl in labels)


class GiteeClient:
    """
    Add and remove labels, comment, and read files.

    A session is made per client, so make a client per event.
    """

    def __init__(self, session=None):
        self.session = session or get_gitee_session()

    def _pr_url(self, org: str, repo: str, number: int) -> str:
        return f"/repos/{org}/{repo}/pulls/{number}"

    def add_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        url = self._pr_url(org, repo, number) + "/labels"
        logger.info(f"Adding label {label!r} to {org}/{repo}!{number}")
        resp = self.session.post(url, json=[label])
        log_check_response(resp)

    def remove_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.remove_pr_labels(org, repo, number, [label])

    def remove_pr_labels(self, org: str, repo: str, number: int, labels: Iterable[str]) -> None:
        """
        Remove labels from a pull request in one request.

        Removing a label that isn't there is not an error.
        """
        labels = list(labels)
        url = self._pr_url(org, repo, number) + "/labels/" + _label_path(labels)
        logger.info(f"Removing labels {labels} from {org}/{repo}!{number}")
        resp = self.session.delete(url)
        if resp.status_code == 404:
            logger.info(f"Labels {labels} were already gone from {org}/{repo}!{number}")
            return
        log_check_response(resp)

    def create_pr_comment(self, org: str, repo: str, number: int, body: str) -> None:
        url = self._pr_url(org, repo, number) + "/comments"
        logger.info(f"Commenting on PR {org}/{repo}!{number}: {text_summary(body, 90)!r}")
        resp = self.session.post(url, json={"body": body})
        log_check_response(resp)

    def get_path_content(self, org: str, repo: str, path: str, ref: str) -> Dict:
        """
        Get a file from a repo.

        Returns:
            The Gitee content object. Its "content" is the base64 of the file.
        """
        url = f"/repos/{org}/{repo}/contents/{quote(path)}"
        resp = self.session.get(url, params={"ref": ref})
        log_check_response(resp)
        content = resp.json()
        # Gitee answers a missing path with an empty list, not a 404.
        if not isinstance(content, dict) or "content" not in content:
            raise ContentNotFound(f"No file {path!r} in {org}/{repo} at {ref}", status_code=404)
        return content

    def get_user_permission(self, org: str, repo: str, login: str) -> str:
        """
        Get the permission `login` has on a repo: "admin", "write", "read",
        or "none" if they aren't a collaborator.
        """
        url = f"/repos/{org}/{repo}/collaborators/{quote(login)}/permission"
        resp = self.session.get(url)
        if resp.status_code == 404:
            return "none"
        log_check_response(resp)
        return resp.json().get("permission", "none")

    def get_pull_request(self, org: str, repo: str, number: int) -> Dict:
        resp = self.session.get(self._pr_url(org, repo, number))
        log_check_response(resp)
        return resp.json()
