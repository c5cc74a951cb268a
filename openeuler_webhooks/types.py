"""Types specific to openeuler_webhooks."""

from __future__ import annotations

import dataclasses
from typing import Dict, FrozenSet

# A pull request as described by a JSON object.
PrDict = Dict

# A webhook payload as described by a JSON object.
PayloadDict = Dict


@dataclasses.dataclass(frozen=True)
class PrId:
    """An id of a pull request: the org, the repo name, and a number."""
    org: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"

    def __str__(self):
        return f"{self.full_name}!{self.number}"


@dataclasses.dataclass(frozen=True)
class PullRequest:
    """The parts of a pull request the bot cares about."""
    prid: PrId
    author: str
    state: str
    labels: FrozenSet[str] = frozenset()
    assignees: FrozenSet[str] = frozenset()

    @classmethod
    def from_pr_dict(cls, org: str, repo: str, pr: PrDict) -> PullRequest:
        return cls(
            prid=PrId(org, repo, pr["number"]),
            author=(pr.get("user") or {}).get("login", ""),
            state=pr.get("state", ""),
            labels=frozenset(lbl["name"] for lbl in pr.get("labels") or ()),
            assignees=frozenset(a["login"] for a in pr.get("assignees") or ()),
        )

    def is_open(self) -> bool:
        return self.state == "open"


@dataclasses.dataclass(frozen=True)
class RepoConfig:
    """Per-repository bot settings."""
    # Don't nag authors of new pull requests about missing reviewers.
    unable_checking_reviewer_for_pr: bool = False


@dataclasses.dataclass(frozen=True)
class RepoMergeConfig:
    """The part of a sig repository file that says how to merge."""
    MergeMethod: str = ""
