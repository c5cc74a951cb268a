"""
Get information about repos and pull requests: bot settings, sig files,
merge methods.
"""

import base64
import binascii
import dataclasses
import fnmatch
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import requests
import yaml

from openeuler_webhooks import settings
from openeuler_webhooks.gitee import GiteeClient
from openeuler_webhooks.labels import MERGE_LABEL_SUFFIX, SIG_LABEL_PREFIX
from openeuler_webhooks.types import RepoConfig, RepoMergeConfig
from openeuler_webhooks.utils import RequestFailed, memoize_timed

logger = logging.getLogger(__name__)

DEFAULT_MERGE_METHOD = "merge"

# "flattened/merge" is Gitee's squash merge.
FLATTENED_STRATEGY = "flattened"


@memoize_timed(minutes=15)
def get_bot_config() -> Dict:
    """
    Read the bot settings file.  A missing file means all defaults.

    The file looks like this::

        defaults:
          unable_checking_reviewer_for_pr: false
        repos:
          - name: openeuler/kernel
            unable_checking_reviewer_for_pr: true
          - name: src-openeuler/*
            unable_checking_reviewer_for_pr: true

    """
    path = Path(settings.BOT_CONFIG_FILE)
    if not path.exists():
        logger.warning(f"No bot config file at {path}, using defaults")
        return {}
    return yaml.safe_load(path.read_text()) or {}


def config_for_repo(org: str, repo: str) -> RepoConfig:
    """
    Get the RepoConfig for a repo.

    Every entry whose name pattern matches the repo is applied over the
    defaults, in file order.  A value of the wrong type is logged and
    ignored.
    """
    config = get_bot_config()
    full_name = f"{org}/{repo}"
    values = dict(config.get("defaults") or {})
    for repo_info in config.get("repos") or []:
        if fnmatch.fnmatch(full_name, repo_info["name"]):
            values.update(repo_info)

    kwargs = {}
    for f in dataclasses.fields(RepoConfig):
        if f.name not in values:
            continue
        value = values[f.name]
        if type(value) is not type(f.default):
            logger.warning(f"Ignoring bot config {f.name}={value!r} for {full_name}: not a {type(f.default).__name__}")
            continue
        kwargs[f.name] = value
    return RepoConfig(**kwargs)


def sig_name(labels: Iterable[str]) -> Optional[str]:
    """The sig named by a "sig/xyz" label, or None."""
    for label in sorted(labels):
        if label.startswith(SIG_LABEL_PREFIX):
            return label[len(SIG_LABEL_PREFIX):].split("/")[0]
    return None


def sig_repo_file_path(sig: str, org: str, repo: str) -> str:
    """Where the community repo keeps the file for `org/repo` in `sig`."""
    return f"sig/{sig}/{org}/{repo[0:1]}/{repo}.yaml"


def decode_repo_yaml(content: Dict) -> str:
    """
    Get the merge method from a Gitee content object of a sig repo file.

    Anything wrong with the file gives the default merge method.
    """
    # Gitee wraps the base64 in lines.  Nothing else may be outside the alphabet.
    encoded = (content.get("content") or "").replace("\r", "").replace("\n", "")
    try:
        text = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.error(f"Couldn't decode repo file: {exc}")
        return DEFAULT_MERGE_METHOD

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.error(f"Couldn't parse repo yaml file: {exc}")
        return DEFAULT_MERGE_METHOD

    if not isinstance(data, dict):
        return DEFAULT_MERGE_METHOD

    merge_method = data.get("MergeMethod")
    if merge_method is None:
        return DEFAULT_MERGE_METHOD
    if not isinstance(merge_method, str):
        logger.error(f"Couldn't use MergeMethod {merge_method!r} from repo yaml file: not a string")
        return DEFAULT_MERGE_METHOD

    merge_config = RepoMergeConfig(MergeMethod=merge_method)
    return merge_config.MergeMethod or DEFAULT_MERGE_METHOD


def merge_method_for_pr(
        labels: Iterable[str],
        org: str,
        repo: str,
        client: Optional[GiteeClient] = None,
    ) -> str:
    """
    Decide how a pull request should be merged: "merge", "rebase", "squash".

    A "<strategy>/merge" label wins: "flattened/merge" means "squash", any
    other means its strategy.  Otherwise the sig label leads to the repo's
    file in the community repo, which can name a MergeMethod.

    This never raises: all failures give "merge".
    """
    labels = sorted(labels)
    merge_labels = [lbl for lbl in labels if lbl.endswith(MERGE_LABEL_SUFFIX)]
    if merge_labels:
        if len(merge_labels) > 1:
            logger.warning(f"Several merge labels on {org}/{repo}: {merge_labels}, using {merge_labels[0]!r}")
        strategy = merge_labels[0].split("/")[0]
        if strategy == FLATTENED_STRATEGY:
            return "squash"
        return strategy

    sig = sig_name(labels)
    if sig is None or not repo:
        return DEFAULT_MERGE_METHOD

    file_path = sig_repo_file_path(sig, org, repo)
    community_org, community_repo = settings.COMMUNITY_REPO
    try:
        client = client or GiteeClient()
        content = client.get_path_content(
            community_org, community_repo, file_path, settings.COMMUNITY_BRANCH,
        )
    except (RequestFailed, requests.RequestException) as exc:
        logger.info(f"Couldn't get the sig file for {org}/{repo}: {exc}")
        return DEFAULT_MERGE_METHOD

    return decode_repo_yaml(content)


def sig_maintainers(sig: str, client: GiteeClient) -> List[str]:
    """
    The maintainers listed in a sig's OWNERS file, lower-cased.

    Raises RequestFailed if the file can't be read.
    """
    community_org, community_repo = settings.COMMUNITY_REPO
    content = client.get_path_content(
        community_org, community_repo, f"sig/{sig}/OWNERS", settings.COMMUNITY_BRANCH,
    )
    try:
        owners = yaml.safe_load(base64.b64decode(content["content"]))
    except (binascii.Error, ValueError, yaml.YAMLError) as exc:
        logger.error(f"Couldn't read the OWNERS file of sig {sig}: {exc}")
        return []
    if not isinstance(owners, dict):
        return []
    return [str(m).lower() for m in owners.get("maintainers") or []]
