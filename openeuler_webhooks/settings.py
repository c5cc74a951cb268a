"""Settings for how the webhook should behave."""

import os
from typing import Tuple


def read_repo_setting(setting_name: str, default: str) -> Tuple[str, str]:
    """Read an ``ORG/REPO`` setting.

    Returns:
        ("ORG", "REPO")
    """
    org, repo = os.environ.get(setting_name, default).split("/")
    return (org, repo)


GITEE_ACCESS_TOKEN = os.environ.get("GITEE_ACCESS_TOKEN", None)

# The root of the Gitee REST API.
GITEE_API_URL = os.environ.get("GITEE_API_URL", "https://gitee.com/api/v5")

# The login the bot comments as.  Note events from it are ignored.
GITEE_BOT_LOGIN = os.environ.get("GITEE_BOT_LOGIN", "openeuler-ci-bot")

# The YAML file with per-repository bot settings.
BOT_CONFIG_FILE = os.environ.get("BOT_CONFIG_FILE", "bot-config.yaml")

# Where the sig configuration files live.
COMMUNITY_REPO = read_repo_setting("COMMUNITY_REPO", "openeuler/community")
COMMUNITY_BRANCH = os.environ.get("COMMUNITY_BRANCH", "master")
