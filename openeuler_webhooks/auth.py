"""
Create authenticated sessions for access to Gitee.
"""

import requests
from urlobject import URLObject

from openeuler_webhooks import settings


class BaseUrlSession(requests.Session):
    """
    A requests Session class that applies a base URL to the requested URL.

    Relative paths are joined onto the base URL's path, so "/user" against
    "https://gitee.com/api/v5" requests "https://gitee.com/api/v5/user".
    """
    def __init__(self, base_url):
        super().__init__()
        self.base_url = URLObject(base_url)

    def request(self, method, url, data=None, headers=None, **kwargs):
        if not URLObject(url).scheme:
            url = self.base_url.rstrip("/") + "/" + url.lstrip("/")
        return super().request(
            method=method,
            url=url,
            data=data,
            headers=headers,
            **kwargs
        )


def get_gitee_session():
    """
    Get the Gitee session to use, in an easily test-patchable way.
    """
    session = BaseUrlSession(base_url=settings.GITEE_API_URL)
    session.headers["Authorization"] = f"Bearer {settings.GITEE_ACCESS_TOKEN}"
    session.trust_env = False   # prevent reading the local .netrc
    return session
