"""
Generic utilities.
"""

import base64
import hmac
import os
import time
from functools import wraps
from hashlib import sha256

import cachetools.func
from flask import jsonify, request, Response, url_for

from openeuler_webhooks import logger


def _check_auth(username, password):
    """
    Checks if a username / password combination is valid.
    """
    return (
        username == os.environ.get('HTTP_BASIC_AUTH_USERNAME') and
        password == os.environ.get('HTTP_BASIC_AUTH_PASSWORD')
    )

def _authenticate():
    """
    Sends a 401 response that enables basic auth
    """
    return Response(
        'Could not verify your access level for that URL.\n'
        'You have to login with proper credentials', 401,
        {'WWW-Authenticate': 'Basic realm="Login Required"'}
    )

def requires_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not _check_auth(auth.username, auth.password):
            return _authenticate()
        return f(*args, **kwargs)
    return decorated


class RequestFailed(Exception):
    """An HTTP request to Gitee didn't succeed."""

    def __init__(self, msg, status_code=None):
        super().__init__(msg)
        self.status_code = status_code


def log_check_response(response, raise_for_status=True):
    """
    Logs HTTP request and response at debug level and checks if it succeeded.

    Arguments:
        response (requests.Response)
        raise_for_status (bool): if True, call raise_for_status on the response
            also.
    """
    msg = "Request: {0.method} {0.url}: {0.body!r}".format(response.request)
    logger.debug(msg)
    msg = "Response: {0.status_code} {0.reason!r} for {0.url}: {0.content!r}".format(response)
    logger.debug(msg)
    if raise_for_status:
        try:
            response.raise_for_status()
        except Exception as exc:
            req = response.request
            raise RequestFailed(
                f"HTTP request failed: {req.method} {req.url}. Response body: {response.content}",
                status_code=response.status_code,
            ) from exc


def gitee_signature(secret: str, timestamp: str) -> str:
    """
    Compute the signature Gitee sends in X-Gitee-Token for signed webhooks.

    It's the base64 of an HMAC-SHA256 over "{timestamp}\\n{secret}", keyed
    with the secret.
    """
    string_to_sign = f"{timestamp}\n{secret}"
    mac = hmac.new(secret.encode(), msg=string_to_sign.encode(), digestmod=sha256)
    return base64.b64encode(mac.digest()).decode()


def is_valid_payload(secret: str, token: str, timestamp: str | None = None) -> bool:
    """
    Ensure a webhook delivery really came from Gitee.

    Gitee hooks are configured either with a plain password, sent as-is in
    X-Gitee-Token, or with a signing key, in which case X-Gitee-Token is a
    signature of X-Gitee-Timestamp.

    Arguments:
        secret (str): The shared secret
        token (str): The X-Gitee-Token header
        timestamp (str): The X-Gitee-Timestamp header, if any

    Returns:
        bool: Is the delivery legit?
    """
    if not secret or not token:
        return False
    if hmac.compare_digest(secret.encode(), token.encode()):
        return True
    if timestamp:
        expected = gitee_signature(secret, timestamp)
        return hmac.compare_digest(expected.encode(), token.encode())
    return False


def text_summary(text, length=40):
    """
    Make a summary of `text`, at most `length` chars long.

    The middle will be elided if needed.
    """
    if len(text) <= length:
        return text
    else:
        start = (length - 3) // 2
        end = length - 3 - start
        return text[:start] + "..." + text[-end:]


# All the memoized functions, so that `clear_memoized_values` can clear them.
_memoized_functions = []

def memoize_timed(minutes):
    """Cache the value of a function for `minutes` minutes."""
    def _timed(func):
        # time.time in a wrapper so that freezegun can patch it.
        def patchable_timer():
            return time.time()
        func = cachetools.func.ttl_cache(ttl=60 * minutes, timer=patchable_timer)(func)
        _memoized_functions.append(func)
        return func
    return _timed

def clear_memoized_values():
    """Clear all the values saved by @memoize_timed, to ensure isolated tests."""
    for func in _memoized_functions:
        func.cache_clear()


def minimal_wsgi_environ():
    values = {
        "HTTP_HOST", "SERVER_NAME", "SERVER_PORT", "REQUEST_METHOD",
        "SCRIPT_NAME", "PATH_INFO", "QUERY_STRING", "wsgi.url_scheme",
    }
    return {key: value for key, value in request.environ.items()
            if key in values}


def queue_task(task, *args, **kwargs):
    """
    Queue a task to run in the background via Celery.

    Returns the HTTP response to return from a view.
    """
    result = task.delay(*args, wsgi_environ=minimal_wsgi_environ(), **kwargs)
    status_url = url_for("tasks.status", task_id=result.id, _external=True)
    logger.info(f"Job status URL: {status_url}")
    resp = jsonify({"message": "queued", "status_url": status_url})
    resp.status_code = 202
    resp.headers["Location"] = status_url
    return resp


def sentry_extra_context(data_dict):
    """Apply the keys and values from data_dict to the Sentry extra context."""
    import sentry_sdk
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
