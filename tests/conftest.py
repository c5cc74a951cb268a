"""Automatically run by pytest to set up test infrastructure."""

import pytest
import requests_mock

import openeuler_webhooks
import openeuler_webhooks.utils

from . import settings as test_settings
from .fake_gitee import FakeGitee


@pytest.fixture
def requests_mocker():
    """Make requests_mock available as a fixture."""
    mocker = requests_mock.Mocker(real_http=False, case_sensitive=True)
    mocker.start()
    try:
        yield mocker
    finally:
        mocker.stop()


@pytest.fixture(autouse=True)
def settings_for_tests(mocker, tmp_path):
    for name, value in vars(test_settings).items():
        if name.isupper():
            mocker.patch(f"openeuler_webhooks.settings.{name}", value)
    # No bot config file unless a test writes one.
    mocker.patch("openeuler_webhooks.settings.BOT_CONFIG_FILE", str(tmp_path / "bot-config.yaml"))


@pytest.fixture
def bot_config_file(tmp_path):
    """A function to write the bot config file."""
    def _write(text):
        (tmp_path / "bot-config.yaml").write_text(text)
    return _write


@pytest.fixture
def fake_gitee(requests_mocker):
    the_fake_gitee = FakeGitee(login=test_settings.GITEE_BOT_LOGIN)
    the_fake_gitee.install_mocks(requests_mocker)
    return the_fake_gitee


@pytest.fixture(autouse=True)
def configure_flask_app():
    """
    Needed to make the app understand it's running under HTTPS, and have Flask
    initialized properly.
    """
    app = openeuler_webhooks.create_app(config="testing")
    with app.test_request_context('/', base_url="https://openeuler-webhooks.example.com"):
        yield app


@pytest.fixture(autouse=True)
def reset_all_memoized_functions():
    """Clears the values cached by @memoize_timed before each test. Applied automatically."""
    openeuler_webhooks.utils.clear_memoized_values()
