import pytest
import requests

from src.sharai_client import state as state_mod
from src.sharai_client.config import Settings
from src.sharai_client.errors import ApiError


class FakeAuthClient:
    def __init__(self, login_error=None, logout_error=None):
        self.login_error = login_error
        self.logout_error = logout_error
        self.calls = []

    def login(self, username, password):
        self.calls.append(("login", username))
        if self.login_error is not None:
            raise self.login_error

    def logout(self):
        self.calls.append(("logout",))
        if self.logout_error is not None:
            raise self.logout_error


def test_init_state_defaults_to_dark_theme():
    app_state = state_mod.init_state()

    assert app_state.theme == "dark"
    assert app_state.admin.is_authenticated is False


@pytest.mark.parametrize("theme, expected", [("light", "light"), ("dark", "dark"), ("blue", "dark"), (None, "dark")])
def test_init_state_uses_configured_theme(theme, expected):
    assert state_mod.init_state(Settings(theme=theme)).theme == expected


def test_toggle_theme():
    app_state = state_mod.init_state()

    assert state_mod.toggle_theme(app_state) == "light"
    assert state_mod.toggle_theme(app_state) == "dark"


def test_login_success_marks_authenticated():
    app_state = state_mod.init_state()

    state_mod.login(app_state, FakeAuthClient(), "admin", "secret")

    assert app_state.admin.is_authenticated is True
    assert app_state.admin.username == "admin"
    assert app_state.admin.is_loading is False


def test_login_failure_reraises_and_stays_logged_out():
    app_state = state_mod.init_state()
    client = FakeAuthClient(login_error=ApiError(401, "Invalid credentials"))

    with pytest.raises(ApiError):
        state_mod.login(app_state, client, "admin", "wrong")

    assert app_state.admin.is_authenticated is False
    assert app_state.admin.is_loading is False


def test_logout_clears_session():
    app_state = state_mod.init_state()
    client = FakeAuthClient()
    state_mod.login(app_state, client, "admin", "secret")

    assert state_mod.logout(app_state, client) is True
    assert app_state.admin.is_authenticated is False
    assert app_state.admin.username is None


def test_logout_failure_keeps_session():
    app_state = state_mod.init_state()
    client = FakeAuthClient(logout_error=requests.ConnectionError("down"))
    state_mod.login(app_state, client, "admin", "secret")

    assert state_mod.logout(app_state, client) is False
    assert app_state.admin.is_authenticated is True
    assert app_state.admin.is_loading is False
