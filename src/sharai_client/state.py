"""Application State

Admin session and display theme held in one object that is created at
process start and passed to the handlers that change it.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

import requests

from .api_client import SharaiClient
from .config import Settings
from .errors import ApiError

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]
DEFAULT_THEME: Theme = "dark"


@dataclass
class AdminSession:
    is_authenticated: bool = False
    is_loading: bool = False
    username: Optional[str] = None


@dataclass
class AppState:
    admin: AdminSession = field(default_factory=AdminSession)
    theme: Theme = DEFAULT_THEME


def init_state(settings: Optional[Settings] = None) -> AppState:
    """Create the process-wide state; a configured light/dark theme wins."""
    theme: Theme = DEFAULT_THEME
    if settings is not None and settings.theme in ("light", "dark"):
        theme = settings.theme
    return AppState(theme=theme)


def login(state: AppState, client: SharaiClient, username: str, password: str) -> None:
    """
    Log the admin in.

    Raises:
        ApiError: If the backend rejects the credentials
    """
    state.admin.is_loading = True
    try:
        client.login(username, password)
    except ApiError:
        logger.error("Login failed: invalid username or password")
        raise
    finally:
        state.admin.is_loading = False

    state.admin.is_authenticated = True
    state.admin.username = username
    logger.info("Logged in successfully as %s", username)


def logout(state: AppState, client: SharaiClient) -> bool:
    """Log the admin out. On failure the session is left as it was.

    Returns:
        True if the backend confirmed the logout
    """
    state.admin.is_loading = True
    try:
        client.logout()
    except (ApiError, requests.RequestException) as e:
        logger.error("Failed to logout: %s", e)
        return False
    finally:
        state.admin.is_loading = False

    state.admin.is_authenticated = False
    state.admin.username = None
    logger.info("Logged out")
    return True


def toggle_theme(state: AppState) -> Theme:
    state.theme = "light" if state.theme == "dark" else "dark"
    return state.theme
