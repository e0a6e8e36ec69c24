"""Language helpers: detection through the backend and RTL display hints."""

import logging

import requests

from .api_client import SharaiClient
from .errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
RTL_LANGUAGES = {"ar", "fa", "he", "ur"}


def detect_language(client: SharaiClient, text: str) -> str:
    """
    Detect the language of ``text`` using the backend.

    Returns:
        A language code such as 'en', 'ar', 'ur' or 'fr'. Falls back to
        English when detection fails or returns nothing.
    """
    try:
        language = client.detect_language(text)
    except (ApiError, requests.RequestException) as e:
        logger.error("Error detecting language: %s", e)
        return DEFAULT_LANGUAGE
    return language or DEFAULT_LANGUAGE


def is_rtl(language_code: str) -> bool:
    return language_code in RTL_LANGUAGES


def get_font_family(language_code: str, is_heading: bool = False) -> str:
    """Font stack for text in the given language."""
    if is_rtl(language_code):
        return "Amiri, serif" if is_heading else "Noto Sans Arabic, sans-serif"
    return "Raleway, sans-serif" if is_heading else "Inter, sans-serif"
