"""Internationalization support using Python's gettext.

This module provides the translation function ``_()`` used for every
user-facing label (status names, tracked field names, fallback names for
entities that cannot be resolved). Call :func:`setup_i18n` once at startup
with the configured language code before any translated strings are accessed.

The source strings (msgid) are in English and only English is bundled: the
package ships no catalogue. A deployment may add one as
``locales/<lang>/LC_MESSAGES/assignment_transfer.mo`` next to this module;
until then every language falls back to the English source strings, and the
fallback is logged once per setup.
"""

import gettext
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DOMAIN = "assignment_transfer"
SOURCE_LANGUAGE = "en"
LOCALE_DIR = Path(__file__).parent / "locales"

_translation: gettext.NullTranslations = gettext.NullTranslations()


def setup_i18n(language: str) -> None:
    """Install the catalogue of a language, or the English source strings.

    Args:
        language: ISO 639-1 language code (e.g. ``"en"``, ``"ru"``).
    """
    global _translation  # noqa: PLW0603  # pylint: disable=global-statement
    try:
        _translation = gettext.translation(
            DOMAIN, localedir=LOCALE_DIR, languages=[language]
        )
    except FileNotFoundError:
        if language != SOURCE_LANGUAGE:
            logger.info(
                "No %r catalogue in %s, labels stay in English", language, LOCALE_DIR
            )
        _translation = gettext.NullTranslations()


def _(message: str) -> str:
    """Return the translated string for *message*."""
    return _translation.gettext(message)
