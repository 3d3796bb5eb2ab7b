from __future__ import annotations
import gettext
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DOMAIN = 'reboot-to'
LOCALE_DIR = Path(__file__).parent / 'locale'

translations: gettext.NullTranslations = gettext.NullTranslations()


def set_language(language: Optional[str] = None) -> bool:
    """Load the catalog for `language` (or the system locale when None).

    Returns False and falls back to the English source strings when no
    catalog is installed.
    """
    global translations

    languages = [language] if language else None
    try:
        translations = gettext.translation(DOMAIN, localedir=str(LOCALE_DIR), languages=languages)
        return True
    except OSError as e:
        if language and language != 'en':
            logger.warning('No translation for %r: %r', language, e)
        translations = gettext.NullTranslations()
        return False


def _(message: str) -> str:
    return translations.gettext(message)
