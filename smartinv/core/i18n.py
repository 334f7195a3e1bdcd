"""
Message catalogs for locale-resolved labels.

Catalogs live in `smartinv/config/messages.toml`, one table per locale, mapping
the English source string to its translation:

    [es]
    "Details" = "Detalles"

Missing locales or messages fall back to the source string.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

MESSAGES_FILE = Path(__file__).parent.parent / "config" / "messages.toml"

DEFAULT_LOCALE = "en"

Translator = Callable[[str], str]


class MessageCatalog:
    """All loaded translations, keyed by locale."""

    def __init__(self, catalogs: dict[str, dict[str, str]] | None = None) -> None:
        self._catalogs: dict[str, dict[str, str]] = {
            locale.lower(): dict(messages) for locale, messages in (catalogs or {}).items()
        }

    @classmethod
    def load(cls, path: Path | None = None) -> MessageCatalog:
        """Load catalogs from a TOML file."""
        if path is None:
            path = MESSAGES_FILE

        logger.debug("Loading message catalogs from %s", path)

        with path.open("rb") as f:
            data = tomllib.load(f)

        catalogs = {
            locale: {str(k): str(v) for k, v in messages.items()}
            for locale, messages in data.items()
            if isinstance(messages, dict)
        }
        return cls(catalogs)

    @property
    def locales(self) -> list[str]:
        return sorted(self._catalogs)

    def translator(self, locale: str | None) -> Translator:
        """Return a translate function for a locale (identity if unknown)."""
        messages = self._catalogs.get((locale or DEFAULT_LOCALE).lower(), {})

        def translate(message: str) -> str:
            return messages.get(message, message)

        return translate


def negotiate_locale(
    accept_language: str | None,
    available: list[str],
    default: str = DEFAULT_LOCALE,
) -> str:
    """
    Pick the best available locale from an Accept-Language header.

    Quality values are honoured; a regional tag (`fr-CA`) matches its base
    language (`fr`) when the region itself is not available.
    """
    if not accept_language:
        return default

    candidates: list[tuple[float, int, str]] = []
    for position, part in enumerate(accept_language.split(",")):
        pieces = part.strip().split(";")
        tag = pieces[0].strip().lower()
        if not tag or tag == "*":
            continue
        quality = 1.0
        for param in pieces[1:]:
            key, _, value = param.strip().partition("=")
            if key == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality > 0:
            candidates.append((-quality, position, tag))

    lowered = {locale.lower(): locale for locale in available}
    for _, _, tag in sorted(candidates):
        if tag in lowered:
            return lowered[tag]
        base = tag.split("-")[0]
        if base in lowered:
            return lowered[base]

    return default


# Global singleton instance (lazy loaded)
_catalog: MessageCatalog | None = None


def get_catalog() -> MessageCatalog:
    """Get the global message catalog (lazy loaded singleton)."""
    global _catalog

    if _catalog is None:
        _catalog = MessageCatalog.load()

    return _catalog


def get_translator(locale: str | None) -> Translator:
    """Shortcut for `get_catalog().translator(locale)`."""
    return get_catalog().translator(locale)
