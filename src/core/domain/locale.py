"""Locale helpers shared by resource matching and configuration.

Locale identifiers follow the `language-REGION` shape (`en-US`, `fr-FR`) or
are a bare language (`en`). Comparisons are always case-insensitive.
"""

from __future__ import annotations


def has_region(locale: str | None) -> bool:
    """True when the locale carries a region part (contains `-`)."""

    return bool(locale) and "-" in locale


def language_of(locale: str | None) -> str | None:
    """Return the language prefix of `locale` (`en` for `en-US`).

    Only locales with a region have a derivable prefix; anything else
    returns None.
    """

    if not has_region(locale):
        return None
    return locale[: locale.index("-")]
