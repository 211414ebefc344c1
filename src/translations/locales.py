"""Locale codes accepted in the strings catalog.

Locale codes compare case-insensitively everywhere (``en-us`` == ``en-US``);
translation keys do not.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from .errors import InvalidLocaleError

__all__ = [
    "KNOWN_LOCALES",
    "primary_first_key",
    "valid_locales",
    "validate_locales",
    "locale_value",
]

KNOWN_LOCALES: Tuple[str, ...] = (
    "da", "de", "en-GB", "en-US", "es-ES", "fr", "hr", "it", "lt", "hu", "nl", "no",
    "pl", "pt-BR", "ro", "fi", "sv-SE", "vi", "tr", "cs", "el", "bg", "ru", "uk",
    "hi", "th", "zh-CN", "ja", "zh-TW", "ko",
)  # fmt: skip


def primary_first_key(primary: str) -> Callable[[str], Tuple[int, str]]:
    """Sort key placing ``primary`` first, the rest in ordinal order."""
    folded = primary.casefold()
    return lambda locale: (0 if locale.casefold() == folded else 1, locale)


def valid_locales(
    primary: str = "en-US", extra: Iterable[str] = (), *, include_known: bool = True
) -> List[str]:
    """Locale codes, de-duplicated case-insensitively, primary first.

    ``extra`` is added to the built-in list, or replaces it when
    ``include_known`` is False. The primary locale is always included.
    """
    known = KNOWN_LOCALES if include_known else ()
    seen = set()
    out: List[str] = []
    for code in (*known, *extra, primary):
        if not code or not code.strip():
            continue
        folded = code.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        out.append(code)
    first = primary.casefold()
    out.sort(key=lambda c: (0 if c.casefold() == first else 1, c.casefold()))
    return out


def validate_locales(
    translations: Optional[Mapping[str, str]],
    allowed: Iterable[str],
    primary: str = "en-US",
) -> None:
    """Raise ``InvalidLocaleError`` unless ``translations`` is acceptable.

    ``None`` is accepted (treated as an empty map by the store). Otherwise the
    primary locale must be present and every locale must be allowed.
    """
    if translations is None:
        return
    if locale_value(translations, primary) is None:
        raise InvalidLocaleError(
            f"Primary locale {primary} is required.", context={"locale": primary}
        )
    allowed_set = {a.casefold() for a in allowed}
    for locale in translations:
        if locale.casefold() not in allowed_set:
            raise InvalidLocaleError(f"Invalid locale: {locale}", context={"locale": locale})


def locale_value(translations: Mapping[str, str], locale: str) -> Optional[str]:
    """Case-insensitive lookup of ``locale`` in a locale -> text map."""
    if locale in translations:
        return translations[locale]
    folded = locale.casefold()
    for code, text in translations.items():
        if code.casefold() == folded:
            return text
    return None
