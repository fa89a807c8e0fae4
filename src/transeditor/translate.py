"""Pluggable auto-translate hooks.

No translation engine ships with the editor.  A translator is any
callable taking the source-language text and returning the translated
text; register one under a name and select it in the settings file
(``"translator": "<name>"``) to enable the grid's Auto Translate action.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from transeditor.errors import TranslationError
from transeditor.models import TranslationRecord

log = logging.getLogger(__name__)

Translator = Callable[[str], str]

_registry: dict[str, Translator] = {}


def register_translator(name: str, func: Translator) -> None:
    """Register *func* under *name*, replacing any previous hook."""
    if not name:
        raise ValueError("Translator name must not be empty")
    _registry[name] = func
    log.debug("Registered translator %r", name)


def unregister_translator(name: str) -> None:
    _registry.pop(name, None)


def available_translators() -> list[str]:
    return sorted(_registry)


def get_translator(name: str) -> Translator:
    """Return the translator registered as *name*.

    Raises:
        KeyError: If nothing is registered under that name.
    """
    try:
        return _registry[name]
    except KeyError:
        raise KeyError(f"No translator registered as {name!r}") from None


def auto_translate(record: TranslationRecord, translator: Translator) -> str:
    """Translate the record's source text and return the result.

    The record itself is not modified; the caller applies the text as a
    regular edit so it can be undone.
    """
    try:
        result = translator(record.source_value)
    except Exception as exc:
        raise TranslationError(
            f"Auto translate failed for {record.page_name}/{record.resource_name}: {exc}"
        ) from exc
    if not isinstance(result, str):
        raise TranslationError(
            f"Translator returned {type(result).__name__}, expected str"
        )
    return result
