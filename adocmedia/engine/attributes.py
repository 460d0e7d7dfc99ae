"""
Document attribute definitions and placeholder substitution.

An attribute definition is a line of the form::

    :name: value
    :name.qualifier: value

Locators may reference definitions as ``{name}``. The table is rebuilt from
the whole document on each request; nothing is cached between calls.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, Mapping, Tuple

from .domain import AttributeTable

LOGGER = logging.getLogger(__name__)

_DEFINITION_RE = re.compile(
    r"^:(?P<key>[A-Za-z0-9][A-Za-z0-9_]*(?:\.[A-Za-z0-9_]+)?):[ \t]+(?P<value>.*)$",
    re.MULTILINE,
)

_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")


def iter_attribute_definitions(text: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, value)`` for each definition line in document order."""
    for m in _DEFINITION_RE.finditer(text or ""):
        yield m.group("key"), m.group("value").rstrip("\r")


def build_attribute_table(text: str) -> AttributeTable:
    table: Dict[str, str] = {}
    for key, value in iter_attribute_definitions(text):
        # later definitions overwrite earlier ones
        table[key] = value
    LOGGER.debug("Built attribute table with %d entries", len(table))
    return table


def resolve_locator(locator: str, table: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders from ``table``.

    Unknown placeholders are kept verbatim and substituted values are not
    expanded again.
    """
    if "{" not in locator:
        return locator

    def _sub(m: "re.Match[str]") -> str:
        value = table.get(m.group(1))
        return m.group(0) if value is None else value

    return _PLACEHOLDER_RE.sub(_sub, locator)
