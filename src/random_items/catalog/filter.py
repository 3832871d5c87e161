"""Catalog filter pipeline: decode raw entries and admit them into a pool."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from random_items.catalog.categories import match_category, normalize_category
from random_items.catalog.source import RawEntry
from random_items.catalog.values import DynamicValue, decode_value
from random_items.config import FilterConfig
from random_items.core.pool import AdmittedItem, SamplingPool

logger = logging.getLogger(__name__)

ID_FIELD = "ID_"
TITLE_FIELD = "Title"
CATEGORY_FIELD = "InventoryCategoryIcon"
# Suits can never be handed out, whatever the value of the flag
EXCLUDED_CLASS_FIELD = "IsHitmanSuit"


@dataclass(frozen=True)
class FilterSnapshot:
    """Immutable view of FilterConfig taken at the start of a rebuild."""

    enabled_categories: frozenset[str]
    include_titleless: bool

    @classmethod
    def from_config(cls, config: FilterConfig) -> "FilterSnapshot":
        return cls(
            enabled_categories=frozenset(
                normalize_category(cat) for cat in config.enabled_categories()
            ),
            include_titleless=config.include_titleless,
        )


def admit_entry(
    key: str,
    entry: RawEntry,
    snapshot: FilterSnapshot,
) -> AdmittedItem | None:
    """Apply the inclusion rules to one entry.

    Fields are collected first and evaluated afterwards, so the result does
    not depend on the order the catalog lists them in. Returns None when the
    entry is rejected.
    """
    fields: dict[str, DynamicValue] = {}
    for name, value in entry:
        if name == EXCLUDED_CLASS_FIELD:
            logger.debug("Rejecting %s: excluded class", key)
            return None
        fields[name] = value

    identifier = decode_value(fields[ID_FIELD]) if ID_FIELD in fields else key

    title = ""
    has_title = TITLE_FIELD in fields
    if has_title:
        title = decode_value(fields[TITLE_FIELD])
        if not title and not snapshot.include_titleless:
            logger.debug("Rejecting %s: empty title", key)
            return None
    elif not snapshot.include_titleless:
        logger.debug("Rejecting %s: no title", key)
        return None

    if CATEGORY_FIELD in fields:
        category = normalize_category(decode_value(fields[CATEGORY_FIELD]))
        if not match_category(category, snapshot.enabled_categories):
            logger.debug("Rejecting %s: category %s not enabled", key, category)
            return None

    return AdmittedItem(title=title, identifier=identifier)


def filter_catalog(
    entries: Mapping[str, RawEntry],
    snapshot: FilterSnapshot,
) -> SamplingPool:
    """Scan every catalog entry and return a freshly built pool."""
    admitted: list[AdmittedItem] = []
    for key, entry in entries.items():
        item = admit_entry(key, entry, snapshot)
        if item is not None:
            admitted.append(item)

    logger.info(
        "Admitted %d of %d repository entries (%d categories enabled)",
        len(admitted),
        len(entries),
        len(snapshot.enabled_categories),
    )
    return SamplingPool(admitted)
