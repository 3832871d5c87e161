"""Catalog sources: where the raw repository entries come from."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

import yaml

from random_items.catalog.values import DynamicValue, value_from_json

logger = logging.getLogger(__name__)

RawEntry = Sequence[tuple[str, DynamicValue]]


class CatalogLoadError(Exception):
    """The repository file is missing or cannot be parsed."""


class CatalogSource(Protocol):
    def is_loaded(self) -> bool: ...

    def entries(self) -> Mapping[str, RawEntry]: ...


class InMemoryCatalogSource:
    """Catalog backed by an already-decoded mapping."""

    def __init__(
        self,
        entries: Mapping[str, RawEntry] | None = None,
        loaded: bool = True,
    ) -> None:
        self._entries: Mapping[str, RawEntry] = entries or {}
        self.loaded = loaded

    def is_loaded(self) -> bool:
        return self.loaded

    def entries(self) -> Mapping[str, RawEntry]:
        return self._entries


class FileCatalogSource:
    """Catalog read lazily from a JSON or YAML repository file.

    Loading happens on the first ``is_loaded()`` call and is retried on later
    calls until it succeeds, so a file that appears later is picked up.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._entries: dict[str, RawEntry] | None = None

    def is_loaded(self) -> bool:
        if self._entries is None:
            try:
                self._entries = load_catalog_file(self.path)
            except CatalogLoadError as e:
                logger.warning("Catalog not available: %s", e)
                return False
        return True

    def entries(self) -> Mapping[str, RawEntry]:
        if not self.is_loaded():
            return {}
        assert self._entries is not None
        return self._entries


def load_catalog_file(path: str | Path) -> dict[str, RawEntry]:
    """Read a repository file and decode every entry.

    The top level maps repository ids to entries. An entry is either a list
    of ``{"key", "type", "value"}`` objects (field order preserved, ``type``
    optional) or a plain mapping of field name to value.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogLoadError(f"Repository file not found at {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise CatalogLoadError(f"Failed to parse {path}: {e}") from e
    except OSError as e:
        raise CatalogLoadError(f"Failed to read {path}: {e}") from e

    if isinstance(data, list):
        # Array form: each entry carries its own ID_ field
        data = {str(i): entry for i, entry in enumerate(data)}
    if not isinstance(data, dict):
        raise CatalogLoadError(
            f"Expected a mapping of repository ids in {path}, "
            f"got {type(data).__name__}"
        )

    entries: dict[str, RawEntry] = {}
    skipped = 0
    for key, raw in data.items():
        try:
            entries[str(key)] = _decode_entry(raw)
        except (KeyError, TypeError, ValueError) as e:
            skipped += 1
            logger.warning("Skipping invalid repository entry %s: %s", key, e)

    if skipped:
        logger.warning("Skipped %d invalid entries out of %d total", skipped, len(data))

    logger.info("Loaded %d repository entries from %s", len(entries), path)
    return entries


def _decode_entry(raw: Any) -> RawEntry:
    if isinstance(raw, dict):
        return [(str(k), value_from_json(v)) for k, v in raw.items()]
    if isinstance(raw, list):
        return [
            (str(field["key"]), value_from_json(field.get("value"), field.get("type")))
            for field in raw
        ]
    raise TypeError(f"entry must be a list or mapping, got {type(raw).__name__}")
