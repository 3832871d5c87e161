"""Configuration loading: YAML file + CLI overrides, validated with pydantic."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from random_items.catalog.categories import ALL_CATEGORIES


def _all_enabled() -> dict[str, bool]:
    return {cat: True for cat in ALL_CATEGORIES}


class FilterConfig(BaseModel):
    categories: dict[str, bool] = Field(default_factory=_all_enabled)
    include_titleless: bool = False

    @field_validator("categories", mode="before")
    @classmethod
    def fill_known_categories(cls, value: Any) -> dict[str, bool]:
        if value is None:
            return _all_enabled()
        if not isinstance(value, dict):
            raise ValueError("categories must be a mapping of name to enabled flag")
        merged = _all_enabled()
        for name, enabled in value.items():
            key = str(name).lower()
            if key not in merged:
                raise ValueError(
                    f"Unknown category {name!r}; expected one of {ALL_CATEGORIES}"
                )
            merged[key] = enabled
        return merged

    def enabled_categories(self) -> list[str]:
        return [cat for cat, enabled in self.categories.items() if enabled]

    def set_category(self, name: str, enabled: bool) -> None:
        key = name.lower()
        if key not in self.categories:
            raise KeyError(f"Unknown category {name!r}")
        self.categories[key] = enabled


class TriggerConfig(BaseModel):
    interval_seconds: float = Field(default=2.0, gt=0.0)
    spawn_in_world: bool = True
    tick_seconds: float = Field(default=1 / 30, gt=0.0)
    seed: int | None = None


class CatalogConfig(BaseModel):
    path: str = "repository/pro.repo.json"


class DispatchConfig(BaseModel):
    mode: str = Field(default="log", pattern="^(log|webhook)$")
    webhook_url: str = ""
    api_key: str = ""
    timeout: float = Field(default=10.0, gt=0.0)

    @model_validator(mode="after")
    def webhook_needs_url(self) -> "DispatchConfig":
        if self.mode == "webhook" and not self.webhook_url:
            raise ValueError("dispatch.webhook_url is required when mode is 'webhook'")
        return self


class AppConfig(BaseModel):
    filter: FilterConfig = FilterConfig()
    trigger: TriggerConfig = TriggerConfig()
    catalog: CatalogConfig = CatalogConfig()
    dispatch: DispatchConfig = DispatchConfig()


def load_config(
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load config from YAML file, then apply CLI overrides."""
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

    if cli_overrides:
        _deep_merge(data, cli_overrides)

    return AppConfig(**data)


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override dict into base dict recursively (in-place)."""
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
