from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


DEFAULT_TIMEOUT_S = 30


@dataclass(frozen=True)
class DataSource:
    name: str
    id_prefix: str
    output_dir: str


DATA_SOURCES: Dict[str, DataSource] = {
    "main": DataSource(name="Main Team", id_prefix="Ponce-", output_dir="data"),
    "discord": DataSource(name="Discord Team", id_prefix="Nales-", output_dir="data/discord"),
}


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool
    base_dir: Path


@dataclass(frozen=True)
class DataConfig:
    data_url: Optional[str]
    data_file: Optional[Path]
    roster_file: Optional[Path]


def cache_config_from_env() -> CacheConfig:
    enabled = os.environ.get("LYCANS_CACHE", "0").lower() in {"1", "true", "yes"}
    base_dir = Path(os.environ.get("LYCANS_CACHE_DIR", ".cache/lycans"))
    return CacheConfig(enabled=enabled, base_dir=base_dir)


def data_config_from_env() -> DataConfig:
    data_file = os.environ.get("LYCANS_DATA_FILE")
    roster_file = os.environ.get("LYCANS_ROSTER_FILE")
    return DataConfig(
        data_url=os.environ.get("LYCANS_DATA_URL") or None,
        data_file=Path(data_file) if data_file else None,
        roster_file=Path(roster_file) if roster_file else None,
    )
