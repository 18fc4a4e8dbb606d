from __future__ import annotations
import logging
import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional


def default_steam_path() -> Path:
    """Default Steam install location for the running platform."""
    if sys.platform.startswith("win"):
        pf86 = os.environ.get("PROGRAMFILES(X86)") or r"C:\Program Files (x86)"
        return Path(pf86) / "Steam"
    if sys.platform.startswith("linux"):
        return Path.home() / ".steam" / "root"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Steam"
    raise RuntimeError(f"Unsupported platform: {sys.platform}")


@dataclass(frozen=True)
class Config:
    # Paths
    STEAM_PATH: Optional[Path] = None
    APPCACHE_DIR: str = "appcache"
    APPINFO_FILE: str = "appinfo.vdf"

    # Library cache folders (under appcache/)
    LIBRARY_CACHE: str = "librarycache"
    LIBRARY_CACHE_BACKUP: str = "librarycache_backup"
    LIBRARY_CACHE_STAGING: str = "librarycache_staging"

    # Image types and extensions
    IMAGE_TYPE_HEADER: str = "header"
    IMAGE_TYPE_LOGO: str = "logo"
    IMAGE_TYPE_HERO: str = "library_hero"
    HEADER_EXT: str = "jpg"
    HERO_EXT: str = "jpg"
    LOGO_EXT: str = "png"

    # Banner layout
    RATIO: float = 460 / 215
    SAFE_WIDTH_PERC: float = 0.9
    EDGE_MARGIN_PERC: float = 0.05
    LOGO_PCT_MIN: float = 0.33
    LOGO_PCT_MAX: float = 0.5

    # Container limits
    MAX_RECORD_BYTES: int = 64 * 1024 * 1024

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" | "json"

    @property
    def steam_path(self) -> Path:
        return self.STEAM_PATH if self.STEAM_PATH is not None else default_steam_path()

    @classmethod
    def from_env(cls, steam_path: Optional[str] = None) -> "Config":
        """Build a Config; the explicit steam_path beats BANNERGEN_STEAM_PATH."""
        cfg = cls()
        overrides = {}
        if env_log := os.environ.get("BANNERGEN_LOG_LEVEL"):
            overrides["LOG_LEVEL"] = env_log
        if env_fmt := os.environ.get("BANNERGEN_LOG_FORMAT"):
            overrides["LOG_FORMAT"] = env_fmt
        if steam_path:
            overrides["STEAM_PATH"] = Path(steam_path)
        elif env_steam := os.environ.get("BANNERGEN_STEAM_PATH"):
            overrides["STEAM_PATH"] = Path(env_steam)
        return replace(cfg, **overrides) if overrides else cfg


def setup_logging(cfg: Config) -> None:
    """Configure root logging from the config."""
    log_level = getattr(logging, cfg.LOG_LEVEL.upper(), logging.INFO)

    if cfg.LOG_FORMAT == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
