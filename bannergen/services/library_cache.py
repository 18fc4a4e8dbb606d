from __future__ import annotations
import logging
import os
import shutil
from pathlib import Path
from typing import Optional

import numpy as np

from bannergen.config import Config
from bannergen.imaging.image_io import ImageIO

logger = logging.getLogger(__name__)


class LibraryCache:
    """Resolves appcache paths and handles backup, staging and promotion of headers."""

    def __init__(self, steam_path: Path, cfg: Config):
        self.steam_path = Path(steam_path)
        self.cfg = cfg

    @property
    def appinfo_path(self) -> Path:
        return self.steam_path / self.cfg.APPCACHE_DIR / self.cfg.APPINFO_FILE

    def directory(self, kind: str) -> Path:
        return self.steam_path / self.cfg.APPCACHE_DIR / kind

    def file(self, app_id: int, kind: str, image_type: str, ext: str = "jpg") -> Path:
        return self.directory(kind) / f"{app_id}_{image_type}.{ext}"

    def hero(self, app_id: int) -> Path:
        return self.file(app_id, self.cfg.LIBRARY_CACHE, self.cfg.IMAGE_TYPE_HERO, self.cfg.HERO_EXT)

    def logo(self, app_id: int) -> Path:
        return self.file(app_id, self.cfg.LIBRARY_CACHE, self.cfg.IMAGE_TYPE_LOGO, self.cfg.LOGO_EXT)

    def header(self, app_id: int, kind: Optional[str] = None) -> Path:
        return self.file(app_id, kind or self.cfg.LIBRARY_CACHE, self.cfg.IMAGE_TYPE_HEADER, self.cfg.HEADER_EXT)

    def ensure_directories(self) -> None:
        for kind in (self.cfg.LIBRARY_CACHE_BACKUP, self.cfg.LIBRARY_CACHE_STAGING):
            self.directory(kind).mkdir(parents=True, exist_ok=True)

    def backup_header(self, app_id: int) -> bool:
        """Copy the current header aside once; an existing backup is never replaced."""
        current = self.header(app_id)
        backup = self.header(app_id, self.cfg.LIBRARY_CACHE_BACKUP)
        if current.is_file() and not backup.exists():
            shutil.copyfile(current, backup)
            logger.debug("Backed up %s -> %s", current.name, backup)
            return True
        return False

    def stage_and_promote(self, app_id: int, image_rgb: np.ndarray) -> Path:
        """Write the banner to staging, then swap it into the live cache in one rename."""
        staging = self.header(app_id, self.cfg.LIBRARY_CACHE_STAGING)
        ImageIO.save_rgb(image_rgb, staging)

        target = self.header(app_id)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(target.name + ".tmp")
        shutil.copyfile(staging, tmp)
        os.replace(tmp, target)
        return target
