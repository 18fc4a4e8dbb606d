from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List

import cv2
from PIL import Image

from bannergen.appinfo.container_parser import ApplicationEntry, parse_file
from bannergen.config import Config
from bannergen.imaging.image_io import ImageIO
from bannergen.layout.placement import read_placement
from bannergen.render.banner_compositor import BannerCompositor, ComposeResult, Status
from bannergen.services.library_cache import LibraryCache

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    written: List[int] = field(default_factory=list)
    skipped: Dict[int, str] = field(default_factory=dict)
    failed: Dict[int, str] = field(default_factory=dict)
    unparsed: List[int] = field(default_factory=list)

    def record(self, app_id: int, result: ComposeResult) -> None:
        if result.status is Status.OK:
            self.written.append(app_id)
        elif result.status is Status.SKIPPED:
            self.skipped[app_id] = result.reason
        else:
            self.failed[app_id] = result.reason


class BannerPipeline:
    """Coordinates appinfo parsing, composition and cache writes for every app."""

    def __init__(self, cfg: Config):
        self.cfg = cfg
        self.cache = LibraryCache(cfg.steam_path, cfg)
        self.compositor = BannerCompositor(cfg)

    def run(self) -> RunSummary:
        steam_path = self.cache.steam_path
        if not steam_path.is_dir():
            raise FileNotFoundError(
                f"Steam path {steam_path} does not exist. Please specify a valid path.")
        logger.info("Using Steam path %s", steam_path)

        self.cache.ensure_directories()

        appinfo_path = self.cache.appinfo_path
        if not appinfo_path.is_file():
            raise FileNotFoundError(f"Appinfo file {appinfo_path} does not exist.")
        logger.info("Using appinfo file %s", appinfo_path)

        container = parse_file(appinfo_path, max_record_bytes=self.cfg.MAX_RECORD_BYTES)

        summary = RunSummary(unparsed=list(container.failed_ids))
        total = len(container)
        for i, (app_id, entry) in enumerate(container.items(), start=1):
            result = self.process(entry)
            summary.record(app_id, result)
            if result.status is Status.OK:
                logger.info("[%d/%d] OK -> %s", i, total, self.cache.header(app_id).name)
            elif result.status is Status.SKIPPED:
                logger.debug("[%d/%d] skipped app %d (%s)", i, total, app_id, result.reason)
            else:
                logger.warning("[%d/%d] FAIL app %d: %s", i, total, app_id, result.reason)

        logger.info(
            "Done. %d banners written, %d skipped, %d failed, %d unparsable records",
            len(summary.written), len(summary.skipped), len(summary.failed), len(summary.unparsed),
        )
        return summary

    def process(self, entry: ApplicationEntry) -> ComposeResult:
        """Produce and install the banner for one app; never raises for per-app problems."""
        app_id = entry.id
        try:
            spec = read_placement(entry.document)
            if spec is None:
                return ComposeResult.skip("not a game or no logo position")

            hero_path = self.cache.hero(app_id)
            logo_path = self.cache.logo(app_id)
            if not hero_path.is_file():
                return ComposeResult.skip("no hero image")
            if not logo_path.is_file():
                return ComposeResult.skip("no logo image")

            hero = ImageIO.load_rgba(hero_path)
            logo = ImageIO.load_rgba(logo_path)
            logger.debug("Generating banner for app %d", app_id)
            result = ComposeResult.ok(self.compositor.render(spec, hero, logo))

            self.cache.backup_header(app_id)
            self.cache.stage_and_promote(app_id, result.image)
            return result
        except (OSError, ValueError, cv2.error, Image.DecompressionBombError) as e:
            return ComposeResult.fail(f"{type(e).__name__}: {e}")
