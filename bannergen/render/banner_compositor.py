from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from bannergen.appinfo.keyvalues import Node
from bannergen.config import Config
from bannergen.imaging.image_fitter import ImageFitter
from bannergen.imaging.overlay_composer import OverlayComposer
from bannergen.layout.placement import (
    BannerGeometry, CompositionError, PlacementSpec, read_placement,
)

logger = logging.getLogger(__name__)


class Status(Enum):
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ComposeResult:
    status: Status
    image: Optional[np.ndarray] = None
    reason: str = ""

    @classmethod
    def ok(cls, image: np.ndarray) -> "ComposeResult":
        return cls(Status.OK, image=image)

    @classmethod
    def skip(cls, reason: str) -> "ComposeResult":
        return cls(Status.SKIPPED, reason=reason)

    @classmethod
    def fail(cls, reason: str) -> "ComposeResult":
        return cls(Status.FAILED, reason=reason)


class BannerCompositor:
    """Builds a header banner from a hero image and a positioned logo."""

    def __init__(self, cfg: Config = Config()):
        self.cfg = cfg

    def compose(self, document: Node, hero_rgba: np.ndarray, logo_rgba: np.ndarray) -> ComposeResult:
        try:
            spec = read_placement(document)
            if spec is None:
                return ComposeResult.skip("not a game or no logo position")
            return ComposeResult.ok(self.render(spec, hero_rgba, logo_rgba))
        except CompositionError as e:
            return ComposeResult.fail(str(e))

    def render(self, spec: PlacementSpec, hero_rgba: np.ndarray, logo_rgba: np.ndarray) -> np.ndarray:
        hero_h, hero_w = hero_rgba.shape[:2]
        logo_h, logo_w = logo_rgba.shape[:2]
        geo = BannerGeometry.compute((hero_w, hero_h), (logo_w, logo_h), spec, self.cfg)
        logger.debug("Geometry %s for %s", geo, spec)

        canvas = OverlayComposer.new_canvas(geo.canvas_w, geo.canvas_h)
        OverlayComposer.draw_over(canvas, hero_rgba, geo.hero_x, 0, 1.0)

        logo = ImageFitter.resize(logo_rgba, *geo.logo_size_px)
        OverlayComposer.draw_over(canvas, logo, *geo.logo_origin_px, 1.0)
        return canvas
