from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from bannergen.appinfo.keyvalues import Node
from bannergen.config import Config


class CompositionError(ValueError):
    """Placement metadata for one app is unusable."""


class PinnedPosition(Enum):
    BottomLeft = "BottomLeft"
    UpperLeft = "UpperLeft"
    UpperCenter = "UpperCenter"
    CenterCenter = "CenterCenter"
    BottomCenter = "BottomCenter"

    @classmethod
    def parse(cls, text: Optional[str]) -> "PinnedPosition":
        wanted = (text or "").strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise CompositionError(f"Unknown pinned position: {text!r}")


@dataclass(frozen=True)
class PlacementSpec:
    pinned_position: PinnedPosition
    width_fraction: float
    height_fraction: float


def _percent(node: Node, name: str) -> float:
    raw = node[name].text
    if raw is None:
        raise CompositionError(f"logo_position.{name} is missing")
    try:
        value = float(raw.strip())
    except ValueError:
        raise CompositionError(f"logo_position.{name} is not a number: {raw!r}") from None
    if not math.isfinite(value):
        raise CompositionError(f"logo_position.{name} is not finite: {raw!r}")
    return value / 100


def read_placement(document: Node) -> Optional[PlacementSpec]:
    """
    Extract the logo placement of one app.

    Returns None when the app should be skipped (not a game, or no
    logo_position block). Raises CompositionError for malformed values.
    """
    common = document["common"]
    app_type = common["type"].text
    if app_type is None or app_type.lower() != "game":
        return None

    logo_position = common.lookup("library_assets", "logo_position")
    if not logo_position.exists:
        return None

    pinned = PinnedPosition.parse(logo_position["pinned_position"].text)
    return PlacementSpec(
        pinned_position=pinned,
        width_fraction=_percent(logo_position, "width_pct"),
        height_fraction=_percent(logo_position, "height_pct"),
    )


def clamp_logo_pct(width_fraction: float, height_fraction: float,
                   lo: float = 0.33, hi: float = 0.5) -> float:
    return max(lo, min(hi, min(width_fraction, height_fraction)))


@dataclass(frozen=True)
class BannerGeometry:
    """Canvas size and layer positions for one banner (pixels, top-left origin)."""
    canvas_w: int
    canvas_h: int
    hero_x: int
    logo_pct: float
    logo_w: float
    logo_h: float
    logo_x: float
    logo_y: float

    @property
    def logo_size_px(self) -> Tuple[int, int]:
        return round(self.logo_w), round(self.logo_h)

    @property
    def logo_origin_px(self) -> Tuple[int, int]:
        return round(self.logo_x), round(self.logo_y)

    @classmethod
    def compute(cls, hero_size: Tuple[int, int], logo_size: Tuple[int, int],
                spec: PlacementSpec, cfg: Config = Config()) -> "BannerGeometry":
        hero_w, hero_h = hero_size
        src_logo_w, src_logo_h = logo_size
        if hero_h <= 0 or src_logo_w <= 0 or src_logo_h <= 0:
            raise CompositionError(f"Degenerate image sizes: hero={hero_size} logo={logo_size}")

        W = round(hero_h * cfg.RATIO)
        H = hero_h
        hero_x = -round((hero_w - W) / 2)

        logo_pct = clamp_logo_pct(spec.width_fraction, spec.height_fraction,
                                  cfg.LOGO_PCT_MIN, cfg.LOGO_PCT_MAX)
        safe_w = W * cfg.SAFE_WIDTH_PERC
        logo_w = safe_w * logo_pct
        logo_h = logo_w / (src_logo_w / src_logo_h)

        margin_x = W * cfg.EDGE_MARGIN_PERC
        margin_y = H * cfg.EDGE_MARGIN_PERC
        centered_x = (W - logo_w) / 2
        centered_y = (H - logo_h) / 2

        pos = spec.pinned_position
        if pos is PinnedPosition.BottomLeft:
            x, y = margin_x, centered_y
        elif pos is PinnedPosition.UpperLeft:
            x, y = margin_x, margin_y
        elif pos is PinnedPosition.UpperCenter:
            x, y = centered_x, margin_y
        elif pos in (PinnedPosition.CenterCenter, PinnedPosition.BottomCenter):
            x, y = centered_x, centered_y
        else:
            raise CompositionError(f"Invalid pinned position: {pos!r}")

        return cls(W, H, hero_x, logo_pct, logo_w, logo_h, x, y)
