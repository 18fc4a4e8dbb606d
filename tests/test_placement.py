"""
Placement and Geometry Tests
============================
"""

import pytest

from bannergen.appinfo.keyvalues import from_mapping
from bannergen.config import Config
from bannergen.layout.placement import (
    BannerGeometry, CompositionError, PinnedPosition, PlacementSpec,
    clamp_logo_pct, read_placement,
)


class TestReadPlacement:
    """Document fields to PlacementSpec."""

    def test_game_with_position(self, game_document):
        spec = read_placement(from_mapping(game_document("uppercenter", "40", "60")))
        assert spec.pinned_position is PinnedPosition.UpperCenter
        assert spec.width_fraction == pytest.approx(0.4)
        assert spec.height_fraction == pytest.approx(0.6)

    def test_type_is_case_insensitive(self, game_document):
        assert read_placement(from_mapping(game_document(app_type="GAME"))) is not None

    @pytest.mark.parametrize("app_type", ["Tool", "DLC", "application"])
    def test_non_game_is_skipped(self, app_type, game_document):
        assert read_placement(from_mapping(game_document(app_type=app_type))) is None

    def test_missing_type_is_skipped(self):
        doc = from_mapping({"common": {"library_assets": {"logo_position": {}}}})
        assert read_placement(doc) is None

    def test_missing_logo_position_is_skipped(self):
        doc = from_mapping({"common": {"type": "game", "library_assets": {"library_logo": "en"}}})
        assert read_placement(doc) is None

    def test_unknown_position_fails(self, game_document):
        with pytest.raises(CompositionError):
            read_placement(from_mapping(game_document("BottomRight")))

    @pytest.mark.parametrize("width", ["abc", "", "nan", "inf"])
    def test_bad_numbers_fail(self, width, game_document):
        with pytest.raises(CompositionError):
            read_placement(from_mapping(game_document(width=width)))


class TestClamp:
    """Logo scale always lands in [0.33, 0.5]."""

    @pytest.mark.parametrize("w, h, expected", [
        (0.4, 0.6, 0.4),
        (0.6, 0.45, 0.45),
        (1.0, 2.0, 0.5),
        (0.0, 0.7, 0.33),
        (-3.0, -1.0, 0.33),
        (0.1, 0.9, 0.33),
    ])
    def test_clamp(self, w, h, expected):
        assert clamp_logo_pct(w, h) == pytest.approx(expected)


class TestGeometry:
    """Canvas size and logo origin per pinned position."""

    def _geo(self, position, hero=(3000, 1000), logo=(400, 200), w=0.4, h=0.6):
        spec = PlacementSpec(position, w, h)
        return BannerGeometry.compute(hero, logo, spec, Config())

    def test_reference_numbers(self):
        geo = self._geo(PinnedPosition.UpperCenter)
        assert geo.canvas_w == 2140
        assert geo.canvas_h == 1000
        assert geo.logo_pct == pytest.approx(0.4)
        assert geo.logo_w == pytest.approx(770.4)
        assert geo.logo_h == pytest.approx(385.2)
        assert geo.hero_x == -430

    def test_upper_center_x(self):
        geo = self._geo(PinnedPosition.UpperCenter)
        assert geo.logo_x == pytest.approx((2140 - 770.4) / 2)
        assert geo.logo_y == pytest.approx(50.0)
        assert abs(geo.logo_origin_px[0] - (2140 - 770.4) / 2) <= 1

    @pytest.mark.parametrize("position, x, y", [
        (PinnedPosition.BottomLeft, 2140 * 0.05, (1000 - 385.2) / 2),
        (PinnedPosition.UpperLeft, 2140 * 0.05, 1000 * 0.05),
        (PinnedPosition.UpperCenter, (2140 - 770.4) / 2, 1000 * 0.05),
        (PinnedPosition.CenterCenter, (2140 - 770.4) / 2, (1000 - 385.2) / 2),
        (PinnedPosition.BottomCenter, (2140 - 770.4) / 2, (1000 - 385.2) / 2),
    ])
    def test_position_table(self, position, x, y):
        geo = self._geo(position)
        assert geo.logo_x == pytest.approx(x)
        assert geo.logo_y == pytest.approx(y)

    def test_height_follows_logo_aspect(self):
        geo = self._geo(PinnedPosition.CenterCenter, logo=(100, 100), w=0.5, h=0.5)
        assert geo.logo_w == pytest.approx(geo.logo_h)

    def test_narrow_hero_is_centered(self):
        geo = self._geo(PinnedPosition.UpperLeft, hero=(1000, 1000))
        assert geo.hero_x == 570

    def test_rounded_logo_size(self):
        geo = self._geo(PinnedPosition.UpperLeft)
        assert geo.logo_size_px == (770, 385)

    def test_degenerate_logo(self):
        with pytest.raises(CompositionError):
            self._geo(PinnedPosition.UpperLeft, logo=(0, 10))
