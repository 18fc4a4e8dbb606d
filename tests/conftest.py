"""
Test Configuration
==================

Pytest fixtures for building appinfo containers and fake Steam trees.
"""

import struct

import cv2
import numpy as np
import pytest
import vdf

MAGIC = 0x07564428
RECORD = struct.Struct("<IIIQ20sI20s")


def _kv_payload(document):
    return vdf.binary_dumps({"appinfo": document})


def _container_bytes(records, magic=MAGIC, universe=1):
    out = struct.pack("<II", magic, universe)
    for app_id, payload in records:
        out += struct.pack("<I", app_id)
        size = RECORD.size - 4 + len(payload)
        out += RECORD.pack(size, 2, 1700000000, 0, b"\x11" * 20, 7, b"\x22" * 20)
        out += payload
    out += struct.pack("<I", 0)
    return out


def _game_document(position="UpperCenter", width="40", height="60", app_type="Game"):
    return {
        "appid": 1,
        "common": {
            "name": "Sample",
            "type": app_type,
            "library_assets": {
                "logo_position": {
                    "pinned_position": position,
                    "width_pct": width,
                    "height_pct": height,
                },
            },
        },
    }


@pytest.fixture
def kv_payload():
    """Serialize a document dict as a binary KeyValues appinfo payload."""
    return _kv_payload


@pytest.fixture
def container_bytes():
    """Build a full container from (app_id, payload) pairs."""
    return _container_bytes


@pytest.fixture
def game_document():
    return _game_document


@pytest.fixture
def corrupt_payload():
    # unknown type byte 0x09
    return b"\x09broken\x00\x08"


@pytest.fixture
def steam_root(tmp_path):
    """Empty Steam-like root with an appcache/librarycache directory."""
    (tmp_path / "appcache" / "librarycache").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def write_art():
    """Write a hero JPEG and a logo PNG for an app into librarycache."""
    def _write(root, app_id, hero_size=(640, 300), logo_size=(200, 100)):
        cache = root / "appcache" / "librarycache"
        hw, hh = hero_size
        hero = np.full((hh, hw, 3), (0, 0, 200), dtype=np.uint8)
        cv2.imwrite(str(cache / f"{app_id}_library_hero.jpg"), hero)
        lw, lh = logo_size
        logo = np.zeros((lh, lw, 4), dtype=np.uint8)
        logo[..., :3] = 255
        logo[..., 3] = 255
        cv2.imwrite(str(cache / f"{app_id}_logo.png"), logo)
    return _write
