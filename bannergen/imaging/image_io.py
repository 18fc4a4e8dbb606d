from __future__ import annotations
import io
from pathlib import Path

import numpy as np
import cv2
from PIL import Image


class ImageIO:
    """Loading and saving cached library art as RGB(A) arrays."""

    @staticmethod
    def _to_rgba(img: np.ndarray) -> np.ndarray:
        if img.dtype == np.uint16:
            img = (img >> 8).astype(np.uint8)
        if img.ndim == 2:
            return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
        if img.shape[2] == 4:
            return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)

    @staticmethod
    def load_rgba(path: Path) -> np.ndarray:
        with open(path, "rb") as f:
            data = f.read()
        arr = np.frombuffer(data, dtype=np.uint8)
        img = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)
        if img is not None:
            return ImageIO._to_rgba(img)
        try:
            pil = Image.open(io.BytesIO(data)).convert("RGBA")
        except Exception as e:
            raise ValueError(f"Failed to decode image {path}: {e}") from e
        return np.array(pil)

    @staticmethod
    def save_rgb(image_rgb: np.ndarray, path: Path) -> None:
        bgr = cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR)
        ok, buf = cv2.imencode(Path(path).suffix or ".jpg", bgr)
        if not ok:
            raise ValueError(f"Failed to encode image for {path}")
        with open(path, "wb") as f:
            f.write(buf.tobytes())
