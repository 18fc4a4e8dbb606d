import numpy as np


class OverlayComposer:
    """Canvas creation and alpha 'source over' drawing with clipping."""
    @staticmethod
    def new_canvas(w: int, h: int):
        return np.zeros((h, w, 3), dtype=np.uint8)

    @staticmethod
    def draw_over(canvas_rgb, layer_rgba, x: int, y: int, opacity: float = 1.0):
        H, W = canvas_rgb.shape[:2]
        lh, lw = layer_rgba.shape[:2]

        # intersection of the layer with the canvas
        l, t = max(0, x), max(0, y)
        r, b = min(W, x + lw), min(H, y + lh)
        if r <= l or b <= t:
            return canvas_rgb

        src = layer_rgba[t - y:b - y, l - x:r - x]
        alpha = src[..., 3:4].astype(np.float32) / 255.0 * float(opacity)
        dst = canvas_rgb[t:b, l:r].astype(np.float32)
        blended = src[..., :3].astype(np.float32) * alpha + dst * (1.0 - alpha)
        canvas_rgb[t:b, l:r] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
        return canvas_rgb
