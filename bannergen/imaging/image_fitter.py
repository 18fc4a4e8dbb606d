import cv2
import numpy as np


class ImageFitter:
    """Resize to an exact pixel size."""
    @staticmethod
    def resize(src, tw: int, th: int):
        tw, th = max(1, int(tw)), max(1, int(th))
        sh, sw = src.shape[:2]
        shrinking = tw * th < sw * sh
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
        if src.ndim != 3 or src.shape[2] != 4:
            return cv2.resize(src, (tw, th), interpolation=interpolation)

        # resample premultiplied colour so transparent pixels don't bleed into edges
        rgba = src.astype(np.float32)
        rgba[..., :3] *= rgba[..., 3:4] / 255.0
        out = cv2.resize(rgba, (tw, th), interpolation=interpolation)

        alpha = np.clip(out[..., 3:4], 0, 255)
        rgb = np.divide(out[..., :3] * 255.0, alpha,
                        out=np.zeros_like(out[..., :3]), where=alpha > 0)
        out = np.concatenate([np.clip(rgb, 0, 255), alpha], axis=2)
        return np.rint(out).astype(np.uint8)
