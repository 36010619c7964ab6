"""
Tonal Adjustments
=================
Whole-image pixel transforms applied after the watermark is drawn.

Technical Notes:
- Only the RGB channels are touched; alpha is carried through unchanged
- Math is done in float64 with numpy, truncated and clamped back to uint8
- Brightness and contrast use a fixed 0.25 amount
"""

from enum import Enum

import numpy as np
from PIL import Image

BRIGHTNESS_AMOUNT = 0.25
CONTRAST_AMOUNT = 0.25

# ITU-R BT.709 luma weights
LUMA_R, LUMA_G, LUMA_B = 0.2126, 0.7152, 0.0722


def _brighten(rgb: np.ndarray) -> np.ndarray:
    return rgb + (255.0 - rgb) * BRIGHTNESS_AMOUNT


def _contrast(rgb: np.ndarray) -> np.ndarray:
    factor = (CONTRAST_AMOUNT + 1) / (1 - CONTRAST_AMOUNT)
    return factor * (rgb - 127) + 127


def _greyscale(rgb: np.ndarray) -> np.ndarray:
    grey = LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]
    return np.repeat(grey[..., np.newaxis], 3, axis=-1)


def _invert(rgb: np.ndarray) -> np.ndarray:
    return 255.0 - rgb


class ToneAdjustment(Enum):
    """
    One tonal operation, chosen once per request.

    Each member's value is the label shown in the interactive menu.
    """

    BRIGHTEN = "Make image brighter"
    CONTRAST = "Increase contrast"
    GREYSCALE = "Make image b&w"
    INVERT = "Invert Image"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def labels(cls) -> list[str]:
        return [member.label for member in cls]

    @classmethod
    def from_label(cls, label: str) -> "ToneAdjustment":
        """
        Resolve a menu label to its adjustment.

        Raises:
            ValueError: If the label matches no adjustment.
        """
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"Unknown tone adjustment: {label!r}")

    def apply(self, image: Image.Image) -> Image.Image:
        """
        Apply this adjustment to an image.

        Args:
            image: Source image in any mode.

        Returns:
            New image in RGB or RGBA mode (RGBA if the source had alpha).
        """
        has_alpha = image.mode in ("RGBA", "LA") or (
                image.mode == "P" and "transparency" in image.info
        )
        mode = "RGBA" if has_alpha else "RGB"
        if image.mode != mode:
            image = image.convert(mode)

        arr = np.asarray(image).astype(np.float64)
        transform = _TRANSFORMS[self]
        arr[..., :3] = transform(arr[..., :3])

        # results are truncated, not rounded
        out = np.clip(np.floor(arr), 0, 255).astype(np.uint8)
        return Image.fromarray(out)


_TRANSFORMS = {
    ToneAdjustment.BRIGHTEN: _brighten,
    ToneAdjustment.CONTRAST: _contrast,
    ToneAdjustment.GREYSCALE: _greyscale,
    ToneAdjustment.INVERT: _invert,
}
