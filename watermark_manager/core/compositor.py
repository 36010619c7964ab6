"""
Watermark Compositor
====================
Loads one image, draws a text or image watermark at its center, applies an
optional tonal adjustment and writes the result as a new file.

Technical Notes:
- Compositing is done in RGBA; sources without alpha are written back as RGB
- Text is word-wrapped to the image width and centered as a block
- Image watermarks are blended source-over at 50% opacity, centered, unclamped
- Output always lands in the output directory as <name>-with-watermark.<ext>
"""

import logging
import math
import os
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .adjust import ToneAdjustment
from .errors import DecodeError, MissingFileError, WatermarkError, WriteError

logger = logging.getLogger(__name__)

# Formats that cannot store an alpha channel
_OPAQUE_SUFFIXES = {".jpg", ".jpeg", ".bmp"}
_QUALITY_SUFFIXES = {".jpg", ".jpeg", ".webp"}

# Bold sans candidates, tried in order
_BOLD_SANS_FONTS = (
    # Windows
    "arialbd.ttf",
    # macOS
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
)


@dataclass(frozen=True)
class TextWatermark:
    """Centered text drawn over the whole canvas."""
    text: str


@dataclass(frozen=True)
class ImageWatermark:
    """Image overlay centered on the base image."""
    path: Path


WatermarkSpec = Union[TextWatermark, ImageWatermark, None]


@dataclass(frozen=True)
class WatermarkRequest:
    """Everything needed for one watermarking attempt."""
    input_path: Path
    watermark: WatermarkSpec = None
    adjust: Optional[ToneAdjustment] = None

    @classmethod
    def build(
            cls,
            input_path: Union[str, Path],
            text: Optional[str] = None,
            watermark_file: Union[str, Path, None] = None,
            adjust: Optional[ToneAdjustment] = None
    ) -> "WatermarkRequest":
        """
        Build a request from loose options.

        Non-empty text takes precedence over a watermark file; with
        neither, no watermark is drawn.
        """
        if text:
            watermark = TextWatermark(text)
        elif watermark_file:
            watermark = ImageWatermark(Path(watermark_file))
        else:
            watermark = None
        return cls(input_path=Path(input_path), watermark=watermark, adjust=adjust)


@dataclass
class WatermarkResult:
    """Outcome of one watermarking attempt."""
    source_path: Path
    output_path: Optional[Path] = None
    success: bool = False
    error_message: str = ""


def output_filename(path: Union[str, Path]) -> str:
    """
    Derive the output filename for an input path.

    Only text after the last dot counts as the extension:
    ``photo.jpg`` -> ``photo-with-watermark.jpg``,
    ``a.b.jpg`` -> ``a.b-with-watermark.jpg``.
    """
    filename = str(path).replace("\\", "/").split("/")[-1]
    name, dot, ext = filename.rpartition(".")
    if not dot or not name:
        return f"{filename}{WatermarkCompositor.OUTPUT_SUFFIX}"
    return f"{name}{WatermarkCompositor.OUTPUT_SUFFIX}.{ext}"


def watermark_position(
        base_size: Tuple[int, int],
        overlay_size: Tuple[int, int]
) -> Tuple[float, float]:
    """Top-left corner that puts the overlay's center on the base's center."""
    base_w, base_h = base_size
    overlay_w, overlay_h = overlay_size
    return base_w / 2 - overlay_w / 2, base_h / 2 - overlay_h / 2


class WatermarkCompositor:
    """
    Applies a WatermarkRequest and writes the result.

    The drawing parameters are fixed defaults; the output directory is the
    only per-instance setting.
    """

    FONT_SIZE = 32
    TEXT_COLOR = (0, 0, 0, 255)
    LINE_SPACING = 4
    OVERLAY_OPACITY = 0.5
    JPEG_QUALITY = 100
    OUTPUT_SUFFIX = "-with-watermark"

    def __init__(self, output_dir: Union[str, Path] = "img", font_path: Optional[str] = None):
        """
        Args:
            output_dir: Directory every result is written to.
            font_path: Optional TTF file used instead of the bold sans lookup.
        """
        self.output_dir = Path(output_dir)
        self._font_path = font_path
        self._cached_font: Optional[ImageFont.ImageFont] = None

    def _get_font(self) -> ImageFont.ImageFont:
        """Get or create the cached watermark font."""
        if self._cached_font is None:
            candidates = _BOLD_SANS_FONTS
            if self._font_path and Path(self._font_path).exists():
                candidates = (self._font_path,) + candidates

            for candidate in candidates:
                try:
                    self._cached_font = ImageFont.truetype(candidate, self.FONT_SIZE)
                    break
                except OSError:
                    continue
            else:
                logger.debug("No bold sans font found, using Pillow default")
                self._cached_font = ImageFont.load_default(size=self.FONT_SIZE)

        return self._cached_font

    def _load_image(self, path: Path) -> Image.Image:
        """Decode an image fully into memory."""
        if not os.path.isfile(path):
            raise MissingFileError(f"Image not found: {path}", path)

        try:
            with Image.open(path) as img:
                img.load()
                return img.copy()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot decode image {path}: {e}", path) from e

    def _wrap_text(self, draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> list[str]:
        """Greedy word wrap; a word wider than max_width keeps its own line."""
        lines = []
        for paragraph in text.splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if current and draw.textlength(candidate, font=font) > max_width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def draw_text(self, image: Image.Image, text: str) -> Image.Image:
        """
        Draw text centered horizontally and vertically over the full canvas.

        Args:
            image: RGBA base image, drawn on in place.
            text: Watermark text.

        Returns:
            The same image.
        """
        font = self._get_font()
        draw = ImageDraw.Draw(image)
        img_w, img_h = image.size

        lines = self._wrap_text(draw, text, font, img_w)

        ascent, descent = font.getmetrics() if hasattr(font, "getmetrics") else (self.FONT_SIZE, 0)
        line_height = ascent + descent
        block_height = line_height * len(lines) + self.LINE_SPACING * (len(lines) - 1)

        y = (img_h - block_height) / 2
        for line in lines:
            line_width = draw.textlength(line, font=font)
            x = (img_w - line_width) / 2
            draw.text((x, y), line, font=font, fill=self.TEXT_COLOR)
            y += line_height + self.LINE_SPACING

        logger.debug("Drew %d line(s) of text on %dx%d image", len(lines), img_w, img_h)
        return image

    def draw_overlay(self, image: Image.Image, overlay: Image.Image) -> Image.Image:
        """
        Blend an overlay onto the center of the image at OVERLAY_OPACITY.

        Args:
            image: RGBA base image.
            overlay: Watermark image in any mode.

        Returns:
            New RGBA image with the overlay composited.
        """
        if overlay.mode != "RGBA":
            overlay = overlay.convert("RGBA")

        alpha = overlay.getchannel("A").point(lambda a: round(a * self.OVERLAY_OPACITY))
        overlay.putalpha(alpha)

        x, y = watermark_position(image.size, overlay.size)
        # halves round up, never to even
        position = (math.floor(x + 0.5), math.floor(y + 0.5))

        # paste clips anything outside the canvas, so negative offsets are fine
        layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
        layer.paste(overlay, position)

        logger.debug("Overlay %s placed at %s", overlay.size, position)
        return Image.alpha_composite(image, layer)

    def _save(self, image: Image.Image, output_path: Path, keep_alpha: bool):
        """Encode at maximum quality; failures become WriteError."""
        suffix = output_path.suffix.lower()

        if not keep_alpha or suffix in _OPAQUE_SUFFIXES:
            rgb_result = Image.new("RGB", image.size, (255, 255, 255))
            rgb_result.paste(image, mask=image.getchannel("A"))
            image = rgb_result

        params = {}
        if suffix in _QUALITY_SUFFIXES:
            params["quality"] = self.JPEG_QUALITY

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            image.save(output_path, **params)
        except (OSError, ValueError, KeyError) as e:
            raise WriteError(f"Cannot write {output_path}: {e}", output_path) from e

    def process(self, request: WatermarkRequest) -> Path:
        """
        Run one request end to end.

        Args:
            request: The validated request.

        Returns:
            Path of the written file.

        Raises:
            MissingFileError: If the source or watermark image is absent.
            DecodeError: If an image cannot be decoded.
            WriteError: If the result cannot be written.
        """
        base = self._load_image(request.input_path)
        keep_alpha = "A" in base.getbands() or "transparency" in base.info
        image = base.convert("RGBA")

        watermark = request.watermark
        if isinstance(watermark, TextWatermark) and watermark.text:
            image = self.draw_text(image, watermark.text)
        elif isinstance(watermark, ImageWatermark):
            overlay = self._load_image(watermark.path)
            image = self.draw_overlay(image, overlay)

        if request.adjust is not None:
            logger.debug("Applying %s", request.adjust.name)
            image = request.adjust.apply(image)

        output_path = self.output_dir / output_filename(request.input_path)
        self._save(image, output_path, keep_alpha)

        logger.info("Wrote %s", output_path)
        return output_path


def add_watermark_to_image(
        request: WatermarkRequest,
        compositor: Optional[WatermarkCompositor] = None
) -> WatermarkResult:
    """
    Run one request and report the outcome instead of raising.

    Args:
        request: The request to process.
        compositor: Compositor to use; a default one writing to ``img`` if None.

    Returns:
        WatermarkResult with success flag and error message.
    """
    compositor = compositor or WatermarkCompositor()
    result = WatermarkResult(source_path=request.input_path)

    try:
        result.output_path = compositor.process(request)
        result.success = True
    except WatermarkError as e:
        result.error_message = str(e)
        logger.info("Watermarking failed: %s", e)
    except Exception as e:
        result.error_message = str(e)
        logger.info("Unexpected error while watermarking %s: %s", request.input_path, e)
        logger.debug(traceback.format_exc())

    return result
