"""
Core Module - Pure Image Logic
==============================
This module contains no terminal I/O.
Watermark compositing and tonal adjustments are implemented here.
"""

from .adjust import ToneAdjustment
from .compositor import (
    ImageWatermark,
    TextWatermark,
    WatermarkCompositor,
    WatermarkRequest,
    WatermarkResult,
    add_watermark_to_image,
    output_filename,
    watermark_position,
)
from .errors import DecodeError, MissingFileError, WatermarkError, WriteError

__all__ = [
    "ToneAdjustment",
    "ImageWatermark",
    "TextWatermark",
    "WatermarkCompositor",
    "WatermarkRequest",
    "WatermarkResult",
    "add_watermark_to_image",
    "output_filename",
    "watermark_position",
    "WatermarkError",
    "MissingFileError",
    "DecodeError",
    "WriteError",
]
