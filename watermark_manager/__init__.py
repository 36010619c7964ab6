"""
Watermark Manager Package
=========================
An interactive terminal tool that stamps a text or image watermark onto an
image, with an optional tonal adjustment.

Modules:
    - core: Pure image logic (no terminal I/O)
    - cli: Prompts and the interactive session loop

Usage:
    from watermark_manager.core import WatermarkCompositor, WatermarkRequest
    from watermark_manager.cli import main
"""

__version__ = "1.0.0"
__app_name__ = "Watermark manager"

# Core exports
from .core import (
    ToneAdjustment,
    WatermarkCompositor,
    WatermarkRequest,
    WatermarkResult,
    add_watermark_to_image,
    output_filename,
)
from .core.errors import DecodeError, MissingFileError, WatermarkError, WriteError

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Core
    "ToneAdjustment",
    "WatermarkCompositor",
    "WatermarkRequest",
    "WatermarkResult",
    "add_watermark_to_image",
    "output_filename",

    # Errors
    "WatermarkError",
    "MissingFileError",
    "DecodeError",
    "WriteError",
]
