"""
Watermark Errors
================
Every failure of a single watermarking attempt is one of these.
"""

from pathlib import Path
from typing import Union


class WatermarkError(Exception):
    """Base class for watermarking failures."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class MissingFileError(WatermarkError, FileNotFoundError):
    """Source or watermark image does not exist."""


class DecodeError(WatermarkError):
    """File exists but cannot be decoded as an image."""


class WriteError(WatermarkError):
    """Encoding or writing the output image failed."""
