"""
Interactive Session
===================
Collects one WatermarkRequest through sequential prompts, runs it, and starts
over until the user declines to continue.

Workflow:
1. Confirm start (declining ends the session)
2. Ask for the source file, optional tone adjustment, watermark type
3. Ask for the watermark text or watermark file
4. Run the compositor and print a one-line outcome
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..core import (
    MissingFileError,
    ToneAdjustment,
    WatermarkCompositor,
    WatermarkRequest,
    add_watermark_to_image,
)
from .prompts import Prompter

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    'Hi! Welcome to "Watermark manager". Copy your image files to `/img` folder. '
    "Then you'll be able to use them in the app. Are you ready?"
)
SUCCESS_MESSAGE = "Success!"
FAILURE_MESSAGE = "Something went wrong... Try again!"

TEXT_WATERMARK = "Text watermark"
IMAGE_WATERMARK = "Image watermark"


@dataclass
class SessionConfig:
    """Configuration for the interactive session."""
    img_dir: Path = field(default_factory=lambda: Path("img"))
    default_input: str = "test.jpg"
    default_watermark: str = "logo.png"


class SessionDriver:
    """
    Drives the prompt loop.

    Responsibilities:
    - Ask questions in a fixed order
    - Check that referenced files exist before compositing
    - Report success or a generic failure, never error details
    """

    def __init__(
            self,
            prompter: Optional[Prompter] = None,
            config: Optional[SessionConfig] = None,
            compositor: Optional[WatermarkCompositor] = None
    ):
        self.prompter = prompter or Prompter()
        self.config = config or SessionConfig()
        self.compositor = compositor or WatermarkCompositor(output_dir=self.config.img_dir)

    def _say(self, message: str):
        self.prompter.say(message)

    def _existing_file(self, filename: str, what: str) -> Path:
        path = self.config.img_dir / filename
        # isfile() reports False on any OSError, e.g. an overlong name
        if not os.path.isfile(path):
            raise MissingFileError(f"{what} does not exist.", path)
        return path

    def build_request(
            self,
            input_name: str,
            adjust: Optional[ToneAdjustment] = None,
            text: Optional[str] = None,
            watermark_name: Optional[str] = None
    ) -> WatermarkRequest:
        """
        Resolve names against the image directory and validate them.

        Raises:
            MissingFileError: If the source or watermark file is absent.
        """
        input_path = self._existing_file(input_name, "Target image")

        watermark_file = None
        if text is None and watermark_name is not None:
            watermark_file = self._existing_file(watermark_name, "Watermark image")

        return WatermarkRequest.build(
            input_path,
            text=text,
            watermark_file=watermark_file,
            adjust=adjust
        )

    def _ask_request(self) -> WatermarkRequest:
        input_name = self.prompter.text(
            "What file do you want to mark?", default=self.config.default_input
        )
        wants_adjust = self.prompter.confirm("Would You like to adjust the image tones?")
        watermark_type = self.prompter.select(
            "Choose watermark type:", [TEXT_WATERMARK, IMAGE_WATERMARK]
        )

        # the source must exist before any further questions
        self._existing_file(input_name, "Target image")

        adjust = None
        if wants_adjust:
            label = self.prompter.select("Choose tone adjustment:", ToneAdjustment.labels())
            adjust = ToneAdjustment.from_label(label)

        if watermark_type == TEXT_WATERMARK:
            text = self.prompter.text("Type your watermark text:")
            return self.build_request(input_name, adjust=adjust, text=text)

        watermark_name = self.prompter.text(
            "Type your watermark name:", default=self.config.default_watermark
        )
        return self.build_request(input_name, adjust=adjust, watermark_name=watermark_name)

    def run_once(self) -> Optional[bool]:
        """
        Run one prompt cycle.

        Returns:
            None if the user declined to start, otherwise whether the
            watermark was written.
        """
        if not self.prompter.confirm(WELCOME_MESSAGE):
            return None

        try:
            request = self._ask_request()
        except MissingFileError as e:
            logger.info("Request rejected: %s (%s)", e, e.path)
            self._say(FAILURE_MESSAGE)
            return False

        result = add_watermark_to_image(request, self.compositor)
        self._say(SUCCESS_MESSAGE if result.success else FAILURE_MESSAGE)
        return result.success

    def run(self) -> int:
        """
        Loop until the user declines or closes the input.

        Returns:
            Process exit code (always 0).
        """
        try:
            while self.run_once() is not None:
                pass
        except (EOFError, KeyboardInterrupt):
            self._say("")
            logger.debug("Input closed, leaving session")
        return 0
