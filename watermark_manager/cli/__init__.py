"""
CLI Module - Interactive Terminal Front End
===========================================
Prompts for a request, hands it to the core compositor, repeats.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from ..core import WatermarkCompositor
from .prompts import Prompter
from .session import SessionConfig, SessionDriver

__all__ = ["Prompter", "SessionConfig", "SessionDriver", "build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watermark-manager",
        description="Add a text or image watermark to an image, interactively."
    )
    parser.add_argument(
        "--img-dir", type=Path, default=Path("img"),
        help="Folder holding source and watermark images; results are written here too"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, configure logging and run the session loop."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = SessionConfig(img_dir=args.img_dir)
    driver = SessionDriver(
        prompter=Prompter(),
        config=config,
        compositor=WatermarkCompositor(output_dir=config.img_dir)
    )
    return driver.run()
