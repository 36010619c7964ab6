"""
Watermark Manager - Main Entry Point
====================================
An interactive terminal tool for text and image watermarks.

Usage:
    python main.py [--img-dir img] [--verbose]

Architecture:
    - Model: watermark_manager/core/ (pure image logic)
    - View/Controller: watermark_manager/cli/ (prompts and session loop)

Features:
    - Centered text watermark, word-wrapped to the image width
    - Centered image watermark blended at 50% opacity
    - Optional brighten / contrast / black & white / invert adjustment
"""

import sys

from watermark_manager.cli import main

if __name__ == "__main__":
    sys.exit(main())
