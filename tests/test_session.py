"""
Tests for the interactive session loop.

Run with: python -m pytest tests/test_session.py -v
"""

import io
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from PIL import Image

from watermark_manager.cli import Prompter, SessionConfig, SessionDriver, main
from watermark_manager.cli.session import FAILURE_MESSAGE, SUCCESS_MESSAGE
from watermark_manager.core import (
    ImageWatermark,
    MissingFileError,
    TextWatermark,
    ToneAdjustment,
)


class ScriptedInput:
    """Feeds canned answers to Prompter; raises EOFError when exhausted."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def make_driver(img_dir: Path, answers):
    scripted = ScriptedInput(answers)
    output = io.StringIO()
    driver = SessionDriver(
        prompter=Prompter(input_func=scripted, output=output),
        config=SessionConfig(img_dir=img_dir),
    )
    return driver, scripted, output


@pytest.fixture
def img_dir(tmp_path):
    folder = tmp_path / "img"
    folder.mkdir()
    Image.new("RGB", (100, 100), (255, 255, 255)).save(folder / "test.jpg")
    Image.new("RGBA", (20, 20), (0, 0, 0, 255)).save(folder / "logo.png")
    return folder


# ===== Prompter =====

def test_confirm_defaults_to_yes():
    prompter = Prompter(input_func=ScriptedInput([""]), output=io.StringIO())
    assert prompter.confirm("Ready?") is True


def test_confirm_reasks_on_garbage():
    output = io.StringIO()
    prompter = Prompter(input_func=ScriptedInput(["maybe", "N"]), output=output)
    assert prompter.confirm("Ready?") is False
    assert "Please answer y or n." in output.getvalue()


def test_text_uses_default():
    prompter = Prompter(input_func=ScriptedInput(["  "]), output=io.StringIO())
    assert prompter.text("File?", default="test.jpg") == "test.jpg"


def test_select_by_number_or_label():
    output = io.StringIO()
    prompter = Prompter(input_func=ScriptedInput(["9", "2", "Alpha"]), output=output)

    assert prompter.select("Pick", ["Alpha", "Beta"]) == "Beta"
    assert prompter.select("Pick", ["Alpha", "Beta"]) == "Alpha"
    assert "1) Alpha" in output.getvalue()
    assert "Please enter a number between 1 and 2." in output.getvalue()


# ===== Request building =====

def test_build_request_resolves_against_img_dir(img_dir):
    driver, _, _ = make_driver(img_dir, [])

    request = driver.build_request("test.jpg", text="HELLO", adjust=ToneAdjustment.GREYSCALE)

    assert request.input_path == img_dir / "test.jpg"
    assert request.watermark == TextWatermark("HELLO")
    assert request.adjust is ToneAdjustment.GREYSCALE


def test_build_request_with_watermark_image(img_dir):
    driver, _, _ = make_driver(img_dir, [])

    request = driver.build_request("test.jpg", watermark_name="logo.png")

    assert request.watermark == ImageWatermark(img_dir / "logo.png")


def test_build_request_rejects_missing_files(img_dir):
    driver, _, _ = make_driver(img_dir, [])

    with pytest.raises(MissingFileError):
        driver.build_request("nope.jpg", text="HELLO")
    with pytest.raises(MissingFileError):
        driver.build_request("test.jpg", watermark_name="nope.png")


# ===== Session loop =====

def test_declining_ends_session(img_dir):
    driver, scripted, output = make_driver(img_dir, ["n"])

    assert driver.run() == 0
    assert len(scripted.questions) == 1
    assert output.getvalue() == ""


def test_text_watermark_cycle(img_dir):
    # start, default file, no adjust, text watermark, text, then quit
    driver, _, output = make_driver(img_dir, ["y", "", "n", "1", "HELLO", "n"])

    assert driver.run() == 0

    result_path = img_dir / "test-with-watermark.jpg"
    assert result_path.exists()
    with Image.open(result_path) as result:
        assert result.size == (100, 100)
    assert SUCCESS_MESSAGE in output.getvalue()


def test_image_watermark_cycle_with_adjustment(img_dir):
    # start, file, adjust, image watermark, invert, default logo
    driver, scripted, output = make_driver(img_dir, ["y", "test.jpg", "y", "2", "4", ""])

    assert driver.run_once() is True

    result_path = img_dir / "test-with-watermark.jpg"
    with Image.open(result_path) as result:
        # inverted white corner
        assert max(result.getpixel((0, 0))) < 16
    assert output.getvalue().strip().endswith(SUCCESS_MESSAGE)
    assert "logo.png" in scripted.questions[-1]


def test_missing_source_reports_generic_failure(img_dir):
    driver, scripted, output = make_driver(img_dir, ["y", "nope.jpg", "y", "1", "n"])

    assert driver.run() == 0

    text = output.getvalue()
    assert FAILURE_MESSAGE in text
    assert "nope.jpg" not in text
    # the adjustment menu is never shown for a missing source
    assert "Make image brighter" not in text
    assert len(scripted.questions) == 5


def test_missing_watermark_reports_generic_failure(img_dir):
    driver, _, output = make_driver(img_dir, ["y", "", "n", "2", "ghost.png"])

    assert driver.run_once() is False
    assert output.getvalue().strip().endswith(FAILURE_MESSAGE)
    assert not (img_dir / "test-with-watermark.jpg").exists()


def test_corrupt_source_reports_generic_failure(img_dir):
    (img_dir / "broken.png").write_bytes(b"not an image")
    driver, _, output = make_driver(img_dir, ["y", "broken.png", "n", "1", "HELLO"])

    assert driver.run_once() is False
    assert FAILURE_MESSAGE in output.getvalue()


def test_session_restarts_after_failure(img_dir):
    answers = [
        "y", "nope.jpg", "n", "1",
        "y", "", "n", "1", "HELLO",
        "n",
    ]
    driver, _, output = make_driver(img_dir, answers)

    assert driver.run() == 0

    text = output.getvalue()
    assert text.index(FAILURE_MESSAGE) < text.index(SUCCESS_MESSAGE)


def test_overlong_filename_reports_generic_failure(img_dir):
    # the OS rejects the name itself (ENAMETOOLONG); the loop must survive it
    driver, _, output = make_driver(img_dir, ["y", "x" * 300 + ".jpg", "n", "1", "n"])

    assert driver.run() == 0
    assert FAILURE_MESSAGE in output.getvalue()


def test_overlong_watermark_name_reports_generic_failure(img_dir):
    driver, _, output = make_driver(img_dir, ["y", "", "n", "2", "x" * 300 + ".png"])

    assert driver.run_once() is False
    assert output.getvalue().strip().endswith(FAILURE_MESSAGE)


def test_end_of_input_exits_cleanly(img_dir):
    driver, _, _ = make_driver(img_dir, ["y", ""])
    assert driver.run() == 0


# ===== Entry point =====

def test_main_uses_img_dir(img_dir, monkeypatch, capsys):
    answers = iter(["y", "", "n", "Text watermark", "HELLO", "n"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert main(["--img-dir", str(img_dir)]) == 0

    assert (img_dir / "test-with-watermark.jpg").exists()
    assert SUCCESS_MESSAGE in capsys.readouterr().out
