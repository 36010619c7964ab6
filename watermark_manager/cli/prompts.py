"""
Terminal Prompts
================
Minimal confirm / text / select questions over input() and a text stream.
"""

import sys
from typing import Callable, Optional, Sequence, TextIO

_YES = {"y", "yes"}
_NO = {"n", "no"}


class Prompter:
    """
    Asks one question at a time and returns the answer.

    EOFError and KeyboardInterrupt from input_func propagate to the caller.
    """

    def __init__(
            self,
            input_func: Optional[Callable[[str], str]] = None,
            output: Optional[TextIO] = None
    ):
        self._input = input_func or input
        self._output = output or sys.stdout

    def say(self, message: str):
        print(message, file=self._output)

    def confirm(self, message: str, default: bool = True) -> bool:
        """Yes/no question. An empty answer returns default."""
        hint = "(Y/n)" if default else "(y/N)"
        while True:
            answer = self._input(f"? {message} {hint} ").strip().lower()
            if not answer:
                return default
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            self.say("Please answer y or n.")

    def text(self, message: str, default: Optional[str] = None) -> str:
        """Free-text question. An empty answer returns default (or "")."""
        hint = f" ({default})" if default else ""
        answer = self._input(f"? {message}{hint} ").strip()
        if not answer and default is not None:
            return default
        return answer

    def select(self, message: str, choices: Sequence[str]) -> str:
        """
        Single-select question.

        Accepts the choice number (1-based) or the exact label.
        """
        if not choices:
            raise ValueError("select() needs at least one choice")

        self.say(f"? {message}")
        for index, choice in enumerate(choices, start=1):
            self.say(f"  {index}) {choice}")

        while True:
            answer = self._input("  Answer: ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            if answer in choices:
                return answer
            self.say(f"Please enter a number between 1 and {len(choices)}.")
