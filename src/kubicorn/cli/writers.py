"""Output writers for help and usage text.

Three renderings are available:

* :class:`PlainWriter` — text as-is on stdout (the default).
* :class:`FabulousWriter` — a rainbow, one colour per line, using the
  256-colour palette.  Enabled by ``--fab``.
* :class:`TrueColorWriter` — a 24-bit gradient that shifts per
  character.  Enabled by a non-empty ``KUBICORN_TRUECOLOR`` and wins
  over ``--fab``.

The choice is made by :func:`select_writer` every time the root action
runs, never cached.
"""

from __future__ import annotations

import colorsys
import sys
from collections.abc import Mapping
from typing import Any, TextIO

from kubicorn.exceptions import EnvironmentError

TRUECOLOR_ENV: str = "KUBICORN_TRUECOLOR"

RAINBOW: tuple[str, ...] = (
    "red",
    "dark_orange",
    "yellow",
    "green",
    "deep_sky_blue1",
    "blue",
    "magenta",
)


def _import_rich() -> tuple[type[Any], type[Any]]:
    """Import Rich lazily for decorated output."""
    try:
        from rich.console import Console
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console, Text


class PlainWriter:
    """Writes text unchanged to *stream* (``sys.stdout`` at write time)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream: TextIO | None = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class FabulousWriter(PlainWriter):
    """Rainbow text, one palette colour per line."""

    color_system: str = "256"

    def write(self, text: str) -> None:
        console_class, text_class = _import_rich()
        rich_console = console_class(
            file=self.stream,
            color_system=self.color_system,
            force_terminal=True,
            highlight=False,
            soft_wrap=True,
        )
        rich_console.print(self.decorate(text, text_class), end="")

    def decorate(self, text: str, text_class: type[Any]) -> Any:
        rendered = text_class()
        for index, line in enumerate(text.splitlines(keepends=True)):
            rendered.append(line, style=RAINBOW[index % len(RAINBOW)])
        return rendered


class TrueColorWriter(FabulousWriter):
    """24-bit hue gradient advancing with every visible character."""

    color_system = "truecolor"

    hue_step: float = 0.012

    def decorate(self, text: str, text_class: type[Any]) -> Any:
        rendered = text_class()
        hue = 0.0
        for char in text:
            if char.isspace():
                rendered.append(char)
                continue
            red, green, blue = (int(channel * 255) for channel in colorsys.hsv_to_rgb(hue, 0.8, 1.0))
            rendered.append(char, style=f"rgb({red},{green},{blue})")
            hue = (hue + self.hue_step) % 1.0
        return rendered


def select_writer(*, fabulous: bool, environ: Mapping[str, str]) -> PlainWriter:
    """Pick the writer for this invocation."""
    if environ.get(TRUECOLOR_ENV):
        return TrueColorWriter()
    if fabulous:
        return FabulousWriter()
    return PlainWriter()
