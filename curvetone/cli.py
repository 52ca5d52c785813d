from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import IO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.traceback import Traceback

from .logging_utils import configure_logging, debug_enabled, get_log_path, log_exception
from .score import load_score
from .synthesis import curve_tone, sine_tone
from .wav import SAMPLE_RATE, wav_info, write_output

_LOGGER = logging.getLogger("curvetone.cli")
_CONSOLE = Console()

_DEFAULT_DURATION = 1.0
_DEFAULT_AMPLITUDE = 0.8


def render_error(
    context: str,
    exc: BaseException,
    *,
    stream: IO[str] | None = None,
) -> None:
    target = stream or sys.stderr
    debug = debug_enabled()
    log_path = get_log_path()
    if target.isatty():
        console = Console(file=target)
        body = Text.assemble(
            ("curvetone error while ", "bold"),
            (context, "bold"),
            (":\n\n", "bold"),
            Text(type(exc).__name__, style="bold red"),
            (": ", "bold"),
            Text(str(exc)),
            (f"\nLogs: {log_path}", "dim"),
            ("\n\nSet CURVETONE_DEBUG=1 for console trace.", "dim"),
        )
        console.print(Panel(body, title="Error", border_style="red"))
        if debug:
            console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
    else:
        target.write(f"{context} failed: {type(exc).__name__}: {exc} (logs: {log_path})\n")
        if debug:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=target)


def _add_tone_options(parser: argparse.ArgumentParser, default_output: str) -> None:
    parser.add_argument("--duration", type=float, default=_DEFAULT_DURATION)
    parser.add_argument("--amplitude", type=float, default=_DEFAULT_AMPLITUDE)
    parser.add_argument("--sample-rate", type=int, default=SAMPLE_RATE)
    parser.add_argument("-o", "--output", type=str, default=default_output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curvetone")
    sub = parser.add_subparsers(dest="command", required=True)

    tone = sub.add_parser("tone", help="Render a sine tone.")
    tone.add_argument("frequency", type=float)
    _add_tone_options(tone, "tone.wav")

    curve = sub.add_parser("curve", help="Render a Bezier-shaped tone.")
    curve.add_argument("frequency", type=float)
    curve.add_argument("control_points", type=float, nargs=4, metavar="P")
    _add_tone_options(curve, "curve.wav")

    render = sub.add_parser("render", help="Render a JSON score exported by the editor.")
    render.add_argument("score", type=str)
    render.add_argument("--sample-rate", type=int, default=None)
    render.add_argument("-o", "--output", type=str, default=None)

    info = sub.add_parser("info", help="Describe a WAV file.")
    info.add_argument("path", type=str)
    return parser


def _info_table(path: str) -> Table:
    details = wav_info(path)
    table = Table(title=path, show_header=False)
    table.add_row("Sample rate", f"{details.sample_rate} Hz")
    table.add_row("Channels", str(details.channels))
    table.add_row("Frames", str(details.frames))
    table.add_row("Duration", f"{details.duration:.3f} s")
    table.add_row("Subtype", details.subtype)
    return table


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        if args.command == "tone":
            data = sine_tone(args.frequency, args.sample_rate, args.duration, args.amplitude)
            path = write_output(args.output, data)
            _CONSOLE.print(f"Wrote {args.frequency} Hz sine tone to {path}")
            return 0

        if args.command == "curve":
            data = curve_tone(
                args.frequency,
                args.sample_rate,
                args.control_points,
                args.duration,
                args.amplitude,
            )
            path = write_output(args.output, data)
            _CONSOLE.print(f"Wrote {args.frequency} Hz curve tone to {path}")
            return 0

        if args.command == "render":
            score = load_score(args.score)
            with _CONSOLE.status(f"Rendering {len(score.notes)} notes"):
                data = score.render(sample_rate=args.sample_rate)
            output = args.output or Path(args.score).with_suffix(".wav")
            path = write_output(output, data)
            _CONSOLE.print(f"Wrote {score.waveform} score at {score.bpm} bpm to {path}")
            return 0

        if args.command == "info":
            _CONSOLE.print(_info_table(args.path))
            return 0

        parser.print_help()
        return 1
    except Exception as exc:
        _LOGGER.warning("curvetone CLI failed: %s", exc, exc_info=debug_enabled())
        log_exception("curvetone CLI", exc)
        render_error("curvetone CLI", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
