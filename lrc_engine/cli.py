from __future__ import annotations

import asyncio
import json
from pathlib import Path

import colorama
from colorama import Fore, Style
import typer

from lrc_engine.config import AppConfig, load_config
from lrc_engine.logging_setup import setup_logging
from lrc_engine.lrc.parse import parse_lrc_with_stats
from lrc_engine.sync.engine import LrcEngine


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _fmt_time(ms: int) -> str:
    sign = "-" if ms < 0 else ""
    m, rem = divmod(abs(ms), 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{sign}{m:02d}:{s:02d}.{ms2 // 10:02d}"


def _read_text(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e


@app.command()
def parse(
    lrc_path: Path,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Parse LRC and print tags, stats and timed lines."""
    cfg = load_config()
    doc, stats = parse_lrc_with_stats(_read_text(lrc_path, cfg.encoding))

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "tags": doc.tags.as_dict(),
                    "offset_ms": doc.tags.offset_ms,
                    "lines": [{"time": ln.time, "text": ln.text} for ln in doc.lines],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"lines_with_timestamps={stats.lines_with_timestamps}")
    typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"lines_kept={stats.lines_kept}")
    typer.echo(f"offset_ms={doc.tags.offset_ms}")
    typer.echo(f"tags={doc.tags.as_dict()}")
    for ln in doc.lines:
        typer.echo(f"[{_fmt_time(ln.time)}] {ln.text}")


async def _play(text: str, start_ms: int, cfg: AppConfig, color: bool) -> int:
    done = asyncio.Event()
    engine: LrcEngine | None = None

    def on_line(line_num: int, line_text: str) -> None:
        assert engine is not None
        prefix = f"[{_fmt_time(engine.lines[line_num].time)}] " if cfg.show_timestamps else ""
        if color:
            typer.echo(f"{Style.DIM}{prefix}{Style.RESET_ALL}{Fore.GREEN}{Style.BRIGHT}{line_text}{Style.RESET_ALL}")
        else:
            typer.echo(f"{prefix}{line_text}")
        if line_num >= len(engine.lines) - 1:
            done.set()

    engine = LrcEngine(text, on_line)
    if not engine.lines:
        typer.echo("No timed lines found", err=True)
        return 1

    tags = engine.tags
    if tags.artist or tags.title:
        header = " - ".join(p for p in (tags.artist, tags.title) if p)
        typer.echo(f"{Fore.CYAN}{Style.BRIGHT}♫ {header} ♫{Style.RESET_ALL}" if color else f"♫ {header} ♫")

    engine.play(start_ms)
    try:
        await done.wait()
    finally:
        engine.stop()
    return 0


@app.command()
def play(
    lrc_path: Path,
    start_ms: int = typer.Option(0, "--start", help="Start position (ms)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """
    Print each lyric line when it is due, starting at --start.
    """
    cfg = load_config()
    setup_logging(debug)
    text = _read_text(lrc_path, cfg.encoding)

    color = cfg.color and not no_color
    if color:
        colorama.just_fix_windows_console()

    try:
        code = asyncio.run(_play(text, start_ms, cfg, color))
    except KeyboardInterrupt:
        code = 130
    raise typer.Exit(code=code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
