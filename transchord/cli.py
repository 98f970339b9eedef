"""transchord CLI entry point."""

import logging
import sys
from collections.abc import Callable
from typing import IO, Any

import click

from transchord import __version__
from transchord.engine import (
    TransposeOptions,
    guess_key,
    transpose_down,
    transpose_from_nashville,
    transpose_to_key,
    transpose_to_nashville,
    transpose_up,
)
from transchord.errors import TransposerError

DEFAULT_CHORD_RATIO = 0.5
ENVVAR_PREFIX = "TRANSCHORD"


def _build_options(delimiters: tuple[str, ...], chord_ratio: float) -> TransposeOptions:
    return TransposeOptions(delimiter_symbols=delimiters, chord_ratio_threshold=chord_ratio)


def _emit(result: str, output: IO[str]) -> None:
    """Write *result*, adding a final line break only when it lacks one."""
    click.echo(result, file=output, nl=not result.endswith("\n"))


def _run(operation: Callable[[str], str], input_file: IO[str], output: IO[str]) -> None:
    """Read *input_file*, apply *operation* and write the result to *output*."""
    try:
        result = operation(input_file.read())
    except (OSError, UnicodeDecodeError) as exc:
        click.echo(f"  ERROR: Could not read input: {exc}", err=True)
        sys.exit(1)
    except TransposerError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    _emit(result, output)


def sheet_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the INPUT argument and the options every sheet command shares."""
    decorators = [
        click.argument(
            "input_file",
            metavar="INPUT",
            type=click.File("r", encoding="utf-8"),
            default="-",
        ),
        click.option(
            "--output",
            "-o",
            type=click.File("w", encoding="utf-8"),
            default="-",
            metavar="PATH",
            help="Destination file. Defaults to standard output.",
        ),
        click.option(
            "--delimiter",
            "-d",
            "delimiters",
            multiple=True,
            metavar="SYMBOL",
            help=(
                "Extra symbol that separates chords (repeatable). "
                "When given, only whitespace and these symbols separate tokens."
            ),
        ),
        click.option(
            "--chord-ratio",
            type=click.FloatRange(0.0, 1.0),
            default=DEFAULT_CHORD_RATIO,
            show_default=True,
            help="Minimum share of chords among the words of a line for it to be a chord line.",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


from_key_option = click.option(
    "--from",
    "from_key",
    default=None,
    metavar="KEY",
    help="Key the sheet is written in. Guessed from the first chord when omitted.",
)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "auto_envvar_prefix": ENVVAR_PREFIX,
    }
)
@click.version_option(version=__version__, prog_name="transchord")
@click.option("--verbose", "-v", is_flag=True, help="Log debugging details to stderr.")
def main(verbose: bool) -> None:
    """transchord: transpose chord sheets without breaking their columns."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── key subcommands ────────────────────────────────────────────────────────────

@main.command("to-key")
@click.argument("to_key", metavar="TO_KEY")
@from_key_option
@sheet_options
def to_key_command(
    to_key: str,
    from_key: str | None,
    input_file: IO[str],
    output: IO[str],
    delimiters: tuple[str, ...],
    chord_ratio: float,
) -> None:
    """
    Transpose a chord sheet into TO_KEY.

    INPUT is a text file, or - to read standard input.

    \b
    Examples:
      transchord to-key F song.txt
      transchord to-key Bb --from G song.txt -o song-bb.txt
      cat song.txt | transchord to-key Em --chord-ratio 0.3
    """
    options = _build_options(delimiters, chord_ratio)
    _run(lambda text: transpose_to_key(text, from_key, to_key, options), input_file, output)


@main.command("up")
@click.argument("semitones", type=click.IntRange(0, None))
@from_key_option
@sheet_options
def up(
    semitones: int,
    from_key: str | None,
    input_file: IO[str],
    output: IO[str],
    delimiters: tuple[str, ...],
    chord_ratio: float,
) -> None:
    """Transpose a chord sheet up by SEMITONES."""
    options = _build_options(delimiters, chord_ratio)
    _run(lambda text: transpose_up(text, semitones, from_key, options), input_file, output)


@main.command("down")
@click.argument("semitones", type=click.IntRange(0, None))
@from_key_option
@sheet_options
def down(
    semitones: int,
    from_key: str | None,
    input_file: IO[str],
    output: IO[str],
    delimiters: tuple[str, ...],
    chord_ratio: float,
) -> None:
    """Transpose a chord sheet down by SEMITONES."""
    options = _build_options(delimiters, chord_ratio)
    _run(lambda text: transpose_down(text, semitones, from_key, options), input_file, output)


# ── Nashville subcommands ──────────────────────────────────────────────────────

@main.command("to-nashville")
@from_key_option
@sheet_options
def to_nashville_command(
    from_key: str | None,
    input_file: IO[str],
    output: IO[str],
    delimiters: tuple[str, ...],
    chord_ratio: float,
) -> None:
    """
    Rewrite the chords of a sheet as Nashville numbers.

    \b
    Examples:
      transchord to-nashville --from G song.txt
    """
    options = _build_options(delimiters, chord_ratio)
    _run(lambda text: transpose_to_nashville(text, from_key, options), input_file, output)


@main.command("from-nashville")
@click.argument("to_key", metavar="TO_KEY")
@sheet_options
def from_nashville_command(
    to_key: str,
    input_file: IO[str],
    output: IO[str],
    delimiters: tuple[str, ...],
    chord_ratio: float,
) -> None:
    """
    Rewrite a Nashville-number sheet as chords in TO_KEY.

    \b
    Examples:
      transchord from-nashville D numbers.txt
    """
    options = _build_options(delimiters, chord_ratio)
    _run(lambda text: transpose_from_nashville(text, to_key, options), input_file, output)


# ── guess-key subcommand ───────────────────────────────────────────────────────

@main.command("guess-key")
@sheet_options
def guess_key_command(
    input_file: IO[str],
    output: IO[str],
    delimiters: tuple[str, ...],
    chord_ratio: float,
) -> None:
    """Print the key of a chord sheet, judged from its first chord."""
    options = _build_options(delimiters, chord_ratio)

    def describe(text: str) -> str:
        key = guess_key(text, options)
        if key.relative_minor:
            return f"{key.major_name} (relative minor {key.relative_minor})"
        return key.major_name

    _run(describe, input_file, output)
