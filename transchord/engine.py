"""Engine: the public text-to-text transposition operations."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from transchord.errors import (
    InvalidKeyError,
    InvalidSourceKeyError,
    InvalidTargetKeyError,
    NoChordsFoundError,
)
from transchord.key_table import KEY_TABLE, KeySignature
from transchord.token_rewriter import TokenRewriter
from transchord.tokenizer import (
    Line,
    Tokenizer,
    build_delimiter_pattern,
    has_chords,
    render_lines,
)
from transchord.transposition_maps import (
    build_from_nashville_map,
    build_key_map,
    build_nashville_map,
    guess_key as guess_key_from_lines,
    parse_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransposeOptions:
    """
    Tokenizer configuration shared by every operation.

    Attributes:
        delimiter_symbols:     Extra literal symbols that separate tokens, on
                               top of whitespace. Empty keeps the default
                               pattern (anything but letters, digits, '#', '/').
        chord_ratio_threshold: Minimum fraction (0-1) of a line's meaningful
                               tokens that must be chords for the line to be
                               rewritten.
    """

    delimiter_symbols: tuple[str, ...] = ()
    chord_ratio_threshold: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.chord_ratio_threshold <= 1.0:
            raise ValueError(
                "chord_ratio_threshold must be between 0 and 1, "
                f"got {self.chord_ratio_threshold}."
            )
        object.__setattr__(self, "delimiter_symbols", tuple(self.delimiter_symbols))

    def tokenizer(self, accept_standard: bool, accept_nashville: bool) -> Tokenizer:
        return Tokenizer(
            accept_standard=accept_standard,
            accept_nashville=accept_nashville,
            delimiter_pattern=build_delimiter_pattern(self.delimiter_symbols),
            chord_ratio_threshold=self.chord_ratio_threshold,
        )


DEFAULT_OPTIONS = TransposeOptions()


# ── Private helpers ─────────────────────────────────────────────────────────

def _resolve_source_key(lines: Sequence[Line], from_key: str | None) -> KeySignature:
    if from_key:
        try:
            return parse_key(from_key)
        except InvalidKeyError:
            logger.debug("source key %r is not valid, guessing from the first chord", from_key)

    try:
        return guess_key_from_lines(lines)
    except InvalidSourceKeyError as exc:
        raise NoChordsFoundError(f"cannot determine the key of the text: {exc}") from exc


def _resolve_target_key(to_key: str) -> KeySignature:
    try:
        return parse_key(to_key)
    except InvalidKeyError as exc:
        raise InvalidTargetKeyError(to_key) from exc


def _require_chords(lines: Sequence[Line]) -> None:
    if not has_chords(lines):
        raise NoChordsFoundError()


def _rewrite(lines: Sequence[Line], transposition_map: Mapping[str, str]) -> str:
    return render_lines(TokenRewriter(transposition_map).rewrite(lines))


# ── Token-level operations ──────────────────────────────────────────────────

def transpose_lines_to_key(lines: Sequence[Line], from_key: str | None, to_key: str) -> str:
    """Transpose already-tokenized lines; see :func:`transpose_to_key`."""
    _require_chords(lines)
    source = _resolve_source_key(lines, from_key)
    target = _resolve_target_key(to_key)
    logger.debug("transposing from %s to %s", source, target)
    return _rewrite(lines, build_key_map(source, target))


def transpose_lines_to_nashville(lines: Sequence[Line], from_key: str | None) -> str:
    """Convert already-tokenized lines to Nashville numbers."""
    _require_chords(lines)
    source = _resolve_source_key(lines, from_key)
    logger.debug("converting from %s to Nashville numbers", source)
    return _rewrite(lines, build_nashville_map(source))


def transpose_lines_from_nashville(lines: Sequence[Line], to_key: str) -> str:
    """Convert already-tokenized Nashville lines to chords in *to_key*."""
    _require_chords(lines)
    target = _resolve_target_key(to_key)
    logger.debug("converting Nashville numbers to %s", target)
    return _rewrite(lines, build_from_nashville_map(target))


def transpose_lines_by_semitones(
    lines: Sequence[Line],
    semitones: int,
    from_key: str | None = None,
) -> str:
    """Transpose already-tokenized lines up (positive) or down by *semitones*."""
    _require_chords(lines)
    source = _resolve_source_key(lines, from_key)
    target = KEY_TABLE.transpose_key(source, semitones)
    logger.debug("shifting %+d semitone(s): %s to %s", semitones, source, target)
    return _rewrite(lines, build_key_map(source, target))


# ── Public API ──────────────────────────────────────────────────────────────

def tokenize(
    text: str,
    accept_standard: bool = True,
    accept_nashville: bool = False,
    options: TransposeOptions | None = None,
) -> list[Line]:
    """
    Split *text* into lines of ChordToken / TextToken.

    Rendering the result with :func:`render_lines` reproduces *text*.
    """
    options = options or DEFAULT_OPTIONS
    return options.tokenizer(accept_standard, accept_nashville).tokenize(text)


def transpose_to_key(
    text: str,
    from_key: str | None,
    to_key: str,
    options: TransposeOptions | None = None,
) -> str:
    """
    Rewrite the chords of *text* from one key into another.

    Args:
        text:     Chord sheet text, chord lines and lyric lines mixed.
        from_key: Key the text is written in. When empty or invalid, the key
                  is guessed from the first chord.
        to_key:   Destination key, e.g. "F", "Bb" or "Dm".
        options:  Tokenizer configuration.

    Returns:
        The text with every chord on a chord line transposed.

    Raises:
        NoChordsFoundError:    If the text holds no chord.
        InvalidTargetKeyError: If *to_key* is not a valid key.
    """
    lines = tokenize(text, True, False, options)
    return transpose_lines_to_key(lines, from_key, to_key)


def transpose_to_nashville(
    text: str,
    from_key: str | None = None,
    options: TransposeOptions | None = None,
) -> str:
    """
    Rewrite the chords of *text* as Nashville numbers relative to *from_key*.

    Raises:
        NoChordsFoundError: If the text holds no chord.
    """
    lines = tokenize(text, True, False, options)
    return transpose_lines_to_nashville(lines, from_key)


def transpose_from_nashville(
    text: str,
    to_key: str,
    options: TransposeOptions | None = None,
) -> str:
    """
    Rewrite Nashville numbers in *text* as chords in *to_key*.

    Nashville numbers carry no key, so *to_key* is required.

    Raises:
        NoChordsFoundError:    If the text holds no Nashville chord.
        InvalidTargetKeyError: If *to_key* is not a valid key.
    """
    lines = tokenize(text, False, True, options)
    return transpose_lines_from_nashville(lines, to_key)


def transpose_by_semitones(
    text: str,
    semitones: int,
    from_key: str | None = None,
    options: TransposeOptions | None = None,
) -> str:
    """Shift every chord of *text* by *semitones* (negative shifts down)."""
    lines = tokenize(text, True, False, options)
    return transpose_lines_by_semitones(lines, semitones, from_key)


def transpose_up(
    text: str,
    semitones: int,
    from_key: str | None = None,
    options: TransposeOptions | None = None,
) -> str:
    return transpose_by_semitones(text, semitones, from_key, options)


def transpose_down(
    text: str,
    semitones: int,
    from_key: str | None = None,
    options: TransposeOptions | None = None,
) -> str:
    return transpose_by_semitones(text, -semitones, from_key, options)


def guess_key(text: str, options: TransposeOptions | None = None) -> KeySignature:
    """
    Guess the key of *text* from its first chord.

    Raises:
        NoChordsFoundError:    If the text holds no chord.
        InvalidSourceKeyError: If the first chord resolves to no key.
    """
    return guess_key_from_lines(tokenize(text, True, False, options))
