"""Tokenizer: splits chord-sheet text into chord and literal-text tokens per line."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Final

from transchord.chord_grammar import (
    NASHVILLE_GRAMMAR,
    STANDARD_GRAMMAR,
    Chord,
    ChordGrammar,
)

logger = logging.getLogger(__name__)

#: Runs of anything that is not a letter, a digit, '#' or '/'.
DEFAULT_DELIMITER_PATTERN: Final = re.compile(r"(?:[^\w#/]|_)+")

LINE_BREAK: Final = "\n"


@dataclass(frozen=True)
class ChordToken:
    """A recognised chord and the offset where it starts in the source text."""

    chord: Chord
    offset: int = 0
    text: str = ""

    def render(self) -> str:
        return self.chord.render()


@dataclass(frozen=True)
class TextToken:
    """A literal run of text kept as written."""

    text: str
    offset: int = 0

    def render(self) -> str:
        return self.text


Token = ChordToken | TextToken
Line = list[Token]


def build_delimiter_pattern(symbols: Iterable[str] = ()) -> re.Pattern[str]:
    """
    Build the pattern that separates tokens on a line.

    With no symbols the default pattern is returned. Otherwise tokens are
    separated by whitespace runs or by any of the given literal symbols.
    """
    symbols = [symbol for symbol in symbols if symbol]
    if not symbols:
        return DEFAULT_DELIMITER_PATTERN

    alternatives = [r"\s+"] + [re.escape(symbol) for symbol in symbols]
    return re.compile("(?:" + "|".join(alternatives) + ")")


def split_keeping_delimiters(line: str, delimiter: re.Pattern[str]) -> list[str]:
    """
    Split *line* on *delimiter*, keeping every delimiter match as its own piece.

    Empty spans between adjacent matches are dropped, so joining the pieces
    always reproduces *line*.
    """
    pieces: list[str] = []
    position = 0
    for match in delimiter.finditer(line):
        if match.start() == match.end():
            continue
        if match.start() > position:
            pieces.append(line[position:match.start()])
        pieces.append(match.group())
        position = match.end()
    if position < len(line):
        pieces.append(line[position:])
    return pieces


class Tokenizer:
    """
    Turns text into lines of ChordToken / TextToken.

    A line is a chord line when the share of its meaningful tokens that
    parse as chords reaches *chord_ratio_threshold*. Every other line is
    emitted as one TextToken so words such as "A" in lyrics are never
    rewritten.
    """

    def __init__(
        self,
        accept_standard: bool = True,
        accept_nashville: bool = False,
        delimiter_pattern: re.Pattern[str] = DEFAULT_DELIMITER_PATTERN,
        chord_ratio_threshold: float = 0.0,
    ) -> None:
        """
        Args:
            accept_standard:       Recognise letter-named chords.
            accept_nashville:      Recognise Nashville-number chords.
            delimiter_pattern:     Pattern separating tokens on a line.
            chord_ratio_threshold: Minimum fraction (0-1) of meaningful tokens
                                   that must be chords on a chord line.
        """
        if not 0.0 <= chord_ratio_threshold <= 1.0:
            raise ValueError(
                f"chord_ratio_threshold must be between 0 and 1, got {chord_ratio_threshold}."
            )
        self.delimiter_pattern = delimiter_pattern
        self.chord_ratio_threshold = chord_ratio_threshold
        self.grammars: list[ChordGrammar] = []
        if accept_standard:
            self.grammars.append(STANDARD_GRAMMAR)
        if accept_nashville:
            self.grammars.append(NASHVILLE_GRAMMAR)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _parse(self, piece: str) -> Chord | None:
        for grammar in self.grammars:
            if grammar.matches(piece):
                return grammar.parse(piece)
        return None

    def _is_meaningful(self, piece: str) -> bool:
        stripped = piece.strip()
        return bool(stripped) and self.delimiter_pattern.search(stripped) is None

    def _is_chord_line(self, pieces: list[str], chords: list[Chord | None]) -> bool:
        meaningful = [chord for piece, chord in zip(pieces, chords) if self._is_meaningful(piece)]
        if not meaningful:
            return False
        chord_count = sum(1 for chord in meaningful if chord is not None)
        if chord_count == 0:
            return False
        return chord_count / len(meaningful) >= self.chord_ratio_threshold

    def _tokenize_line(self, line: str, offset: int) -> Line:
        pieces = split_keeping_delimiters(line, self.delimiter_pattern)
        chords = [self._parse(piece) if piece.strip() else None for piece in pieces]
        chord_line = self._is_chord_line(pieces, chords)
        logger.debug("chord line=%s: %r", chord_line, line)

        tokens: Line = []
        for piece, parsed in zip(pieces, chords):
            chord = parsed if chord_line else None

            if chord is not None:
                tokens.append(ChordToken(chord=chord, offset=offset, text=piece))
            elif tokens and isinstance(tokens[-1], TextToken):
                previous = tokens[-1]
                tokens[-1] = TextToken(text=previous.text + piece, offset=previous.offset)
            else:
                tokens.append(TextToken(text=piece, offset=offset))
            offset += len(piece)

        return tokens

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def iter_lines(self, text: str) -> Iterator[Line]:
        """Yield the tokens of each line of *text* in order."""
        offset = 0
        for line in text.split(LINE_BREAK):
            yield self._tokenize_line(line, offset)
            offset += len(line) + len(LINE_BREAK)

    def tokenize(self, text: str) -> list[Line]:
        """
        Tokenize *text* line by line.

        Returns:
            One list of tokens per line. Joining the rendered tokens of each
            line and the lines with line breaks reproduces *text* exactly.
        """
        return list(self.iter_lines(text))


def has_chords(lines: Iterable[Line]) -> bool:
    return any(isinstance(token, ChordToken) for line in lines for token in line)


def render_lines(lines: Iterable[Line]) -> str:
    """Join rendered tokens within each line, and lines with line breaks."""
    return LINE_BREAK.join("".join(token.render() for token in line) for line in lines)
