"""ChordGrammar: recognises chord symbols and splits them into root, suffix and bass."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Final

from transchord.errors import NotAChordError
from transchord.key_table import ROOT_LETTERS

# ── Pattern fragments ───────────────────────────────────────────────────────

TRIAD_PATTERN: Final = r"(?:M|maj|major|m|min|minor|dim|sus|dom|aug|\+|-)"

ROOT_PATTERN: Final = rf"(?P<root>[{ROOT_LETTERS}][#b]?)"
ADDED_TONE_PATTERN: Final = r"(?:(?:[/.+]|add)?[b#]?[0-9]+[+-]?)"
BASS_PATTERN: Final = rf"(?:/(?P<bass>[{ROOT_LETTERS}][#b]?))?"

NASHVILLE_ROOT_PATTERN: Final = r"(?P<root>[b#]?[1-7])"
NASHVILLE_ADDED_TONE_PATTERN: Final = r"(?:(?:[.+]|add)?[b#]?[0-9]+[+-]?)"
NASHVILLE_BASS_PATTERN: Final = r"(?:/(?P<bass>[b#]?[1-7]))?"


def _suffix_pattern(added_tone: str) -> str:
    # Added tones are atomic: nothing after them can start inside a tone.
    return rf"(?P<suffix>\(?{TRIAD_PATTERN}?(?>{added_tone}*)\)?)"


CHORD_REGEX: Final = re.compile(
    ROOT_PATTERN + _suffix_pattern(ADDED_TONE_PATTERN) + BASS_PATTERN
)
NASHVILLE_CHORD_REGEX: Final = re.compile(
    NASHVILLE_ROOT_PATTERN + _suffix_pattern(NASHVILLE_ADDED_TONE_PATTERN) + NASHVILLE_BASS_PATTERN
)

# A leading minor marker that is not the start of a major marker ("maj",
# "M") and not a minor triad carrying a major seventh ("m(maj7)", "mM7").
MINOR_SUFFIX_REGEX: Final = re.compile(r"(?:minor|min|m)(?!aj|\(?maj|\(?M)")


@dataclass(frozen=True)
class Chord:
    """
    A chord symbol split into its parts.

    Attributes:
        root:   Root spelling exactly as written, e.g. "F#" or "b3".
        suffix: Quality and added tones, e.g. "m7" or "sus4". May be empty.
        bass:   Slash-bass spelling. Empty unless the symbol had a slash bass.
    """

    root: str
    suffix: str = ""
    bass: str = ""

    @property
    def is_minor(self) -> bool:
        """True if the suffix opens with a minor marker (m, min, minor)."""
        return MINOR_SUFFIX_REGEX.match(self.suffix) is not None

    def render(self) -> str:
        """Chord symbol text, e.g. 'Am7/G'."""
        if self.bass:
            return f"{self.root}{self.suffix}/{self.bass}"
        return f"{self.root}{self.suffix}"

    def __str__(self) -> str:
        return self.render()


# ── Grammars ────────────────────────────────────────────────────────────────

class ChordGrammar(ABC):
    """
    Abstract chord grammar.

    A token is a chord iff the whole token decomposes into root, optional
    suffix and optional slash bass with nothing left over.
    """

    name: str = "chord"

    @property
    @abstractmethod
    def regex(self) -> re.Pattern[str]:
        """Compiled pattern with named groups root, suffix and bass."""

    def matches(self, token: str) -> bool:
        return self.regex.fullmatch(token) is not None

    def parse(self, token: str) -> Chord:
        """
        Split *token* into a Chord.

        Raises:
            NotAChordError: If the token does not match the grammar.
        """
        match = self.regex.fullmatch(token)
        if match is None:
            raise NotAChordError(token, self.name)
        return Chord(
            root=match.group("root"),
            suffix=match.group("suffix") or "",
            bass=match.group("bass") or "",
        )


class StandardGrammar(ChordGrammar):
    """Letter-named chords: C, F#m7, Bbmaj7/D, H7, ..."""

    name = "chord"

    @property
    def regex(self) -> re.Pattern[str]:
        return CHORD_REGEX


class NashvilleGrammar(ChordGrammar):
    """Scale-degree chords: 1, b7, 6m7, 5/7, ..."""

    name = "nashville chord"

    @property
    def regex(self) -> re.Pattern[str]:
        return NASHVILLE_CHORD_REGEX


STANDARD_GRAMMAR: Final = StandardGrammar()
NASHVILLE_GRAMMAR: Final = NashvilleGrammar()


def is_chord(token: str) -> bool:
    return STANDARD_GRAMMAR.matches(token)


def parse_chord(token: str) -> Chord:
    return STANDARD_GRAMMAR.parse(token)


def is_nashville_chord(token: str) -> bool:
    return NASHVILLE_GRAMMAR.matches(token)


def parse_nashville_chord(token: str) -> Chord:
    return NASHVILLE_GRAMMAR.parse(token)
