"""KeyTable: pitch-class ranks and the registry of key signatures.

Everything in this module is built once at import time and never mutated.
Other components receive a :class:`KeyTable` (``KEY_TABLE`` by default)
instead of reaching for module globals.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final

SEMITONES_PER_OCTAVE = 12

# ── Pitch spellings ─────────────────────────────────────────────────────────

#: Semitone distance from C for every natural letter. H is the Germanic B natural.
LETTER_RANKS: Final[Mapping[str, int]] = MappingProxyType(
    {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11, "H": 11}
)

ACCIDENTAL_SHIFTS: Final[Mapping[str, int]] = MappingProxyType({"": 0, "#": 1, "b": -1})

#: Cyrillic homographs that chord sheets typed on a Cyrillic keyboard contain.
LOCALIZED_LETTERS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "А": "A",  # Cyrillic capital A
        "В": "B",  # Cyrillic capital VE
        "С": "C",  # Cyrillic capital ES
        "Е": "E",  # Cyrillic capital IE
        "Н": "H",  # Cyrillic capital EN
    }
)

#: Every letter the chord grammar accepts as a root or bass.
ROOT_LETTERS: Final[str] = "".join(LETTER_RANKS) + "".join(LOCALIZED_LETTERS)


def _build_spelling_ranks() -> Mapping[str, int]:
    ranks: dict[str, int] = {}
    for letter in ROOT_LETTERS:
        base = LETTER_RANKS[LOCALIZED_LETTERS.get(letter, letter)]
        for accidental, shift in ACCIDENTAL_SHIFTS.items():
            ranks[letter + accidental] = (base + shift) % SEMITONES_PER_OCTAVE
    return MappingProxyType(ranks)


#: Rank of every accepted pitch spelling, aliases included.
SPELLING_RANKS: Final[Mapping[str, int]] = _build_spelling_ranks()

# ── Chromatic scales ────────────────────────────────────────────────────────

SHARP_SCALE: Final = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
F_SHARP_SCALE: Final = ("C", "C#", "D", "D#", "E", "E#", "F#", "G", "G#", "A", "A#", "B")
C_SHARP_SCALE: Final = ("B#", "C#", "D", "D#", "E", "E#", "F#", "G", "G#", "A", "A#", "B")
FLAT_SCALE: Final = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")
G_FLAT_SCALE: Final = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "Cb")
C_FLAT_SCALE: Final = ("C", "Db", "D", "Eb", "Fb", "F", "Gb", "G", "Ab", "A", "Bb", "Cb")


class Accidental(Enum):
    """Whether a key spells its chromatic notes with flats or sharps."""

    FLAT = "flat"
    SHARP = "sharp"


@dataclass(frozen=True)
class KeySignature:
    """
    A major key together with its canonical chromatic spelling.

    Attributes:
        major_name:      Name of the major tonic, e.g. "Eb".
        relative_minor:  Name of the relative minor, e.g. "Cm". Empty for
                         keys that have none in common use (D#, G#).
        accidental:      Flat- or sharp-leaning spelling preference.
        rank:            Semitone distance of the tonic from C (0-11).
        chromatic_scale: Spelling to use for each of the 12 ranks.
    """

    major_name: str
    relative_minor: str
    accidental: Accidental
    rank: int
    chromatic_scale: tuple[str, ...]

    @property
    def is_flat(self) -> bool:
        return self.accidental is Accidental.FLAT

    def spell(self, rank: int) -> str:
        """Spelling of *rank* (taken modulo 12) in this key."""
        return self.chromatic_scale[rank % SEMITONES_PER_OCTAVE]

    def semitones_to(self, other: KeySignature) -> int:
        """Upward distance from this tonic to *other*, in [0, 11]."""
        return (other.rank - self.rank + SEMITONES_PER_OCTAVE) % SEMITONES_PER_OCTAVE

    def __str__(self) -> str:
        return self.major_name


#: Key signatures in lookup order. The last four are unconventional spellings.
DEFAULT_KEY_SIGNATURES: Final[tuple[KeySignature, ...]] = (
    KeySignature("C", "Am", Accidental.SHARP, 0, SHARP_SCALE),
    KeySignature("D", "Bm", Accidental.SHARP, 2, SHARP_SCALE),
    KeySignature("E", "C#m", Accidental.SHARP, 4, SHARP_SCALE),
    KeySignature("F", "Dm", Accidental.FLAT, 5, FLAT_SCALE),
    KeySignature("G", "Em", Accidental.SHARP, 7, SHARP_SCALE),
    KeySignature("A", "F#m", Accidental.SHARP, 9, SHARP_SCALE),
    KeySignature("B", "G#m", Accidental.SHARP, 11, SHARP_SCALE),
    KeySignature("Db", "Bbm", Accidental.FLAT, 1, FLAT_SCALE),
    KeySignature("Eb", "Cm", Accidental.FLAT, 3, FLAT_SCALE),
    KeySignature("Gb", "Ebm", Accidental.FLAT, 6, G_FLAT_SCALE),
    KeySignature("Ab", "Fm", Accidental.FLAT, 8, FLAT_SCALE),
    KeySignature("Bb", "Gm", Accidental.FLAT, 10, FLAT_SCALE),
    KeySignature("Cb", "Abm", Accidental.FLAT, 11, C_FLAT_SCALE),
    KeySignature("C#", "A#m", Accidental.SHARP, 1, C_SHARP_SCALE),
    KeySignature("D#", "", Accidental.SHARP, 3, SHARP_SCALE),
    KeySignature("F#", "D#m", Accidental.SHARP, 6, F_SHARP_SCALE),
    KeySignature("G#", "", Accidental.SHARP, 8, SHARP_SCALE),
)

#: Key used when a transposition is expressed in semitones rather than by name.
PREFERRED_KEY_NAMES: Final[tuple[str, ...]] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)


class KeyTable:
    """
    Read-only registry of pitch spellings and key signatures.

    Lookups
    -------
    - ``rank(spelling)``    pitch class of any accepted spelling.
    - ``lookup(name)``      key by exact major or relative-minor name.
    - ``key_for_root()``    key for a chord root, by name first, then by
                            the first key whose scale spells that root.
    - ``key_for_rank()``    preferred key for a semitone rank.
    """

    def __init__(
        self,
        signatures: Iterable[KeySignature] = DEFAULT_KEY_SIGNATURES,
        spelling_ranks: Mapping[str, int] = SPELLING_RANKS,
        preferred_names: Iterable[str] = PREFERRED_KEY_NAMES,
    ) -> None:
        self._signatures = tuple(signatures)
        self._ranks = MappingProxyType(dict(spelling_ranks))

        by_name: dict[str, KeySignature] = {}
        for signature in self._signatures:
            by_name[signature.major_name] = signature
            if signature.relative_minor:
                by_name[signature.relative_minor] = signature
        self._by_name = MappingProxyType(by_name)

        by_rank: dict[int, KeySignature] = {}
        for name in preferred_names:
            signature = by_name[name]
            by_rank[signature.rank] = signature
        for signature in self._signatures:
            by_rank.setdefault(signature.rank, signature)
        self._by_rank = MappingProxyType(by_rank)

    # ------------------------------------------------------------------
    # Pitch spellings
    # ------------------------------------------------------------------

    @property
    def spellings(self) -> tuple[str, ...]:
        """Every accepted pitch spelling, localised aliases included."""
        return tuple(self._ranks)

    @property
    def ranks(self) -> Mapping[str, int]:
        return self._ranks

    def rank(self, spelling: str) -> int:
        """
        Return the semitone rank (0-11) of a pitch spelling.

        Raises:
            ValueError: If *spelling* is not an accepted pitch spelling.
        """
        try:
            return self._ranks[spelling]
        except KeyError:
            raise ValueError(f"Unknown pitch spelling: {spelling!r}") from None

    @staticmethod
    def normalize(spelling: str) -> str:
        """Map localised letters to Latin and H to B, keeping the accidental."""
        if not spelling:
            return spelling
        letter = LOCALIZED_LETTERS.get(spelling[0], spelling[0])
        if letter == "H":
            letter = "B"
        return letter + spelling[1:]

    # ------------------------------------------------------------------
    # Key signatures
    # ------------------------------------------------------------------

    @property
    def signatures(self) -> tuple[KeySignature, ...]:
        return self._signatures

    def lookup(self, name: str) -> KeySignature | None:
        """Return the key whose major or relative-minor name is *name*."""
        return self._by_name.get(name)

    def key_for_root(self, root: str, minor: bool = False) -> KeySignature | None:
        """
        Resolve the key a chord with this root most likely belongs to.

        The root is normalised first. An exact name match ("Em" for a minor
        chord, "E" otherwise) wins; failing that, the first key whose
        chromatic scale contains the root spelling is returned.
        """
        latin_root = self.normalize(root)
        name = f"{latin_root}m" if minor else latin_root
        signature = self.lookup(name)
        if signature is not None:
            return signature

        for signature in self._signatures:
            if latin_root in signature.chromatic_scale:
                return signature
        return None

    def key_for_rank(self, rank: int) -> KeySignature:
        """Preferred key signature whose tonic sits at *rank* (modulo 12)."""
        return self._by_rank[rank % SEMITONES_PER_OCTAVE]

    def transpose_key(self, key: KeySignature, semitones: int) -> KeySignature:
        """Key reached by moving *key* up (or down, if negative) by *semitones*."""
        return self.key_for_rank(key.rank + semitones)


KEY_TABLE: Final[KeyTable] = KeyTable()
