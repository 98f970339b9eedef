"""TranspositionMapBuilder: pitch-spelling maps between keys and Nashville degrees."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final

from transchord.chord_grammar import parse_chord
from transchord.errors import (
    InvalidKeyError,
    InvalidSourceKeyError,
    NoChordsFoundError,
    NotAChordError,
)
from transchord.key_table import KEY_TABLE, SEMITONES_PER_OCTAVE, KeySignature, KeyTable
from transchord.tokenizer import ChordToken, Line

logger = logging.getLogger(__name__)

TranspositionMap = Mapping[str, str]

# ── Nashville degree tables ─────────────────────────────────────────────────

#: Degree name of each interval above the tonic, spelled with sharps.
SHARP_NASHVILLE_DEGREES: Final[tuple[str, ...]] = (
    "1", "#1", "2", "#2", "3", "4", "#4", "5", "#5", "6", "#6", "7",
)

#: Degree name of each interval above the tonic, spelled with flats.
FLAT_NASHVILLE_DEGREES: Final[tuple[str, ...]] = (
    "1", "b2", "2", "b3", "3", "4", "b5", "5", "b6", "6", "b7", "7",
)

#: Semitones above the tonic of each major-scale degree 1-7.
MAJOR_SCALE_INTERVALS: Final[tuple[int, ...]] = (0, 2, 4, 5, 7, 9, 11)

NASHVILLE_ACCIDENTALS: Final[Mapping[str, int]] = MappingProxyType({"": 0, "#": 1, "b": -1})


def _interval(rank: int, tonic: int) -> int:
    return (rank - tonic + SEMITONES_PER_OCTAVE) % SEMITONES_PER_OCTAVE


# ── Map builders ────────────────────────────────────────────────────────────

def build_key_map(
    from_key: KeySignature,
    to_key: KeySignature,
    key_table: KeyTable = KEY_TABLE,
) -> TranspositionMap:
    """
    Map every pitch spelling to its transposed spelling in *to_key*.

    Each spelling resolves through its rank and is re-spelled with the
    destination scale, so a D# heading into a flat key comes out as Eb.
    """
    semitones = from_key.semitones_to(to_key)
    return MappingProxyType(
        {
            spelling: to_key.spell(rank + semitones)
            for spelling, rank in key_table.ranks.items()
        }
    )


def build_nashville_map(
    from_key: KeySignature,
    key_table: KeyTable = KEY_TABLE,
) -> TranspositionMap:
    """Map every pitch spelling to its Nashville degree relative to *from_key*."""
    degrees = FLAT_NASHVILLE_DEGREES if from_key.is_flat else SHARP_NASHVILLE_DEGREES
    return MappingProxyType(
        {
            spelling: degrees[_interval(rank, from_key.rank)]
            for spelling, rank in key_table.ranks.items()
        }
    )


def build_from_nashville_map(to_key: KeySignature) -> TranspositionMap:
    """
    Map Nashville degrees to pitch spellings in *to_key*.

    Both the sharp and the flat name of an interval ("#1" and "b2") resolve
    to the single spelling *to_key* uses for it. Remaining degree names such
    as "#3" or "b1" are filled from the major-scale position of the degree.
    """
    mapping: dict[str, str] = {}
    for interval in range(SEMITONES_PER_OCTAVE):
        root = to_key.spell(to_key.rank + interval)
        mapping[SHARP_NASHVILLE_DEGREES[interval]] = root
        mapping[FLAT_NASHVILLE_DEGREES[interval]] = root

    for degree, degree_interval in enumerate(MAJOR_SCALE_INTERVALS, start=1):
        for accidental, shift in NASHVILLE_ACCIDENTALS.items():
            mapping.setdefault(
                f"{accidental}{degree}",
                to_key.spell(to_key.rank + degree_interval + shift),
            )

    return MappingProxyType(mapping)


def build_identity_map(key_table: KeyTable = KEY_TABLE) -> TranspositionMap:
    """Map every pitch spelling to itself."""
    return MappingProxyType({spelling: spelling for spelling in key_table.spellings})


# ── Key resolution ──────────────────────────────────────────────────────────

def parse_key(name: str, key_table: KeyTable = KEY_TABLE) -> KeySignature:
    """
    Resolve a key name such as "G", "Em" or "Bb" to a key signature.

    The name is read as a chord, so "Am" resolves to C major and "Am7"
    does too.

    Raises:
        InvalidKeyError: If *name* is not a chord or no key spells its root.
    """
    try:
        chord = parse_chord(name.strip())
    except NotAChordError as exc:
        raise InvalidKeyError(name) from exc

    signature = key_table.key_for_root(chord.root, chord.is_minor)
    if signature is None:
        raise InvalidKeyError(name, "no key signature spells its root")
    return signature


def guess_key(lines: Iterable[Line], key_table: KeyTable = KEY_TABLE) -> KeySignature:
    """
    Guess the key of tokenized text from its first chord.

    Raises:
        NoChordsFoundError:    If no line contains a chord token.
        InvalidSourceKeyError: If the first chord resolves to no key.
    """
    for line in lines:
        for token in line:
            if not isinstance(token, ChordToken):
                continue
            chord = token.chord
            signature = key_table.key_for_root(chord.root, chord.is_minor)
            if signature is None:
                raise InvalidSourceKeyError(chord.render(), "no key signature spells its root")
            logger.debug("guessed key %s from chord %s", signature, chord)
            return signature

    raise NoChordsFoundError()
