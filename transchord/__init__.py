"""transchord: transpose chord sheets between keys and Nashville numbers."""

from transchord.chord_grammar import (
    Chord,
    is_chord,
    is_nashville_chord,
    parse_chord,
    parse_nashville_chord,
)
from transchord.engine import (
    TransposeOptions,
    guess_key,
    tokenize,
    transpose_by_semitones,
    transpose_down,
    transpose_from_nashville,
    transpose_lines_by_semitones,
    transpose_lines_from_nashville,
    transpose_lines_to_key,
    transpose_lines_to_nashville,
    transpose_to_key,
    transpose_to_nashville,
    transpose_up,
)
from transchord.errors import (
    InvalidKeyError,
    InvalidSourceKeyError,
    InvalidTargetKeyError,
    NoChordsFoundError,
    NotAChordError,
    TransposerError,
    UnmappableChordError,
)
from transchord.key_table import KEY_TABLE, Accidental, KeySignature, KeyTable
from transchord.tokenizer import ChordToken, TextToken, Token, render_lines

__version__ = "0.1.0"

__all__ = [
    "KEY_TABLE",
    "Accidental",
    "Chord",
    "ChordToken",
    "InvalidKeyError",
    "InvalidSourceKeyError",
    "InvalidTargetKeyError",
    "KeySignature",
    "KeyTable",
    "NoChordsFoundError",
    "NotAChordError",
    "TextToken",
    "Token",
    "TransposeOptions",
    "TransposerError",
    "UnmappableChordError",
    "guess_key",
    "is_chord",
    "is_nashville_chord",
    "parse_chord",
    "parse_nashville_chord",
    "render_lines",
    "tokenize",
    "transpose_by_semitones",
    "transpose_down",
    "transpose_from_nashville",
    "transpose_lines_by_semitones",
    "transpose_lines_from_nashville",
    "transpose_lines_to_key",
    "transpose_lines_to_nashville",
    "transpose_to_key",
    "transpose_to_nashville",
    "transpose_up",
]
