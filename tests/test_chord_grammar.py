"""Unit tests for the chord and Nashville-number grammars."""

import pytest

from transchord.chord_grammar import (
    Chord,
    is_chord,
    is_nashville_chord,
    parse_chord,
    parse_nashville_chord,
)
from transchord.errors import NotAChordError


@pytest.mark.parametrize(
    ("token", "root", "suffix", "bass"),
    [
        ("C", "C", "", ""),
        ("Am", "A", "m", ""),
        ("G7", "G", "7", ""),
        ("Fmaj7", "F", "maj7", ""),
        ("Cmajor7", "C", "major7", ""),
        ("Dm7/F", "D", "m7", "F"),
        ("E7/G#", "E", "7", "G#"),
        ("Bb", "Bb", "", ""),
        ("Dsus4", "D", "sus4", ""),
        ("Caug", "C", "aug", ""),
        ("Bdim", "B", "dim", ""),
        ("C#m7b5", "C#", "m7b5", ""),
        ("Cadd9", "C", "add9", ""),
        ("C6/9", "C", "6/9", ""),
        ("Gb+5", "Gb", "+5", ""),
        ("A(m7)", "A", "(m7)", ""),
        ("Hm", "H", "m", ""),
        ("Cb5", "Cb", "5", ""),
        ("Eb7", "Eb", "7", ""),
        ("Ab6/C", "Ab", "6", "C"),
        ("\u0410m7/\u0421", "\u0410", "m7", "\u0421"),
    ],
)
def test_parse_chord(token: str, root: str, suffix: str, bass: str) -> None:
    assert parse_chord(token) == Chord(root=root, suffix=suffix, bass=bass)


@pytest.mark.parametrize(
    "token",
    ["", "Hello", "X", "cm", "C/E/", "Ab/", "Em7add", "Do", "Text with spaces", "123"],
)
def test_rejects_non_chords(token: str) -> None:
    assert not is_chord(token)
    with pytest.raises(NotAChordError):
        parse_chord(token)


def test_not_a_chord_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="not a valid chord"):
        parse_chord("Hello")


def test_long_digit_runs_fail_fast() -> None:
    assert not is_chord("C" + "1" * 5000 + "x")
    assert not is_chord("C" + "1+" * 40 + "x")


@pytest.mark.parametrize(
    ("suffix", "expected"),
    [
        ("m", True),
        ("min", True),
        ("minor", True),
        ("m7", True),
        ("min9", True),
        ("m7b5", True),
        ("", False),
        ("maj7", False),
        ("major", False),
        ("M7", False),
        ("dim", False),
        ("sus4", False),
        ("m(maj7)", False),
        ("mM7", False),
    ],
)
def test_is_minor(suffix: str, expected: bool) -> None:
    assert Chord(root="A", suffix=suffix).is_minor is expected


def test_render_with_and_without_bass() -> None:
    assert Chord(root="D", suffix="m7", bass="F").render() == "Dm7/F"
    assert Chord(root="F", suffix="maj7").render() == "Fmaj7"
    assert str(Chord(root="G")) == "G"


@pytest.mark.parametrize(
    ("token", "root", "suffix", "bass"),
    [
        ("1", "1", "", ""),
        ("b7", "b7", "", ""),
        ("#4dim", "#4", "dim", ""),
        ("6m7", "6", "m7", ""),
        ("5/7", "5", "", "7"),
        ("42", "4", "2", ""),
        ("2m/b7", "2", "m", "b7"),
    ],
)
def test_parse_nashville_chord(token: str, root: str, suffix: str, bass: str) -> None:
    assert parse_nashville_chord(token) == Chord(root=root, suffix=suffix, bass=bass)


@pytest.mark.parametrize("token", ["", "0", "8", "9m", "C", "5/8", "b"])
def test_rejects_non_nashville_chords(token: str) -> None:
    assert not is_nashville_chord(token)
    with pytest.raises(NotAChordError):
        parse_nashville_chord(token)
