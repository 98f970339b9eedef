"""Unit tests for chord substitution and column alignment in TokenRewriter."""

import pytest

from transchord.chord_grammar import Chord
from transchord.errors import UnmappableChordError
from transchord.token_rewriter import TokenRewriter
from transchord.tokenizer import ChordToken, TextToken, Tokenizer, render_lines
from transchord.transposition_maps import build_identity_map


def _rewrite(text: str, mapping: dict[str, str]) -> str:
    lines = Tokenizer().tokenize(text)
    return render_lines(TokenRewriter(mapping).rewrite(lines))


@pytest.mark.parametrize(
    "text",
    [
        "",
        "C G Am F",
        "G        C           Am7\nSaying I love you",
        "| G | D/F# | Em7 | C2 |",
        "Hm  \u041d7   \u0410m\n\n  words  ",
    ],
)
def test_identity_map_round_trip(text: str) -> None:
    assert _rewrite(text, dict(build_identity_map())) == text


def test_shorter_chord_is_padded() -> None:
    assert _rewrite("C# D", {"C#": "C", "D": "D"}) == "C  D"


def test_shorter_chord_at_end_of_line_is_not_padded() -> None:
    assert _rewrite("D C#", {"C#": "C", "D": "D"}) == "D C"


def test_longer_chord_takes_spaces_from_following_text() -> None:
    assert _rewrite("C    G", {"C": "Bb", "G": "F"}) == "Bb   F"


def test_debt_never_empties_a_text_token() -> None:
    assert _rewrite("C G", {"C": "Bb", "G": "F"}) == "Bb F"


def test_debt_is_settled_against_one_text_token_only() -> None:
    line = [
        ChordToken(chord=Chord("1")),
        TextToken(text=" "),
        TextToken(text="   x"),
    ]
    (rewritten,) = TokenRewriter({"1": "C#"}).rewrite([line])
    assert render_lines([rewritten]) == "C#    x"


def test_debt_accumulates_over_adjacent_chords() -> None:
    line = [
        ChordToken(chord=Chord("1")),
        ChordToken(chord=Chord("4")),
        TextToken(text="     x"),
    ]
    (rewritten,) = TokenRewriter({"1": "Bb", "4": "Eb"}).rewrite([line])
    assert render_lines([rewritten]) == "BbEb   x"


def test_unpaid_debt_at_end_of_line_is_dropped() -> None:
    assert _rewrite("G C", {"G": "Gb", "C": "Cb"}) == "Gb Cb"


def test_suffix_kept_and_bass_mapped() -> None:
    assert _rewrite("Dm7/F", {"D": "G", "F": "Bb"}) == "Gm7/Bb"


def test_rewritten_tokens_keep_structure() -> None:
    (line,) = Tokenizer().tokenize("G  Em")
    (rewritten,) = TokenRewriter({"G": "A", "E": "F#"}).rewrite([line])
    assert [type(token) for token in rewritten] == [ChordToken, TextToken, ChordToken]
    assert rewritten[2].text == "F#m"
    assert rewritten[2].offset == line[2].offset


def test_padding_merges_with_following_text() -> None:
    (line,) = Tokenizer().tokenize("D/F# | Em")
    (rewritten,) = TokenRewriter({"D": "5", "F#": "7", "E": "6"}).rewrite([line])
    assert rewritten[1] == TextToken(text="  | ", offset=3)


def test_missing_root_raises() -> None:
    with pytest.raises(UnmappableChordError, match="'X'"):
        TokenRewriter({}).rewrite([[ChordToken(chord=Chord("X"))]])


def test_missing_bass_raises() -> None:
    with pytest.raises(UnmappableChordError) as exc_info:
        _rewrite("C/E", {"C": "D"})
    assert exc_info.value.identifier == "E"
    assert isinstance(exc_info.value, LookupError)


def test_lyric_lines_pass_through() -> None:
    text = "C        G\nA long time ago"
    lines = Tokenizer(chord_ratio_threshold=0.5).tokenize(text)
    rewritten = TokenRewriter({"C": "D", "G": "A"}).rewrite(lines)
    assert render_lines(rewritten) == "D        A\nA long time ago"
