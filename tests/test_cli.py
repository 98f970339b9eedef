"""Tests for the click command-line interface."""

from pathlib import Path

from click.testing import CliRunner

from transchord import __version__
from transchord.cli import main

SONG = "G        C           Am7\nSaying I love you\n"


def _invoke(args: list[str], text: str = "", **kwargs):
    return CliRunner().invoke(main, args, input=text, **kwargs)


def test_to_key_reads_stdin_and_writes_stdout() -> None:
    result = _invoke(["to-key", "F", "--from", "G"], SONG)
    assert result.exit_code == 0, result.output
    assert result.output == "F        Bb          Gm7\nSaying I love you\n"


def test_to_key_guesses_source_key() -> None:
    result = _invoke(["to-key", "A"], "G C D\n")
    assert result.exit_code == 0, result.output
    assert result.output == "A D E\n"


def test_output_without_trailing_newline_gets_one() -> None:
    result = _invoke(["to-key", "D", "--from", "C"], "C G")
    assert result.output == "D A\n"


def test_up_and_down() -> None:
    up = _invoke(["up", "2", "--from", "C"], "C F G\n")
    down = _invoke(["down", "2", "--from", "D"], "D G A\n")
    assert up.output == "D G A\n"
    assert down.output == "C F G\n"


def test_negative_semitones_are_rejected() -> None:
    result = _invoke(["up", "-3"], "C F G\n")
    assert result.exit_code == 2


def test_nashville_commands() -> None:
    numbers = _invoke(["to-nashville", "--from", "G"], "| G | D/F# | Em7 | C2 |\n")
    assert numbers.output == "| 1 | 5/7  | 6m7 | 42 |\n"

    chords = _invoke(["from-nashville", "G"], numbers.output)
    assert chords.output == "| G | D/F# | Em7 | C2 |\n"


def test_guess_key() -> None:
    assert _invoke(["guess-key"], "Em C G D\n").output == "G (relative minor Em)\n"
    assert _invoke(["guess-key"], "D# G#\n").output == "D#\n"


def test_sheet_without_chords_fails() -> None:
    result = _invoke(["to-key", "F"], "hello world\n")
    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert "no chords" in result.output


def test_invalid_target_key_fails() -> None:
    result = _invoke(["to-key", "X", "--from", "C"], "C G\n")
    assert result.exit_code == 1
    assert "not a valid key signature" in result.output


def test_default_chord_ratio_leaves_lyrics_alone() -> None:
    result = _invoke(["to-key", "A", "--from", "G"], "G C\nA love song\n")
    assert result.output == "A D\nA love song\n"


def test_chord_ratio_option() -> None:
    result = _invoke(["to-key", "A", "--from", "G", "--chord-ratio", "0"], "G C\nA love song\n")
    assert result.output == "A D\nB love song\n"


def test_chord_ratio_from_environment() -> None:
    result = _invoke(
        ["to-key", "A", "--from", "G"],
        "G C\nA love song\n",
        env={"TRANSCHORD_TO_KEY_CHORD_RATIO": "0"},
    )
    assert result.output == "A D\nB love song\n"


def test_chord_ratio_out_of_range_is_a_usage_error() -> None:
    result = _invoke(["to-key", "A", "--chord-ratio", "1.5"], "G C\n")
    assert result.exit_code == 2


def test_delimiter_option() -> None:
    result = _invoke(["to-key", "D", "--from", "C", "-d", "/"], "C/G\n")
    assert result.exit_code == 0, result.output
    assert result.output == "D/A\n"


def test_input_and_output_files(tmp_path: Path) -> None:
    source = tmp_path / "song.txt"
    target = tmp_path / "song-f.txt"
    source.write_text(SONG, encoding="utf-8")

    result = CliRunner().invoke(main, ["to-key", "F", str(source), "-o", str(target)])

    assert result.exit_code == 0, result.output
    assert result.output == ""
    assert target.read_text(encoding="utf-8") == "F        Bb          Gm7\nSaying I love you\n"


def test_version() -> None:
    result = _invoke(["--version"])
    assert __version__ in result.output


def test_undecodable_input_is_reported(tmp_path: Path) -> None:
    source = tmp_path / "song.txt"
    source.write_bytes(b"C G \xff\xfe Am\n")

    result = CliRunner().invoke(main, ["to-key", "D", "--from", "C", str(source)])

    assert result.exit_code == 1
    assert "ERROR: Could not read input" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
