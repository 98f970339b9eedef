"""TokenRewriter: substitutes chord roots and basses while keeping text columns aligned."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace

from transchord.chord_grammar import Chord
from transchord.errors import UnmappableChordError
from transchord.tokenizer import ChordToken, Line, TextToken

logger = logging.getLogger(__name__)


def _leading_whitespace(text: str) -> int:
    return len(text) - len(text.lstrip())


class TokenRewriter:
    """
    Rewrites chord tokens through a transposition map.

    Alignment algorithm
    -------------------
    Each line is rewritten left to right with a running *space debt*:

    1. **Shorter chord:** the rewritten chord is followed by padding spaces
       for the difference, unless it is the last token on the line.

    2. **Longer chord:** the difference is added to the space debt.

    3. **Literal text while in debt:** up to *debt* leading whitespace
       characters are removed from the token (always leaving at least one
       character) and the debt is cleared. Debt is settled against one
       token only; whatever cannot be paid there is dropped.

    4. **Literal text with no debt:** merged into a preceding literal token.
    """

    def __init__(self, transposition_map: Mapping[str, str]) -> None:
        """
        Args:
            transposition_map: Maps each root/bass spelling to its replacement.
        """
        self.transposition_map = transposition_map

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _lookup(self, chord: Chord, identifier: str) -> str:
        try:
            return self.transposition_map[identifier]
        except KeyError:
            raise UnmappableChordError(chord.render(), identifier) from None

    def rewrite_chord(self, chord: Chord) -> Chord:
        """
        Return *chord* with root and bass replaced; the suffix is kept.

        Raises:
            UnmappableChordError: If the root or bass has no map entry.
        """
        root = self._lookup(chord, chord.root)
        bass = self._lookup(chord, chord.bass) if chord.bass else ""
        return Chord(root=root, suffix=chord.suffix, bass=bass)

    def _rewrite_line(self, line: Line) -> Line:
        output: Line = []
        space_debt = 0
        last_index = len(line) - 1

        for index, token in enumerate(line):
            if isinstance(token, ChordToken):
                new_chord = self.rewrite_chord(token.chord)
                original_length = len(token.chord.render())
                new_length = len(new_chord.render())
                output.append(replace(token, chord=new_chord, text=new_chord.render()))

                if new_length < original_length and index < last_index:
                    output.append(
                        TextToken(
                            text=" " * (original_length - new_length),
                            offset=token.offset + new_length,
                        )
                    )
                elif new_length > original_length:
                    space_debt += new_length - original_length
                continue

            if space_debt > 0:
                spaces_to_take = max(
                    0, min(space_debt, _leading_whitespace(token.text), len(token.text) - 1)
                )
                output.append(
                    TextToken(
                        text=token.text[spaces_to_take:],
                        offset=token.offset + spaces_to_take,
                    )
                )
                space_debt = 0
            elif output and isinstance(output[-1], TextToken):
                previous = output[-1]
                output[-1] = TextToken(text=previous.text + token.text, offset=previous.offset)
            else:
                output.append(token)

        if space_debt > 0:
            logger.debug("dropping %d unpaid column(s) of space debt", space_debt)
        return output

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def rewrite(self, lines: Iterable[Line]) -> list[Line]:
        """
        Rewrite every line of tokens.

        Returns:
            Lines with the same structure, chords substituted and literal
            text adjusted for alignment.

        Raises:
            UnmappableChordError: If a chord root or bass is missing from the map.
        """
        return [self._rewrite_line(line) for line in lines]
