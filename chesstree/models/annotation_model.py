"""Annotation types attached to move tree nodes: glyphs, priorities and board shapes."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Iterable, Tuple

import chess


class Nag(IntEnum):
    """Numeric Annotation Glyphs supported by the editor.

    Values follow the PGN standard numbering.
    """
    GOOD_MOVE = 1
    POOR_MOVE = 2
    BRILLIANT_MOVE = 3
    BLUNDER_MOVE = 4
    INTERESTING_MOVE = 5
    DUBIOUS_MOVE = 6
    FORCED_MOVE = 7
    EQUAL_POSITION = 10
    UNCLEAR_POSITION = 13
    PLUS_EQUALS_POSITION = 14
    EQUALS_PLUS_POSITION = 15
    PLUS_MINUS_POSITION = 16
    MINUS_PLUS_POSITION = 17
    PLUS_OVER_MINUS_POSITION = 18
    MINUS_OVER_PLUS_POSITION = 19


# Move quality glyphs: at most one of these on a node at a time
MOVE_NAGS: FrozenSet[int] = frozenset({
    Nag.GOOD_MOVE,
    Nag.POOR_MOVE,
    Nag.BRILLIANT_MOVE,
    Nag.BLUNDER_MOVE,
    Nag.INTERESTING_MOVE,
    Nag.DUBIOUS_MOVE,
    Nag.FORCED_MOVE,
})

# Position evaluation glyphs: at most one of these on a node at a time
POSITION_NAGS: FrozenSet[int] = frozenset({
    Nag.EQUAL_POSITION,
    Nag.UNCLEAR_POSITION,
    Nag.PLUS_EQUALS_POSITION,
    Nag.EQUALS_PLUS_POSITION,
    Nag.PLUS_MINUS_POSITION,
    Nag.MINUS_PLUS_POSITION,
    Nag.PLUS_OVER_MINUS_POSITION,
    Nag.MINUS_OVER_PLUS_POSITION,
})

NAG_TO_SYMBOL: Dict[int, str] = {
    Nag.BRILLIANT_MOVE: "!!",
    Nag.GOOD_MOVE: "!",
    Nag.INTERESTING_MOVE: "!?",
    Nag.DUBIOUS_MOVE: "?!",
    Nag.POOR_MOVE: "?",
    Nag.BLUNDER_MOVE: "??",
    Nag.FORCED_MOVE: "□",
    Nag.EQUAL_POSITION: "=",
    Nag.UNCLEAR_POSITION: "∞",
    Nag.PLUS_EQUALS_POSITION: "⩲",
    Nag.EQUALS_PLUS_POSITION: "⩱",
    Nag.PLUS_MINUS_POSITION: "±",
    Nag.MINUS_PLUS_POSITION: "∓",
    Nag.PLUS_OVER_MINUS_POSITION: "+-",
    Nag.MINUS_OVER_PLUS_POSITION: "-+",
}


def nag_text(nag: int) -> str:
    """Get the display symbol for a NAG.

    Args:
        nag: The NAG number.

    Returns:
        The symbol, or an empty string for glyphs without one.
    """
    return NAG_TO_SYMBOL.get(nag, "")


def nags_text(nags: Iterable[int]) -> str:
    """Concatenate the display symbols of several NAGs."""
    return "".join(nag_text(nag) for nag in nags)


def toggle_nag(nags: Iterable[int], nag: int) -> Tuple[int, ...]:
    """Toggle a glyph within a glyph set.

    A glyph that is already present is removed and nothing else changes.
    Otherwise it is added and any other glyph of the same class (move quality
    or position evaluation) is dropped.

    Args:
        nags: Current glyphs.
        nag: Glyph to toggle.

    Returns:
        The new glyph set, sorted by numeric code.
    """
    is_move_nag = nag in MOVE_NAGS
    is_position_nag = nag in POSITION_NAGS
    next_nags = []
    removed = False
    for current in nags:
        if current == nag:
            removed = True
            continue
        if (is_move_nag and current in MOVE_NAGS) or (is_position_nag and current in POSITION_NAGS):
            continue
        next_nags.append(current)
    if not removed:
        next_nags.append(nag)
    return tuple(sorted(next_nags))


class Priority(IntEnum):
    """Training priority of a move, used to bias move selection."""
    TRAIN_LAST = -1
    DEFAULT = 0
    TRAIN_FIRST = 1


class ShapeColor(Enum):
    """Colors available for board shapes (the four PGN %cal/%csl colors)."""
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"

    @property
    def code(self) -> str:
        """Single letter used by the PGN %cal/%csl commands."""
        return self.value[0].upper()

    @classmethod
    def from_code(cls, code: str) -> "ShapeColor":
        """Look up a color by its PGN letter.

        Raises:
            ValueError: If the letter is not one of G, R, Y, B.
        """
        for color in cls:
            if color.code == code.upper():
                return color
        raise ValueError(f"Unknown shape color code: {code}")


@dataclass(frozen=True)
class Shape:
    """Board annotation overlay.

    A shape with equal from/to squares highlights a single square, otherwise
    it is an arrow.
    """
    from_square: chess.Square
    to_square: chess.Square
    color: ShapeColor = ShapeColor.GREEN

    @property
    def is_arrow(self) -> bool:
        return self.from_square != self.to_square

    def pgn(self) -> str:
        """Render the shape as a %cal/%csl argument (e.g. "Ge2e4" or "Rd5")."""
        text = self.color.code + chess.square_name(self.from_square)
        if self.is_arrow:
            text += chess.square_name(self.to_square)
        return text

    @classmethod
    def from_pgn(cls, text: str) -> "Shape":
        """Parse a %cal/%csl argument.

        Raises:
            ValueError: If the text is not a valid shape.
        """
        text = text.strip()
        if len(text) not in (3, 5):
            raise ValueError(f"Invalid shape: {text}")
        color = ShapeColor.from_code(text[0])
        from_square = chess.parse_square(text[1:3])
        to_square = chess.parse_square(text[3:5]) if len(text) == 5 else from_square
        return cls(from_square, to_square, color)
