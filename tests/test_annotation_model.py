"""Unit tests for glyphs, priorities and board shapes."""

import unittest

import chess

from chesstree.models.annotation_model import (
    MOVE_NAGS,
    POSITION_NAGS,
    Nag,
    Shape,
    ShapeColor,
    nag_text,
    nags_text,
    toggle_nag,
)


class TestNags(unittest.TestCase):
    """Test glyph rendering and toggling."""

    def test_glyph_classes_are_disjoint(self):
        self.assertFalse(MOVE_NAGS & POSITION_NAGS)
        self.assertEqual(len(MOVE_NAGS | POSITION_NAGS), len(Nag))

    def test_nag_text(self):
        self.assertEqual(nag_text(Nag.BRILLIANT_MOVE), "!!")
        self.assertEqual(nag_text(Nag.PLUS_MINUS_POSITION), "±")
        self.assertEqual(nag_text(146), "")
        self.assertEqual(nags_text([Nag.DUBIOUS_MOVE, Nag.EQUAL_POSITION]), "?!=")

    def test_toggle_adds_and_removes(self):
        self.assertEqual(toggle_nag((), Nag.GOOD_MOVE), (Nag.GOOD_MOVE,))
        self.assertEqual(toggle_nag((Nag.GOOD_MOVE,), Nag.GOOD_MOVE), ())

    def test_toggle_replaces_same_class(self):
        self.assertEqual(toggle_nag((Nag.GOOD_MOVE, Nag.EQUAL_POSITION), Nag.BLUNDER_MOVE),
                         (Nag.BLUNDER_MOVE, Nag.EQUAL_POSITION))
        self.assertEqual(toggle_nag((Nag.GOOD_MOVE, Nag.EQUAL_POSITION), Nag.UNCLEAR_POSITION),
                         (Nag.GOOD_MOVE, Nag.UNCLEAR_POSITION))

    def test_removing_keeps_other_class(self):
        self.assertEqual(toggle_nag((Nag.GOOD_MOVE, Nag.EQUAL_POSITION), Nag.EQUAL_POSITION),
                         (Nag.GOOD_MOVE,))

    def test_unclassified_glyph_is_kept(self):
        self.assertEqual(toggle_nag((146,), Nag.GOOD_MOVE), (Nag.GOOD_MOVE, 146))


class TestShapes(unittest.TestCase):
    """Test board shape notation."""

    def test_square_and_arrow(self):
        square = Shape(chess.D5, chess.D5, ShapeColor.RED)
        arrow = Shape(chess.E2, chess.E4)
        self.assertFalse(square.is_arrow)
        self.assertTrue(arrow.is_arrow)
        self.assertEqual(square.pgn(), "Rd5")
        self.assertEqual(arrow.pgn(), "Ge2e4")

    def test_from_pgn(self):
        self.assertEqual(Shape.from_pgn("Bc5d4"), Shape(chess.C5, chess.D4, ShapeColor.BLUE))
        self.assertEqual(Shape.from_pgn(" yh7 "), Shape(chess.H7, chess.H7, ShapeColor.YELLOW))

    def test_from_pgn_rejects_invalid(self):
        for text in ("G", "Xe4", "Ge9", "Ge2e4e6"):
            with self.assertRaises(ValueError):
                Shape.from_pgn(text)


if __name__ == '__main__':
    unittest.main()
