"""Unit tests for the cursor over a move tree."""

import unittest

import chess

from chesstree.models.cursor_model import Cursor
from tests.helpers import build_tree, line_sans, moves


class TestCursorNavigation(unittest.TestCase):
    """Test navigation along committed moves."""

    def setUp(self):
        self.root = build_tree({
            "e4": {"e5": {"Nf3": {}}, "c5": {"Nf3": {"d6": {}}}},
            "d4": {},
        })
        self.cursor = Cursor(self.root)

    def test_initial_line_follows_main_line(self):
        self.assertEqual(self.cursor.ply, 0)
        self.assertEqual(line_sans(self.cursor.line), ["e4", "e5", "Nf3"])
        self.assertEqual(len(self.cursor.nodes), 4)
        self.assertEqual(len(self.cursor.positions), 4)
        self.assertFalse(self.cursor.has_draft())

    def test_entries_list_siblings(self):
        first = self.cursor.editor_node(1)
        self.assertEqual([m.san for m in first.moves], ["e4", "d4"])
        self.assertEqual(first.current_move, 0)
        self.assertEqual(first.moves_to_parent, ())
        self.assertIsNone(self.cursor.editor_node(0))

    def test_move_along_existing_line_only_advances(self):
        e4 = moves("e4")[0]
        line_before = list(self.cursor.line)
        self.cursor.move(e4)
        self.assertEqual(self.cursor.ply, 1)
        self.assertEqual(self.cursor.line, line_before)

    def test_move_to_other_branch(self):
        self.cursor.set_moves(moves("e4 c5"))
        self.assertEqual(self.cursor.ply, 2)
        self.assertEqual(line_sans(self.cursor.line), ["e4", "c5", "Nf3", "d6"])
        self.assertEqual(self.cursor.line[1].current_move, 1)
        self.assertEqual(self.cursor.moves_to_current_node(), moves("e4 c5"))

    def test_padding_follows_branch_index(self):
        self.cursor.set_moves(moves("e4 c5"))
        self.assertEqual([entry.padding for entry in self.cursor.line], [0, 0, 1, 1])

    def test_backwards_and_forwards(self):
        self.cursor.move_forwards()
        self.cursor.move_forwards()
        self.assertEqual(self.cursor.ply, 2)
        self.cursor.move_backwards()
        self.assertEqual(self.cursor.ply, 1)
        self.assertEqual(len(self.cursor.line), 3)

    def test_backwards_at_root_raises(self):
        with self.assertRaises(RuntimeError):
            self.cursor.move_backwards()

    def test_forwards_at_end_raises(self):
        self.cursor.move_to_ply(3)
        with self.assertRaises(RuntimeError):
            self.cursor.move_forwards()

    def test_move_to_ply_out_of_range(self):
        with self.assertRaises(ValueError):
            self.cursor.move_to_ply(4)
        with self.assertRaises(ValueError):
            self.cursor.move_to_ply(-1)

    def test_current_position_is_a_copy(self):
        self.cursor.move_to_ply(1)
        position = self.cursor.current_position()
        position.push_san("e5")
        self.assertEqual(self.cursor.current_position().fullmove_number, 1)
        self.assertEqual(self.cursor.positions[1].fen(), self.cursor.current_position().fen())


class TestCursorDrafts(unittest.TestCase):
    """Test draft moves that are not in the tree."""

    def setUp(self):
        self.root = build_tree({"e4": {"e5": {}}, "d4": {}})
        self.cursor = Cursor(self.root)

    def test_draft_is_not_added_to_tree(self):
        self.cursor.move(moves("c4")[0])
        self.assertTrue(self.cursor.is_draft())
        self.assertEqual(self.cursor.draft_start, 1)
        self.assertEqual(len(self.root.children), 2)
        entry = self.cursor.editor_node()
        self.assertTrue(entry.current_move_is_draft)
        self.assertEqual([m.san for m in entry.moves], ["e4", "d4", "c4"])
        self.assertEqual(entry.current_move, 2)

    def test_moves_after_draft_are_drafts(self):
        self.cursor.move(moves("c4")[0])
        self.cursor.move(moves("c4 e5")[1])
        self.assertEqual(self.cursor.draft_moves(), moves("c4 e5"))
        self.assertTrue(self.cursor.is_draft(1))
        self.assertTrue(self.cursor.is_draft(2))
        self.assertFalse(self.cursor.is_draft(0))

    def test_draft_after_committed_moves(self):
        self.cursor.set_moves(moves("e4 e5 Nf3"))
        self.assertEqual(self.cursor.draft_start, 3)
        self.assertFalse(self.cursor.is_draft(2))
        self.assertEqual(self.cursor.draft_moves(), moves("e4 e5 Nf3")[2:])

    def test_line_is_not_extended_past_a_draft(self):
        self.cursor.move(moves("c4")[0])
        self.assertEqual(len(self.cursor.line), 1)

    def test_moving_backwards_drops_draft_tip(self):
        self.cursor.move(moves("c4")[0])
        self.cursor.move(moves("c4 e5")[1])
        self.cursor.move_backwards()
        self.assertEqual(len(self.cursor.line), 1)
        self.assertTrue(self.cursor.has_draft())
        self.cursor.move_backwards()
        self.assertFalse(self.cursor.has_draft())
        # Back on committed ground the main line shows again
        self.assertEqual(line_sans(self.cursor.line), ["e4", "e5"])
        self.assertTrue(self.cursor.can_move_forwards())

    def test_illegal_move_raises_before_touching_line(self):
        self.cursor.move_to_ply(1)
        line_before = list(self.cursor.line)
        with self.assertRaises(ValueError):
            self.cursor.move(chess.Move.from_uci("e7e4"))
        self.assertEqual(self.cursor.ply, 1)
        self.assertEqual(self.cursor.line, line_before)
        self.assertFalse(self.cursor.has_draft())

    def test_set_moves_rejects_illegal_path(self):
        self.cursor.set_moves(moves("d4"))
        with self.assertRaises(ValueError):
            self.cursor.set_moves([chess.Move.from_uci("e2e5")])
        self.assertEqual(self.cursor.moves_to_current_node(), moves("d4"))

    def test_committed_move_replaces_draft(self):
        self.cursor.move(moves("c4")[0])
        self.cursor.move_backwards()
        self.cursor.move(moves("d4")[0])
        self.assertFalse(self.cursor.has_draft())
        self.assertEqual(line_sans(self.cursor.line), ["d4"])

    def test_push_move_uses_committed_child(self):
        self.cursor.reset(extend_line=False)
        self.cursor.push_move(moves("e4")[0])
        self.assertIs(self.cursor.nodes[1], self.root.children[0])
        self.assertEqual(self.cursor.ply, 0)


class TestCursorRefresh(unittest.TestCase):
    """Test rebuilding line entries after tree changes."""

    def setUp(self):
        self.root = build_tree({"e4": {"e5": {}}, "d4": {}})
        self.cursor = Cursor(self.root)

    def test_refresh_editor_node_keeps_selection(self):
        self.cursor.move_to_ply(1)
        self.cursor.update_selected()
        self.root.children[0].comment = "King's pawn"
        self.cursor.refresh_editor_node()
        entry = self.cursor.editor_node()
        self.assertEqual(entry.comment, "King's pawn")
        self.assertTrue(entry.selected)
        self.assertTrue(entry.moves[0].has_annotation)

    def test_update_selected_moves_selection(self):
        self.cursor.move_to_ply(2)
        self.cursor.update_selected()
        self.cursor.move_to_ply(1)
        self.cursor.update_selected()
        self.assertEqual([entry.selected for entry in self.cursor.line], [True, False])
        self.cursor.move_to_ply(0)
        self.cursor.update_selected()
        self.assertEqual([entry.selected for entry in self.cursor.line], [False, False])

    def test_trim_line(self):
        self.cursor.move_to_ply(1)
        self.cursor.trim_line()
        self.assertEqual(len(self.cursor.line), 1)
        self.assertEqual(len(self.cursor.nodes), 2)
        self.assertEqual(len(self.cursor.positions), 2)


if __name__ == '__main__':
    unittest.main()
