"""Unit tests for the chess rules delegate."""

import unittest

import chess

from chesstree.services.chess_rules_service import ChessRulesService


class TestChessRulesService(unittest.TestCase):

    def test_parse_san_and_uci(self):
        board = chess.Board()
        self.assertEqual(ChessRulesService.parse_move(board, "Nf3"), chess.Move.from_uci("g1f3"))
        self.assertEqual(ChessRulesService.parse_move(board, "e2e4"), chess.Move.from_uci("e2e4"))

    def test_illegal_move_raises(self):
        board = chess.Board()
        for text in ("Ke2", "e2e5", "xyz"):
            with self.assertRaises(ValueError):
                ChessRulesService.parse_move(board, text)

    def test_parse_and_render_moves(self):
        board = chess.Board()
        line = ChessRulesService.parse_moves(board, ["e4", "e5", "Nf3", "Nc6", "Bb5"])
        self.assertEqual(board.fen(), chess.STARTING_FEN)
        self.assertEqual(ChessRulesService.render_moves(board, line), ["e4", "e5", "Nf3", "Nc6", "Bb5"])

    def test_clone_is_independent(self):
        board = ChessRulesService.board_from_fen()
        clone = ChessRulesService.clone(board)
        ChessRulesService.play(clone, chess.Move.from_uci("d2d4"))
        self.assertEqual(ChessRulesService.fen(board), chess.STARTING_FEN)
        self.assertNotEqual(ChessRulesService.fen(clone), chess.STARTING_FEN)

    def test_play_rejects_illegal_move(self):
        board = ChessRulesService.board_from_fen()
        for uci in ("e2e5", "e7e5", "0000"):
            with self.assertRaises(ValueError):
                ChessRulesService.play(board, chess.Move.from_uci(uci))
        self.assertEqual(ChessRulesService.fen(board), chess.STARTING_FEN)

    def test_bad_fen_raises(self):
        with self.assertRaises(ValueError):
            ChessRulesService.board_from_fen("rnbqkbnr/pppppppp w")


if __name__ == '__main__':
    unittest.main()
