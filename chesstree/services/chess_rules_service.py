"""Chess rules delegate backed by python-chess."""

from typing import Iterable, List

import chess


class ChessRulesService:
    """Service wrapping the chess rules the editor relies on.

    The move tree never checks legality itself; every parse, notation and
    make-move call goes through this service.
    """

    @staticmethod
    def board_from_fen(fen: str = chess.STARTING_FEN) -> chess.Board:
        """Create a board from a FEN string.

        Raises:
            ValueError: If the FEN is invalid.
        """
        return chess.Board(fen)

    @staticmethod
    def fen(position: chess.Board) -> str:
        return position.fen()

    @staticmethod
    def parse_move(position: chess.Board, text: str) -> chess.Move:
        """Parse a move in SAN (or UCI as a fallback) for a position.

        Args:
            position: Position the move is played from.
            text: Move text, e.g. "Nf3" or "g1f3".

        Returns:
            The parsed legal move.

        Raises:
            ValueError: If the text is not a legal move in the position.
        """
        try:
            return position.parse_san(text)
        except ValueError:
            move = chess.Move.from_uci(text)
            if move not in position.legal_moves:
                raise ValueError(f"Illegal move {text} in {position.fen()}")
            return move

    @staticmethod
    def render_move(position: chess.Board, move: chess.Move) -> str:
        """Render a move in SAN for the position it is played from."""
        return position.san(move)

    @staticmethod
    def check_legal(position: chess.Board, move: chess.Move) -> None:
        """Raise ValueError unless the move is legal in the position."""
        if not position.is_legal(move):
            raise ValueError(f"Illegal move {move.uci()} in {position.fen()}")

    @staticmethod
    def play(position: chess.Board, move: chess.Move) -> None:
        """Play a legal move on a position, in place.

        Raises:
            ValueError: If the move is illegal in the position.
        """
        ChessRulesService.check_legal(position, move)
        position.push(move)

    @staticmethod
    def clone(position: chess.Board) -> chess.Board:
        """Copy a position without its move stack."""
        return position.copy(stack=False)

    @staticmethod
    def parse_moves(position: chess.Board, texts: Iterable[str]) -> List[chess.Move]:
        """Parse a sequence of SAN moves starting from a position.

        The given position is not modified.

        Raises:
            ValueError: If any move is illegal in its position.
        """
        board = ChessRulesService.clone(position)
        moves = []
        for text in texts:
            move = ChessRulesService.parse_move(board, text)
            board.push(move)
            moves.append(move)
        return moves

    @staticmethod
    def render_moves(position: chess.Board, moves: Iterable[chess.Move]) -> List[str]:
        """Render a sequence of moves in SAN starting from a position."""
        board = ChessRulesService.clone(position)
        sans = []
        for move in moves:
            sans.append(board.san(move))
            board.push(move)
        return sans
