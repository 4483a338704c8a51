"""Shared helpers for building move trees in tests."""

from typing import Any, Dict, List, Optional

import chess

from chesstree.models.node_model import ChildNode, Node, RootNode
from chesstree.services.chess_rules_service import ChessRulesService


def build_tree(spec: Dict[str, Any], fen: Optional[str] = None) -> RootNode:
    """Build a tree from a nested dict of SAN moves.

    Example: {"e4": {"e5": {}, "c5": {}}, "d4": {}} builds 1.e4 with replies
    e5 and c5 (in that order), and 1.d4.
    """
    root = RootNode(chess.Board(fen) if fen else None)
    _add_children(root, root.initial_position, spec)
    return root


def _add_children(node: Node, position: chess.Board, spec: Dict[str, Any]) -> None:
    for san, sub_spec in spec.items():
        move = position.parse_san(san)
        child = node.add_child(move)
        next_position = position.copy(stack=False)
        next_position.push(move)
        _add_children(child, next_position, sub_spec)


def moves(sans: str, fen: Optional[str] = None) -> List[chess.Move]:
    """Parse a space-separated SAN line from the start (or a FEN)."""
    board = chess.Board(fen) if fen else chess.Board()
    return ChessRulesService.parse_moves(board, sans.split())


def child_sans(node: Node, position: chess.Board) -> List[str]:
    """SAN of a node's children, in order."""
    return [position.san(child.move) for child in node.children]


def node_at(root: RootNode, sans: str) -> Optional[Node]:
    """Follow a SAN path from the root."""
    return root.get_descendant(moves(sans, root.initial_fen))


def line_sans(line) -> List[str]:
    """SAN of the chosen move at each ply of an editor line."""
    return [entry.moves[entry.current_move].san for entry in line]


def new_child(sans: str) -> ChildNode:
    """A detached chain of nodes for a SAN line from the start position."""
    line = moves(sans)
    head = ChildNode(line[0])
    tip = head
    for move in line[1:]:
        tip = tip.add_child(move)
    return head
