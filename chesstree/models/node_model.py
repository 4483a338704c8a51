"""Move tree model: positions reached by moves, with their annotations."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import chess

from chesstree.models.annotation_model import Priority, Shape


@dataclass(frozen=True)
class LineCountByPriority:
    """Leaf counts of a subtree, split by the priority of each leaf."""
    default: int = 0
    train_first: int = 0
    train_last: int = 0

    def __add__(self, other: "LineCountByPriority") -> "LineCountByPriority":
        return LineCountByPriority(
            self.default + other.default,
            self.train_first + other.train_first,
            self.train_last + other.train_last,
        )

    @property
    def total(self) -> int:
        return self.default + self.train_first + self.train_last


class Node:
    """Single position in a move tree.

    Children are kept in order; the first child is the main line. No two
    children may share the same move.
    """

    def __init__(self, children: Optional[List["ChildNode"]] = None,
                 comment: Optional[str] = None) -> None:
        """Initialize the node.

        Args:
            children: Child nodes, in order. Moves must be unique.
            comment: Optional free-text comment.

        Raises:
            ValueError: If two children share a move.
        """
        self.children: List[ChildNode] = []
        self.comment = comment
        for child in children or []:
            self.add_child_node(child)

    def get_child_index(self, move: chess.Move) -> Optional[int]:
        """Get the index of the child for a move, or None."""
        for i, child in enumerate(self.children):
            if child.move == move:
                return i
        return None

    def get_child(self, move: chess.Move) -> Optional["ChildNode"]:
        """Get the child whose move equals the given move.

        Args:
            move: Move to look up.

        Returns:
            The child node, or None if there is no child for the move.
        """
        index = self.get_child_index(move)
        return self.children[index] if index is not None else None

    def has_child(self, move: chess.Move) -> bool:
        return self.get_child_index(move) is not None

    def add_child(self, move: chess.Move) -> "ChildNode":
        """Create and append a new child for a move.

        Args:
            move: Move leading to the new child.

        Returns:
            The new child node.

        Raises:
            ValueError: If a child for the move already exists.
        """
        child = ChildNode(move)
        self.add_child_node(child)
        return child

    def add_child_node(self, node: "ChildNode", index: Optional[int] = None) -> None:
        """Add an existing child node (with its subtree).

        Args:
            node: Child to add.
            index: Position among the children. Defaults to the end.

        Raises:
            ValueError: If a child for the node's move already exists.
        """
        if self.has_child(node.move):
            raise ValueError(f"Child already exists for move {node.move.uci()}")
        if index is None:
            self.children.append(node)
        else:
            self.children.insert(index, node)

    def remove_child(self, move: chess.Move) -> "ChildNode":
        """Remove the child for a move.

        Args:
            move: Move of the child to remove.

        Returns:
            The removed child, with its subtree intact.

        Raises:
            ValueError: If there is no child for the move.
        """
        index = self.get_child_index(move)
        if index is None:
            raise ValueError(f"No child for move {move.uci()}")
        return self.children.pop(index)

    def children_have_order(self, order: Sequence[chess.Move]) -> bool:
        """Check whether the children's moves are exactly `order`."""
        return [child.move for child in self.children] == list(order)

    def reorder_children(self, order: Sequence[chess.Move]) -> None:
        """Reorder children to match a list of moves.

        Args:
            order: Permutation of the current children's moves.

        Raises:
            ValueError: If `order` is not a permutation of the children's moves.
                The existing order is left untouched.
        """
        if len(order) != len(self.children):
            raise ValueError(f"reorder_children: expected {len(self.children)} moves, got {len(order)}")
        reordered = []
        for move in order:
            child = self.get_child(move)
            if child is None or child in reordered:
                raise ValueError(f"reorder_children: invalid move in order: {move.uci()}")
            reordered.append(child)
        self.children = reordered

    def get_descendant(self, moves: Iterable[chess.Move]) -> Optional["Node"]:
        """Follow a move path from this node.

        Args:
            moves: Moves to follow. An empty path returns this node.

        Returns:
            The node at the end of the path, or None if any step is missing.
        """
        node: Node = self
        for move in moves:
            child = node.get_child(move)
            if child is None:
                return None
            node = child
        return node

    def get_single_child(self) -> Optional["ChildNode"]:
        """Return the only child if there is exactly one."""
        if len(self.children) == 1:
            return self.children[0]
        return None

    def is_empty(self) -> bool:
        return len(self.children) == 0

    def line_count(self) -> int:
        """Count the lines (terminal leaves) reachable from this node.

        A node without children counts as one line.
        """
        if self.is_empty():
            return 1
        return sum(child.line_count() for child in self.children)

    def line_count_by_priority(self) -> LineCountByPriority:
        """Count lines reachable from this node, grouped by leaf priority."""
        if self.is_empty():
            return self._leaf_line_count()
        result = LineCountByPriority()
        for child in self.children:
            result = result + child.line_count_by_priority()
        return result

    def _leaf_line_count(self) -> LineCountByPriority:
        return LineCountByPriority(default=1)

    def merge(self, other: "Node") -> None:
        """Merge another node's children into this node.

        Children missing here are adopted as-is, children present in both are
        merged recursively. Annotations on this side win.
        """
        for other_child in other.children:
            child = self.get_child(other_child.move)
            if child is None:
                self.children.append(other_child)
            else:
                child.merge(other_child)


class ChildNode(Node):
    """A node reached from its parent by a move."""

    def __init__(self, move: chess.Move,
                 children: Optional[List["ChildNode"]] = None,
                 comment: Optional[str] = None,
                 nags: Iterable[int] = (),
                 shapes: Iterable[Shape] = (),
                 priority: Priority = Priority.DEFAULT) -> None:
        """Initialize the child node.

        Args:
            move: Move that produced this position from the parent.
            children: Child nodes, in order.
            comment: Optional comment.
            nags: Annotation glyphs.
            shapes: Board shapes.
            priority: Training priority.
        """
        super().__init__(children, comment)
        self.move = move
        self.nags: Tuple[int, ...] = tuple(sorted(nags))
        self.shapes: Tuple[Shape, ...] = tuple(shapes)
        self.priority = priority

    def has_annotation(self) -> bool:
        """True if the node carries a comment or board shapes.

        Glyphs are not included, they are rendered next to the move instead.
        """
        return bool(self.comment) or len(self.shapes) > 0

    def _leaf_line_count(self) -> LineCountByPriority:
        if self.priority == Priority.TRAIN_FIRST:
            return LineCountByPriority(train_first=1)
        if self.priority == Priority.TRAIN_LAST:
            return LineCountByPriority(train_last=1)
        return LineCountByPriority(default=1)

    def __repr__(self) -> str:
        return f"ChildNode({self.move.uci()}, children={len(self.children)})"


class RootNode(Node):
    """Root of a move tree: the initial position plus game-level data."""

    def __init__(self, initial_position: Optional[chess.Board] = None,
                 children: Optional[List[ChildNode]] = None,
                 comment: Optional[str] = None,
                 color: Optional[chess.Color] = None,
                 headers: Optional[Dict[str, str]] = None) -> None:
        """Initialize the root node.

        Args:
            initial_position: Starting position. Defaults to the standard start.
            children: Child nodes, in order.
            comment: Optional comment before the first move.
            color: Side being trained/edited (chess.WHITE, chess.BLACK), None for both.
            headers: Game metadata.
        """
        super().__init__(children, comment)
        board = initial_position if initial_position is not None else chess.Board()
        self._initial_position = board.copy(stack=False)
        self.color = color
        self.headers: Dict[str, str] = dict(headers or {})

    @property
    def initial_position(self) -> chess.Board:
        """A fresh copy of the starting position."""
        return self._initial_position.copy(stack=False)

    @property
    def initial_fen(self) -> str:
        return self._initial_position.fen()

    def set_initial_position(self, fen: str, children: Optional[List[ChildNode]] = None) -> None:
        """Replace the starting position, and with it the whole move tree.

        Args:
            fen: FEN of the new starting position.
            children: Replacement children (e.g. when restoring an earlier tree).

        Raises:
            ValueError: If the FEN is invalid.
        """
        board = chess.Board(fen)
        self._initial_position = board
        self.children = []
        for child in children or []:
            self.add_child_node(child)

    def __repr__(self) -> str:
        return f"RootNode({self.initial_fen!r}, children={len(self.children)})"
