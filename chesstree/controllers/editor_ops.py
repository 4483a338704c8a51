"""Reversible editor operations.

Each operation mutates the tree through a Cursor and returns the operation
that undoes it. Operations validate their preconditions before touching the
tree, so a raised error never leaves a half-applied change behind.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import chess

from chesstree.models.annotation_model import Priority, Shape
from chesstree.models.cursor_model import Cursor
from chesstree.models.node_model import ChildNode


class EditorOp(ABC):
    """Base class for reversible tree mutations."""

    @abstractmethod
    def execute(self, cursor: Cursor) -> "EditorOp":
        """Apply the operation at the cursor's current node.

        Args:
            cursor: Cursor positioned at the node the operation targets.

        Returns:
            The inverse operation, to be executed at the same node.
        """

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


@dataclass
class UndoAction:
    """Undo/redo stack entry: where to go, and what to do there."""
    initial_moves: Tuple[chess.Move, ...]
    op: EditorOp


def _require_committed_child(cursor: Cursor, op_name: str) -> ChildNode:
    # Ply 0 is always the root
    if cursor.ply == 0 or cursor.is_draft():
        raise RuntimeError(f"{op_name}: current node is not a committed move (ply={cursor.ply})")
    return cursor.node()


class AddLine(EditorOp):
    """Attach a subtree as a new child of the current node.

    After attaching it, the cursor replays `replay_moves` from the current
    node so it ends where the committed line ends. `index` places the subtree
    among its siblings (last by default).
    """

    def __init__(self, node: ChildNode, replay_moves: Optional[Sequence[chess.Move]] = None,
                 index: Optional[int] = None) -> None:
        self.node = node
        self.replay_moves: List[chess.Move] = list(replay_moves) if replay_moves else [node.move]
        self.index = index

    def execute(self, cursor: Cursor) -> EditorOp:
        if cursor.is_draft():
            raise RuntimeError(f"AddLine: current node is a draft (ply={cursor.ply})")
        parent = cursor.node()
        parent.add_child_node(self.node, self.index)
        cursor.trim_line()
        for move in self.replay_moves:
            cursor.move(move, extend_line=False)
        return DeleteLine(self.node.move)

    def __repr__(self) -> str:
        return f"AddLine({self.node.move.uci()}, replay={len(self.replay_moves)})"


class DeleteLine(EditorOp):
    """Remove the child for a move (with its subtree) from the current node."""

    def __init__(self, move: chess.Move) -> None:
        self.move = move

    def execute(self, cursor: Cursor) -> EditorOp:
        if cursor.is_draft():
            raise RuntimeError(f"DeleteLine: current node is a draft (ply={cursor.ply})")
        parent = cursor.node()
        index = parent.get_child_index(self.move)
        removed = parent.remove_child(self.move)
        cursor.trim_line()
        return AddLine(removed, index=index)

    def __repr__(self) -> str:
        return f"DeleteLine({self.move.uci()})"


class SetComment(EditorOp):
    """Replace the comment of the current node; an empty string clears it."""

    def __init__(self, comment: str) -> None:
        self.comment = comment

    def execute(self, cursor: Cursor) -> EditorOp:
        if cursor.is_draft():
            raise RuntimeError(f"SetComment: current node is a draft (ply={cursor.ply})")
        node = cursor.node()
        old_comment = node.comment
        node.comment = self.comment if self.comment else None
        cursor.refresh_editor_node()
        return SetComment(old_comment or "")


class SetNags(EditorOp):
    def __init__(self, nags: Sequence[int]) -> None:
        self.nags = tuple(sorted(nags))

    def execute(self, cursor: Cursor) -> EditorOp:
        node = _require_committed_child(cursor, "SetNags")
        old_nags = node.nags
        node.nags = self.nags
        cursor.refresh_editor_node()
        return SetNags(old_nags)


class SetShapes(EditorOp):
    def __init__(self, shapes: Sequence[Shape]) -> None:
        self.shapes = tuple(shapes)

    def execute(self, cursor: Cursor) -> EditorOp:
        node = _require_committed_child(cursor, "SetShapes")
        old_shapes = node.shapes
        node.shapes = self.shapes
        cursor.refresh_editor_node()
        return SetShapes(old_shapes)


class SetPriority(EditorOp):
    def __init__(self, priority: Priority) -> None:
        self.priority = priority

    def execute(self, cursor: Cursor) -> EditorOp:
        node = _require_committed_child(cursor, "SetPriority")
        old_priority = node.priority
        node.priority = self.priority
        cursor.refresh_editor_node()
        return SetPriority(old_priority)


class ReorderMoves(EditorOp):
    """Reorder the siblings of the current node."""

    def __init__(self, order: Sequence[chess.Move]) -> None:
        self.order = tuple(order)

    def execute(self, cursor: Cursor) -> EditorOp:
        _require_committed_child(cursor, "ReorderMoves")
        parent = cursor.node(cursor.ply - 1)
        old_order = tuple(child.move for child in parent.children)
        parent.reorder_children(self.order)
        cursor.refresh_editor_node()
        cursor.refresh_padding(cursor.ply + 1)
        return ReorderMoves(old_order)


class SetTrainingColor(EditorOp):
    def __init__(self, color: Optional[chess.Color]) -> None:
        self.color = color

    def execute(self, cursor: Cursor) -> EditorOp:
        old_color = cursor.root.color
        cursor.root.color = self.color
        return SetTrainingColor(old_color)


class SetHeaderValue(EditorOp):
    """Set a header, or remove it when `value` is None."""

    def __init__(self, name: str, value: Optional[str]) -> None:
        self.name = name
        self.value = value

    def execute(self, cursor: Cursor) -> EditorOp:
        headers = cursor.root.headers
        old_value = headers.get(self.name)
        if self.value is None:
            headers.pop(self.name, None)
        else:
            headers[self.name] = self.value
        return SetHeaderValue(self.name, old_value)


class SetInitialPosition(EditorOp):
    """Replace the starting position, discarding the tree.

    `restore_children` is installed as the new tree; undo uses it to bring
    the old tree back.
    """

    def __init__(self, fen: str, restore_children: Optional[Sequence[ChildNode]] = None) -> None:
        self.fen = fen
        self.restore_children: List[ChildNode] = list(restore_children or [])

    def execute(self, cursor: Cursor) -> EditorOp:
        root = cursor.root
        old_fen = root.initial_fen
        old_children = list(root.children)
        root.set_initial_position(self.fen, self.restore_children)
        cursor.reset()
        return SetInitialPosition(old_fen, old_children)

    def __repr__(self) -> str:
        return f"SetInitialPosition({self.fen!r}, children={len(self.restore_children)})"
