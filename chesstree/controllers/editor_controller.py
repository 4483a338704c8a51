"""Editor controller: the public facade for navigating and editing a move tree."""

from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

import chess

from chesstree.controllers.editor_ops import (
    AddLine,
    DeleteLine,
    EditorOp,
    ReorderMoves,
    SetComment,
    SetHeaderValue,
    SetInitialPosition,
    SetNags,
    SetPriority,
    SetShapes,
    SetTrainingColor,
    UndoAction,
)
from chesstree.models.annotation_model import Priority, Shape, toggle_nag
from chesstree.models.cursor_model import Cursor
from chesstree.models.editor_view_model import EditorCurrentNode, EditorView
from chesstree.models.node_model import ChildNode, RootNode
from chesstree.services.chess_rules_service import ChessRulesService
from chesstree.services.logging_service import LoggingService


class Editor:
    """Controller for editing a move tree.

    This controller owns the cursor and the undo/redo stacks. Every method
    runs to completion and rebuilds `view`; callers re-read `view` after each
    call. Mutations are performed through EditorOps so that each one can be
    undone and redone.
    """

    def __init__(self, root_node: RootNode) -> None:
        """Initialize the editor.

        Args:
            root_node: Root of the tree to edit. It is mutated in place.
        """
        self.root_node = root_node
        self._cursor = Cursor(root_node)
        self._undo_stack: List[UndoAction] = []
        self._redo_stack: List[UndoAction] = []
        self.view: EditorView = self._calc_view()

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    # Navigation

    def move(self, move: chess.Move) -> None:
        """Play a move from the current node (a draft if the tree lacks it).

        Raises:
            ValueError: If the move is illegal in the current position.
        """
        try:
            self._cursor.move(move)
        except ValueError as e:
            LoggingService.get_instance().error(f"Editor move failed: {move.uci()}", exc_info=e)
            raise
        self._update_view()

    def move_backwards(self) -> None:
        if self._cursor.can_move_backwards():
            self._cursor.move_backwards()
            self._update_view()

    def move_forwards(self) -> None:
        if self._cursor.can_move_forwards():
            self._cursor.move_forwards()
            self._update_view()

    def set_moves(self, moves: Sequence[chess.Move]) -> None:
        """Jump to an absolute move path, replaying it from the root.

        Raises:
            ValueError: If a move of the path is illegal.
        """
        try:
            self._cursor.set_moves(moves)
        except ValueError as e:
            LoggingService.get_instance().error(
                f"Editor set_moves failed: {[m.uci() for m in moves]}", exc_info=e)
            raise
        self._update_view()

    # Mutations

    def add_line(self) -> None:
        """Commit every draft move of the line to the tree, as one undo step.

        Raises:
            RuntimeError: If there is no draft to commit.
        """
        cursor = self._cursor
        if not cursor.has_draft():
            raise RuntimeError("add_line: no draft moves to add")
        draft_moves = cursor.draft_moves()
        subtree = ChildNode(draft_moves[0])
        tip = subtree
        for move in draft_moves[1:]:
            tip = tip.add_child(move)
        cursor.move_to_ply(cursor.draft_start - 1)
        self._perform_op(AddLine(subtree, draft_moves))

    def delete_line(self) -> None:
        """Delete the current node and its subtree; the cursor moves to the parent.

        Raises:
            RuntimeError: If the cursor is at the root or on a draft.
        """
        cursor = self._cursor
        if cursor.ply == 0:
            raise RuntimeError("delete_line: cannot delete the root")
        if cursor.is_draft():
            raise RuntimeError("delete_line: current node is a draft")
        move = cursor.node().move
        cursor.move_to_ply(cursor.ply - 1)
        self._perform_op(DeleteLine(move))

    def set_comment(self, comment: str) -> None:
        if self._cursor.is_draft():
            return
        if (self._cursor.node().comment or "") == comment:
            return
        self._perform_op(SetComment(comment))

    def toggle_nag(self, nag: int) -> None:
        """Toggle a glyph on the current move, keeping one glyph per class."""
        node = self._current_child_node()
        if node is None:
            return
        self._perform_op(SetNags(toggle_nag(node.nags, nag)))

    def toggle_shape(self, shape: Shape) -> None:
        """Remove the shape if the current move has it, add it otherwise."""
        node = self._current_child_node()
        if node is None:
            return
        shapes = [s for s in node.shapes if s != shape]
        if len(shapes) == len(node.shapes):
            shapes.append(shape)
        self._perform_op(SetShapes(shapes))

    def set_priority(self, priority: Priority) -> None:
        node = self._current_child_node()
        if node is None or node.priority == priority:
            return
        self._perform_op(SetPriority(priority))

    def reorder_moves(self, moves: Sequence[chess.Move]) -> None:
        """Reorder the current move and its siblings.

        Raises:
            ValueError: If `moves` is not a permutation of the sibling moves.
        """
        if self._current_child_node() is None:
            return
        parent = self._cursor.node(self._cursor.ply - 1)
        if parent.children_have_order(moves):
            return
        self._perform_op(ReorderMoves(moves))

    def set_training_color(self, color: Optional[chess.Color]) -> None:
        if self.root_node.color == color:
            return
        self._perform_op(SetTrainingColor(color))

    def set_header_value(self, name: str, value: Optional[str]) -> None:
        """Set a header, or remove it when `value` is None."""
        if self.root_node.headers.get(name) == value:
            return
        self._perform_op(SetHeaderValue(name, value))

    def set_initial_position(self, fen: str) -> None:
        """Start the tree from a new position, discarding all moves.

        Raises:
            ValueError: If the FEN is invalid.
        """
        new_fen = ChessRulesService.fen(ChessRulesService.board_from_fen(fen))
        if new_fen == self.root_node.initial_fen:
            return
        self._cursor.set_moves([])
        self._perform_op(SetInitialPosition(new_fen))

    # Undo / redo

    def undo(self) -> None:
        if not self._undo_stack:
            return
        action = self._undo_stack.pop()
        self._replay(action, "undo")

    def redo(self) -> None:
        if not self._redo_stack:
            return
        action = self._redo_stack.pop()
        self._replay(action, "redo")

    def clear_undo(self) -> None:
        self._undo_stack = []
        self._redo_stack = []
        self._update_view()

    def _replay(self, action: UndoAction, undo_type: str) -> None:
        LoggingService.get_instance().debug(
            f"Editor {undo_type}: {action.op!r} at {[m.uci() for m in action.initial_moves]}"
        )
        self._cursor.set_moves(action.initial_moves)
        self._perform_op(action.op, undo_type)

    def _perform_op(self, op: EditorOp, undo_type: Optional[str] = None) -> None:
        """Execute an op and record its inverse.

        A fresh op that exactly reverts the top undo entry (same op at the same
        node, e.g. toggling a glyph twice) pops that entry instead of pushing a
        new one. The pair then leaves no undo step behind and `can_undo` is as
        it was before the first edit. The redo stack is still cleared.

        Args:
            op: Operation to execute at the cursor's current node.
            undo_type: "undo" or "redo" when replaying a stack entry, None for a
                fresh user action (which clears the redo stack).
        """
        initial_moves = tuple(self._cursor.moves_to_current_node())
        try:
            inverse = op.execute(self._cursor)
        except (ValueError, RuntimeError) as e:
            LoggingService.get_instance().error(f"Editor operation failed: {op!r}", exc_info=e)
            raise

        action = UndoAction(initial_moves, inverse)
        if undo_type == "undo":
            self._redo_stack.append(action)
        elif undo_type == "redo":
            self._undo_stack.append(action)
        elif self._reverts_last_action(initial_moves, op):
            # The edit put the node back as it was, so the previous entry is dropped
            self._undo_stack.pop()
            self._redo_stack = []
        else:
            self._undo_stack.append(action)
            self._redo_stack = []
        LoggingService.get_instance().debug(f"Editor op executed: {op!r}, inverse: {inverse!r}")

        self._cursor.push_first_moves_if_at_line_end()
        self._update_view()

    def _reverts_last_action(self, initial_moves: Tuple[chess.Move, ...], op: EditorOp) -> bool:
        """Check whether `op` at `initial_moves` is exactly the pending undo."""
        if not self._undo_stack:
            return False
        last = self._undo_stack[-1]
        return last.initial_moves == initial_moves and last.op == op

    def _current_child_node(self) -> Optional[ChildNode]:
        """The current node if it is a committed move, None at the root or on a draft."""
        if self._cursor.ply == 0 or self._cursor.is_draft():
            return None
        return self._cursor.node()

    # View

    def _update_view(self) -> None:
        self._cursor.update_selected()
        self.view = self._calc_view()

    def _calc_view(self) -> EditorView:
        cursor = self._cursor
        node = cursor.node()
        if cursor.ply > 0:
            current_node = EditorCurrentNode(
                is_draft=cursor.is_draft(),
                comment=node.comment or "",
                nags=node.nags,
                shapes=node.shapes,
                priority=node.priority,
            )
            last_move = node.move
        else:
            current_node = EditorCurrentNode(comment=self.root_node.comment or "")
            last_move = None

        initial_position = self.root_node.initial_position
        return EditorView(
            line=tuple(cursor.line),
            ply=cursor.ply,
            initial_ply=0 if initial_position.turn == chess.WHITE else 1,
            fen=ChessRulesService.fen(cursor.positions[cursor.ply]),
            current_node=current_node,
            color=self.root_node.color,
            root_comment=self.root_node.comment,
            last_move=last_move,
            can_undo=len(self._undo_stack) > 0,
            can_redo=len(self._redo_stack) > 0,
            headers=MappingProxyType(dict(self.root_node.headers)),
        )
