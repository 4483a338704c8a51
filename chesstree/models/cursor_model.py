"""Cursor over a move tree: the visible line, the current ply and draft moves."""

from dataclasses import replace
from typing import List, Optional, Sequence

import chess

from chesstree.models.annotation_model import nags_text
from chesstree.models.editor_view_model import EditorMove, EditorNode
from chesstree.models.node_model import ChildNode, Node, RootNode
from chesstree.services.chess_rules_service import ChessRulesService


class Cursor:
    """Walks a move tree and keeps the currently visible line render-ready.

    The line is stored as three parallel lists: `line` holds one EditorNode per
    ply beyond the root, `nodes` and `positions` hold the tree node and board
    for every ply including the root (index 0). `ply` is where we are inside
    the line, 0 meaning the root.

    Moves that have no committed child are played as drafts: a transient
    ChildNode is appended to the line but never to its parent's children.
    Drafts always form a contiguous tail of the line starting at
    `draft_start`.
    """

    def __init__(self, root: RootNode) -> None:
        """Initialize the cursor at the root of a tree.

        Args:
            root: Root of the tree to walk.
        """
        self.root = root
        self.line: List[EditorNode] = []
        self.nodes: List[Node] = [root]
        self.positions: List[chess.Board] = [root.initial_position]
        self.ply = 0
        self.draft_start: Optional[int] = None
        self._last_selected_ply = 0
        self.reset()

    def reset(self, extend_line: bool = True) -> None:
        """Go back to the root and rebuild the line from scratch.

        Args:
            extend_line: Whether to extend the line along the main line.
        """
        self.line = []
        self.nodes = [self.root]
        self.positions = [self.root.initial_position]
        self.ply = 0
        self.draft_start = None
        self._last_selected_ply = 0
        if extend_line:
            self.push_first_moves_if_at_line_end()

    # Queries

    def node(self, ply: Optional[int] = None) -> Node:
        """Get the tree node at a ply (defaults to the current ply)."""
        return self.nodes[self.ply if ply is None else ply]

    def editor_node(self, ply: Optional[int] = None) -> Optional[EditorNode]:
        """Get the line entry at a ply, or None for the root."""
        ply = self.ply if ply is None else ply
        if ply <= 0:
            return None
        return self.line[ply - 1]

    def is_draft(self, ply: Optional[int] = None) -> bool:
        """Check whether the node at a ply is an uncommitted draft."""
        ply = self.ply if ply is None else ply
        return self.draft_start is not None and ply >= self.draft_start

    def has_draft(self) -> bool:
        return self.draft_start is not None

    def draft_moves(self) -> List[chess.Move]:
        """Moves of the draft tail of the line, in order."""
        if self.draft_start is None:
            return []
        return [node.move for node in self.nodes[self.draft_start:]]

    def current_position(self) -> chess.Board:
        """A copy of the board at the current ply."""
        return ChessRulesService.clone(self.positions[self.ply])

    def moves_to_current_node(self) -> List[chess.Move]:
        """Path of moves from the root to the current node."""
        return [node.move for node in self.nodes[1:self.ply + 1]]

    def can_move_backwards(self) -> bool:
        return self.ply > 0

    def can_move_forwards(self) -> bool:
        return self.ply < len(self.line)

    # Navigation

    def move(self, move: chess.Move, extend_line: bool = True) -> None:
        """Play a move from the current node.

        If the next entry of the line already is that move we only advance.
        Otherwise the line is cut at the current ply and the move is pushed,
        as a committed node when the tree has it, as a draft otherwise.

        Args:
            move: Move to play.
            extend_line: Whether to extend the line along the main line afterwards.

        Raises:
            ValueError: If the move is illegal in the current position.
        """
        ChessRulesService.check_legal(self.positions[self.ply], move)
        if self.ply < len(self.line) and self.nodes[self.ply + 1].move == move:
            self.ply += 1
            return
        self.trim_line()
        self.push_move(move)
        self.ply += 1
        if extend_line:
            self.push_first_moves_if_at_line_end()

    def move_backwards(self) -> None:
        """Step back one ply, dropping a draft tip we step off.

        Once the drafts are gone the line is extended along first children
        again.

        Raises:
            RuntimeError: If the cursor is at the root.
        """
        if not self.can_move_backwards():
            raise RuntimeError("Cursor.move_backwards: already at the root")
        self.ply -= 1
        self.trim_end_draft_nodes()
        self.push_first_moves_if_at_line_end()

    def move_forwards(self) -> None:
        """Step forward one ply along the visible line.

        Raises:
            RuntimeError: If the cursor is at the end of the line.
        """
        if not self.can_move_forwards():
            raise RuntimeError("Cursor.move_forwards: already at the end of the line")
        self.ply += 1

    def move_to_ply(self, ply: int) -> None:
        """Jump to a ply inside the visible line without changing the line.

        Raises:
            ValueError: If the ply is outside the line.
        """
        if ply < 0 or ply > len(self.line):
            raise ValueError(f"Cursor.move_to_ply: ply {ply} outside line of length {len(self.line)}")
        self.ply = ply

    def set_moves(self, moves: Sequence[chess.Move]) -> None:
        """Replay an absolute move path from the root.

        Moves missing from the tree become drafts.

        Raises:
            ValueError: If a move of the path is illegal. The cursor is left
                unchanged.
        """
        position = ChessRulesService.clone(self.root.initial_position)
        for move in moves:
            ChessRulesService.play(position, move)
        self.reset(extend_line=False)
        for move in moves:
            self.move(move, extend_line=False)
        self.push_first_moves_if_at_line_end()

    # Line maintenance

    def trim_line(self) -> None:
        """Drop every entry past the current ply."""
        del self.line[self.ply:]
        del self.nodes[self.ply + 1:]
        del self.positions[self.ply + 1:]
        if self.draft_start is not None and self.draft_start > self.ply:
            self.draft_start = None

    def trim_end_draft_nodes(self) -> None:
        """Drop draft entries past the current ply."""
        while len(self.line) > self.ply and self.is_draft(len(self.line)):
            self.line.pop()
            self.nodes.pop()
            self.positions.pop()
        if self.draft_start is not None and self.draft_start > len(self.line):
            self.draft_start = None

    def push_move(self, move: chess.Move) -> None:
        """Append a move to the end of the line.

        The committed child is used when the tree has one, otherwise a draft
        node is synthesized.
        """
        parent_ply = len(self.line)
        parent = self.nodes[parent_ply]
        child = None if self.is_draft(parent_ply) else parent.get_child(move)
        if child is None:
            child = ChildNode(move)
            if self.draft_start is None:
                self.draft_start = parent_ply + 1
        position = ChessRulesService.clone(self.positions[parent_ply])
        ChessRulesService.play(position, move)
        self.nodes.append(child)
        self.positions.append(position)
        self.line.append(self._create_editor_node(parent_ply + 1))

    def push_first_moves_if_at_line_end(self) -> None:
        """Extend the line along first children until a leaf is reached."""
        if self.is_draft(len(self.line)):
            return
        node = self.nodes[-1]
        while node.children:
            self.push_move(node.children[0].move)
            node = self.nodes[-1]

    def refresh_editor_node(self, ply: Optional[int] = None) -> None:
        """Rebuild the line entry at a ply after its node or siblings changed.

        The selection flag is kept. Nothing happens at the root.
        """
        ply = self.ply if ply is None else ply
        if ply <= 0:
            return
        selected = self.line[ply - 1].selected
        self.line[ply - 1] = replace(self._create_editor_node(ply), selected=selected)

    def refresh_padding(self, start_ply: int = 1) -> None:
        """Recompute paddings from a ply to the end of the line."""
        for ply in range(max(start_ply, 1), len(self.line) + 1):
            padding = self._padding(ply)
            entry = self.line[ply - 1]
            if entry.padding != padding:
                self.line[ply - 1] = replace(entry, padding=padding)

    def update_selected(self) -> None:
        """Mark the entry at the current ply as the only selected one."""
        last = self._last_selected_ply
        if 0 < last <= len(self.line) and last != self.ply and self.line[last - 1].selected:
            self.line[last - 1] = replace(self.line[last - 1], selected=False)
        if self.ply > 0 and not self.line[self.ply - 1].selected:
            self.line[self.ply - 1] = replace(self.line[self.ply - 1], selected=True)
        self._last_selected_ply = self.ply

    def _padding(self, ply: int) -> int:
        # Parent's padding plus the number of siblings before the parent's branch
        if ply <= 1:
            return 0
        parent_entry = self.line[ply - 2]
        return parent_entry.padding + parent_entry.current_move

    def _create_editor_node(self, ply: int) -> EditorNode:
        """Build the line entry for a ply from the tree.

        Entries for all plies before `ply` must already be in the line.
        """
        parent = self.nodes[ply - 1]
        node = self.nodes[ply]
        position = self.positions[ply - 1]
        is_draft = self.is_draft(ply)

        siblings = list(parent.children)
        if is_draft:
            siblings.append(node)
            current_move = len(siblings) - 1
        else:
            current_move = parent.get_child_index(node.move)

        return EditorNode(
            moves=tuple(self._create_editor_move(position, child) for child in siblings),
            current_move=current_move,
            current_move_is_draft=is_draft,
            selected=False,
            moves_to_parent=tuple(n.move for n in self.nodes[1:ply]),
            padding=self._padding(ply),
            comment=node.comment,
            nags=node.nags,
            shapes=node.shapes,
            priority=node.priority,
        )

    @staticmethod
    def _create_editor_move(position: chess.Board, child: ChildNode) -> EditorMove:
        return EditorMove(
            move=child.move,
            san=ChessRulesService.render_move(position, child.move),
            nag_text=nags_text(child.nags),
            priority=child.priority,
            has_annotation=child.has_annotation(),
        )
