"""Immutable snapshots of the editor state, consumed by the rendering layer.

Everything here is frozen so that views can be compared by structural
equality for change detection.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import chess

from chesstree.models.annotation_model import Priority, Shape


@dataclass(frozen=True)
class EditorMove:
    """One entry of a sibling move list."""
    move: chess.Move
    san: str
    nag_text: str = ""
    priority: Priority = Priority.DEFAULT
    has_annotation: bool = False


@dataclass(frozen=True)
class EditorNode:
    """One ply of the visible line, with everything needed to render it."""
    moves: Tuple[EditorMove, ...]  # Sibling moves at this ply, draft (if any) last
    current_move: int  # Index into `moves` of the chosen branch
    current_move_is_draft: bool
    selected: bool
    moves_to_parent: Tuple[chess.Move, ...]  # Path from root to the node owning `moves`
    padding: int  # Vertical offset for nested variations
    comment: Optional[str] = None
    nags: Tuple[int, ...] = ()
    shapes: Tuple[Shape, ...] = ()
    priority: Priority = Priority.DEFAULT

    @property
    def move(self) -> chess.Move:
        """Move of the chosen branch at this ply."""
        return self.moves[self.current_move].move

    @property
    def moves_to_node(self) -> Tuple[chess.Move, ...]:
        """Path from root to the chosen node at this ply."""
        return self.moves_to_parent + (self.move,)


@dataclass(frozen=True)
class EditorCurrentNode:
    """Annotations of the node the cursor points at."""
    is_draft: bool = False
    comment: str = ""
    nags: Tuple[int, ...] = ()
    shapes: Tuple[Shape, ...] = ()
    priority: Priority = Priority.DEFAULT


@dataclass(frozen=True)
class EditorView:
    """Snapshot of the editor after the last navigation or mutation.

    `line[ply - 1]` is the selected entry; ply 0 means the root is selected.
    """
    line: Tuple[EditorNode, ...]
    ply: int
    initial_ply: int
    fen: str
    current_node: EditorCurrentNode
    color: Optional[chess.Color] = None
    root_comment: Optional[str] = None
    last_move: Optional[chess.Move] = None
    can_undo: bool = False
    can_redo: bool = False
    # Compared but not hashed, mapping proxies are unhashable
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    @property
    def position(self) -> chess.Board:
        """Current board state (a fresh board on every access)."""
        return chess.Board(self.fen)
