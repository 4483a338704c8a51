"""PGN import/export for move trees."""

import io
import re
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

import chess
import chess.pgn

from chesstree.config.config_loader import ConfigLoader
from chesstree.models.annotation_model import Priority, Shape
from chesstree.models.node_model import ChildNode, Node, RootNode
from chesstree.services.logging_service import LoggingService


# Board shape commands embedded in PGN comments, e.g. "[%cal Ge2e4,Rd1d8]"
SHAPE_COMMAND_PATTERN = re.compile(r"\[%(csl|cal)\s+([^\]]*)\]")

# Headers derived from the initial position, never stored on the root
POSITION_HEADERS = ("FEN", "SetUp")

COLOR_NAMES = {chess.WHITE: "white", chess.BLACK: "black"}


class PgnTreeService:
    """Service converting between PGN text and move trees.

    Export goes through python-chess: the tree is rebuilt as a chess.pgn.Game
    and printed by its exporter. Import walks a parsed game. Editor-only data
    is stored in standard PGN places: priorities as NAGs, board shapes as
    %csl/%cal comment commands and the training color as a header.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the PGN service.

        Args:
            config: Configuration dictionary. Only the 'pgn' section is used.
                Defaults to the bundled config.json.
        """
        if config is None:
            config = ConfigLoader().load()
        pgn_config = config["pgn"]
        self.color_header: str = pgn_config["training_color_header"]
        priority_nags = pgn_config["priority_nags"]
        self.priority_to_nag: Dict[Priority, int] = {
            Priority.TRAIN_FIRST: int(priority_nags["train_first"]),
            Priority.TRAIN_LAST: int(priority_nags["train_last"]),
        }
        self.nag_to_priority: Dict[int, Priority] = {
            nag: priority for priority, nag in self.priority_to_nag.items()
        }

    # Import

    def import_pgn(self, pgn_text: str) -> RootNode:
        """Parse the first game of a PGN text into a move tree.

        Args:
            pgn_text: PGN text.

        Returns:
            Root of the imported tree.

        Raises:
            ValueError: If the text contains no game or the game has illegal moves.
        """
        game = chess.pgn.read_game(io.StringIO(pgn_text))
        if game is None:
            raise ValueError("No game found in PGN text")
        return self.import_game(game)

    def import_game(self, game: chess.pgn.Game) -> RootNode:
        """Convert a parsed python-chess game into a move tree.

        Raises:
            ValueError: If python-chess reported errors while reading the game.
        """
        if game.errors:
            raise ValueError(f"Invalid PGN game: {game.errors[0]}")

        headers: Dict[str, str] = {}
        color: Optional[chess.Color] = None
        for name, value in game.headers.items():
            if name in POSITION_HEADERS:
                continue
            if name == self.color_header:
                color = self._parse_color(value)
                continue
            headers[name] = value

        root = RootNode(
            initial_position=game.board(),
            comment=game.comment or None,
            color=color,
            headers=headers,
        )
        self._import_variations(root, game)
        return root

    def _import_variations(self, parent: Node, game_node: chess.pgn.GameNode) -> None:
        # Breadth-first so very long games don't hit the recursion limit and
        # folded duplicate variations keep their order
        queue: Deque[Tuple[Node, chess.pgn.GameNode]] = deque([(parent, game_node)])
        while queue:
            tree_node, pgn_node = queue.popleft()
            for variation in pgn_node.variations:
                child = self._import_node(variation)
                existing = tree_node.get_child(child.move)
                if existing is not None:
                    # Duplicate variations are folded into the first one
                    LoggingService.get_instance().warning(
                        f"Merging duplicate variation {child.move.uci()} during PGN import")
                    queue.append((existing, variation))
                    continue
                tree_node.add_child_node(child)
                queue.append((child, variation))

    def _import_node(self, variation: chess.pgn.ChildNode) -> ChildNode:
        comment, shapes = self.split_comment(variation.comment)
        priority = Priority.DEFAULT
        nags = []
        for nag in variation.nags:
            if nag in self.nag_to_priority:
                priority = self.nag_to_priority[nag]
            else:
                nags.append(nag)
        return ChildNode(variation.move, comment=comment, nags=nags, shapes=shapes, priority=priority)

    def _parse_color(self, value: str) -> Optional[chess.Color]:
        for color, name in COLOR_NAMES.items():
            if value.strip().lower() == name:
                return color
        LoggingService.get_instance().warning(f"Ignoring unknown {self.color_header} header value: {value}")
        return None

    @staticmethod
    def split_comment(text: str) -> Tuple[Optional[str], List[Shape]]:
        """Separate board shape commands from the free text of a comment.

        Args:
            text: Raw PGN comment.

        Returns:
            Tuple of (comment text or None if nothing is left, shapes).

        Raises:
            ValueError: If a shape command holds an invalid shape.
        """
        shapes: List[Shape] = []
        for match in SHAPE_COMMAND_PATTERN.finditer(text or ""):
            for item in match.group(2).split(","):
                if item.strip():
                    shapes.append(Shape.from_pgn(item))
        remainder = SHAPE_COMMAND_PATTERN.sub("", text or "").strip()
        return (remainder or None), shapes

    # Export

    def export_game(self, root: RootNode) -> chess.pgn.Game:
        """Build a python-chess game from a move tree.

        Args:
            root: Root of the tree.

        Returns:
            A new chess.pgn.Game holding the tree's headers, moves and annotations.
        """
        game = chess.pgn.Game()
        for name, value in root.headers.items():
            game.headers[name] = value
        if root.color is not None:
            game.headers[self.color_header] = COLOR_NAMES[root.color]
        game.setup(root.initial_position)
        if root.comment:
            game.comment = root.comment

        stack: List[Tuple[Node, chess.pgn.GameNode]] = [(root, game)]
        while stack:
            tree_node, pgn_node = stack.pop()
            for child in tree_node.children:
                variation = pgn_node.add_variation(
                    child.move,
                    comment=self.join_comment(child.comment, child.shapes),
                    nags=self._export_nags(child),
                )
                stack.append((child, variation))
        return game

    def export_pgn(self, root: RootNode) -> str:
        """Render a move tree as PGN text."""
        exporter = chess.pgn.StringExporter(headers=True, variations=True, comments=True)
        return self.export_game(root).accept(exporter).strip()

    def _export_nags(self, node: ChildNode) -> List[int]:
        nags = list(node.nags)
        if node.priority in self.priority_to_nag:
            nags.append(self.priority_to_nag[node.priority])
        return nags

    @staticmethod
    def join_comment(comment: Optional[str], shapes: Tuple[Shape, ...]) -> str:
        """Build a PGN comment from free text and board shapes.

        Square highlights are written as one %csl command and arrows as one
        %cal command, ahead of the text.
        """
        squares = [shape.pgn() for shape in shapes if not shape.is_arrow]
        arrows = [shape.pgn() for shape in shapes if shape.is_arrow]
        parts = []
        if squares:
            parts.append(f"[%csl {','.join(squares)}]")
        if arrows:
            parts.append(f"[%cal {','.join(arrows)}]")
        if comment:
            parts.append(comment)
        return " ".join(parts)
