"""Plain-dict payloads exchanged with renderers, transports and logs."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

from .errors import IllegalMoveError
from .grid import Cell, HexGrid
from .rules import Move, MoveKind
from .state import BoardState, Side


def cell_to_dict(cell: Cell) -> Dict[str, int]:
    return {"q": int(cell[0]), "r": int(cell[1])}


def cell_from_dict(payload: Mapping[str, Any]) -> Cell:
    q, r = payload["q"], payload["r"]
    if isinstance(q, bool) or isinstance(r, bool) or not isinstance(q, int) or not isinstance(r, int):
        raise ValueError(f"Cell coordinates must be integers, got {payload!r}.")
    return (q, r)


def move_to_dict(move: Move) -> Dict[str, Any]:
    return {
        "from_cell": cell_to_dict(move.from_cell),
        "to_cell": cell_to_dict(move.to_cell),
        "kind": move.kind.value,
    }


def move_from_dict(payload: Mapping[str, Any]) -> Move:
    try:
        return Move(
            from_cell=cell_from_dict(payload["from_cell"]),
            to_cell=cell_from_dict(payload["to_cell"]),
            kind=MoveKind(payload["kind"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise IllegalMoveError(f"Malformed move descriptor {payload!r}.") from exc


def state_snapshot(state: BoardState, current_side: Side) -> Dict[str, Any]:
    return {
        "radius": state.grid.radius,
        "blocked": [cell_to_dict(cell) for cell in sorted(state.grid.blocked)],
        "pieces": [{"cell": cell_to_dict(piece.cell), "side": piece.side.label} for piece in state.pieces()],
        "current_side": Side(current_side).label,
    }


def load_state_snapshot(snapshot: Mapping[str, Any]) -> Tuple[BoardState, Side]:
    grid = HexGrid(int(snapshot["radius"]), [cell_from_dict(c) for c in snapshot.get("blocked", [])])
    state = BoardState(grid)
    for entry in snapshot["pieces"]:
        state.place(cell_from_dict(entry["cell"]), Side.from_label(entry["side"]))
    return state, Side.from_label(snapshot["current_side"])
