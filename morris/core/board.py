from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import OutOfRangeError
from .state import Line, Owner

CELLS_PER_RING = 8

BoardArray = NDArray[np.int8]


class Board:
    """Flat store of ``layer_count * 8`` cells arranged as concentric rings.

    Index ``i`` sits on ring ``i // 8``. Within a ring, even positions are
    joints that connect to the same position on the neighbouring rings,
    odd positions are mid-edges that only touch their ring neighbours. The
    board knows geometry only; legality lives in the rules engine.
    """

    def __init__(self, layer_count: int, cells: Optional[np.ndarray] = None) -> None:
        if layer_count < 1:
            raise ValueError("Board needs at least one ring.")
        self.layer_count = layer_count
        self.size = layer_count * CELLS_PER_RING
        if cells is None:
            self.cells: BoardArray = np.zeros(self.size, dtype=np.int8)
        else:
            cells = np.asarray(cells, dtype=np.int8)
            if cells.shape != (self.size,):
                raise ValueError(f"cells must have shape ({self.size},), got {cells.shape}")
            self.cells = cells.copy()

    def _check(self, index: int) -> int:
        if not 0 <= index < self.size:
            raise OutOfRangeError(index, self.size)
        return int(index)

    def in_range(self, index: int) -> bool:
        return 0 <= index < self.size

    def cell_state(self, index: int) -> Owner:
        return Owner(int(self.cells[self._check(index)]))

    def set_cell(self, index: int, owner: Owner) -> None:
        self.cells[self._check(index)] = int(owner)

    def is_empty(self, index: int) -> bool:
        return self.cell_state(index) == Owner.EMPTY

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------
    def ring_neighbors(self, index: int) -> Tuple[int, int]:
        i = self._check(index)
        prev = i + 7 if i % CELLS_PER_RING == 0 else i - 1
        nxt = i - 7 if (i + 1) % CELLS_PER_RING == 0 else i + 1
        return prev, nxt

    def spoke_neighbors(self, index: int) -> Tuple[int, ...]:
        i = self._check(index)
        if i % 2:
            return ()
        spokes: List[int] = []
        if i - CELLS_PER_RING >= 0:
            spokes.append(i - CELLS_PER_RING)
        if i + CELLS_PER_RING < self.size:
            spokes.append(i + CELLS_PER_RING)
        return tuple(spokes)

    def neighbors(self, index: int) -> Tuple[int, ...]:
        """Adjacent cells in the order prev, next, out, in."""
        return self.ring_neighbors(index) + self.spoke_neighbors(index)

    # ------------------------------------------------------------------
    # Lines of three
    # ------------------------------------------------------------------
    def lines(self) -> List[Line]:
        found: List[Line] = []
        for i in range(self.size):
            line = self._line_centred_on(i)
            if line is not None:
                found.append(line)
        return found

    def lines_through(self, index: int) -> List[Line]:
        i = self._check(index)
        return [line for line in self.lines() if i in line]

    def _line_centred_on(self, i: int) -> Optional[Line]:
        # Mid-edges centre a ring edge; joints with both an out and an in
        # neighbour centre a spoke.
        if i % 2:
            prev, nxt = self.ring_neighbors(i)
            return (prev, i, nxt)
        spokes = self.spoke_neighbors(i)
        if len(spokes) == 2:
            return (spokes[0], i, spokes[1])
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def count_pieces(self, owner: Owner) -> int:
        return int(np.count_nonzero(self.cells == int(owner)))

    def positions_of(self, owner: Owner) -> List[int]:
        return [int(i) for i in np.flatnonzero(self.cells == int(owner))]

    def empty_positions(self) -> List[int]:
        return self.positions_of(Owner.EMPTY)

    def __iter__(self) -> Iterator[Owner]:
        for value in self.cells:
            yield Owner(int(value))

    def __len__(self) -> int:
        return self.size

    def copy(self) -> "Board":
        return Board(self.layer_count, self.cells)

    def snapshot(self) -> "Board":
        """Independent copy whose cells cannot be written."""
        view = self.copy()
        view.cells.setflags(write=False)
        return view

    def render(self) -> str:
        symbols = {0: ".", 1: "A", 2: "B"}
        rows = []
        for ring in range(self.layer_count):
            start = ring * CELLS_PER_RING
            row = " ".join(symbols[int(v)] for v in self.cells[start : start + CELLS_PER_RING])
            rows.append(f"{ring}: {row}")
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Board(layer_count={self.layer_count}, cells={self.cells.tolist()})"
