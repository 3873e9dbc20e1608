"""
ASCII grid files.

Format (whitespace separated tokens)::

    cpgrid-grid 1
    dimensions <d>
    cartdims <nx> <ny> <nz>
    nodes <N>
    <x> <y> [<z>]            (N rows)
    cells <M> <corners>
    <n0> ... <n_corners-1>   (M rows)
    global_cell <M>
    <g0> ... <gM-1>

Faces are not stored; they are rebuilt from the cells on read.
"""

from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from loguru import logger

from .unstructured import UnstructuredGrid

MAGIC = "cpgrid-grid"
VERSION = 1


class _Tokens:
    """Sequential reader over whitespace-separated tokens."""

    def __init__(self, tokens: List[str]):
        self.tokens = tokens
        self.ptr = 0

    def next(self) -> str:
        if self.ptr >= len(self.tokens):
            raise ValueError("Unexpected end of file")
        token = self.tokens[self.ptr]
        self.ptr += 1
        return token

    def expect(self, word: str) -> None:
        token = self.next()
        if token != word:
            raise ValueError(f"Expected '{word}', found '{token}'")

    def ints(self, n: int) -> np.ndarray:
        return np.array([int(self.next()) for _ in range(n)], dtype=np.int64)

    def floats(self, n: int) -> np.ndarray:
        return np.array([float(self.next()) for _ in range(n)], dtype=np.float64)


def _parse_grid(tokens: _Tokens) -> UnstructuredGrid:
    tokens.expect(MAGIC)
    version = int(tokens.next())
    if version != VERSION:
        raise ValueError(f"Unsupported grid file version {version}")

    tokens.expect("dimensions")
    dimensions = int(tokens.next())
    if dimensions not in (2, 3):
        raise ValueError(f"Grid dimension must be 2 or 3, got {dimensions}")

    tokens.expect("cartdims")
    cartdims = tuple(int(v) for v in tokens.ints(3))

    tokens.expect("nodes")
    n_nodes = int(tokens.next())
    nodes = tokens.floats(n_nodes * dimensions).reshape(n_nodes, dimensions)

    tokens.expect("cells")
    n_cells = int(tokens.next())
    n_corners = int(tokens.next())
    if n_corners != 2 ** dimensions:
        raise ValueError(f"Expected {2 ** dimensions} corners per cell, got {n_corners}")
    cell_nodes = tokens.ints(n_cells * n_corners).reshape(n_cells, n_corners)
    if cell_nodes.size and (cell_nodes.min() < 0 or cell_nodes.max() >= n_nodes):
        raise ValueError("Cell node index out of range")

    tokens.expect("global_cell")
    if int(tokens.next()) != n_cells:
        raise ValueError("global_cell count does not match number of cells")
    global_cell = tokens.ints(n_cells)

    return UnstructuredGrid.from_cells(
        dimensions=dimensions,
        cartdims=cartdims,
        node_coordinates=nodes,
        cell_nodes=cell_nodes,
        global_cell=global_cell,
    )


def read_grid(filename: Union[str, Path]) -> Optional[UnstructuredGrid]:
    """
    Read a grid written by write_grid().

    Returns
    -------
    UnstructuredGrid or None
        None if the file is missing or malformed; the reason is logged.
    """
    path = Path(filename)
    try:
        with open(path, 'r') as f:
            tokens = _Tokens(f.read().split())
        grid = _parse_grid(tokens)
    except (OSError, ValueError) as exc:
        logger.warning(f"Could not read grid from {path}: {exc}")
        return None

    logger.debug(f"Read {grid.number_of_cells} cells from {path}")
    return grid


def write_grid(grid: UnstructuredGrid, filename: Union[str, Path]) -> None:
    """Write a grid in the format read by read_grid()."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    cartdims = list(grid.cartdims) + [1] * (3 - len(grid.cartdims))
    lines = [
        f"{MAGIC} {VERSION}",
        f"dimensions {grid.dimensions}",
        "cartdims " + " ".join(str(n) for n in cartdims),
        f"nodes {grid.number_of_nodes}",
    ]
    lines.extend(" ".join(f"{v:.17g}" for v in row) for row in grid.node_coordinates)
    lines.append(f"cells {grid.number_of_cells} {grid.cell_nodes.shape[1]}")
    lines.extend(" ".join(str(n) for n in row) for row in grid.cell_nodes)
    lines.append(f"global_cell {grid.number_of_cells}")
    lines.append(" ".join(str(g) for g in grid.global_cell))

    path.write_text("\n".join(lines) + "\n")
