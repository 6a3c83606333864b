"""
Shared fixtures for TextureTools tests.

Provides named colors, small sample grids and fresh sessions.
"""
import pytest

from texture_tools.colors import from_hex
from texture_tools.grid import Grid
from texture_tools.session import TextureSession


RED = from_hex("#FF0000")
GREEN = from_hex("#00FF00")
BLUE = from_hex("#0000FF")
HALF_GREEN = from_hex("#00FF0080")
EMPTY = 0


def grid_of(*rows):
    """Build a grid from rows of hex strings ('.' is empty)."""
    return Grid.from_hex_rows([["transparent" if cell == "." else cell for cell in row] for row in rows])


@pytest.fixture
def empty_4x4():
    return Grid.empty(4, 4)


@pytest.fixture
def two_region_grid():
    """Red block on the left, blue block on the right, split by an empty column"""
    return grid_of(
        ["#FF0000", "#FF0000", ".", "#0000FF"],
        ["#FF0000", "#FF0000", ".", "#0000FF"],
        [".", ".", ".", "#0000FF"],
        ["#FF0000", ".", ".", "#0000FF"],
    )


@pytest.fixture
def numbered_4x4():
    """4x4 grid where every cell holds a distinct opaque color"""
    return Grid.from_rows([[(r * 4 + c + 1) << 8 | 0xFF for c in range(4)] for r in range(4)])


@pytest.fixture
def session():
    return TextureSession(4, 4)
