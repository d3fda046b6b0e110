from wfc_dungeon.dungeon.grid import Grid
from wfc_dungeon.dungeon.pruning import blocked_sides, remove_dead_ends

from dungeon_test_utils import boxed


def test_blocked_sides_counts_out_of_bounds():
    g = Grid.from_text(boxed(["..", ".."]))
    assert blocked_sides(g, 0, 0) == 4
    assert blocked_sides(g, 1, 1) == 2


def test_open_block_untouched():
    g = Grid.from_text(boxed(["..", ".."]))
    before = g.to_text()
    assert remove_dead_ends(g) == (0, 1)
    assert g.to_text() == before


def test_single_stub_removed():
    g = Grid.from_text(boxed(["...", "...", ".##"]))
    removed, sweeps = remove_dead_ends(g)
    assert (removed, sweeps) == (1, 2)
    assert g.rows()[3] == "#####"


def test_stub_chain_erodes_to_fixed_point():
    g = Grid.from_text(boxed(["...", "...", ".##", ".##"]))
    removed, sweeps = remove_dead_ends(g)
    # the tip goes in the first sweep, the cell behind it in the second
    assert (removed, sweeps) == (2, 3)
    assert g.rows()[3] == "#####"
    assert g.rows()[4] == "#####"
    assert g.rows()[1] == "#...#"


def test_isolated_cell_and_halls_removed():
    g = Grid.from_text(boxed(["+##", "###", "##."]))
    removed, _ = remove_dead_ends(g)
    assert removed == 2
    assert g.count("+") == 0 and g.count(".") == 0


def test_loop_survives():
    g = Grid.from_text(boxed(["...", ".#.", "..."]))
    assert remove_dead_ends(g)[0] == 0
