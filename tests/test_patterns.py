import pytest

from wfc_dungeon.dungeon.patterns import DEFAULT_CATALOGUE, FLOOR_ID, HALL_ID, WALL_ID, PatternCatalogue

ALL = {WALL_ID, FLOOR_ID, HALL_ID}


def test_default_catalogue_tiles():
    cat = DEFAULT_CATALOGUE
    assert cat.tile_for(WALL_ID) == "#"
    assert cat.tile_for(FLOOR_ID) == "."
    assert cat.tile_for(HALL_ID) == "+"
    assert cat.id_for("+") == HALL_ID
    assert cat.pattern_ids == frozenset(ALL)


def test_relation_is_directed():
    cat = DEFAULT_CATALOGUE
    # HALL accepts FLOOR next to it, FLOOR does not accept HALL
    assert cat.allows(HALL_ID, FLOOR_ID)
    assert not cat.allows(FLOOR_ID, HALL_ID)
    assert cat.allows(WALL_ID, HALL_ID)
    assert not cat.allows(WALL_ID, FLOOR_ID)


@pytest.mark.parametrize(
    "source,expected",
    [
        ({WALL_ID}, {WALL_ID, HALL_ID}),
        ({FLOOR_ID}, {FLOOR_ID}),
        ({HALL_ID}, ALL),
        ({WALL_ID, HALL_ID}, {WALL_ID, HALL_ID}),
        ({WALL_ID, FLOOR_ID}, set()),
        (set(), ALL),
    ],
)
def test_compatible_with(source, expected):
    assert DEFAULT_CATALOGUE.compatible_with(source, ALL) == expected


def test_compatible_with_only_filters_candidates():
    assert DEFAULT_CATALOGUE.compatible_with({HALL_ID}, {FLOOR_ID}) == {FLOOR_ID}


def test_unknown_tile_raises_key_error():
    with pytest.raises(KeyError):
        DEFAULT_CATALOGUE.id_for("?")


def test_catalogue_requires_rules_for_every_pattern():
    with pytest.raises(ValueError):
        PatternCatalogue(tiles={0: "#", 1: "."}, valid_neighbors={0: frozenset({0})})


def test_catalogue_rejects_duplicate_tiles():
    with pytest.raises(ValueError):
        PatternCatalogue(tiles={0: "#", 1: "#"}, valid_neighbors={0: frozenset(), 1: frozenset()})
