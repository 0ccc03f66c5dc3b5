import pytest

from city_library.exceptions import CellOutOfBoundsError, InvalidInputError, ValidationError
from city_library.floor_map import Coordinate, FloorMap


def test_populate_grid_walls_entrance_and_walkway(floor_map):
    assert floor_map.populated
    assert floor_map.width == 10 and floor_map.height == 6
    assert floor_map.rows()[0] == "#" * 10
    assert floor_map.rows()[-1] == "#" * 10
    assert floor_map.rows()[1] == "#E       #"
    assert floor_map.cell_at(2, 0) == "#"
    assert floor_map.cell_at(2, 9) == "#"
    assert floor_map.cell_at(3, 4) == " "
    assert all(len(row) == floor_map.width for row in floor_map.rows())


def test_entrance_coordinate(floor_map):
    assert floor_map.entrance_coordinate() == Coordinate(1, 1)


def test_entrance_missing_returns_none():
    fm = FloorMap.build(4, 3).populate_from_rows(["####", "#  #", "####"])
    assert fm.entrance_coordinate() is None


@pytest.mark.parametrize("row,col", [(6, 0), (0, 10), (-1, 0), (0, -1)])
def test_cell_at_out_of_bounds(floor_map, row, col):
    with pytest.raises(CellOutOfBoundsError):
        floor_map.cell_at(row, col)


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3), (True, 3)])
def test_build_rejects_bad_dimensions(width, height):
    with pytest.raises(ValidationError):
        FloorMap.build(width, height)


def test_build_rejects_blank_legend_description():
    with pytest.raises(ValidationError):
        FloorMap.build(5, 5, {"#": "Wall", " ": "   "})


def test_populate_from_rows_checks_shape():
    with pytest.raises(ValidationError):
        FloorMap.build(4, 3).populate_from_rows(["####", "#E #"])
    with pytest.raises(ValidationError):
        FloorMap.build(4, 3).populate_from_rows(["####", "#E  #", "####"])


def test_populate_from_rows_rejects_two_entrances():
    with pytest.raises(ValidationError):
        FloorMap.build(4, 3).populate_from_rows(["####", "#EE#", "####"])


def test_map_is_read_only_after_population(floor_map):
    with pytest.raises(ValidationError):
        floor_map.populate_grid()
    copy = floor_map.grid
    copy[3, 3] = "#"
    assert floor_map.cell_at(3, 3) == " "


def test_legend_is_read_only(floor_map):
    assert floor_map.legend["#"] == "Wall"
    assert floor_map.describe("?") == "Unknown"
    with pytest.raises(TypeError):
        floor_map.legend["?"] = "Mystery"


def test_walkability(floor_map):
    assert floor_map.is_walkable(1, 1)
    assert floor_map.is_walkable(2, 2)
    assert not floor_map.is_walkable(0, 0)
    assert not floor_map.is_walkable(10, 10)


def test_coordinate_value_identity_and_format():
    assert Coordinate(1, 2) == Coordinate(1, 2)
    assert len({Coordinate(1, 2), Coordinate(1, 2)}) == 1
    assert str(Coordinate(1, 2)) == "(1,2)"


@pytest.mark.parametrize("row,col", [(-1, 0), (0, -3), (1.5, 0)])
def test_coordinate_rejects_bad_values(row, col):
    with pytest.raises(InvalidInputError):
        Coordinate(row, col)
