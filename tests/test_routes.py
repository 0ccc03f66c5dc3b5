from city_library.floor_map import Coordinate, FloorMap
from city_library.library import Library
from city_library.routes import route_from_entrance, route_to_media, route_to_resource


def test_route_to_media(library):
    result = route_to_media(library, library.require_media("M1"))
    assert result.found
    assert result.steps == 1
    assert result.directions() == ["RIGHT to (1,2)"]
    assert result.render()[1] == "#SX      #"


def test_route_to_resource(library):
    result = route_to_resource(library, library.require_resource(1))
    assert result.found
    assert result.path[0] == Coordinate(1, 1)
    assert result.path[-1] == Coordinate(3, 2)
    assert result.steps == 3


def test_route_to_wall_is_not_found(library):
    result = route_from_entrance(library, Coordinate(0, 5))
    assert not result.found
    assert result.steps == 0
    assert result.directions() == []
    assert result.render() == library.floor_map.rows()


def test_map_without_entrance_has_no_routes():
    fm = FloorMap.build(5, 4).populate_from_rows(["#####", "#   #", "#   #", "#####"])
    branch = Library("Annex", "2 Side Street", fm)
    assert not route_from_entrance(branch, Coordinate(2, 2)).found
