"""Tests for the query engine."""

from pathlib import Path

import pytest

from rmmz_index.game_data import EntityIndex, GameDataService, QueryEngine, SearchOptions


@pytest.fixture
def index() -> EntityIndex:
    index = EntityIndex()
    index.add_collection(
        "enemy",
        {
            1: {"id": 1, "name": "Slime", "exp": 10, "gold": 5},
            6: {"id": 6, "name": "Bat", "exp": 20},
            12: {"id": 12, "name": "Dragon", "exp": 500, "gold": 900},
        },
    )
    index.add_collection(
        "actor",
        {
            1: {"id": 1, "name": "Hero", "classId": 1},
            2: {"id": 2, "name": "", "classId": 2},
        },
    )
    return index


def ids(results):
    return [(r.type, r.id) for r in results]


class TestQueryFilters:
    """Test individual predicates."""

    def test_no_options_returns_everything_in_processing_order(self, index: EntityIndex) -> None:
        """Test an empty query returns all records, types in processing order."""
        results = QueryEngine(index).run(SearchOptions())
        assert ids(results) == [("actor", 1), ("actor", 2), ("enemy", 1), ("enemy", 6), ("enemy", 12)]

    def test_id_range_inclusive(self, index: EntityIndex) -> None:
        """Test both id bounds are inclusive."""
        results = QueryEngine(index).run(SearchOptions(types=["enemy"], id_min=5, id_max=10))
        assert ids(results) == [("enemy", 6)]

        results = QueryEngine(index).run(SearchOptions(types=["enemy"], id_min=6, id_max=12))
        assert ids(results) == [("enemy", 6), ("enemy", 12)]

    def test_open_ended_range(self, index: EntityIndex) -> None:
        """Test either id bound can be omitted."""
        results = QueryEngine(index).run(SearchOptions(types=["enemy"], id_min=6))
        assert ids(results) == [("enemy", 6), ("enemy", 12)]

        results = QueryEngine(index).run(SearchOptions(types=["enemy"], id_max=1))
        assert ids(results) == [("enemy", 1)]

    def test_type_filter(self, index: EntityIndex) -> None:
        """Test only the requested types are searched."""
        results = QueryEngine(index).run(SearchOptions(types=["actor"]))
        assert {r.type for r in results} == {"actor"}

    def test_empty_and_unknown_types(self, index: EntityIndex) -> None:
        """Test an empty type list means all types and unknown types are ignored."""
        assert len(QueryEngine(index).run(SearchOptions(types=[]))) == 5
        assert QueryEngine(index).run(SearchOptions(types=["spell"])) == []

    def test_name_contains_is_case_insensitive(self, index: EntityIndex) -> None:
        """Test name matching ignores case."""
        results = QueryEngine(index).run(SearchOptions(name_contains="DRA"))
        assert ids(results) == [("enemy", 12)]

    def test_has_property(self, index: EntityIndex) -> None:
        """Test records without the property are filtered out."""
        results = QueryEngine(index).run(SearchOptions(has_property="gold"))
        assert ids(results) == [("enemy", 1), ("enemy", 12)]

    def test_where_equality(self, index: EntityIndex) -> None:
        """Test field equality filter."""
        results = QueryEngine(index).run(SearchOptions(where={"classId": 2}))
        assert ids(results) == [("actor", 2)]

    def test_where_missing_field_does_not_match_none(self, index: EntityIndex) -> None:
        """Test a missing field never equals an explicit null."""
        assert QueryEngine(index).run(SearchOptions(where={"gold": None})) == []

    def test_where_does_not_mix_booleans_and_numbers(self) -> None:
        """Test true and 1 are different values while 1 and 1.0 are the same number."""
        index = EntityIndex()
        index.add_collection(
            "item", {1: {"id": 1, "consumable": True}, 2: {"id": 2, "consumable": 1}}
        )
        engine = QueryEngine(index)

        assert ids(engine.run(SearchOptions(where={"consumable": 1}))) == [("item", 2)]
        assert ids(engine.run(SearchOptions(where={"consumable": 1.0}))) == [("item", 2)]
        assert ids(engine.run(SearchOptions(where={"consumable": True}))) == [("item", 1)]

    def test_filters_combine(self, index: EntityIndex) -> None:
        """Test filters are combined with AND."""
        options = SearchOptions(types=["enemy"], id_min=2, has_property="gold")
        assert ids(QueryEngine(index).run(options)) == [("enemy", 12)]

    def test_unnamed_record_gets_fallback_name(self, index: EntityIndex) -> None:
        """Test a record without a name is reported as '<type> <id>'."""
        results = QueryEngine(index).run(SearchOptions(types=["actor"], id_min=2))
        assert results[0].name == "actor 2"


class TestQueryOrdering:
    """Test sorting and limits."""

    def test_order_by_field(self, index: EntityIndex) -> None:
        """Test results sort by the requested field."""
        results = QueryEngine(index).run(SearchOptions(types=["enemy"], order_by="name"))
        assert [r.name for r in results] == ["Bat", "Dragon", "Slime"]

    def test_missing_sort_field_goes_last(self, index: EntityIndex) -> None:
        """Test records lacking the sort field come after the others."""
        results = QueryEngine(index).run(SearchOptions(types=["enemy"], order_by="gold"))
        assert ids(results) == [("enemy", 1), ("enemy", 12), ("enemy", 6)]

    def test_mixed_types_do_not_raise(self) -> None:
        """Test values that cannot be compared keep their order."""
        index = EntityIndex()
        index.add_collection("item", {1: {"id": 1, "price": "50"}, 2: {"id": 2, "price": 10}})
        results = QueryEngine(index).run(SearchOptions(order_by="price"))
        assert ids(results) == [("item", 1), ("item", 2)]

    def test_incomparable_values_follow(self) -> None:
        """Test values of another kind follow the sorted ones."""
        index = EntityIndex()
        index.add_collection(
            "item",
            {1: {"id": 1, "price": 30}, 2: {"id": 2, "price": "free"}, 3: {"id": 3, "price": 10}, 4: {"id": 4}},
        )
        results = QueryEngine(index).run(SearchOptions(order_by="price"))
        assert ids(results) == [("item", 3), ("item", 1), ("item", 2), ("item", 4)]

    def test_limit_applies_after_sort(self, index: EntityIndex) -> None:
        """Test the limit keeps the first rows of the sorted result, not of id order."""
        options = SearchOptions(types=["enemy"], order_by="name", limit=2)
        results = QueryEngine(index).run(options)
        assert [r.name for r in results] == ["Bat", "Dragon"]

    def test_zero_limit(self, index: EntityIndex) -> None:
        """Test a zero limit returns nothing."""
        assert QueryEngine(index).run(SearchOptions(limit=0)) == []

    def test_negative_limit(self, index: EntityIndex) -> None:
        """Test a negative limit is rejected."""
        with pytest.raises(ValueError):
            QueryEngine(index).run(SearchOptions(limit=-1))


class TestServiceSearch:
    """Test searching through the service."""

    def test_enemy_range(self, project: Path) -> None:
        """Test an id range search over the project's enemies."""
        results = GameDataService(project).search(
            SearchOptions(types=["enemy"], id_min=5, id_max=10)
        )
        assert [(r.id, r.name) for r in results] == [(6, "Bat")]

    def test_search_does_not_mutate_index_records(self, project: Path) -> None:
        """Test sorting and limiting leave the loaded records untouched."""
        service = GameDataService(project)
        before = service.build_index().records_by_type
        service.search(SearchOptions(order_by="name", limit=3))
        assert service.build_index().records_by_type == before
