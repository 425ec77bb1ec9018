"""Tests for filter rendering."""

from modloom.constants import TargetPlatform
from modloom.filters import (
    DATE_ADDED,
    FULLTEXT,
    ID,
    NAME,
    VERSION,
    Filter,
    Operator,
    custom_filter,
    custom_order_by_asc,
    with_limit,
    with_offset,
)


def test_empty_filter_renders_nothing():
    assert Filter().to_query() == {}


def test_operators_render_suffixes():
    f = (
        ID.eq(1)
        + ID.ne(2)
        + NAME.like("Foo*")
        + NAME.not_like("*Bar")
        + ID.in_([1, 2, 3])
        + ID.not_in((4, 5))
        + DATE_ADDED.ge(10)
        + DATE_ADDED.le(20)
        + DATE_ADDED.lt(30)
        + DATE_ADDED.gt(5)
        + custom_filter("maturity_option", Operator.BITWISE_AND, 6)
    )

    assert f.to_query() == {
        "date_added-min": "10",
        "date_added-max": "20",
        "date_added-st": "30",
        "date_added-gt": "5",
        "id": "1",
        "id-not": "2",
        "id-in": "1,2,3",
        "id-not-in": "4,5",
        "maturity_option-bitwise-and": "6",
        "name-lk": "Foo*",
        "name-not-lk": "*Bar",
    }


def test_entries_are_sorted_by_name_and_operator():
    f = NAME.like("x") + ID.ne(1) + NAME.eq("y") + ID.eq(2)
    assert [e.key for e in f.entries] == ["id", "id-not", "name", "name-lk"]


def test_right_hand_side_wins_for_duplicates():
    f = VERSION.eq("1.0") + VERSION.eq("2.0")
    assert f.to_query() == {"version": "2.0"}


def test_values_are_rendered():
    f = custom_filter("visible", Operator.EQUALS, True) + custom_filter(
        "platforms", Operator.IN, [TargetPlatform.WINDOWS, TargetPlatform.LINUX]
    )
    assert f.to_query() == {"platforms-in": "windows,linux", "visible": "true"}


def test_sort_limit_and_offset():
    f = FULLTEXT.eq("tree").order_by(DATE_ADDED.desc()).limit(10).offset(20)

    assert f.to_query() == {
        "_q": "tree",
        "_limit": 10,
        "_offset": 20,
        "_sort": "-date_added",
    }


def test_ascending_sort():
    assert NAME.asc().to_query() == {"_sort": "name"}
    assert custom_order_by_asc("rating").to_query() == {"_sort": "rating"}


def test_combining_keeps_paging_unless_overridden():
    base = NAME.eq("a") + with_limit(5) + with_offset(10)
    combined = base + with_offset(15)

    assert combined.to_query() == {"name": "a", "_limit": 5, "_offset": 15}


def test_filters_are_immutable():
    base = NAME.eq("a")
    limited = base.limit(5)

    assert base.to_query() == {"name": "a"}
    assert limited.to_query() == {"name": "a", "_limit": 5}
