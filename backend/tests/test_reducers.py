import pytest

from lod.reducers import named_reducer, parse_reducer_spec


def test_parse_reducer_spec():
    assert parse_reducer_spec("sum:population") == ("sum", "population")
    assert parse_reducer_spec(" MAX : height ") == ("max", "height")
    for bad in ["", "sum", "sum:", "avg:x", ":x"]:
        with pytest.raises(ValueError):
            parse_reducer_spec(bad)


def test_sum_treats_missing_values_as_zero():
    map_props, reduce_props = named_reducer("sum:n")
    acc = map_props({"n": 2, "other": "x"})
    assert acc == {"n": 2}
    reduce_props(acc, map_props({"n": 5}))
    reduce_props(acc, map_props({}))
    assert acc == {"n": 7}


def test_min_and_max_ignore_missing_values():
    map_max, reduce_max = named_reducer("max:h")
    acc = map_max({})
    reduce_max(acc, map_max({"h": 3}))
    reduce_max(acc, map_max({"h": 9}))
    reduce_max(acc, map_max({}))
    assert acc == {"h": 9}

    map_min, reduce_min = named_reducer("min:h")
    acc = map_min({"h": 4})
    reduce_min(acc, map_min({"h": 1}))
    assert acc == {"h": 1}
