from __future__ import annotations

from typing import Any, Callable

from lod.options import PropsMap, PropsReduce


_COMBINE: dict[str, Callable[[Any, Any], Any]] = {
    "sum": lambda a, b: a + b,
    "max": max,
    "min": min,
}


def parse_reducer_spec(spec: str) -> tuple[str, str]:
    """
    "sum:population" -> ("sum", "population").
    """
    op, sep, prop = (spec or "").partition(":")
    op = op.strip().lower()
    prop = prop.strip()
    if not sep or not prop or op not in _COMBINE:
        raise ValueError(
            f"Invalid reducer {spec!r}; expected one of "
            f"{', '.join(f'{k}:<property>' for k in _COMBINE)}"
        )
    return op, prop


def named_reducer(spec: str) -> tuple[PropsMap, PropsReduce]:
    """
    Build a (map, reduce) pair that aggregates one numeric property across clusters.

    Points missing the property count as 0 for sums and are ignored by min/max.
    """
    op, prop = parse_reducer_spec(spec)
    combine = _COMBINE[op]

    def map_props(props: dict[str, Any]) -> dict[str, Any]:
        v = props.get(prop)
        if v is None and op == "sum":
            v = 0
        return {prop: v}

    def reduce_props(acc: dict[str, Any], props: dict[str, Any]) -> None:
        v = props.get(prop)
        if v is None:
            return
        cur = acc.get(prop)
        acc[prop] = v if cur is None else combine(cur, v)

    return map_props, reduce_props
