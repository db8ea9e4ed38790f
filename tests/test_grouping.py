from types import SimpleNamespace

from app.core.grouping import group_by


def _row(**kwargs):
    return SimpleNamespace(**kwargs)


def test_group_by_keeps_first_seen_key_order_and_row_order() -> None:
    rows = [_row(k="b", n=1), _row(k="a", n=2), _row(k="b", n=3)]

    grouped = group_by(rows, lambda r: r.k)

    assert list(grouped) == ["b", "a"]
    assert [r.n for r in grouped["b"]] == [1, 3]
    assert [r.n for r in grouped["a"]] == [2]


def test_group_by_drops_rows_with_null_key() -> None:
    rows = [_row(k=None, n=1), _row(k="a", n=2)]

    grouped = group_by(rows, lambda r: r.k)

    assert grouped == {"a": [rows[1]]}
    assert sum(len(v) for v in grouped.values()) == 1


def test_group_by_drops_composite_keys_with_a_null_part() -> None:
    rows = [_row(c="c1", s="s1"), _row(c="c1", s=None), _row(c=None, s="s1")]

    grouped = group_by(rows, lambda r: (r.c, r.s))

    assert list(grouped) == [("c1", "s1")]


def test_group_by_empty_input() -> None:
    assert group_by([], lambda r: r) == {}


def test_group_by_partitions_every_keyed_row_exactly_once() -> None:
    rows = [_row(k=i % 3) for i in range(10)]

    grouped = group_by(rows, lambda r: r.k)

    flattened = [r for bucket in grouped.values() for r in bucket]
    assert len(flattened) == len(rows)
    assert all(r.k == k for k, bucket in grouped.items() for r in bucket)
