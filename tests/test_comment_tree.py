from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from types import SimpleNamespace

from poetportal.crud.engagement import MAX_REPLY_DEPTH, build_comment_forest, collect_subtree

BASE = datetime(2024, 1, 1, 12, 0, 0)


def _comment(comment_id, parent_id=None, minute=0, user_id=1):
    return SimpleNamespace(
        id=comment_id,
        post_id=1,
        user_id=user_id,
        parent_id=parent_id,
        content=f"comment {comment_id}",
        created_at=BASE + timedelta(minutes=minute),
    )


def _shape(nodes):
    return [(node.id, _shape(node.replies)) for node in nodes]


THREAD = [
    _comment(1, None, minute=0),
    _comment(2, 1, minute=5),
    _comment(3, 1, minute=2),
    _comment(4, None, minute=1),
    _comment(5, 3, minute=6),
]


def test_forest_links_children_and_orders_siblings_by_time():
    forest = build_comment_forest(THREAD)

    assert _shape(forest) == [
        (1, [(3, [(5, [])]), (2, [])]),
        (4, []),
    ]


def test_forest_is_independent_of_input_order():
    expected = _shape(build_comment_forest(THREAD))
    for permutation in itertools.permutations(THREAD):
        assert _shape(build_comment_forest(permutation)) == expected


def test_equal_timestamps_fall_back_to_id():
    thread = [_comment(9, None), _comment(8, None)]
    assert [node.id for node in build_comment_forest(thread)] == [8, 9]


def test_orphans_and_cycles_are_dropped():
    thread = [
        _comment(1, None),
        _comment(2, 404),  # parent never existed
        _comment(3, 4),
        _comment(4, 3),  # 3 and 4 point at each other
        _comment(5, 5),  # its own parent
    ]
    assert _shape(build_comment_forest(thread)) == [(1, [])]


def test_depth_and_reply_affordance():
    chain = [_comment(i, i - 1 if i > 1 else None, minute=i) for i in range(1, 7)]
    node = build_comment_forest(chain)[0]
    depths = []
    while True:
        depths.append((node.depth, node.can_reply))
        if not node.replies:
            break
        node = node.replies[0]

    assert [depth for depth, _ in depths] == [0, 1, 2, 3, 4, 5]
    assert all(can_reply == (depth < MAX_REPLY_DEPTH) for depth, can_reply in depths)


def test_like_data_is_attached_to_nodes():
    forest = build_comment_forest(THREAD, like_counts={3: 2}, liked={3})
    reply = forest[0].replies[0]
    assert (reply.id, reply.like_count, reply.liked_by_me) == (3, 2, True)
    assert forest[0].like_count == 0


def test_collect_subtree_returns_descendants_only():
    assert sorted(collect_subtree(THREAD, 1)) == [1, 2, 3, 5]
    assert collect_subtree(THREAD, 4) == [4]


def test_collect_subtree_survives_cycles():
    thread = [_comment(3, 4), _comment(4, 3)]
    assert sorted(collect_subtree(thread, 3)) == [3, 4]
