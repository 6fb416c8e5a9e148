import pytest

from bddfour.caches import Op
from bddfour.manager import (
    BDDManager,
    OutOfNodesError,
    TableFullError,
    ram_estimate,
)
from bddfour.node import NO_INDEX, ONEINDEX, ZEROINDEX


@pytest.fixture
def manager():
    return BDDManager(6)


def test_constants_created(manager):
    zero = manager.get_node(ZEROINDEX)
    one = manager.get_node(ONEINDEX)
    assert zero.is_constant() and zero.constant() == 0
    assert one.is_constant() and one.constant() == 1
    assert manager.count == 2
    assert manager.num_nodes == 2


def test_create_variable(manager):
    x1 = manager.create_variable()
    node = manager.get_node(x1)
    assert x1 == 2
    assert (node.var, node.low, node.high) == (1, ZEROINDEX, ONEINDEX)
    assert node.parentcount == 1
    assert manager.get_node(ZEROINDEX).parentcount == 1
    assert manager.get_node(ONEINDEX).parentcount == 1
    assert manager.num_variables == 1


def test_make_reduces_equal_children(manager):
    x1 = manager.create_variable()
    assert manager.make(1, x1, x1) == x1


def test_make_is_unique(manager):
    manager.create_variable()
    x2 = manager.create_variable()
    a = manager.make(1, ZEROINDEX, x2)
    count = manager.count
    assert manager.make(1, ZEROINDEX, x2) == a
    assert manager.count == count


def test_make_rejects_unknown_variable(manager):
    manager.create_variable()
    with pytest.raises(ValueError):
        manager.make(2, ZEROINDEX, ONEINDEX)


def test_make_rejects_bad_order(manager):
    x1 = manager.create_variable()
    manager.create_variable()
    with pytest.raises(ValueError):
        manager.make(2, ZEROINDEX, x1)


def test_levels(manager):
    x1 = manager.create_variable()
    manager.create_variable()
    assert manager.level(manager.get_node(ZEROINDEX)) == manager.num_variables + 1
    assert manager.level(manager.get_node(x1)) == 1
    assert manager.level_for_var(0) == manager.num_variables + 1
    assert manager.level_for_var(2) == 2


def test_table_full():
    m = BDDManager(2)
    m.create_variable()
    with pytest.raises(TableFullError):
        m.create_variable()


def test_pop_index_runs_out():
    m = BDDManager(2)
    m.pop_index()
    m.pop_index()
    with pytest.raises(OutOfNodesError):
        m.pop_index()


def test_push_index_is_reused_first(manager):
    a = manager.pop_index()
    b = manager.pop_index()
    manager.push_index(a)
    assert manager.pop_index() == a
    assert b == a + 1


def test_get_node_rejects_no_index(manager):
    with pytest.raises(ValueError):
        manager.get_node(NO_INDEX)
    with pytest.raises(IndexError):
        manager.get_node(manager.capacity)


def test_gc_frees_parentless_nodes(manager):
    manager.create_variable()
    x2 = manager.create_variable()
    before = manager.count
    a = manager.make(1, ZEROINDEX, x2)
    assert manager.get_node(x2).parentcount == 2
    freed = manager.gc(True, True)
    assert freed == 1
    assert manager.count == before
    assert manager.get_node(x2).parentcount == 1
    assert manager.get_node(a).is_disabled()
    manager.verify()
    assert manager.make(1, ZEROINDEX, x2) == a


def test_gc_keeps_kept_alive_nodes(manager):
    manager.create_variable()
    x2 = manager.create_variable()
    a = manager.make(1, ZEROINDEX, x2)
    manager.keepalive(a)
    assert manager.gc(True, True) == 0
    assert not manager.get_node(a).is_disabled()
    manager.undo_keepalive(a)
    assert manager.gc(True, True) == 1


def test_gc_without_force_skips_when_mostly_empty(manager):
    manager.create_variable()
    x2 = manager.create_variable()
    a = manager.make(1, ZEROINDEX, x2)
    count = manager.count
    assert manager.gc(True, False) == 0
    assert manager.count == count
    assert not manager.get_node(a).is_disabled()
    assert manager.gc_max_fill_level == manager.num_nodes / manager.capacity


def test_disable_node_rec(manager):
    manager.create_variable()
    x2 = manager.create_variable()
    a = manager.make(1, ZEROINDEX, x2)
    manager.disable_node_rec(manager.get_node(a))
    assert manager.get_node(a).is_disabled()
    assert manager.get_node(x2).parentcount == 1
    b = manager.make(1, ZEROINDEX, x2)
    assert b != a
    assert not manager.get_node(b).is_disabled()


def test_clear_caches(manager):
    manager.binary_cache.store(Op.AND, 1, 2, 3)
    assert manager.binary_cache.lookup(Op.AND, 2, 3) == 1
    manager.clear_caches()
    assert manager.binary_cache.lookup(Op.AND, 2, 3) is None


def test_verify_detects_corruption(manager):
    x1 = manager.create_variable()
    manager.get_node(x1).low = ONEINDEX
    with pytest.raises(RuntimeError):
        manager.verify()


def test_to_dot(manager):
    x1 = manager.create_variable()
    dot = manager.to_dot()
    lines = dot.splitlines()
    assert lines[0] == "digraph {"
    assert lines[-1] == "}"
    assert f'{x1} [label="x1 ({x1})"]' in lines
    assert f"{x1} -> 0 [style=dashed]" in lines
    assert f"{x1} -> 1" in lines
    assert '0 [label="0"]' in lines


def test_format_nodes_stats_only(manager):
    text = manager.format_nodes(True)
    lines = text.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("Memorypool(num_nodes=2 ")
    assert lines[1] == f"Uniquetable(count=2, size={manager.table_size})"


def test_format_nodes_hides_after_twenty(manager):
    for _ in range(21):
        manager.create_variable()
    lines = manager.format_nodes(False).splitlines()
    assert lines[-1] == f"Hiding {manager.count - 20} nodes"
    assert len(lines) == 2 + 20 + 1


def test_too_many_variables():
    m = BDDManager(9)
    for _ in range(254):
        m.create_variable()
    with pytest.raises(ValueError):
        m.create_variable()


def test_invalid_log2size():
    with pytest.raises(ValueError):
        BDDManager(33)


def test_ram_estimate_scales_linearly():
    assert ram_estimate(11) == 2 * ram_estimate(10)
    assert ram_estimate(12) > ram_estimate(11)