import pytest

from bddfour.caches import (
    Op,
    OpCache,
    binaryop_hash,
    ternaryop_hash,
    unaryop_hash,
)
from bddfour.node import hash_2, hash_3


def test_unaryop_hash_matches_hash_2():
    assert unaryop_hash(17, Op.NOT) == hash_2(Op.NOT, 17)


def test_binaryop_hash_matches_hash_3():
    assert binaryop_hash(3, 9, Op.AND) == hash_3(Op.AND, 3, 9)


def test_ternaryop_hash_ignores_third_argument():
    assert ternaryop_hash(4, 5, 6, Op.IMAGE) == ternaryop_hash(4, 5, 99, Op.IMAGE)


def test_fresh_cache_misses():
    cache = OpCache(4, binaryop_hash)
    assert cache.lookup(Op.AND, 2, 3) is None
    assert cache.size == 16
    assert cache.mask == 15


def test_store_then_lookup():
    cache = OpCache(6, binaryop_hash)
    cache.store(Op.OR, 42, 2, 3)
    assert cache.lookup(Op.OR, 2, 3) == 42
    assert cache.lookup(Op.AND, 2, 3) is None
    assert cache.lookup(Op.OR, 3, 2) is None


def test_unary_cache():
    cache = OpCache(5, unaryop_hash)
    cache.store(Op.SAT, 1 << 40, 7)
    assert cache.lookup(Op.SAT, 7) == 1 << 40
    assert cache.lookup(Op.NOT, 7) is None


def test_ternary_third_argument_is_compared():
    cache = OpCache(5, ternaryop_hash)
    cache.store(Op.IMAGE, 11, 2, 3, 4)
    assert cache.lookup(Op.IMAGE, 2, 3, 4) == 11
    assert cache.lookup(Op.IMAGE, 2, 3, 5) is None


def test_single_slot_overwrites():
    cache = OpCache(0, binaryop_hash)
    cache.store(Op.AND, 5, 2, 3)
    cache.store(Op.AND, 6, 4, 5)
    assert cache.lookup(Op.AND, 2, 3) is None
    assert cache.lookup(Op.AND, 4, 5) == 6


def test_clear():
    cache = OpCache(3, unaryop_hash)
    cache.store(Op.NOT, 9, 2)
    cache.clear()
    assert cache.lookup(Op.NOT, 2) is None


@pytest.mark.parametrize("log2size", [-1, 32])
def test_bad_size(log2size):
    with pytest.raises(ValueError):
        OpCache(log2size, unaryop_hash)