# bddfour

`bddfour` provides the storage layer of a binary decision diagram (BDD)
engine: a fixed-capacity node pool, a unique table that keeps every
`(var, low, high)` triple exactly once, operation caches and
reference-counted garbage collection. It also includes bitboard helpers
for Connect Four positions of every width and height that fit in 64 bits.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## BDD nodes and the manager

`bddfour.manager.BDDManager(log2size)` holds up to `2 ** log2size` nodes.
Index `0` (`bddfour.node.ZEROINDEX`) is the constant *false* and index `1`
(`ONEINDEX`) is the constant *true*. Variables are numbered from 1 in the
order they are created, and that order is the variable order. At most 254
variables can be created.

```python
from bddfour.manager import BDDManager
from bddfour.node import ZEROINDEX, ONEINDEX

manager = BDDManager(10)
x1 = manager.create_variable()   # node (1, 0, 1), kept alive
x2 = manager.create_variable()   # node (2, 0, 1), kept alive

# x1 AND x2: if x1 is false the result is false, otherwise it is x2
f = manager.make(1, ZEROINDEX, x2)
assert manager.make(1, ZEROINDEX, x2) == f   # the unique table returns the same node

node = manager.get_node(f)
print(node.describe())           # BDDNode(var=1, low=0, high=..., #parents=0)
```

`make(var, low, high)` returns `low` when `low == high`. It raises
`ValueError` if the variable has not been created yet, or if it does not come
before the variables of its children. `allocate` adds a node without looking
for an existing one. When the pool is exhausted, the manager raises
`OutOfNodesError`. When the unique table is full, it raises `TableFullError`.

`bddfour.manager.ram_estimate(log2size)` returns the number of bytes a pool of
that size needs in a compact in-memory layout.

### Garbage collection

Every node counts its parents. To protect a root you still need, call
`manager.keepalive(index)`, and call `manager.undo_keepalive(index)` once you
no longer need it. `manager.gc(disable_rec, force)` removes nodes that have no
parents, gives their indices back to the pool, clears the operation caches and
returns the number of nodes it freed. If `force` is false, it does nothing
until the pool is at least half full. If `disable_rec` is true, it first
disables parentless nodes recursively, so that whole unreferenced subgraphs
are freed in one pass. Progress is reported through the standard `logging`
module. The attributes `gc_time`, `gc_max_fill_level` and `gc_max_nodes_alloc`
record statistics across runs.

`manager.verify()` raises `RuntimeError` if an invariant of the unique table
is broken. `manager.format_nodes(statsonly)` returns pool and table statistics,
followed by up to 20 nodes. `manager.to_dot()` returns the whole table in
Graphviz dot format.

### Supporting pieces

- `bddfour.node`: the `Node` dataclass and the pairing hashes `hash_2`,
  `hash_3` and `hash_varlowhigh`.
- `bddfour.caches`: the `Op` enumeration and `OpCache`. An `OpCache` is a
  direct-mapped cache with `2 ** log2size` slots. `lookup(op, *args)` returns
  the stored result or `None`, `store(op, result, *args)` writes a result and
  `clear()` empties the cache. Each manager has `unary_cache`, `binary_cache`
  and `ternary_cache`, and `gc` clears all three.
- `bddfour.nodeindexmap`: `NodeIndexMap`, a bounded map from one node index to
  another that keeps insertion order. It raises `MapFullError` when full. It
  also provides the mixing hash `hash_32`.

### What is not included

This package provides no Boolean operations on diagrams (conjunction,
disjunction, negation, quantification, relational image), no counting of
satisfying assignments or reachable nodes, and no saving of diagrams to files
or loading from them. You can build diagrams only directly, through
`BDDManager.make`.

## Connect Four bitboards

```python
from bddfour.board import Connect4

game = Connect4(7, 6)
player, mask = game.play_sequence("334")
print(game.render(player, mask))
print(game.is_terminal(player, mask))
print(bin(game.winning_spots(player ^ mask, mask)))
```

A position is a pair of integers. `mask` holds every stone on the board, and
`player` holds the stones of the side to move, so `player ^ mask` holds the
stones of the side that just moved. Each column takes `height + 1` bits, and
bit 0 is the bottom cell of the leftmost column.

`play` and `undo` return the new `(player, mask)` pair. They raise
`IllegalMoveError` for a full or empty column, and `ValueError` for a column
outside the board. Other methods are `column_mask`, `is_cell_set`,
`alignment`, `ply`, `pseudo_legal_moves`, `is_legal_move`, `position_key`
(the same key whichever side is to move), `flip` (left–right mirror) and
`format_mask`.

`bddfour.constants.board_constants(width, height)` returns a frozen
`BoardConstants` with the board, left-half, right-half and bottom masks and
the static move order. The width must be between 1 and 10, the height between
1 and 13, and `width * (height + 1)` must be at most 64.
`static_move_order(width)` lists the columns centre-first.