"""Node storage, unique table and garbage collection for BDDs.

A BDDManager owns a fixed-capacity pool of nodes, a unique table that
makes sure every (var, low, high) triple exists at most once, and the
operation caches. Nodes 0 and 1 are the constants false and true.
"""

from __future__ import annotations

import logging
import time

from .caches import OpCache, binaryop_hash, ternaryop_hash, unaryop_hash
from .node import NO_INDEX, ONEINDEX, ZEROINDEX, Node

logger = logging.getLogger(__name__)

MAX_VARIABLES = 254

# Sizes in bytes of the records used by the reference memory layout.
_NODE_BYTES = 20
_BUCKET_BYTES = 4
_TABLE_ENTRY_BYTES = 8
_UNARY_ENTRY_BYTES = 16
_BINARY_ENTRY_BYTES = 16
_TERNARY_ENTRY_BYTES = 20


class OutOfNodesError(Exception):
    """Raised when the node pool has no unallocated node left."""


class TableFullError(Exception):
    """Raised when the unique table cannot hold another node."""


def ram_estimate(log2size: int) -> int:
    """Bytes of memory a manager with 2**log2size nodes needs in the compact layout."""
    num_nodes = 1 << log2size
    per_node = _NODE_BYTES + 1.5 * _BUCKET_BYTES + 1.5 * _TABLE_ENTRY_BYTES
    per_cache_slot = _UNARY_ENTRY_BYTES + _BINARY_ENTRY_BYTES + _TERNARY_ENTRY_BYTES
    return int(num_nodes * per_node + (num_nodes // 4) * per_cache_slot)


class BDDManager:
    """Pool of 2**log2size nodes with a unique table and operation caches."""

    def __init__(self, log2size: int) -> None:
        if not 0 <= log2size <= 32:
            raise ValueError(f"log2size must be between 0 and 32, got {log2size}")
        self.log2size = log2size
        self.capacity = 1 << log2size
        self.num_variables = 0
        self.num_nodes = 0

        self._nodes: list[Node] = []
        self._free: list[int] = []
        self._fresh = 0

        size = 1 << log2size
        # The largest index is reserved as the end marker, so a full-size
        # table holds one entry less.
        self.table_size = size - 1 if log2size == 32 else size
        self._mask = (size - 1) & 0xFFFFFFFF
        self._entries: list[int] = []
        self._table: dict[tuple[int, int, int], int] = {}

        cache_log2 = max(log2size - 2, 0)
        self.unary_cache = OpCache(cache_log2, unaryop_hash)
        self.binary_cache = OpCache(cache_log2, binaryop_hash)
        self.ternary_cache = OpCache(cache_log2, ternaryop_hash)

        self.gc_time = 0.0
        self.gc_max_fill_level = 0.0
        self.gc_max_nodes_alloc = 0

        self._create_zero_one()

    # -- node pool -------------------------------------------------------

    def _ensure(self, index: int) -> None:
        while len(self._nodes) <= index:
            i = len(self._nodes)
            self._nodes.append(Node(next=i + 1))

    def get_node(self, index: int) -> Node:
        """Node stored at index."""
        if index == NO_INDEX:
            raise ValueError("NO_INDEX does not refer to a node")
        if not 0 <= index < self.capacity:
            raise IndexError(f"node index {index} out of range")
        self._ensure(index)
        return self._nodes[index]

    def pop_index(self) -> int:
        """Take the next unallocated node index from the pool."""
        if self._free:
            index = self._free.pop()
        elif self._fresh < self.capacity:
            index = self._fresh
            self._fresh += 1
        else:
            raise OutOfNodesError("ran out of nodes")
        self._ensure(index)
        self.num_nodes += 1
        return index

    def push_index(self, index: int) -> None:
        """Give a node index back to the pool; it is handed out next."""
        node = self.get_node(index)
        node.next = self._free[-1] if self._free else self._fresh
        self._free.append(index)
        self.num_nodes -= 1

    # -- unique table ----------------------------------------------------

    @property
    def count(self) -> int:
        """Number of nodes currently held in the unique table."""
        return len(self._entries)

    def _add(self, var: int, low: int, high: int, inc_parentcount: bool) -> int:
        if len(self._entries) + 1 == self.table_size:
            raise TableFullError("unique table is too small")
        index = self.pop_index()
        node = self._nodes[index]
        node.var = var
        node.low = low
        node.high = high
        node.next = 0
        if inc_parentcount:
            self.get_node(low).parentcount += 1
            self.get_node(high).parentcount += 1
        self._entries.append(index)
        self._table[(var, low, high)] = index
        return index

    def allocate(self, var: int, low: int, high: int, inc_parentcount: bool) -> int:
        """Allocate a node without checking whether it already exists."""
        return self._add(var, low, high, inc_parentcount)

    def make(self, var: int, low: int, high: int) -> int:
        """Index of the node (var, low, high), creating it if needed."""
        if low == high:
            return low
        if var > self.num_variables:
            raise ValueError(f"variable {var} has not been created")
        level = self.level_for_var(var)
        if not (level < self.level(self.get_node(low)) and level < self.level(self.get_node(high))):
            raise ValueError(f"variable {var} must come before the variables of its children")

        index = self._table.get((var, low, high))
        if index is not None:
            node = self._nodes[index]
            if (node.var, node.low, node.high) == (var, low, high):
                return index
        return self._add(var, low, high, True)

    def _create_zero_one(self) -> None:
        zero = self.allocate(0, 0, 0, False)
        one = self.allocate(0, 1, 1, False)
        if zero != ZEROINDEX or one != ONEINDEX:
            raise RuntimeError("constant nodes were not placed at indices 0 and 1")

    def create_variable(self) -> int:
        """Create the next variable and return its node, which is kept alive."""
        if self.num_variables >= MAX_VARIABLES:
            raise ValueError(f"at most {MAX_VARIABLES} variables can be created")
        self.num_variables += 1
        index = self.make(self.num_variables, ZEROINDEX, ONEINDEX)
        self.keepalive(index)
        return index

    # -- levels ----------------------------------------------------------

    def level(self, node: Node) -> int:
        """Position of the node's variable in the order; constants come last."""
        if node.is_constant():
            return self.num_variables + 1
        return node.var

    def level_for_var(self, var: int) -> int:
        if var == 0:
            return self.num_variables + 1
        return var

    # -- garbage collection ----------------------------------------------

    def keepalive(self, index: int) -> None:
        """Add an artificial parent so gc keeps the node."""
        self.get_node(index).parentcount += 1

    def undo_keepalive(self, index: int) -> None:
        self.get_node(index).parentcount -= 1

    def disable_node_rec(self, node: Node) -> None:
        """Disable a parentless node and, in turn, children left without parents."""
        stack = [node]
        while stack:
            current = stack.pop()
            if current.is_constant():
                continue
            if current.parentcount == 0 and not current.is_disabled():
                low = self.get_node(current.low)
                high = self.get_node(current.high)
                current.disable()
                low.parentcount -= 1
                high.parentcount -= 1
                stack.append(high)
                stack.append(low)

    def clear_caches(self) -> None:
        self.unary_cache.clear()
        self.binary_cache.clear()
        self.ternary_cache.clear()

    def gc(self, disable_rec: bool, force: bool) -> int:
        """Free nodes without parents and return how many were freed.

        Unless forced, nothing happens while the pool is less than half full.
        With disable_rec, parentless nodes are first disabled recursively.
        """
        fill_level = self.num_nodes / self.capacity
        if fill_level > self.gc_max_fill_level:
            self.gc_max_fill_level = fill_level
            self.gc_max_nodes_alloc = self.num_nodes
        if not force and fill_level < 0.5:
            return 0
        logger.info("%s started", "Forced GC" if force else "GC")
        start = time.perf_counter()

        if disable_rec:
            n_disabled = 0
            for index in self._entries:
                node = self._nodes[index]
                if not node.is_constant() and not node.is_disabled() and node.parentcount == 0:
                    self.disable_node_rec(node)
                    n_disabled += 1
            logger.info("%d disabled", n_disabled)

        kept: list[int] = []
        table: dict[tuple[int, int, int], int] = {}
        for index in self._entries:
            node = self._nodes[index]
            if node.is_constant() or node.parentcount > 0:
                if node.is_disabled():
                    raise RuntimeError(f"node {index} is alive but disabled")
                kept.append(index)
                table[(node.var, node.low, node.high)] = index
            else:
                node.disable()
                self.push_index(index)

        before = len(self._entries)
        logger.info(
            "decreased number of nodes from %d (%.2f%%) to %d (%.2f%%)",
            before,
            before / self.table_size * 100,
            len(kept),
            len(kept) / self.table_size * 100,
        )
        self._entries = kept
        self._table = table
        self.clear_caches()
        self.gc_time += time.perf_counter() - start
        return before - len(kept)

    # -- inspection ------------------------------------------------------

    def verify(self) -> None:
        """Check the unique table's invariants; raise RuntimeError on a violation."""
        for index in list(self._entries):
            node = self._nodes[index]
            found = self.make(node.var, node.low, node.high)
            if found != index:
                raise RuntimeError(
                    f"looking for node {node.describe()} returns different node "
                    f"{self.get_node(found).describe()}"
                )
            if not node.is_constant() and node.low == node.high:
                raise RuntimeError(f"low and high are the same for {node.describe()}")
            if node.is_disabled():
                raise RuntimeError(f"alive node is disabled {node.describe()}")

    def format_nodes(self, statsonly: bool) -> str:
        """Pool and table statistics, followed by up to 20 nodes unless statsonly."""
        perc = self.num_nodes / self.capacity * 100
        lines = [
            f"Memorypool(num_nodes={self.num_nodes} ({perc:.2f}%), "
            f"capacity={self.capacity}, num_variables={self.num_variables})",
            f"Uniquetable(count={self.count}, size={self.table_size})",
        ]
        if not statsonly:
            for i, index in enumerate(self._entries):
                if i == 20:
                    lines.append(f"Hiding {self.count - 20} nodes")
                    break
                node = self._nodes[index]
                lines.append(
                    f"{i}. Index({index}) -> {node.describe()} ... "
                    f"bucket={node.hash() & self._mask}"
                )
        return "\n".join(lines) + "\n"

    def to_dot(self) -> str:
        """All nodes of the unique table in Graphviz dot format."""
        lines = ["digraph {"]
        for index in self._entries:
            node = self._nodes[index]
            if not node.is_constant():
                lines.append(f'{index} [label="x{node.var} ({index})"]')
                lines.append(f"{index} -> {node.low} [style=dashed]")
                lines.append(f"{index} -> {node.high}")
        lines.append('0 [label="0"]')
        lines.append('1 [label="1"]')
        lines.append("}")
        return "\n".join(lines) + "\n"