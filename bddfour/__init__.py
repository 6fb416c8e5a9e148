"""BDD node pools, unique tables and garbage collection, with Connect Four bitboard helpers."""

__version__ = "0.1.0"

__all__ = ["board", "caches", "constants", "manager", "node", "nodeindexmap"]