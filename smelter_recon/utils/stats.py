"""
Thread-safe counters for matching runs.

Tracks how many declared facilities each matcher resolved when a submission
is matched on several threads.
"""

from threading import Lock


class ExecutionStats:
    """
    Thread-safe named counters.

    Example:
        stats = ExecutionStats(exact_id=0, exact_name=0, fuzzy_name=0, no_match=0)
        stats.increment("exact_id")
        stats.to_dict()
    """

    def __init__(self, **initial_values: int):
        """
        Initialize stats with any number of counters.

        Args:
            **initial_values: Initial values for counters
        """
        self._lock = Lock()
        self._counters: dict[str, int] = dict(initial_values)

    def increment(self, key: str, amount: int = 1) -> None:
        """Thread-safe increment of a counter (created at 0 if missing)."""
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + amount

    def get(self, key: str, default: int = 0) -> int:
        """Get counter value."""
        with self._lock:
            return self._counters.get(key, default)

    def to_dict(self) -> dict[str, int]:
        """Get all counters as a dictionary."""
        with self._lock:
            return self._counters.copy()

    def __getitem__(self, key: str) -> int:
        """Allow dict-like access: stats['exact_id']."""
        return self.get(key)

    def __repr__(self) -> str:
        with self._lock:
            items = ", ".join(f"{k}={v}" for k, v in sorted(self._counters.items()))
        return f"ExecutionStats({items})"
