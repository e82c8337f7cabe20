"""
Update cursor for long-running polling.
"""


class CursorTracker:
    """Remembers the highest consumed update id."""

    def __init__(self, start: int = 0):
        self._cursor = start

    @property
    def value(self) -> int:
        return self._cursor

    def advance(self, observed_id: int) -> int:
        """Move the cursor to ``observed_id`` unless it is already past it."""
        if observed_id > self._cursor:
            self._cursor = observed_id
        return self._cursor

    def next(self) -> int:
        """Lower bound (getUpdates offset) for the next fetch."""
        return self._cursor + 1
