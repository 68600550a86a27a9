"""Infrastructure layer providing reusable components.

- Per-record locks serializing writes to the same quote
"""

from quote_board.infrastructure.record_locks import RecordLocks

__all__ = ["RecordLocks"]
