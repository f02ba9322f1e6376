"""Write Results — structured outcomes of delete/update operations.

Invariants:
    - acknowledged=False means the store rejected the write; nothing was applied
    - A failed delete reports deleted_count=0
    - A failed update reports modified_count=0 but keeps matched_count
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DeleteResult:
    acknowledged: bool
    deleted_count: int


@dataclass(frozen=True)
class UpdateResult:
    acknowledged: bool
    modified_count: int
    matched_count: int
