import uuid
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PendingId:
    """Locally generated block id, not yet backed by a stored row."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PersistedId:
    """Storage-assigned block id."""
    value: str

    def __str__(self) -> str:
        return self.value


BlockId = Union[PendingId, PersistedId]


def new_pending_id() -> PendingId:
    return PendingId(f"temp-{uuid.uuid4().hex}")


def new_element_id() -> str:
    return f"element-{uuid.uuid4().hex}"


def same_id(block_id: BlockId, other) -> bool:
    """Compare a block id against another id or its raw string value."""
    if isinstance(other, (PendingId, PersistedId)):
        return block_id == other
    return other is not None and block_id.value == str(other)
