"""Domain entity representing a store."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Store:
    """Business location whose data is isolated from other stores."""

    id: int | None
    name: str
    is_active: bool
    created_at: datetime | None


__all__ = ["Store"]
