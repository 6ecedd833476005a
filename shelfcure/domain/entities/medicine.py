"""Domain entities describing store inventory."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Medicine:
    """Stocked medicine with strip and/or individual unit tracking."""

    id: int | None
    store_id: int
    name: str
    generic_name: str | None
    has_strips: bool
    has_individual: bool
    strip_stock: int
    strip_min_stock: int
    individual_stock: int
    individual_min_stock: int
    is_active: bool = True

    def stock_level(self) -> tuple[int, int, str]:
        """Return ``(stock, threshold, unit)`` used to judge low stock.

        Strip stock decides whenever strips are tracked, even if individual
        units are tracked too.
        """

        if self.has_strips:
            return self.strip_stock or 0, self.strip_min_stock or 0, "strips"
        return self.individual_stock or 0, self.individual_min_stock or 0, "units"


@dataclass
class Batch:
    """Lot of a medicine received with a specific expiry date."""

    id: int | None
    medicine_id: int
    store_id: int
    batch_number: str
    expiry_date: datetime
    strip_quantity: int
    individual_quantity: int
    is_active: bool = True

    @property
    def total_stock(self) -> int:
        return (self.strip_quantity or 0) + (self.individual_quantity or 0)


__all__ = ["Medicine", "Batch"]
