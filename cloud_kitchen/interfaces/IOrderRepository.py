from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from cloud_kitchen.domain.models import Order
from cloud_kitchen.domain.schemas import OrderFilters


class IOrderRepository(ABC):
    @abstractmethod
    def create_order(self, fields: dict, items: List[dict]) -> Order:
        """Insert the order and all of its items atomically."""
        pass

    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    def list_orders(self, filters: OrderFilters) -> List[Order]:
        pass

    @abstractmethod
    def update_status(self, order_id: int, expected: str, status: str) -> Optional[Order]:
        pass

    @abstractmethod
    def update_payment(self, order_id: int, payment_status: str, reference: Optional[str]) -> Optional[Order]:
        pass

    # --- Aggregations ---

    @abstractmethod
    def window_totals(self, since: datetime, until: Optional[datetime] = None) -> Dict[str, float]:
        pass

    @abstractmethod
    def all_time_totals(self) -> Tuple[float, int]:
        pass

    @abstractmethod
    def status_counts(self) -> Dict[str, int]:
        pass

    @abstractmethod
    def revenue_rows_since(self, since: datetime) -> List[Tuple[datetime, float]]:
        pass

    @abstractmethod
    def customer_rollups(self) -> List[dict]:
        pass
