from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from cloud_kitchen.domain.models import Product


class IProductRepository(ABC):
    @abstractmethod
    def list_products(self) -> List[Product]:
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    def get_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        pass

    @abstractmethod
    def create_product(self, fields: dict) -> Product:
        pass

    @abstractmethod
    def update_product(self, product_id: int, changes: dict) -> Optional[Product]:
        pass

    @abstractmethod
    def delete_product(self, product_id: int) -> bool:
        pass

    @abstractmethod
    def count(self) -> int:
        pass
