import logging
from typing import Dict, Iterable, List, Optional

from cloud_kitchen.domain.models import Product
from cloud_kitchen.infrastructure.database import SessionLocal
from cloud_kitchen.interfaces.IProductRepository import IProductRepository

logger = logging.getLogger(__name__)


class SqlProductRepository(IProductRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def list_products(self) -> List[Product]:
        session = self.session_factory()
        try:
            return session.query(Product).order_by(Product.category, Product.id).all()
        finally:
            session.close()

    def get_product(self, product_id: int) -> Optional[Product]:
        session = self.session_factory()
        try:
            return session.get(Product, product_id)
        finally:
            session.close()

    def get_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """One round trip for any number of ids; missing ids are simply absent."""
        ids = set(product_ids)
        if not ids:
            return {}
        session = self.session_factory()
        try:
            rows = session.query(Product).filter(Product.id.in_(ids)).all()
            return {p.id: p for p in rows}
        finally:
            session.close()

    def create_product(self, fields: dict) -> Product:
        session = self.session_factory()
        try:
            product = Product(**fields)
            session.add(product)
            session.commit()
            return product
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def update_product(self, product_id: int, changes: dict) -> Optional[Product]:
        session = self.session_factory()
        try:
            product = session.get(Product, product_id)
            if product is None:
                return None
            for key, value in changes.items():
                setattr(product, key, value)
            session.commit()
            return product
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete_product(self, product_id: int) -> bool:
        session = self.session_factory()
        try:
            deleted = session.query(Product).filter(Product.id == product_id).delete()
            session.commit()
            return deleted > 0
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def count(self) -> int:
        session = self.session_factory()
        try:
            return session.query(Product).count()
        finally:
            session.close()
