import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import Numeric, case, cast, desc, func
from sqlalchemy.orm import selectinload

from cloud_kitchen.core.clock import utcnow
from cloud_kitchen.domain.models import Order, OrderItem
from cloud_kitchen.domain.order_status import OPEN_STATUSES, OrderStatus
from cloud_kitchen.domain.schemas import OrderFilters
from cloud_kitchen.infrastructure.database import SessionLocal
from cloud_kitchen.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)

# Totals are stored as decimal strings; aggregate them as numbers.
MONEY = Numeric(12, 2, asdecimal=False)


def _amount():
    return cast(Order.total_amount, MONEY)


class SqlOrderRepository(IOrderRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def create_order(self, fields: dict, items: List[dict]) -> Order:
        """Persist the order header and every line in a single transaction."""
        session = self.session_factory()
        try:
            order = Order(**fields)
            order.items = [OrderItem(**item) for item in items]
            session.add(order)
            session.commit()
            return order
        except Exception as e:
            logger.error("Order insert failed, rolled back: %s", e)
            session.rollback()
            raise
        finally:
            session.close()

    def get_order(self, order_id: int) -> Optional[Order]:
        session = self.session_factory()
        try:
            return (
                session.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.id == order_id)
                .first()
            )
        finally:
            session.close()

    def list_orders(self, filters: OrderFilters) -> List[Order]:
        """
        Retrieves a page of orders matching every given filter.
        Ordered by created_at DESC (newest first), id breaking ties.
        """
        session = self.session_factory()
        try:
            query = session.query(Order).options(selectinload(Order.items))
            if filters.status:
                query = query.filter(Order.status == filters.status.value)
            if filters.payment_status:
                query = query.filter(Order.payment_status == filters.payment_status.value)
            if filters.customer_name:
                query = query.filter(Order.customer_name.icontains(filters.customer_name, autoescape=True))
            if filters.date_from:
                query = query.filter(Order.created_at >= filters.date_from)
            if filters.date_to:
                query = query.filter(Order.created_at <= filters.date_to)
            return (
                query.order_by(desc(Order.created_at), desc(Order.id))
                .limit(filters.limit)
                .offset(filters.offset)
                .all()
            )
        finally:
            session.close()

    def update_status(self, order_id: int, expected: str, status: str) -> Optional[Order]:
        """Compare-and-set: only writes when the order still has ``expected``."""
        session = self.session_factory()
        try:
            updated = (
                session.query(Order)
                .filter(Order.id == order_id, Order.status == expected)
                .update({Order.status: status, Order.updated_at: utcnow()}, synchronize_session=False)
            )
            session.commit()
            if not updated:
                return None
            return (
                session.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.id == order_id)
                .first()
            )
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def update_payment(self, order_id: int, payment_status: str, reference: Optional[str]) -> Optional[Order]:
        session = self.session_factory()
        try:
            order = (
                session.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.id == order_id)
                .first()
            )
            if order is None:
                return None
            order.payment_status = payment_status
            if reference:
                order.payment_reference = reference
            order.updated_at = utcnow()
            session.commit()
            return order
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ---------------------------------------------------------
    # AGGREGATIONS
    # ---------------------------------------------------------

    def window_totals(self, since: datetime, until: Optional[datetime] = None) -> Dict[str, float]:
        """Revenue and order counts for orders created in [since, until)."""
        session = self.session_factory()
        try:
            open_statuses = [s.value for s in OPEN_STATUSES]
            query = session.query(
                func.coalesce(func.sum(_amount()), 0),
                func.count(Order.id),
                func.sum(case((Order.status == OrderStatus.DELIVERED.value, 1), else_=0)),
                func.sum(case((Order.status.in_(open_statuses), 1), else_=0)),
            ).filter(Order.created_at >= since)
            if until is not None:
                query = query.filter(Order.created_at < until)
            revenue, orders, completed, pending = query.one()
            return {
                "revenue": float(revenue or 0),
                "orders": int(orders or 0),
                "completed": int(completed or 0),
                "pending": int(pending or 0),
            }
        finally:
            session.close()

    def all_time_totals(self) -> Tuple[float, int]:
        session = self.session_factory()
        try:
            revenue, orders = session.query(
                func.coalesce(func.sum(_amount()), 0),
                func.count(Order.id),
            ).one()
            return float(revenue or 0), int(orders or 0)
        finally:
            session.close()

    def status_counts(self) -> Dict[str, int]:
        session = self.session_factory()
        try:
            rows = session.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
            return {status: int(count) for status, count in rows}
        finally:
            session.close()

    def revenue_rows_since(self, since: datetime) -> List[Tuple[datetime, float]]:
        session = self.session_factory()
        try:
            rows = (
                session.query(Order.created_at, _amount())
                .filter(Order.created_at >= since)
                .order_by(Order.created_at)
                .all()
            )
            return [(created_at, float(amount or 0)) for created_at, amount in rows]
        finally:
            session.close()

    def customer_rollups(self) -> List[dict]:
        """One row per normalized phone number, most recent customer first."""
        session = self.session_factory()
        try:
            last_order = func.max(Order.created_at)
            rows = (
                session.query(
                    Order.customer_phone_normalized,
                    func.max(Order.customer_name),
                    func.max(Order.customer_email),
                    func.count(Order.id),
                    func.coalesce(func.sum(_amount()), 0),
                    last_order,
                )
                .group_by(Order.customer_phone_normalized)
                .order_by(desc(last_order))
                .all()
            )
            return [
                {
                    "customer_phone": phone,
                    "customer_name": name,
                    "customer_email": email,
                    "total_orders": int(count),
                    "total_spent": float(spent or 0),
                    "last_order_date": last,
                }
                for phone, name, email, count, spent, last in rows
            ]
        finally:
            session.close()
