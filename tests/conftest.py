import os

# Settings are read at import time; pin them before cloud_kitchen is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["SEED_MENU"] = "false"
os.environ.pop("REDIS_URL", None)
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("TWILIO_ACCOUNT_SID", None)

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from cloud_kitchen.application.analytics import AnalyticsService  # noqa: E402
from cloud_kitchen.application.order_service import OrderService  # noqa: E402
from cloud_kitchen.core.security import hash_password  # noqa: E402
from cloud_kitchen.domain.models import Order  # noqa: E402
from cloud_kitchen.domain.schemas import OrderCreateRequest  # noqa: E402
from cloud_kitchen.infrastructure.database import init_db  # noqa: E402
from cloud_kitchen.infrastructure.repositories.order_repository import SqlOrderRepository  # noqa: E402
from cloud_kitchen.infrastructure.repositories.product_repository import SqlProductRepository  # noqa: E402
from cloud_kitchen.infrastructure.repositories.user_repository import SqlUserRepository  # noqa: E402
from cloud_kitchen.infrastructure.session_store import SessionRevocationStore  # noqa: E402
from cloud_kitchen.main import create_app  # noqa: E402

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
ADMIN_EMAIL = "admin@kitchen.example.com"
ADMIN_PASSWORD = "correct-horse-battery"


class RecordingNotifier:
    def __init__(self):
        self.orders = []

    def notify_admin_new_order(self, order):
        self.orders.append(order.id)
        return True


class FrozenClock:
    def __init__(self, moment=NOW):
        self.moment = moment

    def __call__(self):
        return self.moment


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    init_db(factory, retries=1, wait_seconds=0)
    yield factory
    engine.dispose()


@pytest.fixture
def product_repo(session_factory):
    return SqlProductRepository(session_factory)


@pytest.fixture
def order_repo(session_factory):
    return SqlOrderRepository(session_factory)


@pytest.fixture
def user_repo(session_factory):
    return SqlUserRepository(session_factory)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def order_service(product_repo, order_repo, notifier):
    return OrderService(product_repo, order_repo, notifier=notifier)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def analytics(order_repo, clock):
    return AnalyticsService(order_repo, clock=clock)


@pytest.fixture
def make_product(product_repo):
    def _make(name="Peri Peri Classic", price="449", **fields):
        data = {
            "name": name,
            "description": f"{name} from the test kitchen",
            "price": price,
            "category": fields.pop("category", "Infused Chickens"),
            "image_url": "",
            "available": fields.pop("available", True),
            "sizes": fields.pop("sizes", None),
            "badges": fields.pop("badges", []),
        }
        return product_repo.create_product(data)
    return _make


def _line(entry):
    product, quantity, *size = entry
    line = {"product_id": product.id, "quantity": quantity}
    if size:
        line["selected_size"] = size[0]
    return line


@pytest.fixture
def place_order(order_service):
    def _place(items, name="Asha Rao", phone="9876543210", address="12 MG Road, Bengaluru", **extra):
        request = OrderCreateRequest(
            customer_name=name,
            customer_phone=phone,
            customer_address=address,
            items=[_line(entry) for entry in items],
            **extra,
        )
        return order_service.create_order(request)
    return _place


@pytest.fixture
def set_created_at(session_factory):
    """Move an order in time; analytics windows key off created_at."""
    def _set(order_id, moment):
        session = session_factory()
        try:
            session.query(Order).filter(Order.id == order_id).update({Order.created_at: moment})
            session.commit()
        finally:
            session.close()
    return _set


@pytest.fixture
def count_orders(session_factory):
    def _count():
        session = session_factory()
        try:
            return session.query(Order).count()
        finally:
            session.close()
    return _count


@pytest.fixture
def app(session_factory, notifier, clock):
    return create_app(
        session_factory=session_factory,
        session_store=SessionRevocationStore(None),
        notifier=notifier,
        clock=clock,
        seed=False,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(app, user_repo):
    user_repo.create_user(
        email=ADMIN_EMAIL,
        password_hash=hash_password(ADMIN_PASSWORD),
        name="Admin",
        role="admin",
    )
    with TestClient(app) as c:
        resp = c.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert resp.status_code == 200
        yield c
