import logging
from typing import Optional

from cloud_kitchen.core.security import hash_password
from cloud_kitchen.domain.menu_seed import SEED_MENU
from cloud_kitchen.domain.schemas import ProductCreate
from cloud_kitchen.interfaces.IProductRepository import IProductRepository
from cloud_kitchen.interfaces.IUserRepository import IUserRepository

logger = logging.getLogger(__name__)


def seed_menu(product_repo: IProductRepository) -> int:
    """Load the launch menu into an empty catalog. Returns products created."""
    if product_repo.count() > 0:
        return 0
    logger.info("Seeding menu...")
    for entry in SEED_MENU:
        product = ProductCreate.model_validate(entry)
        product_repo.create_product(product.model_dump())
    logger.info("Menu seeded with %d products", len(SEED_MENU))
    return len(SEED_MENU)


def seed_admin(user_repo: IUserRepository, email: Optional[str], password: Optional[str]) -> bool:
    if not email or not password:
        logger.info("No ADMIN_EMAIL/ADMIN_PASSWORD set - skipping admin seed")
        return False
    if user_repo.find_user_by_email(email):
        return False
    user_repo.create_user(email=email, password_hash=hash_password(password), name="Admin", role="admin")
    logger.info("Admin user seeded: %s", email)
    return True
