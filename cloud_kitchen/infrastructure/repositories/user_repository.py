from typing import Optional

from sqlalchemy import func

from cloud_kitchen.domain.models import User
from cloud_kitchen.infrastructure.database import SessionLocal
from cloud_kitchen.interfaces.IUserRepository import IUserRepository


class SqlUserRepository(IUserRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def create_user(self, email: str, password_hash: str, name: Optional[str] = None, role: str = "customer") -> User:
        session = self.session_factory()
        try:
            user = User(email=email.lower(), password_hash=password_hash, name=name, role=role)
            session.add(user)
            session.commit()
            return user
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def find_user_by_email(self, email: str) -> Optional[User]:
        session = self.session_factory()
        try:
            return session.query(User).filter(func.lower(User.email) == email.lower()).first()
        finally:
            session.close()

    def find_user_by_id(self, user_id: int) -> Optional[User]:
        session = self.session_factory()
        try:
            return session.get(User, user_id)
        finally:
            session.close()
