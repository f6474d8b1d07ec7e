from abc import ABC, abstractmethod
from typing import Optional

from cloud_kitchen.domain.models import User


class IUserRepository(ABC):
    @abstractmethod
    def create_user(self, email: str, password_hash: str, name: Optional[str] = None, role: str = "customer") -> User:
        pass

    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def find_user_by_id(self, user_id: int) -> Optional[User]:
        pass
