from abc import ABC, abstractmethod

from shopdesk.domain.entities.user import User


class SessionStorePort(ABC):
    @abstractmethod
    def load(self) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, user: User) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
