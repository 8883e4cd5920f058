from abc import ABC, abstractmethod

class BaseDatabaseDriver(ABC):
    """Owns an engine; repositories only ever see the sessions it hands out."""

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass

    @abstractmethod
    async def get_session(self):
        pass
