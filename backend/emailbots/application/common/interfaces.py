"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class CreateBotCommand(Command[ServiceResult[Bot]]):
        user_id: Optional[UserId]
        payload: BotCreate

    class CreateBotHandler(CommandHandler[ServiceResult[Bot]]):
        def __init__(self, bot_repository: BotRepository):
            self._bots = bot_repository

        async def execute(self, command: CreateBotCommand) -> ServiceResult[Bot]:
            ...

Commands and queries carry the caller's session identity; handlers never
look it up themselves.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")
class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass

class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...

class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass

class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
