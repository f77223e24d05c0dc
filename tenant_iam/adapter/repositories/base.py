"""
Shared plumbing for SQLModel repositories.

Driver exceptions are translated to the application's repository errors
here, so use cases only ever see ``RepositoryError`` subclasses.
"""

import logging
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_iam.app.repositories.errors import DuplicateRecordError, StoreUnavailableError

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=SQLModel)


@contextmanager
def translate_store_errors(operation: str):
    try:
        yield
    except IntegrityError as exc:
        raise DuplicateRecordError(
            f"{operation} violated a uniqueness constraint",
            {"operation": operation},
        ) from exc
    except (OperationalError, InterfaceError) as exc:
        logger.error(f"Store unavailable during {operation}: {exc.__class__.__name__}")
        raise StoreUnavailableError(
            f"Store unavailable during {operation}", {"operation": operation}
        ) from exc


class SqlModelRepository:
    """Base class holding the session and the add/flush/refresh cycle"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, entity: EntityT, operation: str) -> EntityT:
        with translate_store_errors(operation):
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
        return entity
