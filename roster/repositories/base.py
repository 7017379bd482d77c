"""
Base comune dei repository async: una AsyncSession per istanza, traduzione
errori SQLAlchemy -> RepositoryError, cancellazione propagata invariata.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.core.exceptions import ConstraintViolationError, InvalidOperationError, RepositoryError

logger = logging.getLogger(__name__)


class BaseRepository:
    entity_type = "Entity"
    model = None
    id_column_name = "id"

    def __init__(self, db: AsyncSession):
        if db is None:
            raise ValueError("db session cannot be None")
        self.db = db

    def _id_column(self):
        # letta dalla classe mappata: l'attributo ORM su self sarebbe un descriptor d'istanza
        return getattr(self.model, self.id_column_name)

    @asynccontextmanager
    async def _guard(self, operation: str, entity_id: Any = None):
        try:
            yield
        except asyncio.CancelledError:
            logger.warning("%s %s id=%s annullata", self.entity_type, operation, entity_id)
            raise
        except (RepositoryError, InvalidOperationError, ValueError):
            raise
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning("%s %s id=%s: vincolo violato: %s", self.entity_type, operation, entity_id, exc.orig)
            raise ConstraintViolationError(
                f"Unable to {operation} {self.entity_type}: a store constraint was violated.",
                operation=operation,
                entity_type=self.entity_type,
                entity_id=entity_id,
            ) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("%s %s id=%s errore store: %s", self.entity_type, operation, entity_id, exc)
            raise RepositoryError(
                f"Unable to {operation} {self.entity_type}.",
                operation=operation,
                entity_type=self.entity_type,
                entity_id=entity_id,
            ) from exc
        except Exception as exc:
            logger.exception("%s %s id=%s errore inatteso: %s", self.entity_type, operation, entity_id, exc)
            raise RepositoryError(
                f"Unexpected error during {operation} of {self.entity_type}.",
                operation=operation,
                entity_type=self.entity_type,
                entity_id=entity_id,
            ) from exc

    async def _fetch_all(self, stmt) -> list:
        result = await self.db.execute(stmt)
        items = list(result.scalars().unique().all())
        # gli oggetti restituiti sono staccati dalla sessione
        self.db.expunge_all()
        return items

    async def _fetch_one(self, stmt):
        result = await self.db.execute(stmt)
        item = result.scalars().unique().one_or_none()
        self.db.expunge_all()
        return item

    async def exists(self, entity_id: int) -> bool:
        async with self._guard("exists", entity_id):
            stmt = select(1).where(self._id_column() == entity_id).limit(1)
            found = (await self.db.execute(stmt)).first() is not None
            logger.debug("%s exists id=%s -> %s", self.entity_type, entity_id, found)
            return found

    async def delete(self, entity_id: int) -> bool:
        """
        DELETE singolo per id: le righe dipendenti le rimuove la cascade
        delle foreign key nella stessa transazione. False se l'id non esiste.
        """
        async with self._guard("delete", entity_id):
            stmt = delete(self.model).where(self._id_column() == entity_id)
            result = await self.db.execute(stmt, execution_options={"synchronize_session": False})
            await self.db.commit()
            deleted = (result.rowcount or 0) > 0
            if deleted:
                logger.info("%s id=%s eliminato", self.entity_type, entity_id)
            else:
                logger.warning("%s id=%s non trovato per delete", self.entity_type, entity_id)
            return deleted

    async def _insert(self, entity):
        self.db.add(entity)
        await self.db.commit()
        self.db.expunge(entity)
        return entity
