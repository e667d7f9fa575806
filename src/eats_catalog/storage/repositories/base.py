"""
Generic repository with the CRUD operations shared by all catalog entities.
"""

from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from eats_catalog.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common CRUD operations.

    Writes only flush; committing is left to the session owner so several
    repository calls can share one transaction.
    """

    def __init__(self, session: Session, model: type[ModelType]) -> None:
        """Initialize repository.

        Args:
            session: SQLAlchemy Session instance
            model: ORM model class managed by this repository
        """
        self.session = session
        self.model = model

    def get_by_id(self, id: int) -> Optional[ModelType]:
        """Get an instance by primary key.

        Args:
            id: Primary key

        Returns:
            Model instance or None
        """
        return self.session.get(self.model, id)

    def list(
        self,
        limit: int = 100,
        offset: int = 0,
        order_by: str = "id",
        order_desc: bool = False,
        **filters: Any,
    ) -> list[ModelType]:
        """List instances with optional equality filters.

        Args:
            limit: Maximum number of results
            offset: Number of results to skip
            order_by: Field to order by
            order_desc: Sort in descending order
            **filters: Column equality filters

        Returns:
            List of model instances
        """
        query = self.session.query(self.model).filter_by(**filters)
        order_column = getattr(self.model, order_by, self.model.id)
        query = query.order_by(desc(order_column) if order_desc else asc(order_column))
        return query.limit(limit).offset(offset).all()

    def count(self, **filters: Any) -> int:
        """Count instances matching equality filters.

        Args:
            **filters: Column equality filters

        Returns:
            Number of instances
        """
        return self.session.query(self.model).filter_by(**filters).count()

    def save(self, instance: ModelType) -> ModelType:
        """Persist a new or modified instance.

        Args:
            instance: Model instance

        Returns:
            The same instance, flushed and refreshed
        """
        self.session.add(instance)
        self.session.flush()
        self.session.refresh(instance)
        return instance

    def delete(self, instance: ModelType) -> None:
        """Delete an instance.

        Args:
            instance: Model instance
        """
        self.session.delete(instance)
        self.session.flush()
