"""
Shared service boundary: one transaction per call, tagged results out.
"""

from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm.exc import StaleDataError

from eats_catalog.core.results import (
    CatalogError,
    ServiceResult,
    ValidationError,
    internal_server_error,
    success,
)
from eats_catalog.logger import get_logger
from eats_catalog.storage.database import DatabaseManager

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def parse_input(schema: type[SchemaType], data: Any) -> SchemaType:
    """Coerce request data into a schema instance.

    Args:
        schema: Pydantic schema class
        data: Schema instance, mapping or None

    Returns:
        Schema instance

    Raises:
        ValidationError: If the data does not fit the schema
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data or {})
    except SchemaValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ValidationError(f"Invalid input: {fields}") from e


class TransactionalService:
    """Runs each workflow inside one database session.

    The session commits only when the workflow returns, so all writes made by
    a workflow land together. Workflows that lose an optimistic-lock race are
    re-run from a fresh read.
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        max_conflict_retries: int = 0,
    ) -> None:
        from eats_catalog.core.factories import create_database_manager

        self._db = db_manager or create_database_manager()
        self._max_conflict_retries = max_conflict_retries
        self._logger = get_logger(self.__class__.__module__)

    def _run(self, operation: str, workflow: Callable[..., Any], *args: Any) -> ServiceResult:
        """Execute a workflow and convert its outcome into a ServiceResult.

        Args:
            operation: Name used in log messages
            workflow: Callable taking the session followed by *args
            *args: Workflow arguments

        Returns:
            ServiceResult with the workflow's return value, or an error
        """
        attempt = 0
        while True:
            try:
                with self._db.session() as session:
                    data = workflow(session, *args)
                return success(data)
            except CatalogError as e:
                self._logger.warning(f"{operation} rejected ({e.code.value}): {e.message}")
                return e.to_result()
            except StaleDataError:
                attempt += 1
                if attempt > self._max_conflict_retries:
                    self._logger.error(
                        f"{operation} abandoned after {attempt} concurrent keyword updates"
                    )
                    return internal_server_error()
                self._logger.warning(
                    f"{operation} lost a concurrent update, retrying "
                    f"({attempt}/{self._max_conflict_retries})"
                )
            except Exception:
                self._logger.exception(f"{operation} failed")
                return internal_server_error()
