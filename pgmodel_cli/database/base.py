"""Abstract base class for catalog-driven entity extraction."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .executor import QueryExecutor, Row
from .models import Entity

logger = logging.getLogger(__name__)


class DatabaseDriver(ABC):
    """Abstract base class for entity extraction drivers.

    Subclasses implement the catalog queries. ``extract`` runs them in
    order: the table list first, then the column, index and relation
    enrichers, which only depend on the table list.
    """

    DEFAULT_SCHEMAS: List[str] = ["public"]

    def __init__(self, executor: QueryExecutor, schemas: Optional[Iterable[str]] = None):
        self.executor = executor
        self.schemas = list(schemas) if schemas else list(self.DEFAULT_SCHEMAS)

    def run_query(self, sql: str) -> List[Row]:
        """Execute a catalog query. Failures propagate to the caller."""
        return self.executor.execute(sql)

    @abstractmethod
    def get_all_tables(self) -> List[Entity]:
        """Get one entity per base table in the configured schemas."""
        pass

    @abstractmethod
    def get_columns_from_entities(self, entities: List[Entity]) -> List[Entity]:
        """Populate entity columns."""
        pass

    @abstractmethod
    def get_indexes_from_entities(self, entities: List[Entity]) -> List[Entity]:
        """Populate entity indices."""
        pass

    @abstractmethod
    def get_relations(self, entities: List[Entity]) -> List[Entity]:
        """Populate entity relations."""
        pass

    @abstractmethod
    def check_if_db_exists(self, db_name: str) -> bool:
        """Check whether a database with this name exists."""
        pass

    def extract(self, include_indices: bool = True, include_relations: bool = True) -> List[Entity]:
        """Extract the full entity model.

        Args:
            include_indices: Whether to populate indices
            include_relations: Whether to populate relations

        Returns:
            List of populated entities
        """
        entities = self.get_all_tables()
        logger.info("Found %d tables in schemas %s", len(entities), ", ".join(self.schemas))

        self.get_columns_from_entities(entities)
        if include_indices:
            self.get_indexes_from_entities(entities)
        if include_relations:
            self.get_relations(entities)

        return entities

    def close(self):
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
