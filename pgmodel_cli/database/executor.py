"""Query execution against the database catalog."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ConfigurationError, DatabaseConnectionError, QueryExecutionError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def escape_literal(value: str) -> str:
    """Render a string as a single-quoted SQL literal."""
    return "'" + str(value).replace("'", "''") + "'"


def build_escaped_object_list(names: Iterable[str]) -> str:
    """Render names as a comma-separated list of SQL literals.

    Used for ``IN (...)`` filters over configured schema names.
    """
    return ", ".join(escape_literal(name) for name in names)


class QueryExecutor(ABC):
    """Executes SQL text and returns rows keyed by column alias."""

    @abstractmethod
    def execute(self, sql: str) -> List[Row]:
        """Execute a query.

        Args:
            sql: SQL text; any embedded identifiers must already be escaped

        Returns:
            List of rows, each a mapping from column alias to value
        """
        pass

    def close(self):
        """Release the underlying connection."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class PostgresQueryExecutor(QueryExecutor):
    """Query executor backed by a psycopg2 connection."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        user: str = "postgres",
        password: Optional[str] = None,
        database: Optional[str] = None,
        ssl: bool = False,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.ssl = ssl
        self._connection = None

    @classmethod
    def from_settings(cls, settings, **overrides) -> "PostgresQueryExecutor":
        """Build an executor from Settings, letting non-None overrides win."""
        values = {
            "host": settings.pg_host,
            "port": settings.pg_port,
            "user": settings.pg_user,
            "password": settings.pg_password,
            "database": settings.pg_database,
            "ssl": settings.pg_ssl,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def connect(self):
        """Connect to PostgreSQL."""
        if self._connection is not None:
            return self._connection

        if not self.database:
            raise ConfigurationError("No database configured. Set PG_DATABASE or pass --database.")

        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL connections. "
                "Install it with: pip install psycopg2-binary"
            )

        try:
            self._connection = psycopg2.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                dbname=self.database,
                sslmode="require" if self.ssl else "prefer",
            )
        except psycopg2.Error as e:
            raise DatabaseConnectionError(
                f"Cannot connect to PostgreSQL at {self.host}:{self.port}: {e}",
                details={"host": self.host, "port": self.port, "database": self.database},
            ) from e
        # Catalog reads only
        self._connection.set_session(readonly=True, autocommit=True)
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def execute(self, sql: str) -> List[Row]:
        conn = self.connect()

        import psycopg2
        from psycopg2.extras import RealDictCursor

        logger.debug("Executing catalog query: %s", sql)
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(sql)
                return [dict(row) for row in cursor.fetchall()]
        except psycopg2.Error as e:
            raise QueryExecutionError(f"Catalog query failed: {e}", sql=sql) from e
