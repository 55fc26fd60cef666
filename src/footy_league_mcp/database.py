"""Neo4j database connection and operations for the footy league graph."""

import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional

from neo4j import Driver, GraphDatabase, Session
from neo4j.exceptions import ClientError

from .config import get_settings

logger = logging.getLogger(__name__)


class Neo4jDatabase:
    """Neo4j database connection manager."""

    def __init__(
        self,
        uri: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
    ):
        settings = get_settings()
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password
        self._driver: Optional[Driver] = None

    def connect(self) -> None:
        """Establish connection to Neo4j database."""
        if self._driver is None:
            logger.info("Connecting to Neo4j at %s", self.uri)
            self._driver = GraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
            )

    def close(self) -> None:
        """Close database connection."""
        if self._driver:
            self._driver.close()
            self._driver = None

    @property
    def driver(self) -> Driver:
        """Get the database driver, connecting if necessary."""
        if self._driver is None:
            self.connect()
        return self._driver  # type: ignore

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Create a database session context manager."""
        session = self.driver.session()
        try:
            yield session
        finally:
            session.close()

    def execute_query(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """Execute a Cypher query and return results."""
        with self.session() as session:
            result = session.run(query, parameters or {})
            return [dict(record) for record in result]

    def execute_write(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> None:
        """Execute a write query."""
        with self.session() as session:
            session.run(query, parameters or {})

    def clear_database(self) -> None:
        """Clear all data from the database."""
        logger.warning("Deleting every node in %s", self.uri)
        self.execute_write("MATCH (n) DETACH DELETE n")

    def _apply_schema(self, statements: list[str]) -> None:
        for statement in statements:
            try:
                self.execute_write(statement)
            except ClientError as exc:
                logger.debug("Schema statement skipped (%s): %s", exc.code, statement)

    def create_constraints(self) -> None:
        """Create uniqueness constraints for node types."""
        self._apply_schema([
            "CREATE CONSTRAINT player_id IF NOT EXISTS FOR (p:Player) REQUIRE p.player_id IS UNIQUE",
            "CREATE CONSTRAINT guest_id IF NOT EXISTS FOR (g:Guest) REQUIRE g.guest_id IS UNIQUE",
            "CREATE CONSTRAINT match_id IF NOT EXISTS FOR (m:Match) REQUIRE m.match_id IS UNIQUE",
            "CREATE CONSTRAINT game_id IF NOT EXISTS FOR (g:ScheduledGame) REQUIRE g.game_id IS UNIQUE",
            "CREATE CONSTRAINT signup_id IF NOT EXISTS FOR (s:Signup) REQUIRE s.signup_id IS UNIQUE",
        ])

    def create_indexes(self) -> None:
        """Create indexes for commonly queried properties."""
        self._apply_schema([
            "CREATE INDEX player_name IF NOT EXISTS FOR (p:Player) ON (p.name)",
            "CREATE INDEX match_played_at IF NOT EXISTS FOR (m:Match) ON (m.played_at)",
            "CREATE INDEX game_scheduled_at IF NOT EXISTS FOR (g:ScheduledGame) ON (g.scheduled_at)",
            "CREATE INDEX signup_signed_up_at IF NOT EXISTS FOR (s:Signup) ON (s.signed_up_at)",
        ])
