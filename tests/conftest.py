"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import datetime
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from paddlerank.db.models import (
    Base,
    Equipment,
    EquipmentType,
    EquipmentUsage,
    MatchResult,
    Player,
    Tournament,
    TournamentTier,
)


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory for fast tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def file_session_factory(tmp_path):
    """
    Session factory over a throwaway SQLite file.

    For code that opens its own sessions from worker threads (concurrent
    leaderboards, the web app); each thread gets its own connection.
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'paddlerank-test.db'}")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    yield factory
    engine.dispose()


class GraphBuilder:
    """Shortcuts for inserting rows with explicit (not computed) points."""

    def __init__(self, session):
        self.session = session
        self._counter = 0

    def _slug(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def player(self, name: str = "Player", **kwargs) -> Player:
        player = Player(name=name, slug=kwargs.pop("slug", None) or self._slug("player"), **kwargs)
        self.session.add(player)
        self.session.flush()
        return player

    def equipment(
        self,
        name: str = "Paddle",
        equipment_type: EquipmentType = EquipmentType.PADDLE,
        **kwargs,
    ) -> Equipment:
        equipment = Equipment(
            name=name,
            slug=kwargs.pop("slug", None) or self._slug("equipment"),
            brand=kwargs.pop("brand", "Brand"),
            type=equipment_type,
            **kwargs,
        )
        self.session.add(equipment)
        self.session.flush()
        return equipment

    def tournament(self, tier: TournamentTier = TournamentTier.PPA, **kwargs) -> Tournament:
        tournament = Tournament(
            name=kwargs.pop("name", "Open"),
            slug=kwargs.pop("slug", None) or self._slug("tournament"),
            tier=tier,
            start_date=kwargs.pop("start_date", datetime(2024, 1, 1)),
            end_date=kwargs.pop("end_date", datetime(2024, 12, 31)),
            **kwargs,
        )
        self.session.add(tournament)
        self.session.flush()
        return tournament

    def result(
        self,
        player: Player,
        match_date: datetime,
        points: int,
        placement: int = 2,
        tournament: Optional[Tournament] = None,
    ) -> MatchResult:
        result = MatchResult(
            player=player,
            tournament=tournament or self.tournament(),
            placement=placement,
            points=points,
            match_date=match_date,
        )
        self.session.add(result)
        self.session.flush()
        return result

    def usage(
        self,
        player: Player,
        equipment: Equipment,
        start_date: datetime,
        end_date: Optional[datetime] = None,
    ) -> EquipmentUsage:
        usage = EquipmentUsage(
            player=player,
            equipment=equipment,
            start_date=start_date,
            end_date=end_date,
        )
        self.session.add(usage)
        self.session.flush()
        return usage


@pytest.fixture
def build(db_session):
    """GraphBuilder bound to the per-test session."""
    return GraphBuilder(db_session)
