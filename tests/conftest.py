"""Shared fixtures: in-memory database, Storage, user factory and API client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.roster_factory import MatchRosterFactory
from core.slot_acceptance import SlotAcceptanceCoordinator
from core.storage import Storage
from database import Base, get_db, get_settings
from main import app
from models import Game, Slot, Team, User


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def storage(session_factory) -> Storage:
    session = session_factory()
    yield Storage(session)
    session.close()


@pytest.fixture
def strict_selectors(monkeypatch):
    """Reject targeted selectors that name unknown users."""
    monkeypatch.setattr(get_settings(), "strict_selector_resolution", True)


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_user(storage):
    """Create a committed user with a given rating."""
    counter = {"n": 0}

    def _make(username: str | None = None, rating: float = 1200.0) -> User:
        counter["n"] += 1
        user = User(username=username or f"player{counter['n']}", rating=rating)
        storage.save(user)
        storage.commit()
        return user

    return _make


def slots_of(storage: Storage, game: Game) -> list[list[Slot]]:
    """Slots grouped per team, creator's team first."""
    return [
        storage.list_children(Team, team.id, Slot)
        for team in storage.list_children(Game, game.id, Team)
    ]


@pytest.fixture
def roster(storage):
    """Callable returning a game's slots grouped per team."""
    return lambda game: slots_of(storage, game)


@pytest.fixture
def confirmed_single(storage, make_user):
    """A 1v1 game between two fresh users, already confirmed."""

    def _make(creator_rating: float = 1200.0, rival_rating: float = 1200.0):
        creator = make_user(rating=creator_rating)
        rival = make_user(rating=rival_rating)
        game = MatchRosterFactory.create_single_match(storage, creator.id, rival.id)
        (_, ), (rival_slot, ) = slots_of(storage, game)
        SlotAcceptanceCoordinator.accept_slot(storage, rival_slot.id, rival.id)
        team_a, team_b = storage.list_children(Game, game.id, Team)
        return game, team_a, team_b, creator, rival

    return _make


@pytest.fixture
def confirmed_double(storage, make_user):
    """A 2v2 game with four 1200-rated users, already confirmed."""

    def _make():
        creator, partner, rival1, rival2 = (make_user() for _ in range(4))
        game = MatchRosterFactory.create_double_match(
            storage, creator.id, partner.id, [rival1.id, rival2.id]
        )
        (_, partner_slot), (rival1_slot, rival2_slot) = slots_of(storage, game)
        SlotAcceptanceCoordinator.accept_slot(storage, partner_slot.id, partner.id)
        SlotAcceptanceCoordinator.accept_slot(storage, rival1_slot.id, rival1.id)
        SlotAcceptanceCoordinator.accept_slot(storage, rival2_slot.id, rival2.id)
        team_a, team_b = storage.list_children(Game, game.id, Team)
        return game, team_a, team_b, [creator, partner], [rival1, rival2]

    return _make


# ============================================================================
# API
# ============================================================================


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
