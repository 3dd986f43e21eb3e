"""
Pytest configuration and fixtures for the ContAI tests.
"""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from main import create_app


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory SQLite database."""
    return Settings(
        DATABASE_URL="sqlite://",
        DB_AUTO_CREATE=True,
        ALLOWED_ORIGINS=["http://testserver"],
        API_URL="http://testserver",
    )


@pytest.fixture
def api(settings):
    """TestClient running the full application lifespan."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def db_session(settings):
    """A session on a freshly created database, closed afterwards."""
    database = Database(settings.DATABASE_URL).open()
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        database.close()


@pytest.fixture
def salario() -> dict:
    return {
        "description": "Salário",
        "amount": "1000.00",
        "type": "Crédito",
        "date": "2024-03-05",
    }


@pytest.fixture
def aluguel() -> dict:
    return {
        "description": "Aluguel",
        "amount": "400.00",
        "type": "Débito",
        "date": "2024-03-10",
    }
