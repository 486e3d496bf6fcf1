"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import logging
import pytest

from sqlalchemy.orm import sessionmaker

from tests import create_sqlite_engine
from database.repository import MarketplaceRepository


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring a database session (deselect with '-m \"not db\"')"
    )
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@pytest.fixture
def db_session():
    """Function-scoped SQLite session with the full schema created."""
    engine = create_sqlite_engine()
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def repo(db_session):
    return MarketplaceRepository(db_session)
