"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture(scope="session")
def test_db_engine():
    """
    Session-scoped engine for DB tests with the schema created.

    Skips when no PostgreSQL with pgvector is reachable at TEST_DATABASE_URL.
    """
    from tests import TEST_DB_URL, check_db_available

    if not check_db_available():
        pytest.skip("Test database not available")

    from sqlalchemy import create_engine, text
    from database.models import Base

    engine = create_engine(TEST_DB_URL)
    with engine.connect() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        conn.commit()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db_engine):
    """Session rolled back after each test."""
    from sqlalchemy.orm import sessionmaker

    connection = test_db_engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection)()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()
