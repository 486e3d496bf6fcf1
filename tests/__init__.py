#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Run only pure unit tests (no database session)
    python -m pytest tests/ -v -m "not db"

    # Using unittest
    python -m unittest discover tests -v

Database-backed tests run against an in-memory SQLite database built from
the SQLAlchemy models, so no external service is needed.
"""

import unittest
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import (
    Base,
    User,
    JobPosting,
    Application,
    Interview,
    SavedSearch,
    JobAlert,
)
from database.repository import MarketplaceRepository

FIXED_NOW = datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


def create_sqlite_engine():
    """In-memory SQLite shared across the session's connections, with SAVEPOINT support."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    # pysqlite defers BEGIN on its own; let SQLAlchemy emit it so nested
    # transactions (SAVEPOINT) behave as on PostgreSQL.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Base class giving each test a fresh schema and a MarketplaceRepository."""

    def setUp(self):
        self.engine = create_sqlite_engine()
        self.Session = sessionmaker(bind=self.engine, autoflush=False)
        self.session = self.Session()
        self.repo = MarketplaceRepository(self.session)

    def tearDown(self):
        self.session.close()
        self.engine.dispose()

    # ============ Factories ============

    def add_user(
        self,
        user_id: str = "cand-1",
        email: Optional[str] = None,
        created_at: Optional[datetime] = None,
        **fields
    ) -> User:
        user = User(
            id=user_id,
            email=email or f"{user_id}@example.com",
            created_at=created_at or FIXED_NOW - timedelta(days=30),
            **fields
        )
        self.session.add(user)
        self.session.flush()
        return user

    def add_job(self, title: str = "Backend Engineer", company: str = "Acme", merit_fit: int = 80, **fields) -> JobPosting:
        job = JobPosting(
            title=title,
            company=company,
            location=fields.pop('location', 'Remote'),
            salary=fields.pop('salary', '$120k'),
            merit_fit=merit_fit,
            **fields
        )
        self.session.add(job)
        self.session.flush()
        return job

    def add_application(self, user: User, job: JobPosting, status: str = "Applied",
                        applied_at: Optional[datetime] = None) -> Application:
        application = Application(
            user_id=user.id,
            job_id=job.id,
            status=status,
            applied_at=applied_at or FIXED_NOW
        )
        self.session.add(application)
        self.session.flush()
        return application

    def add_interview(self, owner: str, person: str = "Candidate",
                      scheduled_at: Optional[datetime] = None) -> Interview:
        interview = Interview(
            person=person,
            owner=owner,
            scheduled_at=scheduled_at or FIXED_NOW + timedelta(days=1)
        )
        self.session.add(interview)
        self.session.flush()
        return interview

    def add_search(self, user: User, label: str = "Python roles", **fields) -> SavedSearch:
        search = SavedSearch(user_id=user.id, label=label, **fields)
        self.session.add(search)
        self.session.flush()
        return search

    def add_alert(self, search: SavedSearch, job: JobPosting, reason: str = "Matched search") -> JobAlert:
        alert = JobAlert(user_id=search.user_id, saved_search_id=search.id, job_id=job.id, reason=reason)
        self.session.add(alert)
        self.session.flush()
        return alert
