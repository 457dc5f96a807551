"""Pytest fixtures for TalentX tests."""
import pytest

from factories import add_employer, add_job, add_talent, days_from_now
from talentx.persistence.database import build_engine, create_session_factory, init_db


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    engine = build_engine("sqlite:///:memory:")
    init_db(engine)
    Session = create_session_factory(engine)
    session = Session()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def session_factory(tmp_path):
    """File-backed database shared by several threads/sessions."""
    engine = build_engine(f"sqlite:///{tmp_path / 'talentx.db'}")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def employer(test_db):
    return add_employer(test_db, "employer-a")


@pytest.fixture
def other_employer(test_db):
    return add_employer(test_db, "employer-b", company="InnovateCo")


@pytest.fixture
def talent(test_db):
    return add_talent(test_db, "talent-t", ["Python", "ML"], experience_years=3)


@pytest.fixture
def open_job(test_db, employer):
    return add_job(test_db, "job-j", employer.id, ["Python", "ML", "AWS"], deadline=days_from_now(30))


@pytest.fixture
def closed_job(test_db, employer):
    return add_job(test_db, "job-closed", employer.id, ["Python"], deadline=days_from_now(-1))
