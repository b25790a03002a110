"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the exhaustive roster-size sweeps
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# Keep the app from persisting a generated key into the repo data dir
os.environ.setdefault('SECRET_KEY', 'test-secret-key')

from bracket.models import Entrant
from bracket.roster import Roster


def make_entrants(count, prefix='P'):
    """Entrants P1..Pn with stable ids p1..pn."""
    return [Entrant(id=f"{prefix.lower()}{i}", display_name=f"{prefix}{i}") for i in range(1, count + 1)]


@pytest.fixture
def four_entrants():
    return make_entrants(4)


@pytest.fixture
def named_roster():
    """A roster of four named players."""
    roster = Roster()
    for name in ["Alice", "Bob", "Carol", "Dave"]:
        roster.add(name)
    return roster


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at an empty temporary data directory."""
    import app as app_module

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    monkeypatch.setattr(app_module, 'RECOGNITION_SERVICE_URL', None)
    return str(data_dir)


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by the temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
