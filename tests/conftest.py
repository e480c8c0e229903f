import pytest

from cirrus import hashing
from cirrus.database import Database
from cirrus.hashing import ScryptParams


@pytest.fixture(autouse=True)
def cheap_scrypt(monkeypatch):
    """Use low scrypt cost so tests do not spend 128 MB per hash."""
    monkeypatch.setattr(hashing, "SCRYPT_PARAMS", ScryptParams(log_n=4, r=8, p=1))


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cirrus.db'}"


@pytest.fixture
def database(database_url):
    """Provide an isolated SQLite database for each test."""
    db = Database.connect(database_url)
    yield db
    db.close()


@pytest.fixture
def config_file(tmp_path, database_url):
    path = tmp_path / "config.toml"
    path.write_text(f'[database]\nurl = "{database_url}"\n')
    return path
