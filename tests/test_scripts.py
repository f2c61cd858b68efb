import pytest
from sqlalchemy import create_engine

from app.jsonfmt.models import Base
from scripts.init_db import seed_only
from scripts.start import resolve_port


def test_seed_only_is_idempotent(tmp_path, monkeypatch):
    db_url = f"sqlite:///{tmp_path/'seed.db'}"
    engine = create_engine(db_url, future=True)
    Base.metadata.create_all(bind=engine)
    engine.dispose()
    monkeypatch.setenv("DEV_USER_EMAIL", "Dev@Example.com")

    first = seed_only(database_url=db_url)
    second = seed_only(database_url=db_url)
    assert first == second


def test_resolve_port_defaults_and_validates():
    assert resolve_port(None) == 8080
    assert resolve_port(" 5000 ") == 5000
    with pytest.raises(ValueError):
        resolve_port("70000")
    with pytest.raises(ValueError):
        resolve_port("http")
