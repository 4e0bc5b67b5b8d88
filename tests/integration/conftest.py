from __future__ import annotations

import sys
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))


def _docker_available() -> bool:
    try:
        import docker

        docker.from_env().ping()
    except Exception:
        return False
    return True


@pytest.fixture(scope="session")
def mysql_container():
    if not _docker_available():
        pytest.skip("docker is not reachable")
    from testcontainers.mysql import MySqlContainer

    with MySqlContainer("mysql:8.0") as mysql:
        yield mysql


@pytest.fixture()
def mysql_settings(mysql_container, monkeypatch: pytest.MonkeyPatch):
    from bookseed.settings import load_settings

    monkeypatch.setenv("MYSQL_HOST", mysql_container.get_container_host_ip())
    monkeypatch.setenv("MYSQL_PORT", str(mysql_container.get_exposed_port(mysql_container.port)))
    monkeypatch.setenv("MYSQL_USERNAME", mysql_container.username)
    monkeypatch.setenv("MYSQL_PASSWORD", mysql_container.password)
    monkeypatch.setenv("MYSQL_DB", mysql_container.dbname)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    settings = load_settings()

    yield settings

    import sqlalchemy as sa

    engine = sa.create_engine(settings.url())
    try:
        with engine.begin() as conn:
            conn.execute(sa.text("DROP TABLE IF EXISTS books"))
    finally:
        engine.dispose()
