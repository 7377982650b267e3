import pytest

from app.db import init_engine


@pytest.fixture
def database(tmp_path):
    engine = init_engine(f"sqlite+pysqlite:///{tmp_path / 'santa.db'}", create_schema=True)
    yield engine
    engine.dispose()
