from __future__ import annotations

import pytest
from sqlalchemy import create_engine

from outta.infra.db.tables import metadata


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'outta.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)
