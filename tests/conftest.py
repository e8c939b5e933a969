from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base
from domain.base_types import DenomDefinition
from tests.constants import DENOM_1, DENOM_2, ISSUER_A, ISSUER_B
from tests.helpers.builders import definition

engine: Engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
session_factory = sessionmaker(engine)


@pytest.fixture(scope="function")
def test_session() -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function", autouse=True)
def reset_db() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def definitions() -> list[DenomDefinition]:
    return [
        definition(DENOM_1, ISSUER_A, "0.08", "0.12"),
        definition(DENOM_2, ISSUER_B, "1", "0"),
    ]
