import pytest
from sqlalchemy.orm import Session

from db.repositories import BalanceRepository, DenomDefinitionRepository
from domain.base_types import DenomDefinition
from domain.errors import InsufficientBalance
from services.settlement_service import SettlementService, settle
from tests.constants import ACCOUNT_1, ACCOUNT_2, DENOM_1, ISSUER_A, MILLION, RECIPIENT
from tests.helpers.builders import amount_of, balance, changes_by_address, coin, multi_send


@pytest.fixture()
def seeded_session(test_session: Session, definitions: list[DenomDefinition]) -> Session:
    BalanceRepository(test_session).create_many(
        [
            balance(ACCOUNT_1, coin(DENOM_1, MILLION)),
            balance(ACCOUNT_2, coin(DENOM_1, 360)),
        ]
    )
    DenomDefinitionRepository(test_session).create_many(definitions)
    return test_session


def test_settle_applies_changes_to_store(seeded_session: Session) -> None:
    tx = multi_send(
        inputs=[balance(ACCOUNT_1, coin(DENOM_1, 1000))],
        outputs=[balance(RECIPIENT, coin(DENOM_1, 1000))],
    )

    changes = settle(seeded_session, tx)

    assert changes_by_address(changes) == {
        ACCOUNT_1: {DENOM_1: -1200},
        ACCOUNT_2: {DENOM_1: 0},
        ISSUER_A: {DENOM_1: 120},
        RECIPIENT: {DENOM_1: 1000},
    }
    stored = {b.address: amount_of(b, DENOM_1) for b in BalanceRepository(seeded_session).snapshot()}
    assert stored == {
        ACCOUNT_1: MILLION - 1200,
        ACCOUNT_2: 360,
        ISSUER_A: 120,
        RECIPIENT: 1000,
    }


def test_rejected_transfer_leaves_store_untouched(seeded_session: Session) -> None:
    service = SettlementService(seeded_session)
    before = service.balances.snapshot()
    tx = multi_send(
        inputs=[balance(ACCOUNT_1, coin(DENOM_1, 650)), balance(ACCOUNT_2, coin(DENOM_1, 350))],
        outputs=[balance(RECIPIENT, coin(DENOM_1, 500)), balance(ISSUER_A, coin(DENOM_1, 500))],
    )

    with pytest.raises(InsufficientBalance):
        service.settle(tx)

    assert service.balances.snapshot() == before
