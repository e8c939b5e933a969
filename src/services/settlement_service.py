from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.repositories import BalanceRepository, DenomDefinitionRepository
from domain.base_types import Balance, MultiSend
from domain.settlement import calculate_balance_changes

logger = logging.getLogger(__name__)


class SettlementService:
    """Runs a multi-send against the stored balances and persists the outcome."""

    def __init__(self, session: Session) -> None:
        self.balances = BalanceRepository(session)
        self.definitions = DenomDefinitionRepository(session)

    def settle(self, multi_send: MultiSend) -> list[Balance]:
        snapshot = self.balances.snapshot()
        changes = calculate_balance_changes(snapshot, self.definitions.list(), multi_send)
        self.balances.apply_changes(changes)
        logger.info("Applied balance changes for %d accounts", len(changes))
        return changes


def settle(session: Session, multi_send: MultiSend) -> list[Balance]:
    return SettlementService(session).settle(multi_send)


__all__ = ["SettlementService", "settle"]
