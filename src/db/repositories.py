from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Session

from db import models
from domain.base_types import Address, Balance, Coin, Denom, DenomDefinition


class NegativeBalanceError(Exception):
    def __init__(self, *, address: str, denom: str, resulting_amount: int) -> None:
        self.address = address
        self.denom = denom
        self.resulting_amount = resulting_amount
        super().__init__(f"Applying changes leaves address={address} denom={denom} at {resulting_amount}")


class BalanceRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_many(self, balances: Iterable[Balance]) -> list[Balance]:
        """Store balances, replacing any amount already held for the same (address, denom)."""
        stored: list[Balance] = []
        for balance in balances:
            for coin in balance.coins:
                self._session.merge(models.AccountCoinOrm(address=balance.address, denom=coin.denom, amount=coin.amount))
            stored.append(balance)
        self._session.commit()
        return stored

    def snapshot(self) -> list[Balance]:
        orm_coins = (
            self._session.query(models.AccountCoinOrm)
            .order_by(models.AccountCoinOrm.address.asc(), models.AccountCoinOrm.denom.asc())
            .all()
        )
        grouped: dict[str, list[Coin]] = {}
        for orm_coin in orm_coins:
            grouped.setdefault(orm_coin.address, []).append(Coin(denom=Denom(orm_coin.denom), amount=orm_coin.amount))
        return [Balance(address=Address(address), coins=coins) for address, coins in grouped.items()]

    def apply_changes(self, changes: Iterable[Balance]) -> None:
        """Add every delta in a single commit; nothing is written if any delta fails."""
        try:
            for change in changes:
                for coin in change.coins:
                    orm_coin = self._session.get(models.AccountCoinOrm, (change.address, coin.denom))
                    if orm_coin is None:
                        orm_coin = models.AccountCoinOrm(address=change.address, denom=coin.denom, amount=0)
                        self._session.add(orm_coin)
                    resulting_amount = orm_coin.amount + coin.amount
                    if resulting_amount < 0:
                        raise NegativeBalanceError(
                            address=change.address,
                            denom=coin.denom,
                            resulting_amount=resulting_amount,
                        )
                    orm_coin.amount = resulting_amount
        except Exception:
            self._session.rollback()
            raise
        self._session.commit()


class DenomDefinitionRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_many(self, definitions: Iterable[DenomDefinition]) -> list[DenomDefinition]:
        stored: list[DenomDefinition] = []
        for definition in definitions:
            self._session.merge(
                models.DenomDefinitionOrm(
                    denom=definition.denom,
                    issuer=definition.issuer,
                    burn_rate=definition.burn_rate,
                    commission_rate=definition.commission_rate,
                )
            )
            stored.append(definition)
        self._session.commit()
        return stored

    def get(self, denom: str) -> DenomDefinition | None:
        orm_definition = self._session.get(models.DenomDefinitionOrm, denom)
        if orm_definition is None:
            return None
        return self._to_domain(orm_definition)

    def list(self) -> list[DenomDefinition]:
        orm_definitions = (
            self._session.query(models.DenomDefinitionOrm).order_by(models.DenomDefinitionOrm.denom.asc()).all()
        )
        return [self._to_domain(orm_definition) for orm_definition in orm_definitions]

    @staticmethod
    def _to_domain(orm_definition: models.DenomDefinitionOrm) -> DenomDefinition:
        return DenomDefinition(
            denom=Denom(orm_definition.denom),
            issuer=Address(orm_definition.issuer),
            burn_rate=orm_definition.burn_rate,
            commission_rate=orm_definition.commission_rate,
        )
