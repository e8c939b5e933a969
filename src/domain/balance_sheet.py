from __future__ import annotations

from typing import Iterable, Sequence

from domain.base_types import Address, Balance, Coin, Denom
from domain.errors import InsufficientBalance

DenomAmounts = dict[Denom, int]


class BalanceSheet:
    """Working ledger of address -> denom -> amount for one settlement run."""

    def __init__(self) -> None:
        self._balances: dict[Address, DenomAmounts] = {}

    @classmethod
    def from_snapshot(cls, balances: Iterable[Balance]) -> BalanceSheet:
        sheet = cls()
        for balance in balances:
            for coin in balance.coins:
                if coin.amount < 0:
                    raise ValueError(f"Snapshot balance for {balance.address} has negative amount {coin.amount}")
                # Later entries for the same (address, denom) overwrite earlier ones.
                sheet._balances.setdefault(balance.address, {})[coin.denom] = coin.amount
        return sheet

    def get_balance(self, *, address: Address, denom: Denom) -> int | None:
        """Return the current amount, or None when the address never held the denom."""
        return self._balances.get(address, {}).get(denom)

    def has_available(self, *, address: Address, denom: Denom, amount: int) -> bool:
        current = self.get_balance(address=address, denom=denom)
        return current is not None and current >= amount

    def debit(self, *, address: Address, denom: Denom, amount: int) -> None:
        if not self.has_available(address=address, denom=denom, amount=amount):
            raise InsufficientBalance(
                denom=denom,
                address=address,
                required_amount=amount,
                available_balance=self.get_balance(address=address, denom=denom),
            )
        self._balances[address][denom] -= amount

    def credit(self, *, address: Address, denom: Denom, amount: int) -> None:
        denoms = self._balances.setdefault(address, {})
        denoms[denom] = denoms.get(denom, 0) + amount

    def coins_for(self, address: Address) -> list[Coin]:
        return [Coin(denom=denom, amount=amount) for denom, amount in self._balances.get(address, {}).items()]

    def changes_since(self, original: Sequence[Balance]) -> list[Balance]:
        """Signed per-address deltas between this sheet and the original snapshot.

        Known addresses report every denom they now hold, zero deltas included.
        New addresses are reported only when they ended up holding something.
        """
        original_sheet = BalanceSheet.from_snapshot(original)
        known_addresses = {balance.address for balance in original}

        changes: list[Balance] = []
        for address, denoms in self._balances.items():
            if address in known_addresses:
                coins = [
                    Coin(
                        denom=denom,
                        amount=amount - (original_sheet.get_balance(address=address, denom=denom) or 0),
                    )
                    for denom, amount in denoms.items()
                ]
                changes.append(Balance(address=address, coins=coins))
            elif any(amount != 0 for amount in denoms.values()):
                changes.append(Balance(address=address, coins=self.coins_for(address)))
        return changes
