from __future__ import annotations

from domain.base_types import Address, Denom


class SettlementError(Exception):
    """Base class for reasons a multi-send transfer is rejected."""


class UndefinedDenomination(SettlementError):
    def __init__(self, *, denom: Denom, address: Address) -> None:
        self.denom = denom
        self.address = address
        super().__init__(f"Undefined denomination {denom} referenced by {address}")


class ImbalancedTransfer(SettlementError):
    def __init__(self, *, denom: Denom, total_input: int, total_output: int) -> None:
        self.denom = denom
        self.total_input = total_input
        self.total_output = total_output
        super().__init__(f"Input and output do not match for denom={denom} input={total_input} output={total_output}")


class InsufficientBalance(SettlementError):
    def __init__(
        self,
        *,
        denom: Denom,
        address: Address,
        required_amount: int,
        available_balance: int | None,
    ) -> None:
        self.denom = denom
        self.address = address
        self.required_amount = required_amount
        self.available_balance = available_balance
        available = "none" if available_balance is None else available_balance
        message = (
            f"Insufficient balance for denom={denom} address={address} "
            f"required={required_amount} available={available}"
        )
        super().__init__(message)
