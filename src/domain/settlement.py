"""Balance changes produced by a multi-send transfer with burn and commission fees.

For every denom the fee-bearing volume is ``min(non_issuer_input, non_issuer_output)``.
Each non-issuer sender pays fees on its proportional share of that volume:

    share = amount * fee_base // total_input
    burn = ceil(share * burn_rate)
    commission = ceil(share * commission_rate)

The divisor is the denom-wide ``total_input`` (issuer legs included). Burned
coins leave circulation; commission is credited to the denom's issuer.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from .balance_sheet import BalanceSheet
from .base_types import Address, Balance, Denom, DenomDefinition, MultiSend
from .errors import ImbalancedTransfer, InsufficientBalance, UndefinedDenomination

logger = logging.getLogger(__name__)


@dataclass
class _TransferTotals:
    total_input: dict[Denom, int] = field(default_factory=lambda: defaultdict(int))
    total_output: dict[Denom, int] = field(default_factory=lambda: defaultdict(int))
    non_issuer_input: dict[Denom, int] = field(default_factory=lambda: defaultdict(int))
    non_issuer_output: dict[Denom, int] = field(default_factory=lambda: defaultdict(int))

    def fee_base(self, denom: Denom) -> int:
        return min(self.non_issuer_input[denom], self.non_issuer_output[denom])


@dataclass(frozen=True)
class LegFees:
    share: int
    burn: int
    commission: int


def calculate_balance_changes(
    original_balances: Sequence[Balance],
    definitions: Iterable[DenomDefinition],
    multi_send: MultiSend,
) -> list[Balance]:
    """Return the signed balance delta of every affected account.

    Raises a ``SettlementError`` subclass when the transfer must be rejected;
    nothing is partially applied in that case.
    """
    sheet = BalanceSheet.from_snapshot(original_balances)
    definition_map = {definition.denom: definition for definition in definitions}

    totals = _aggregate(multi_send, definition_map)
    _check_conservation(totals)
    _apply_fees(multi_send.inputs, definition_map, totals, sheet)

    for leg in multi_send.outputs:
        for coin in leg.coins:
            sheet.credit(address=leg.address, denom=coin.denom, amount=coin.amount)

    changes = sheet.changes_since(original_balances)
    logger.info(
        "Settled multi-send: %d input legs, %d output legs, %d accounts changed",
        len(multi_send.inputs),
        len(multi_send.outputs),
        len(changes),
    )
    return changes


def compute_leg_fees(*, amount: int, fee_base: int, total_input: int, definition: DenomDefinition) -> LegFees:
    """Fees owed by one non-issuer input leg."""
    if total_input == 0:
        return LegFees(share=0, burn=0, commission=0)
    share = amount * fee_base // total_input
    return LegFees(
        share=share,
        burn=_round_up(share, definition.burn_rate),
        commission=_round_up(share, definition.commission_rate),
    )


def _round_up(share: int, rate: Decimal) -> int:
    """ceil(share * rate) without going through a finite-precision context."""
    numerator, denominator = rate.as_integer_ratio()
    return -(-share * numerator // denominator)


def _lookup(definition_map: dict[Denom, DenomDefinition], denom: Denom, address: Address) -> DenomDefinition:
    definition = definition_map.get(denom)
    if definition is None:
        logger.info("Rejecting multi-send: denom %s referenced by %s has no definition", denom, address)
        raise UndefinedDenomination(denom=denom, address=address)
    return definition


def _aggregate(multi_send: MultiSend, definition_map: dict[Denom, DenomDefinition]) -> _TransferTotals:
    totals = _TransferTotals()
    for leg in multi_send.inputs:
        for coin in leg.coins:
            definition = _lookup(definition_map, coin.denom, leg.address)
            totals.total_input[coin.denom] += coin.amount
            if leg.address != definition.issuer:
                totals.non_issuer_input[coin.denom] += coin.amount

    for leg in multi_send.outputs:
        for coin in leg.coins:
            definition = _lookup(definition_map, coin.denom, leg.address)
            totals.total_output[coin.denom] += coin.amount
            if leg.address != definition.issuer:
                totals.non_issuer_output[coin.denom] += coin.amount
    return totals


def _check_conservation(totals: _TransferTotals) -> None:
    for denom in dict.fromkeys([*totals.total_input, *totals.total_output]):
        total_input = totals.total_input.get(denom, 0)
        total_output = totals.total_output.get(denom, 0)
        if total_input != total_output:
            logger.info("Rejecting multi-send: %s input %d != output %d", denom, total_input, total_output)
            raise ImbalancedTransfer(denom=denom, total_input=total_input, total_output=total_output)


def _apply_fees(
    inputs: Sequence[Balance],
    definition_map: dict[Denom, DenomDefinition],
    totals: _TransferTotals,
    sheet: BalanceSheet,
) -> None:
    for leg in inputs:
        for coin in leg.coins:
            definition = definition_map[coin.denom]
            if leg.address == definition.issuer:
                fees = LegFees(share=0, burn=0, commission=0)
            else:
                fees = compute_leg_fees(
                    amount=coin.amount,
                    fee_base=totals.fee_base(coin.denom),
                    total_input=totals.total_input[coin.denom],
                    definition=definition,
                )
            logger.debug(
                "Input leg %s %d %s: share=%d burn=%d commission=%d",
                leg.address,
                coin.amount,
                coin.denom,
                fees.share,
                fees.burn,
                fees.commission,
            )

            try:
                sheet.debit(address=leg.address, denom=coin.denom, amount=coin.amount + fees.burn + fees.commission)
            except InsufficientBalance as err:
                logger.info("Rejecting multi-send: %s", err)
                raise
            sheet.credit(address=definition.issuer, denom=coin.denom, amount=fees.commission)
