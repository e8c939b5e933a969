from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from domain.base_types import Balance

from .formatting import format_change


@dataclass
class DenomChangeSummary:
    denom: str
    credited: int
    debited: int

    @property
    def net(self) -> int:
        return self.credited + self.debited


def summarize_changes(changes: Iterable[Balance]) -> list[DenomChangeSummary]:
    """Per-denom totals of credits and debits; a negative net is the amount burned."""
    summaries: dict[str, DenomChangeSummary] = {}
    for change in changes:
        for coin in change.coins:
            summary = summaries.setdefault(coin.denom, DenomChangeSummary(denom=coin.denom, credited=0, debited=0))
            if coin.amount > 0:
                summary.credited += coin.amount
            else:
                summary.debited += coin.amount
    return [summaries[denom] for denom in sorted(summaries)]


def render_balance_changes(changes: list[Balance]) -> None:
    print("Balance changes:")
    rows = [
        (change.address, coin.denom, format_change(coin.amount))
        for change in sorted(changes, key=lambda balance: balance.address)
        for coin in change.coins
    ]
    if not rows:
        print("  (none)")
        return

    address_width = max(len("Address"), max(len(address) for address, _, _ in rows))
    denom_width = max(len("Denom"), max(len(denom) for _, denom, _ in rows))
    change_width = max(len("Change"), max(len(change) for _, _, change in rows))

    header = f"{'Address':<{address_width}} {'Denom':<{denom_width}} {'Change':>{change_width}}"
    lines = [header, "-" * len(header)]
    for address, denom, change in rows:
        lines.append(f"{address:<{address_width}} {denom:<{denom_width}} {change:>{change_width}}")
    lines.append("-" * len(header))

    for summary in summarize_changes(changes):
        if summary.net < 0:
            lines.append(f"Burned {summary.denom}: {-summary.net}")
    print("\n".join(lines))
