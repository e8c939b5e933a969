from __future__ import annotations

import csv
from pathlib import Path

from domain.base_types import Address, Balance, Coin, Denom


def load_balances_csv(csv_path: Path) -> list[Balance]:
    """Load a balance snapshot from CSV.

    Each row should contain: address,denom,amount
    Rows for the same address are grouped into one Balance, keeping file order.
    """

    if not csv_path.exists():
        return []

    with csv_path.open(newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"Balances CSV {csv_path} is empty or missing headers")

        required = {"address", "denom", "amount"}
        missing = required - set(reader.fieldnames)
        if missing:
            raise ValueError(f"Balances CSV {csv_path} missing required columns: {', '.join(sorted(missing))}")

        grouped: dict[Address, list[Coin]] = {}
        for row in reader:
            address = Address(row["address"].strip())
            denom = Denom(row["denom"].strip())
            amount = _parse_amount(row["amount"], csv_path)
            grouped.setdefault(address, []).append(Coin(denom=denom, amount=amount))

    return [Balance(address=address, coins=coins) for address, coins in grouped.items()]


def _parse_amount(raw: str | None, csv_path: Path) -> int:
    if raw is None or raw.strip() == "":
        raise ValueError(f"Balances CSV {csv_path} has a row without amount")
    amount = int(raw.strip())
    if amount < 0:
        raise ValueError(f"Balances CSV {csv_path} has negative amount {amount}")
    return amount
