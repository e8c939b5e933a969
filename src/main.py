from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from config import config
from db.db import init_db
from db.repositories import BalanceRepository, DenomDefinitionRepository
from domain.base_types import Balance
from domain.errors import SettlementError
from domain.settlement import calculate_balance_changes
from importers.balances_csv import load_balances_csv
from importers.scenario import DEFAULT_SCENARIO_PATH, Scenario, load_scenario
from services.settlement_service import SettlementService
from utils.settlement_summary import render_balance_changes


def run(scenario: Scenario) -> list[Balance]:
    return calculate_balance_changes(scenario.balances, scenario.definitions, scenario.multi_send)


def run_with_db(scenario: Scenario, db_file: Path, *, reset: bool) -> list[Balance]:
    session = init_db(db_file=db_file, reset=reset)
    with session:
        balances = BalanceRepository(session)
        definitions = DenomDefinitionRepository(session)
        # Scenario balances only seed a fresh store; later runs build on what earlier settlements left.
        if reset or not balances.snapshot():
            balances.create_many(scenario.balances)
        if reset or not definitions.list():
            definitions.create_many(scenario.definitions)
        return SettlementService(session).settle(scenario.multi_send)


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    parser = argparse.ArgumentParser(description="Compute balance changes of a multi-send transfer.")
    parser.add_argument("--scenario", type=Path, default=DEFAULT_SCENARIO_PATH)
    parser.add_argument("--balances-csv", type=Path, help="Snapshot CSV (address,denom,amount) replacing the scenario's")
    parser.add_argument("--db", action="store_true", help="Settle against the SQLite balance store")
    parser.add_argument("--db-file", type=Path, default=settings.db_file)
    parser.add_argument("--reset-db", action="store_true")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        scenario = load_scenario(args.scenario)
        if args.balances_csv is not None:
            scenario = scenario.model_copy(update={"balances": load_balances_csv(args.balances_csv)})
    except ValueError as err:
        # pydantic.ValidationError and json.JSONDecodeError are ValueErrors too.
        print(f"Invalid input: {str(err).splitlines()[0]}")
        return 2

    try:
        if args.db:
            changes = run_with_db(scenario, args.db_file, reset=args.reset_db)
        else:
            changes = run(scenario)
    except SettlementError as err:
        print(f"Transfer rejected: {err}")
        return 1

    render_balance_changes(changes)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
