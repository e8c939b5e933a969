from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from domain.base_types import Balance, DenomDefinition, MultiSend

DEFAULT_SCENARIO_PATH = Path("data/example_scenario.json")


class Scenario(BaseModel):
    """Everything one settlement run needs: snapshot, denom catalog and transfer."""

    balances: list[Balance] = Field(default_factory=list)
    definitions: list[DenomDefinition] = Field(default_factory=list)
    multi_send: MultiSend


def load_scenario(path: Path = DEFAULT_SCENARIO_PATH) -> Scenario:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        msg = f"Scenario file {path} must contain a JSON object."
        raise ValueError(msg)
    if "multi_send" not in payload:
        msg = f"Scenario file {path} is missing 'multi_send'."
        raise ValueError(msg)
    return Scenario.model_validate(payload)


__all__ = ["DEFAULT_SCENARIO_PATH", "Scenario", "load_scenario"]
