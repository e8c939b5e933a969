from __future__ import annotations

from decimal import Decimal
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Address = NewType("Address", str)
Denom = NewType("Denom", str)

INT128_MIN = -(2**127)
INT128_MAX = 2**127 - 1


class Coin(BaseModel):
    """An amount of a single denomination.

    Amounts are integers in the base unit of the denom. Negative amounts only
    appear in balance deltas returned by the settlement calculation.
    """

    model_config = ConfigDict(frozen=True)

    denom: Denom
    amount: int

    @model_validator(mode="after")
    def _validate_fields(self) -> Coin:
        if not self.denom:
            raise ValueError("Coin.denom must be non-empty")
        if not INT128_MIN <= self.amount <= INT128_MAX:
            raise ValueError(f"Coin.amount {self.amount} is outside the signed 128-bit range")
        return self


class Balance(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: Address
    coins: list[Coin] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_address(self) -> Balance:
        if not self.address:
            raise ValueError("Balance.address must be non-empty")
        return self


class DenomDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    denom: Denom
    issuer: Address
    burn_rate: Decimal = Field(ge=0, le=1)
    commission_rate: Decimal = Field(ge=0, le=1)

    @field_validator("burn_rate", "commission_rate", mode="before")
    @classmethod
    def _rate_from_text(cls, value: object) -> object:
        # 0.08 must mean 8/100, not the nearest binary float.
        if isinstance(value, float):
            return Decimal(repr(value))
        return value

    @model_validator(mode="after")
    def _validate_fields(self) -> DenomDefinition:
        if not self.denom:
            raise ValueError("DenomDefinition.denom must be non-empty")
        if not self.issuer:
            raise ValueError("DenomDefinition.issuer must be non-empty")
        return self


class MultiSend(BaseModel):
    """A transfer of several denoms from several senders to several recipients.

    Every element of ``inputs``/``outputs`` is one accounting leg; the same
    address may appear more than once.
    """

    model_config = ConfigDict(frozen=True)

    inputs: list[Balance]
    outputs: list[Balance]

    @model_validator(mode="after")
    def _validate_legs(self) -> MultiSend:
        for side, legs in (("inputs", self.inputs), ("outputs", self.outputs)):
            for leg in legs:
                for coin in leg.coins:
                    if coin.amount < 0:
                        raise ValueError(
                            f"MultiSend.{side} leg for {leg.address} has negative amount {coin.amount} {coin.denom}"
                        )
        return self
