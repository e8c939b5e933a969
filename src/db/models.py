from __future__ import annotations

from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class DecimalAsString(TypeDecorator):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


class IntegerAsString(TypeDecorator):
    """Arbitrary-size integers; SQLite INTEGER stops at 64 bits."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> int | None:
        if value is None:
            return None
        return int(value)


class Base(DeclarativeBase):
    pass


class AccountCoinOrm(Base):
    __tablename__ = "account_coins"

    address: Mapped[str] = mapped_column(String, primary_key=True)
    denom: Mapped[str] = mapped_column(String, primary_key=True)
    amount: Mapped[int] = mapped_column(IntegerAsString, nullable=False)


class DenomDefinitionOrm(Base):
    __tablename__ = "denom_definitions"

    denom: Mapped[str] = mapped_column(String, primary_key=True)
    issuer: Mapped[str] = mapped_column(String, nullable=False)
    burn_rate: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
    commission_rate: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
