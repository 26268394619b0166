from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from splitledger.ledger.models import Bill, Group
from splitledger.utils.parse import memo_to_bytes, normalize_address


class BillView(BaseModel):
    """Счёт в том виде, в каком его отдаёт view-функция контракта (u64 приходят строками)."""

    model_config = ConfigDict(frozen=True)

    bill_id: int
    payer: str
    total_amount: int = Field(ge=0)
    memo: bytes = b""
    shares_bp: List[int] = Field(default_factory=list)
    debtors: List[str] = Field(default_factory=list)
    debtors_paid: List[int] = Field(default_factory=list)

    @field_validator("memo", mode="before")
    @classmethod
    def _normalize_memo(cls, value: Any) -> bytes:
        if value is None:
            return b""
        return memo_to_bytes(value)

    @field_validator("payer")
    @classmethod
    def _normalize_payer(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("debtors")
    @classmethod
    def _normalize_debtors(cls, value: List[str]) -> List[str]:
        return [normalize_address(item) for item in value]

    @model_validator(mode="after")
    def _check_alignment(self) -> "BillView":
        if len(self.shares_bp) != len(self.debtors) or len(self.debtors_paid) != len(self.debtors):
            raise ValueError("debtors, shares_bp and debtors_paid must be aligned")
        return self

    def to_model(self) -> Bill:
        return Bill(
            bill_id=self.bill_id,
            payer=self.payer,
            total_amount=self.total_amount,
            memo=self.memo,
            debtors=tuple(self.debtors),
            shares_bp=tuple(self.shares_bp),
            debtors_paid=tuple(self.debtors_paid),
        )


class GroupView(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: int
    admin: str
    members: List[str] = Field(default_factory=list)
    bills: List[BillView] = Field(default_factory=list)

    @field_validator("admin")
    @classmethod
    def _normalize_admin(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("members")
    @classmethod
    def _normalize_members(cls, value: List[str]) -> List[str]:
        return [normalize_address(item) for item in value]

    def to_model(self) -> Group:
        return Group(
            group_id=self.group_id,
            admin=self.admin,
            members=tuple(self.members),
            bills=tuple(bill.to_model() for bill in self.bills),
        )
