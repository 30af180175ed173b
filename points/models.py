import re
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import AwareDatetime, BaseModel, Field, ConfigDict, StrictInt, field_validator


class SpendMode(str, Enum):
    ACCUMULATE = "accumulate"
    OVERWRITE = "overwrite"


RFC3339_DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}")


class Transaction(BaseModel):
    payer: str = Field(..., min_length=1, description="Payer granting or withdrawing points")
    points: StrictInt = Field(..., description="Signed, non-zero point amount")
    timestamp: AwareDatetime = Field(..., description="RFC3339 instant of the transaction")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "payer": "DANNON",
            "points": 300,
            "timestamp": "2020-10-31T10:00:00Z"
        }
    })

    @field_validator("payer")
    @classmethod
    def payer_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("payer must not be blank")
        return value

    @field_validator("points")
    @classmethod
    def points_not_zero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("points must be non-zero")
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def timestamp_rfc3339(cls, value):
        # Unix numbers are valid pydantic datetimes but not RFC3339.
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not RFC3339_DATE_TIME.match(value.strip()):
            raise ValueError(f"timestamp {value!r} is not RFC3339")
        return value.strip()


class LedgerEntry(BaseModel):
    sequence: int
    payer: str
    points: int
    timestamp: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)

    def sort_key(self) -> tuple[datetime, int]:
        return self.timestamp, self.sequence


class PayerDelta(BaseModel):
    payer: str
    points: int


class SpendRequest(BaseModel):
    points: StrictInt = Field(..., description="Number of points to spend")

    model_config = ConfigDict(json_schema_extra={"example": {"points": 5000}})


class TransactionHistoryResponse(BaseModel):
    payer: Optional[str] = None
    entries: list[LedgerEntry]
    total_count: int
    balance: int
