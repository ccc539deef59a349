from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import MAX_AMOUNT, MAX_COTTON_PERCENTAGE, MIN_COTTON_PERCENTAGE


class SockRequest(BaseModel):
    """Arrival / departure payload; all fields required."""
    model_config = ConfigDict(populate_by_name=True)

    color: str
    cotton_percentage: int = Field(
        ...,
        alias="cottonPercentage",
        ge=MIN_COTTON_PERCENTAGE,
        le=MAX_COTTON_PERCENTAGE,
    )
    amount: int = Field(..., ge=1, le=MAX_AMOUNT)

    @field_validator("color")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("color is required")
        return v


class SockUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    color: Optional[str] = None
    cotton_percentage: Optional[int] = Field(
        None,
        alias="cottonPercentage",
        ge=MIN_COTTON_PERCENTAGE,
        le=MAX_COTTON_PERCENTAGE,
    )
    amount: Optional[int] = Field(None, ge=0, le=MAX_AMOUNT)

    @field_validator("color")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("color cannot be empty")
        return v


class SockResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: Optional[int] = None
    color: Optional[str] = None
    cotton_percentage: Optional[int] = Field(None, alias="cottonPercentage")
    amount: Optional[int] = None


class AmountResponse(BaseModel):
    amount: int


class SocksList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sock_list: List[SockResponse] = Field(default_factory=list, alias="sockList")
