from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class CouponBase(BaseModel):
    # No emptiness or format checks; absent fields are stored as null,
    # scalar values are stored as their text form
    model_config = ConfigDict(coerce_numbers_to_str=True)

    offer: Optional[str] = None
    code: Optional[str] = None
    link: Optional[str] = None

    @field_validator("offer", "code", "link", mode="before")
    @classmethod
    def booleans_as_text(cls, v):
        if isinstance(v, bool):
            return "true" if v else "false"
        return v


class CouponCreate(CouponBase):
    pass


class CouponUpdate(CouponBase):
    pass


class CouponResponse(BaseModel):
    id: str
    offer: Optional[str]
    code: Optional[str]
    link: Optional[str]
    used: int
    today: int
    thumbs_up: int
    thumbs_down: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class InteractionsResponse(BaseModel):
    thumbsUp: int
    thumbsDown: int
    clicks: int


class MessageResponse(BaseModel):
    message: str
