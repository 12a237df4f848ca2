"""Typed decode of the Kakao ``/v2/user/me`` payload.

Only the fields needed to register a member are modelled; everything else in
the provider response is ignored.
"""
from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.models.models import Gender

BIRTH_DATE_FORMAT = "%Y%m%d"


class KakaoProperties(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nickname: str


class KakaoAccount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=3)
    gender: Gender
    birthyear: str = Field(pattern=r"^\d{4}$")
    birthday: str = Field(pattern=r"^\d{4}$")
    phone_number: str

    @field_validator("gender", mode="before")
    @classmethod
    def _upper_gender(cls, value):
        # Kakao sends "male"/"female"
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("birthday")
    @classmethod
    def _valid_calendar_date(cls, value: str, info: ValidationInfo) -> str:
        year = info.data.get("birthyear")
        if year is not None:
            dt.datetime.strptime(year + value, BIRTH_DATE_FORMAT)
        return value

    @property
    def birth(self) -> dt.date:
        return dt.datetime.strptime(self.birthyear + self.birthday, BIRTH_DATE_FORMAT).date()


class KakaoUserResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    properties: KakaoProperties
    kakao_account: KakaoAccount


class KakaoProfile(BaseModel):
    """Profile used to match or register a member. Never persisted as-is."""

    name: str
    email: str
    gender: Gender
    birth: dt.date
    phone_number: str
