"""User domain schemas - Pydantic models for validation"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

USERNAME_PATTERN = re.compile(r"^[a-z0-9-]+$")


class ClaimUsernameRequest(BaseModel):
    """Schema for claiming a username (creates the pending user)"""

    name: str = Field(..., min_length=3)
    username: str = Field(..., min_length=3)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip().lower()
        if not USERNAME_PATTERN.match(v):
            raise ValueError("O usuário pode ter apenas letras, números e hifens.")
        return v


class UserResponse(BaseModel):
    id: str
    name: str
    username: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        from_attributes = True


class UpdateProfileRequest(BaseModel):
    bio: str


class TimeInterval(BaseModel):
    weekDay: int = Field(..., ge=0, le=6)
    startTimeInMinutes: int = Field(..., ge=0, le=24 * 60)
    endTimeInMinutes: int = Field(..., ge=0, le=24 * 60)

    @model_validator(mode="after")
    def validate_duration(self):
        if self.endTimeInMinutes - self.startTimeInMinutes < 60:
            raise ValueError("O horário de término deve ser pelo menos 1h distante do início.")
        return self


class TimeIntervalsRequest(BaseModel):
    intervals: list[TimeInterval] = Field(..., min_length=1)

    @field_validator("intervals")
    @classmethod
    def validate_unique_week_days(cls, v: list[TimeInterval]) -> list[TimeInterval]:
        week_days = [i.weekDay for i in v]
        if len(week_days) != len(set(week_days)):
            raise ValueError("Cada dia da semana pode ter apenas um intervalo.")
        return v


class AvailabilityResponse(BaseModel):
    possibleTimes: list[int]
    availableTimes: list[int]


class BlockedDatesResponse(BaseModel):
    blockedWeekDays: list[int]
    blockedDates: list[int]


class CreateSchedulingRequest(BaseModel):
    name: str = Field(..., min_length=3)
    email: EmailStr
    observations: Optional[str] = None
    date: datetime


class SchedulingResponse(BaseModel):
    id: str
    name: str
    email: str
    observations: Optional[str] = None
    date: datetime

    class Config:
        from_attributes = True
