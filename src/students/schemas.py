from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Student(_CamelModel):
    id: int = Field(..., ge=1)
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    date_of_birth: date = Field(..., alias="dateOfBirth")
    gpa: float
    email: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class StudentCreate(_CamelModel):
    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)
    date_of_birth: date = Field(..., alias="dateOfBirth")
    gpa: float
    email: str = Field(..., min_length=1)


class StudentUpdate(_CamelModel):
    first_name: Optional[str] = Field(None, alias="firstName", min_length=1)
    last_name: Optional[str] = Field(None, alias="lastName", min_length=1)
    date_of_birth: Optional[date] = Field(None, alias="dateOfBirth")
    gpa: Optional[float] = None
    email: Optional[str] = Field(None, min_length=1)


class Statistics(_CamelModel):
    count: int
    average_gpa: float = Field(..., alias="averageGPA")
    highest_gpa: float = Field(..., alias="highestGPA")
    lowest_gpa: float = Field(..., alias="lowestGPA")


class StudentResponse(BaseModel):
    message: str
    data: Student


class StudentListResponse(BaseModel):
    message: str
    data: List[Student]
    count: int


class StatisticsResponse(BaseModel):
    message: str
    data: Statistics


class HealthResponse(BaseModel):
    message: str
    timestamp: datetime
