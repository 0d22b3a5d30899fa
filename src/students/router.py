from __future__ import annotations

import re
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Request, status

from .result import ErrorKind, Result
from .schemas import (
    StatisticsResponse,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from .store import StudentStore


router = APIRouter(prefix="/students", tags=["Students"])

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_store(request: Request) -> StudentStore:
    return request.app.state.student_store


_STUDENT_ID = re.compile(r"-?[0-9]+")


def _parse_student_id(raw: str) -> int:
    candidate = raw.strip()
    if not _STUDENT_ID.fullmatch(candidate):
        raise HTTPException(status_code=400, detail="Invalid student ID format")
    return int(candidate)


def _unwrap(result: Result):
    if not result.success:
        status_code = _STATUS_BY_KIND.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
        raise HTTPException(status_code=status_code, detail=result.detail)
    return result.value


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=StudentResponse,
    summary="Create a student",
)
async def create_student(
    payload: StudentCreate = Body(...),
    store: StudentStore = Depends(get_store),
) -> StudentResponse:
    student = _unwrap(await store.create(**payload.model_dump()))
    return StudentResponse(message="Student created successfully", data=student)


@router.get("", response_model=StudentListResponse, summary="List all students")
async def list_students(store: StudentStore = Depends(get_store)) -> StudentListResponse:
    students = _unwrap(await store.get_all())
    return StudentListResponse(
        message="Students retrieved successfully", data=students, count=len(students)
    )


# Declared before "/{student_id}" so "statistics" is not read as an id.
@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Get GPA statistics across all students",
)
async def get_statistics(store: StudentStore = Depends(get_store)) -> StatisticsResponse:
    stats = _unwrap(await store.statistics())
    return StatisticsResponse(message="Statistics retrieved successfully", data=stats)


@router.get("/{student_id}", response_model=StudentResponse, summary="Get a student")
async def get_student(
    student_id: str = Path(..., description="Numeric student identifier."),
    store: StudentStore = Depends(get_store),
) -> StudentResponse:
    student = _unwrap(await store.get_by_id(_parse_student_id(student_id)))
    return StudentResponse(message="Student retrieved successfully", data=student)


@router.put("/{student_id}", response_model=StudentResponse, summary="Update a student")
async def update_student(
    student_id: str = Path(..., description="Numeric student identifier."),
    payload: Optional[StudentUpdate] = Body(None),
    store: StudentStore = Depends(get_store),
) -> StudentResponse:
    parsed_id = _parse_student_id(student_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True) if payload else {}
    if not changes:
        raise HTTPException(
            status_code=400, detail="At least one field must be provided for update"
        )
    student = _unwrap(await store.update(parsed_id, changes))
    return StudentResponse(message="Student updated successfully", data=student)


@router.delete("/{student_id}", response_model=StudentResponse, summary="Delete a student")
async def delete_student(
    student_id: str = Path(..., description="Numeric student identifier."),
    store: StudentStore = Depends(get_store),
) -> StudentResponse:
    student = _unwrap(await store.delete(_parse_student_id(student_id)))
    return StudentResponse(message="Student deleted successfully", data=student)
