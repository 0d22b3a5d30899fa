from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .result import ErrorKind, Result
from .schemas import Statistics, Student
from .validation import (
    EMAIL_FORMAT_ERROR,
    GPA_RANGE_ERROR,
    MINIMUM_AGE,
    UNDERAGE_ERROR,
    compute_statistics,
    validate_age,
    validate_email,
    validate_gpa,
)

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"

UPDATABLE_FIELDS = ("first_name", "last_name", "date_of_birth", "gpa", "email")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _invalid_fields(exc: ValidationError) -> str:
    names = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
    return f"Invalid value for field(s): {', '.join(names)}"


class StudentStore:
    """In-memory store of student records.

    Records keep insertion order. Identifiers come from a counter that is
    never rewound, so a deleted student's id is never handed out again.
    Every operation runs under one lock and returns a ``Result``; records
    handed back are copies of the stored ones.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        minimum_age: int = MINIMUM_AGE,
    ) -> None:
        self._lock = asyncio.Lock()
        self._students: List[Student] = []
        self._next_id = 1
        self._clock = clock
        self._minimum_age = minimum_age

    @property
    def minimum_age(self) -> int:
        return self._minimum_age

    async def create(
        self,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        gpa: float,
        email: str,
    ) -> Result[Student]:
        async with self._lock:
            now = self._clock()
            error = self._check_rules(
                {"gpa": gpa, "date_of_birth": date_of_birth, "email": email}, now
            )
            if error is not None:
                logger.debug(f"Rejected new student {first_name} {last_name}: {error}")
                return Result.fail(ErrorKind.VALIDATION_FAILED, error)

            try:
                student = Student(
                    id=self._next_id,
                    first_name=first_name,
                    last_name=last_name,
                    date_of_birth=date_of_birth,
                    gpa=gpa,
                    email=email,
                    created_at=now,
                    updated_at=now,
                )
            except ValidationError as exc:
                return Result.fail(ErrorKind.VALIDATION_FAILED, _invalid_fields(exc))

            self._next_id += 1
            self._students.append(student)
            logger.info(f"Created student id={student.id}")
            return Result.succeed(student.model_copy())

    async def get_all(self) -> Result[List[Student]]:
        async with self._lock:
            return Result.succeed([student.model_copy() for student in self._students])

    async def get_by_id(self, student_id: int) -> Result[Student]:
        async with self._lock:
            index = self._index_of(student_id)
            if index is None:
                return Result.fail(ErrorKind.NOT_FOUND, STUDENT_NOT_FOUND)
            return Result.succeed(self._students[index].model_copy())

    async def update(self, student_id: int, changes: Mapping[str, Any]) -> Result[Student]:
        async with self._lock:
            index = self._index_of(student_id)
            if index is None:
                return Result.fail(ErrorKind.NOT_FOUND, STUDENT_NOT_FOUND)

            supplied: Dict[str, Any] = {
                key: value
                for key, value in changes.items()
                if key in UPDATABLE_FIELDS and value is not None
            }
            now = self._clock()
            error = self._check_rules(supplied, now)
            if error is not None:
                logger.debug(f"Rejected update of student id={student_id}: {error}")
                return Result.fail(ErrorKind.VALIDATION_FAILED, error)

            current = self._students[index]
            try:
                updated = Student.model_validate(
                    {**current.model_dump(), **supplied, "updated_at": now}
                )
            except ValidationError as exc:
                return Result.fail(ErrorKind.VALIDATION_FAILED, _invalid_fields(exc))

            self._students[index] = updated
            logger.info(f"Updated student id={student_id} fields={sorted(supplied)}")
            return Result.succeed(updated.model_copy())

    async def delete(self, student_id: int) -> Result[Student]:
        async with self._lock:
            index = self._index_of(student_id)
            if index is None:
                return Result.fail(ErrorKind.NOT_FOUND, STUDENT_NOT_FOUND)
            removed = self._students.pop(index)
            logger.info(f"Deleted student id={student_id}")
            return Result.succeed(removed)

    async def statistics(self) -> Result[Statistics]:
        async with self._lock:
            return Result.succeed(compute_statistics(self._students))

    def _index_of(self, student_id: int) -> Optional[int]:
        for index, student in enumerate(self._students):
            if student.id == student_id:
                return index
        return None

    def _check_rules(self, fields: Mapping[str, Any], today: datetime) -> Optional[str]:
        # GPA, then date of birth, then email; keys not in ``fields`` are skipped
        if "gpa" in fields and not validate_gpa(fields["gpa"]):
            return GPA_RANGE_ERROR
        if "date_of_birth" in fields and not validate_age(
            fields["date_of_birth"], reference=today, minimum_age=self._minimum_age
        ):
            return UNDERAGE_ERROR.format(minimum_age=self._minimum_age)
        if "email" in fields and not validate_email(fields["email"]):
            return EMAIL_FORMAT_ERROR
        return None
