"""Read access to the problem database."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

import sqlalchemy
from sqlalchemy.exc import SQLAlchemyError

from vjudge.models import (
    TABLE_PROBLEM,
    TABLE_PROBLEM_LIMITATION,
    TABLE_PROBLEM_SAMPLE,
    Limitation,
    Problem,
    ProblemInfo,
    ProblemSample,
    Statement,
    make_statement,
)

_T = TypeVar("_T")

_PROBLEM_COLUMNS = {
    "id": "id",
    "title": "title",
    "content": "content",
    "resources": "resources",
    "constraints": "constraints",
    "standard_input": "input",
    "standard_output": "output",
    "note": "note",
    "disable": "is_disable",
    "submit": "submit",
    "accept": "accept",
    "_checker": "checker",
    "limitation_id": "limitation_id",
}

_LIMITATION_COLUMNS = {
    "id": "id",
    "time_limit": "time_limit",
    "memory_limit": "memory_limit",
    "output_limit": "output_limit",
    "cpu_limit": "cpu_limit",
}

_SAMPLE_COLUMNS = {
    "id": "id",
    "input_content": "sample_input",
    "output_content": "sample_output",
    "problem_id": "problem_id",
}


class StoreError(Exception):
    """Raised when the problem database cannot answer a query."""


def _build(cls: type[_T], columns: dict[str, str], row: Mapping[str, Any]) -> _T:
    values = {
        attribute: row[column]
        for column, attribute in columns.items()
        if column in row and row[column] is not None
    }
    return cls(**values)


class ProblemStore:
    """Queries problems, their limitations and their samples."""

    def __init__(self, engine: sqlalchemy.engine.Engine) -> None:
        self._engine = engine

    @contextmanager
    def _connection(self) -> Iterator[sqlalchemy.engine.Connection]:
        try:
            with self._engine.connect() as connection:
                yield connection
        except SQLAlchemyError as error:
            raise StoreError(str(error)) from error

    def _rows(self, sql: str, **params: Any) -> list[Mapping[str, Any]]:
        with self._connection() as connection:
            result = connection.execute(sqlalchemy.text(sql), params)
            return [row._mapping for row in result]

    def _problem(self, problem_id: int) -> Problem:
        rows = self._rows(f"SELECT * FROM {TABLE_PROBLEM} WHERE id = :id", id=problem_id)
        if not rows:
            raise StoreError("no problem record")
        if len(rows) > 1:
            raise StoreError("duplicate problem_id but why???")
        problem = _build(Problem, _PROBLEM_COLUMNS, rows[0])
        if problem.is_disable == 1:
            raise StoreError("the problem is not published")
        return problem

    def get_samples(self, problem_id: int) -> list[ProblemSample]:
        """Return every sample of the problem."""
        rows = self._rows(
            f"SELECT * FROM {TABLE_PROBLEM_SAMPLE} WHERE problem_id = :problem_id",
            problem_id=problem_id,
        )
        return [_build(ProblemSample, _SAMPLE_COLUMNS, row) for row in rows]

    def get_limitation(self, limitation_id: int) -> Limitation:
        """Return the limitation record with the given id."""
        rows = self._rows(
            f"SELECT * FROM {TABLE_PROBLEM_LIMITATION} WHERE id = :id", id=limitation_id
        )
        if not rows:
            raise StoreError("no problem limitation record")
        if len(rows) > 1:
            raise StoreError("duplicate limitation_id but why???")
        return _build(Limitation, _LIMITATION_COLUMNS, rows[0])

    def get_statement(self, problem_id: int) -> Statement:
        """Return the full statement of a published problem."""
        problem = self._problem(problem_id)
        limitation = self.get_limitation(problem.limitation_id)
        samples = self.get_samples(problem_id)
        return make_statement(problem, limitation, samples)

    def search_problems(self, name: str | None, offset: int, limit: int) -> list[ProblemInfo]:
        """List published problems whose title contains *name*, ordered by id."""
        clauses = []
        params: dict[str, Any] = {}
        if name:
            clauses.append("title LIKE :pattern")
            params["pattern"] = f"%{name}%"
        clauses.append("disable = 0")
        sql = f"SELECT id, title FROM {TABLE_PROBLEM} WHERE {' AND '.join(clauses)} ORDER BY id"
        offset = max(offset, 0)
        if limit > 0:
            sql += " LIMIT :limit OFFSET :offset"
            params["limit"] = limit
            params["offset"] = offset
            rows = self._rows(sql, **params)
        else:
            rows = self._rows(sql, **params)[offset:]
        return [ProblemInfo(id=row["id"], title=row["title"] or "") for row in rows]

    def get_checker_info(self, problem_id: int) -> tuple[str, Limitation]:
        """Return the checker and the limitation of a published problem."""
        problem = self._problem(problem_id)
        return problem.checker, self.get_limitation(problem.limitation_id)