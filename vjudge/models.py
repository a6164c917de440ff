"""Records stored in the database and exchanged with clients."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any

LOGIN_KEY_PREFIX = "NAMEPAS"
SUBMISSION_RESULT_KEY = "RESULT"

TABLE_PROBLEM = "problem_problem"
TABLE_PROBLEM_SAMPLE = "problem_problemsample"
TABLE_PROBLEM_LIMITATION = "problem_limitation"


@dataclass(frozen=True)
class Problem:
    """A row of the problem table."""

    id: int = 0
    title: str = ""
    content: str = ""
    resources: str = ""
    constraints: str = ""
    input: str = ""
    output: str = ""
    note: str = ""
    is_disable: int = 0
    submit: int = 0
    accept: int = 0
    checker: str = ""
    limitation_id: int = 0


@dataclass(frozen=True)
class Limitation:
    """A row of the limitation table."""

    id: int = 0
    time_limit: int = 0
    memory_limit: int = 0
    output_limit: int = 0
    cpu_limit: int = 0


@dataclass(frozen=True)
class ProblemSample:
    """A row of the sample table."""

    id: int = 0
    sample_input: str = ""
    sample_output: str = ""
    problem_id: int = 0


@dataclass(frozen=True)
class Sample:
    """A sample input with its expected output, as shown in a statement."""

    sample_input: str = ""
    sample_output: str = ""


@dataclass(frozen=True)
class Statement:
    """Everything a client needs to show a problem."""

    id: int
    title: str
    content: str
    resources: str
    constraints: str
    input: str
    output: str
    note: str
    checker: str
    samples: list[Sample] = field(default_factory=list)
    time_limit: int = 0
    memory_limit: int = 0
    submit: int = 0
    accept: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the statement."""
        return asdict(self)


@dataclass(frozen=True)
class ProblemInfo:
    """The id and title of a problem, as listed by a search."""

    id: int
    title: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the entry."""
        return {"id": self.id, "title": self.title}


@dataclass(frozen=True)
class Result:
    """The judging status of a submission."""

    verdict: str
    message: str = ""
    time_used: int = 0
    memory_used: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the result."""
        return {
            "verdict": self.verdict,
            "msg": self.message,
            "time_used": self.time_used,
            "mem_used": self.memory_used,
        }

    def to_json(self) -> str:
        """Return the compact JSON text of the result."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


def _integer(data: dict[str, Any], key: str, low: int, high: int) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    if not low <= value <= high:
        raise ValueError(f"field {key!r} is out of range")
    return value


@dataclass(frozen=True)
class Submission:
    """Source code submitted for a problem."""

    problem_id: int = 0
    language: int = 0
    code: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Submission:
        """Build a submission from a decoded JSON request body."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("submission must be a JSON object")
        code = data.get("code")
        if code is None:
            code = ""
        if not isinstance(code, str):
            raise ValueError("field 'code' must be a string")
        return cls(
            problem_id=_integer(data, "problem_id", -(2**63), 2**63 - 1),
            language=_integer(data, "lang", -128, 127),
            code=code,
        )


def make_statement(
    problem: Problem, limitation: Limitation, samples: list[ProblemSample]
) -> Statement:
    """Combine a problem, its limitation and its samples into a statement."""
    return Statement(
        id=problem.id,
        title=problem.title,
        content=problem.content,
        resources=problem.resources,
        constraints=problem.constraints,
        input=problem.input,
        output=problem.output,
        note=problem.note,
        checker=problem.checker,
        samples=[Sample(s.sample_input, s.sample_output) for s in samples],
        time_limit=limitation.time_limit,
        memory_limit=limitation.memory_limit,
        submit=problem.submit,
        accept=problem.accept,
    )