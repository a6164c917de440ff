"""Requests to the execution worker and the results built from its replies."""

from __future__ import annotations

import enum
import json
from dataclasses import asdict, dataclass, field
from typing import Any

from vjudge.config import Language
from vjudge.models import Limitation, Result, Submission

COMPILE_TIME_LIMIT = 5000
COMPILE_MEMORY_LIMIT = 1024 << 20
JAVA_MEMORY_REDUNDANCY = 64


class ErrorCode(enum.IntEnum):
    """Status codes reported by the execution worker."""

    OK = 0
    CE = 1
    RE = 2
    IE = 3


@dataclass(frozen=True)
class PhaseLimits:
    """Time (ms) and memory (bytes) limits of one phase."""

    time: int
    memory: int


@dataclass(frozen=True)
class Phase:
    """A program to run, with its arguments and limits."""

    exec: str
    run_args: list[str]
    limits: PhaseLimits


@dataclass(frozen=True)
class SourceCode:
    """The file the submitted code is written to."""

    name: str
    content: str


@dataclass(frozen=True)
class CompilePhase:
    """How the submitted code is compiled."""

    compile: Phase
    source_code: SourceCode
    exec_name: str


@dataclass(frozen=True)
class RunPhase:
    """How the compiled program is run against the problem's tests."""

    run: Phase
    problem_id: str


@dataclass(frozen=True)
class ExecRequest:
    """A complete judging job for the execution worker."""

    compile_phases: CompilePhase
    run_phases: RunPhase
    check_phase: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the request."""
        return asdict(self)


def _object(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


@dataclass(frozen=True)
class OmitString:
    """A possibly truncated text and the number of bytes cut from it."""

    s: str = ""
    omit_size: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> OmitString:
        """Build from a decoded JSON object."""
        data = _object(data)
        return cls(s=data.get("s") or "", omit_size=data.get("omit_size") or 0)


@dataclass(frozen=True)
class ExecResult:
    """The outcome of running one test case."""

    case: int = 0
    user_time_used: int = 0
    memory_used: int = 0
    checker_result: OmitString = field(default_factory=OmitString)

    @classmethod
    def from_dict(cls, data: Any) -> ExecResult:
        """Build from a decoded JSON object."""
        data = _object(data)
        return cls(
            case=data.get("case") or 0,
            user_time_used=data.get("user_time_used") or 0,
            memory_used=data.get("memory_used") or 0,
            checker_result=OmitString.from_dict(data.get("checker_result")),
        )


@dataclass(frozen=True)
class WorkerResponse:
    """A status message sent back by the execution worker."""

    err_code: int = 0
    err_msg: str = ""
    data: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> WorkerResponse:
        """Build from a decoded JSON object."""
        data = _object(data)
        return cls(
            err_code=data.get("err_code") or 0,
            err_msg=data.get("err_msg") or "",
            data=data.get("data") or "",
        )


def _toolchain(language: Language, memory: int) -> tuple:
    """Return code file, compiler, runner, compile args, run args and memory slack."""
    if language is Language.C:
        compile_args = ["gcc", "main.c", "-o", "main", "-std=c11", "-O2", "-DONLINE_JUDGE", "-lm"]
        return "main.c", "gcc", "main", compile_args, ["./main"], 0
    if language is Language.CPP:
        compile_args = ["g++", "main.cpp", "-o", "main", "-std=c++17", "-O2", "-DONLINE_JUDGE"]
        return "main.cpp", "g++", "main", compile_args, ["./main"], 0
    if language is Language.JAVA:
        compile_args = ["javac", "-encoding", "UTF-8", "-sourcepath", ".", "-d", ".", "Main.java"]
        run_args = [
            "java", "-Dfile.encoding=UTF-8", "-XX:+UseSerialGC",
            f"-Xss{memory}m", f"-Xms{memory}m", f"-Xmx{memory}m", "Main",
        ]
        return "Main.java", "javac", "java", compile_args, run_args, JAVA_MEMORY_REDUNDANCY
    compile_args = ["python3", "-m", "py_compile", "main.py"]
    run_args = ["python3", "__pycache__/main.cpython-38.pyc"]
    return "main.py", "python3", "python3", compile_args, run_args, 0


def make_submission(
    submission: Submission, checker: str, limitation: Limitation
) -> ExecRequest:
    """Build the worker request that compiles, runs and checks a submission."""
    try:
        language = Language(submission.language)
    except ValueError:
        raise ValueError("unknown language code") from None

    code_name, exec_name, run_name, compile_args, run_args, slack = _toolchain(
        language, limitation.memory_limit
    )
    return ExecRequest(
        compile_phases=CompilePhase(
            compile=Phase(
                exec_name, compile_args, PhaseLimits(COMPILE_TIME_LIMIT, COMPILE_MEMORY_LIMIT)
            ),
            source_code=SourceCode(code_name, submission.code),
            exec_name=exec_name,
        ),
        run_phases=RunPhase(
            run=Phase(
                run_name,
                run_args,
                PhaseLimits(limitation.time_limit, (limitation.memory_limit + slack) << 20),
            ),
            problem_id=str(submission.problem_id),
        ),
        check_phase=checker,
    )


def make_ce_result(message: str) -> Result:
    """Build the result of a compile error from the worker's JSON message."""
    output = OmitString.from_dict(json.loads(message))
    text = output.s
    if output.omit_size != 0:
        text = f"{output.s} ({output.omit_size} byte omitted)"
    return Result(verdict="Compile Error", message=text)


def make_re_result(error_message: str, data: str) -> Result:
    """Build the result of a runtime error from the worker's JSON data."""
    outcome = ExecResult.from_dict(json.loads(data))
    return Result(
        f"Runtime Error on test case {outcome.case}",
        error_message,
        outcome.user_time_used,
        outcome.memory_used,
    )


def make_ie_result() -> Result:
    """Build the result of an internal error in the judging system."""
    return Result(verdict="Internal Error", message="Something wrong with cdoj-vjudge T_T")


def make_ok_result(error_message: str, data: str) -> Result:
    """Build the result of a normal worker report: running, success or wrong answer."""
    if error_message == "running":
        return Result(verdict=f"Running on test case {data}")
    outcome = ExecResult.from_dict(json.loads(data))
    if error_message == "success":
        return Result("Accepted", "", outcome.user_time_used, outcome.memory_used)
    return Result(
        f"Wrong on test case {outcome.case}",
        outcome.checker_result.s,
        outcome.user_time_used,
        outcome.memory_used,
    )


def make_unknown_result(error_message: str) -> Result:
    """Build an internal-error result carrying *error_message*."""
    return Result(verdict="Internal Error", message=error_message)


def build_result(response: WorkerResponse) -> Result:
    """Turn a worker response into the result shown to the user."""
    code = response.err_code
    if code == ErrorCode.CE:
        return make_ce_result(response.data)
    if code == ErrorCode.RE:
        return make_re_result(response.err_msg, response.data)
    if code == ErrorCode.IE:
        return make_ie_result()
    if code == ErrorCode.OK:
        if response.err_msg not in ("running", "success", "wrong answer"):
            return make_unknown_result("unknown error message")
        return make_ok_result(response.err_msg, response.data)
    return make_unknown_result("unknown error code")