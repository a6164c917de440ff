"""The judging service behind the HTTP API and the worker's status replies."""

from __future__ import annotations

import contextlib
import json
import logging
from typing import Any

import pika.exceptions
import redis

from vjudge.cache import NoSuchSubmission, ResultCache
from vjudge.config import ERR_INTERNAL, ERR_WRONG_INFO
from vjudge.judging import WorkerResponse, build_result, make_submission
from vjudge.messaging import JudgeQueue
from vjudge.models import Result, Submission
from vjudge.responses import error_response, success_response, success_response_with_total
from vjudge.store import ProblemStore, StoreError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class JudgeService:
    """Answers API requests and records the results reported by the worker."""

    def __init__(self, store: ProblemStore, cache: ResultCache, queue: JudgeQueue) -> None:
        self._store = store
        self._cache = cache
        self._queue = queue

    def search_problems(self, name: str | None, page: int, page_size: int) -> dict[str, Any]:
        """List published problems whose title contains *name*, one page at a time."""
        if page_size > MAX_PAGE_SIZE:
            return error_response(ERR_WRONG_INFO, "page size too large")
        if page_size <= 0:
            return error_response(ERR_WRONG_INFO, "page size should greater than 0")
        try:
            infos = self._store.search_problems(name or "", (page - 1) * page_size, page_size)
        except StoreError as error:
            return error_response(ERR_INTERNAL, str(error))
        return success_response_with_total([info.to_dict() for info in infos], len(infos))

    def get_problem(self, problem_id: int) -> dict[str, Any]:
        """Return the statement of a published problem."""
        try:
            statement = self._store.get_statement(problem_id)
        except StoreError as error:
            return error_response(ERR_INTERNAL, str(error))
        return success_response(statement.to_dict())

    def submit(self, body: bytes | str) -> dict[str, Any]:
        """Queue the submission in the JSON *body* and return its id."""
        try:
            submission = Submission.from_dict(json.loads(body))
        except ValueError as error:
            return error_response(ERR_INTERNAL, str(error))
        try:
            checker, limitation = self._store.get_checker_info(submission.problem_id)
        except StoreError as error:
            return error_response(ERR_INTERNAL, str(error))
        try:
            request = make_submission(submission, checker, limitation)
        except ValueError as error:
            return error_response(ERR_WRONG_INFO, str(error))
        try:
            submission_id = self._queue.send(request)
        except (pika.exceptions.AMQPError, OSError) as error:
            return error_response(ERR_INTERNAL, str(error))
        status = Result(verdict="Compiling").to_json()
        with contextlib.suppress(redis.RedisError):
            self._cache.set_submission_result(submission_id, status)
        return success_response(submission_id)

    def get_status(self, submission_id: str) -> dict[str, Any]:
        """Return the stored JSON result of a submission."""
        try:
            status = self._cache.get_submission_result(submission_id)
        except (NoSuchSubmission, redis.RedisError) as error:
            message = error.args[0] if isinstance(error, NoSuchSubmission) else str(error)
            return error_response(ERR_INTERNAL, message)
        return success_response(status)

    def update_status(self, response: WorkerResponse, correlation_id: str) -> None:
        """Store the result described by a worker response."""
        result = build_result(response)
        with contextlib.suppress(redis.RedisError):
            self._cache.set_submission_result(correlation_id, result.to_json())

    def handle_message(self, body: bytes | str, correlation_id: str) -> None:
        """Decode a reply from the worker and record the result it carries."""
        try:
            response = WorkerResponse.from_dict(json.loads(body))
        except ValueError as error:
            logger.error("handle_message(): unmarshal error: %s", error)
            return
        self.update_status(response, correlation_id)