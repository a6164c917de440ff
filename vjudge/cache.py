"""Credentials and submission results kept in Redis."""

from __future__ import annotations

import logging
from typing import Any

import redis

from vjudge.models import SUBMISSION_RESULT_KEY

logger = logging.getLogger(__name__)

USER_ENTRY_PREFIX = "NAMEPAS"


class NoSuchSubmission(LookupError):
    """Raised when no result is stored for a submission."""


def user_password_key(username: str) -> str:
    """Return the Redis key holding the password of *username*."""
    return f"{USER_ENTRY_PREFIX}:{username}"


def result_key(submission_id: str) -> str:
    """Return the Redis key holding the result of a submission."""
    return f"{SUBMISSION_RESULT_KEY}:{submission_id}"


def _text(value: Any) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class ResultCache:
    """Looks up user credentials and stores judging results."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def is_auth_valid(self, username: str, password: str) -> bool:
        """Tell whether *password* is the one stored for *username*."""
        try:
            stored = self._client.get(user_password_key(username))
        except redis.RedisError as error:
            logger.error("is_auth_valid(): redis query error, err: %s", error)
            raise
        if stored is None:
            logger.info("is_auth_valid(): key is nil, username: %s", username)
            return False
        return _text(stored) == password

    def set_submission_result(self, submission_id: str, result: str) -> None:
        """Store the JSON result of a submission, without expiry."""
        try:
            self._client.set(result_key(submission_id), result)
        except redis.RedisError as error:
            logger.error("set_submission_result(): redis set error, err: %s", error)
            raise

    def get_submission_result(self, submission_id: str) -> str:
        """Return the stored JSON result of a submission."""
        try:
            stored = self._client.get(result_key(submission_id))
        except redis.RedisError as error:
            logger.error("get_submission_result(): redis query error, err: %s", error)
            raise
        if stored is None:
            logger.info("get_submission_result(): key is nil, submission_id: %s", submission_id)
            raise NoSuchSubmission("no such submission")
        return _text(stored)