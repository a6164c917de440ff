"""The HTTP application and the command that starts the service."""

from __future__ import annotations

import argparse
import logging
import threading

import redis
from flask import Flask, Response, jsonify, request

from vjudge.cache import ResultCache
from vjudge.config import connect_database, connect_redis, load_config
from vjudge.messaging import connect
from vjudge.service import JudgeService
from vjudge.store import ProblemStore

logger = logging.getLogger(__name__)

REALM = "Authorization Required"
DEFAULT_PAGE_SIZE = 20


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _challenge() -> Response:
    return Response(status=401, headers={"WWW-Authenticate": f'Basic realm="{REALM}"'})


def create_app(service: JudgeService, cache: ResultCache) -> Flask:
    """Build the Flask application serving the judging API behind basic auth."""
    app = Flask(__name__)

    @app.before_request
    def authenticate() -> Response | None:
        auth = request.authorization
        if auth is None or auth.username is None or auth.password is None:
            return _challenge()
        try:
            allowed = cache.is_auth_valid(auth.username, auth.password)
        except redis.RedisError:
            allowed = False
        return None if allowed else _challenge()

    @app.get("/searchProblems")
    def search_problems() -> Response:
        return jsonify(
            service.search_problems(
                request.args.get("name", ""),
                _int_arg("page", 1),
                _int_arg("pageSize", DEFAULT_PAGE_SIZE),
            )
        )

    @app.get("/getProblem")
    def get_problem() -> Response:
        return jsonify(service.get_problem(_int_arg("id", 0)))

    @app.post("/submit")
    def submit() -> Response:
        return jsonify(service.submit(request.get_data()))

    @app.get("/status")
    def status() -> Response:
        return jsonify(service.get_status(request.args.get("submission_id", "")))

    return app


def main(argv: list[str] | None = None) -> None:
    """Load the configuration, connect the backing stores and serve the API."""
    parser = argparse.ArgumentParser(description="Virtual judge front service.")
    parser.add_argument(
        "-c", dest="config", default="./conf/config.yaml", help="the path of configure file"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    config = load_config(args.config)
    address = config.server_address()
    engine = connect_database(config.rdb)
    client = connect_redis(config.redis)
    queue = connect(config.mq)
    logger.info("init finished successfully")

    cache = ResultCache(client)
    service = JudgeService(ProblemStore(engine), cache, queue)
    app = create_app(service, cache)

    threading.Thread(target=queue.consume, args=(service.handle_message,), daemon=True).start()
    host, _, port = address.rpartition(":")
    app.run(host=host or "0.0.0.0", port=int(port))