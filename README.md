# vjudge

A small HTTP service in front of an online judge. It serves problem
statements from a MySQL database and sends submitted code to remote
execution workers over RabbitMQ. It keeps each submission's current
verdict in Redis, where clients can poll for it.

Every endpoint is protected by HTTP Basic authentication. The credentials
are checked against Redis keys of the form `NAMEPAS:<username>`, whose
value is the user's password.

## Installation

```
pip install .
```

`vjudge.config.connect_database` opens the database through SQLAlchemy's
`mysql+pymysql` dialect. The PyMySQL driver is not installed with the
package; install it in the same environment before running the service.

## Configuration

The service reads a YAML file. The default path is `./conf/config.yaml`.

```yaml
RDB:
  Host: localhost
  Port: 3306
  Username: user
  Password: password
  DBName: judge
Redis:
  Host: localhost
  Port: 6379
  Password: password
  DB: 0
MQ:
  Host: localhost
  Port: 5672
  Username: user
  Password: password
  QueueName: exec_queue
Server:
  Port: 8080
```

`vjudge.config.load_config(path)` parses this file into a
`vjudge.config.Configure` object.

## Running

```
vjudge -c ./conf/config.yaml
```

This connects to the database, Redis and the message queue. It declares an
exclusive reply queue, starts a background consumer for worker replies and
then serves HTTP on all interfaces at `Server.Port`.

## Endpoints

| Method | Path              | Parameters                              |
|--------|-------------------|-----------------------------------------|
| GET    | `/searchProblems` | `name`, `page` (1), `pageSize` (20)     |
| GET    | `/getProblem`     | `id`                                    |
| POST   | `/submit`         | JSON body: `problem_id`, `lang`, `code` |
| GET    | `/status`         | `submission_id`                         |

`pageSize` must be between 1 and 100. Only published problems are listed or
returned.

`lang` takes one of these values:

| Value | Language |
|-------|----------|
| 0     | C        |
| 1     | C++      |
| 2     | Java     |
| 3     | Python 3 |

Every reply is a JSON object.

- Success: `"code": "0"` and `"msg": "success"`, with the result under `"data"`.
  `/searchProblems` also returns `"total"`, the number of entries on the page.
- Error: code `"1000"` for internal errors or `"1001"` for bad input, with a
  message under `"msg"`.

A successful submission returns its id. `/status` returns the stored result
as a JSON string with the fields `verdict`, `msg`, `time_used` and
`mem_used`. The verdict moves through these stages:

- `Compiling`
- `Running on test case N`
- a final verdict: `Accepted`, `Wrong on test case N`,
  `Runtime Error on test case N`, `Compile Error` or `Internal Error`

## Using it as a library

`vjudge.app.create_app(service, cache)` builds the Flask application from a
`vjudge.service.JudgeService` and a `vjudge.cache.ResultCache`. A
`JudgeService` is made from a `vjudge.store.ProblemStore` (over a SQLAlchemy
engine), a `ResultCache` (over a Redis client) and a
`vjudge.messaging.JudgeQueue` (over a pika channel), so any of them can be
backed by other stores in tests or embedded use.

`vjudge.judging.make_submission` builds the job sent to the worker, and
`vjudge.judging.build_result` turns a worker reply into a
`vjudge.models.Result`.

## What it does not do

The service only reads problems; it has no way to create or edit problems,
limitations or samples. It has no user registration either: credentials must
be written into Redis by other means. Compiling and running code is left to
the execution workers listening on the configured queue.