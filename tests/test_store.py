import pytest
import sqlalchemy

from vjudge.models import Limitation, ProblemInfo, ProblemSample, Sample
from vjudge.store import ProblemStore, StoreError

_DDL = [
    "CREATE TABLE problem_problem (id INTEGER, title TEXT, content TEXT, resources TEXT,"
    " constraints TEXT, standard_input TEXT, standard_output TEXT, note TEXT,"
    " disable INTEGER, submit INTEGER, accept INTEGER, _checker TEXT, limitation_id INTEGER)",
    "CREATE TABLE problem_limitation (id INTEGER, time_limit INTEGER, memory_limit INTEGER,"
    " output_limit INTEGER, cpu_limit INTEGER)",
    "CREATE TABLE problem_problemsample (id INTEGER, input_content TEXT,"
    " output_content TEXT, problem_id INTEGER)",
]


def _problem(engine, pid, title, disable=0, limitation_id=1, checker="wcmp"):
    with engine.begin() as conn:
        conn.execute(
            sqlalchemy.text(
                "INSERT INTO problem_problem VALUES (:id, :title, 'body', 'src', 'cons',"
                " 'in', 'out', 'note', :disable, 10, 4, :checker, :lim)"
            ),
            {"id": pid, "title": title, "disable": disable, "checker": checker, "lim": limitation_id},
        )


def _limitation(engine, lid, time_limit=1000, memory_limit=256):
    with engine.begin() as conn:
        conn.execute(
            sqlalchemy.text("INSERT INTO problem_limitation VALUES (:id, :t, :m, 64, 1)"),
            {"id": lid, "t": time_limit, "m": memory_limit},
        )


def _sample(engine, sid, pid, data_in, data_out):
    with engine.begin() as conn:
        conn.execute(
            sqlalchemy.text("INSERT INTO problem_problemsample VALUES (:id, :i, :o, :p)"),
            {"id": sid, "i": data_in, "o": data_out, "p": pid},
        )


@pytest.fixture
def engine():
    eng = sqlalchemy.create_engine("sqlite://")
    with eng.begin() as conn:
        for statement in _DDL:
            conn.execute(sqlalchemy.text(statement))
    return eng


@pytest.fixture
def store(engine):
    return ProblemStore(engine)


def test_get_samples(engine, store):
    _sample(engine, 1, 7, "1 2", "3")
    _sample(engine, 2, 7, "4 5", "9")
    _sample(engine, 3, 8, "x", "y")
    samples = store.get_samples(7)
    assert samples == [ProblemSample(1, "1 2", "3", 7), ProblemSample(2, "4 5", "9", 7)]


def test_get_limitation(engine, store):
    _limitation(engine, 3, time_limit=2000, memory_limit=512)
    assert store.get_limitation(3) == Limitation(3, 2000, 512, 64, 1)


def test_get_limitation_missing(store):
    with pytest.raises(StoreError, match="no problem limitation record"):
        store.get_limitation(99)


def test_get_limitation_duplicate(engine, store):
    _limitation(engine, 4)
    _limitation(engine, 4)
    with pytest.raises(StoreError, match="duplicate limitation_id"):
        store.get_limitation(4)


def test_get_statement(engine, store):
    _problem(engine, 1, "A+B", limitation_id=2)
    _limitation(engine, 2, time_limit=1500, memory_limit=128)
    _sample(engine, 1, 1, "1 2", "3")
    statement = store.get_statement(1)
    assert statement.title == "A+B"
    assert statement.input == "in"
    assert statement.checker == "wcmp"
    assert statement.time_limit == 1500
    assert statement.memory_limit == 128
    assert statement.samples == [Sample("1 2", "3")]


def test_get_statement_missing(store):
    with pytest.raises(StoreError, match="no problem record"):
        store.get_statement(5)


def test_get_statement_duplicate(engine, store):
    _problem(engine, 5, "a")
    _problem(engine, 5, "b")
    with pytest.raises(StoreError, match="duplicate problem_id"):
        store.get_statement(5)


def test_get_statement_not_published(engine, store):
    _problem(engine, 6, "hidden", disable=1)
    _limitation(engine, 1)
    with pytest.raises(StoreError, match="the problem is not published"):
        store.get_statement(6)


def test_get_statement_missing_limitation(engine, store):
    _problem(engine, 6, "lonely", limitation_id=42)
    with pytest.raises(StoreError, match="no problem limitation record"):
        store.get_statement(6)


def test_search_filters_and_orders(engine, store):
    _problem(engine, 3, "Graph walk")
    _problem(engine, 1, "Graph paths")
    _problem(engine, 2, "Strings")
    _problem(engine, 4, "Graph hidden", disable=1)
    assert store.search_problems("Graph", 0, 20) == [
        ProblemInfo(1, "Graph paths"),
        ProblemInfo(3, "Graph walk"),
    ]
    assert [p.id for p in store.search_problems("", 0, 20)] == [1, 2, 3]


def test_search_paging(engine, store):
    for pid in range(1, 6):
        _problem(engine, pid, f"P{pid}")
    assert [p.id for p in store.search_problems("", 2, 2)] == [3, 4]
    assert [p.id for p in store.search_problems(None, -2, 2)] == [1, 2]
    assert store.search_problems("", 10, 2) == []


def test_get_checker_info(engine, store):
    _problem(engine, 1, "A", checker="ncmp", limitation_id=9)
    _limitation(engine, 9, time_limit=3000)
    checker, limitation = store.get_checker_info(1)
    assert checker == "ncmp"
    assert limitation.time_limit == 3000


def test_get_checker_info_not_published(engine, store):
    _problem(engine, 1, "A", disable=1)
    with pytest.raises(StoreError, match="not published"):
        store.get_checker_info(1)


def test_database_error_is_wrapped(engine, store):
    with engine.begin() as conn:
        conn.execute(sqlalchemy.text("DROP TABLE problem_problemsample"))
    with pytest.raises(StoreError):
        store.get_samples(1)