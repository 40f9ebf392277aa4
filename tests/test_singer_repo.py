from datetime import date

import psycopg2
import pytest
from psycopg2 import errors, pool

from models.singer import CreatePayload, FilterPayload, SingerInfo
from repositories.exceptions import (
    BadValueError,
    DuplicateError,
    ErrorKind,
    NotFoundError,
    SingerError,
    UnknownError,
)


RANDOM = CreatePayload(
    singer_id=1,
    first_name="Random",
    last_name="Last",
    info=SingerInfo(songs=["Song A"], awards=["Award A"]),
    birth_date=date(1990, 7, 21),
)
FIRST = CreatePayload(
    singer_id=2,
    first_name="First",
    last_name="Last",
    info=SingerInfo(songs=["Song B", "Song C"], awards=[]),
    birth_date=date(2002, 2, 2),
)


@pytest.fixture()
def seeded(repo):
    repo.create(RANDOM)
    repo.create(FIRST)
    return repo


def _ids(singers):
    return sorted(s.singer_id for s in singers)


# ── create / get ──────────────────────────────────────────


def test_create_then_get_returns_same_singer(repo):
    repo.create(RANDOM)

    singer = repo.get(1)

    assert singer.first_name == "Random"
    assert singer.last_name == "Last"
    assert singer.birth_date == date(1990, 7, 21)
    assert singer.info == SingerInfo(songs=["Song A"], awards=["Award A"])


def test_create_without_optional_fields(repo, fake_db):
    repo.create(CreatePayload(singer_id=9))

    assert fake_db.rows[9][1:3] == (None, None)
    assert fake_db.rows[9][4] is None
    singer = repo.get(9)
    assert (singer.first_name, singer.last_name, singer.birth_date) == ("", "", None)
    assert singer.info == SingerInfo()


def test_duplicate_create_keeps_first_row(repo):
    repo.create(RANDOM)

    with pytest.raises(DuplicateError) as exc_info:
        repo.create(CreatePayload(singer_id=1, first_name="Other"))

    assert exc_info.value.kind is ErrorKind.DUPLICATE
    assert isinstance(exc_info.value.__cause__, errors.UniqueViolation)
    assert repo.get(1).first_name == "Random"


def test_create_with_unencodable_info_never_reaches_storage(repo, fake_db):
    with pytest.raises(BadValueError):
        repo.create(CreatePayload(singer_id=3, info=SingerInfo(songs=[object()])))

    assert fake_db.statements == []
    assert 3 not in fake_db.rows


def test_create_storage_failure_is_unknown(repo, fake_db):
    fake_db.fail_next = psycopg2.OperationalError("server closed the connection unexpectedly")

    with pytest.raises(UnknownError) as exc_info:
        repo.create(RANDOM)

    assert isinstance(exc_info.value.cause, psycopg2.OperationalError)
    assert fake_db.rows == {}


def test_get_missing_is_not_found(repo):
    with pytest.raises(NotFoundError) as exc_info:
        repo.get(404)

    assert exc_info.value.kind is ErrorKind.NOT_FOUND


def test_get_corrupt_row_is_bad_value(repo, fake_db):
    fake_db.put_raw(5, "Broken", None, b"{not json", None)

    with pytest.raises(BadValueError):
        repo.get(5)


def test_get_empty_blob_is_bad_value(repo, fake_db):
    fake_db.put_raw(6, "Empty", None, b"", None)

    with pytest.raises(BadValueError):
        repo.get(6)


@pytest.mark.parametrize(
    "exc",
    [
        errors.QueryCanceled("canceling statement due to statement timeout"),
        pool.PoolError("connection pool exhausted"),
        psycopg2.InternalError("internal"),
    ],
)
def test_get_storage_failures_are_unknown(repo, fake_db, exc):
    fake_db.fail_next = exc

    with pytest.raises(UnknownError) as exc_info:
        repo.get(1)

    assert exc_info.value.cause is exc


# ── list ─────────────────────────────────────────────────


def test_list_empty_filter_returns_everything(seeded):
    assert _ids(seeded.list(FilterPayload())) == [1, 2]
    assert _ids(seeded.list()) == [1, 2]


def test_list_on_empty_table_is_empty_not_error(repo):
    assert repo.list() == []


@pytest.mark.parametrize(
    "flt, expected",
    [
        (FilterPayload(name="and"), [1]),
        (FilterPayload(name="Last"), [1, 2]),
        (FilterPayload(birth_date_start=date(2000, 1, 1)), [2]),
        (FilterPayload(birth_date_end=date(2000, 1, 1)), [1]),
        (FilterPayload(name="and", birth_date_start=date(2000, 1, 1)), []),
        (FilterPayload(name="and", birth_date_end=date(2000, 1, 1)), [1]),
        (FilterPayload(birth_date_start=date(1990, 7, 21), birth_date_end=date(1990, 7, 21)), [1]),
    ],
)
def test_list_filters(seeded, flt, expected):
    assert _ids(seeded.list(flt)) == expected


def test_name_filter_is_case_sensitive(seeded):
    assert seeded.list(FilterPayload(name="AND")) == []
    assert _ids(seeded.list(FilterPayload(name="Rand"))) == [1]


def test_name_filter_treats_wildcards_literally(seeded, repo):
    repo.create(CreatePayload(singer_id=3, first_name="100%", last_name="Pure"))

    assert _ids(seeded.list(FilterPayload(name="%"))) == [3]
    assert seeded.list(FilterPayload(name="_")) == []


def test_rows_without_birth_date_are_excluded_by_date_bounds(repo):
    repo.create(CreatePayload(singer_id=4, first_name="Ageless"))

    assert repo.list(FilterPayload(birth_date_start=date(1900, 1, 1))) == []
    assert _ids(repo.list(FilterPayload(name="Age"))) == [4]


def test_list_stops_at_first_corrupt_row(seeded, fake_db):
    fake_db.put_raw(3, "Corrupt", "Row", b"garbage", date(1999, 1, 1))

    with pytest.raises(BadValueError):
        seeded.list()

    conn = fake_db.connections[-1]
    assert all(cur.closed for cur in conn.cursors)
    assert fake_db.released == len(fake_db.connections)


def test_list_storage_failure_is_unknown(repo, fake_db):
    fake_db.fail_next = errors.QueryCanceled("canceling statement due to user request")

    with pytest.raises(UnknownError):
        repo.list(FilterPayload(name="x"))


def test_list_with_invalid_bound_is_bad_value(repo, fake_db):
    with pytest.raises(BadValueError):
        repo.list(FilterPayload(birth_date_start="2000-01-01"))

    assert fake_db.statements == []


# ── cross-cutting ────────────────────────────────────────


def test_timeout_is_passed_to_each_connection(repo, fake_db):
    repo.create(RANDOM, timeout=1.5)
    repo.list(timeout=0.25)
    repo.get(1)

    assert fake_db.timeouts == [1.5, 0.25, None]


def test_every_connection_is_released(seeded, fake_db):
    with pytest.raises(NotFoundError):
        seeded.get(99)
    with pytest.raises(DuplicateError):
        seeded.create(RANDOM)

    assert fake_db.released == len(fake_db.connections)


def test_all_errors_share_a_base_class():
    for cls in (DuplicateError, NotFoundError, BadValueError, UnknownError):
        assert issubclass(cls, SingerError)
