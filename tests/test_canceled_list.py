import asyncio
from datetime import datetime, timedelta, timezone
from http import HTTPStatus

from apscheduler.triggers.cron import CronTrigger
from sqlalchemy import inspect

from app.config import Settings
from app.models import ListCanceled
from app.services.canceled_list_retention import (
    PURGE_JOB_ID,
    CanceledListRetentionEngine,
    purge_canceled_before,
)


def _row(uid: str, *, canceled_at: datetime | None, number: int = 1, title: str = "Request", user_uid: str = "u1"):
    return ListCanceled(
        app_uid=uid,
        usr_uid=user_uid,
        tas_uid="t1",
        pro_uid="p1",
        app_number=number,
        app_title=title,
        app_pro_title="Process",
        app_tas_title="Task",
        app_canceled_date=canceled_at,
        del_index=1,
        del_delegate_date=datetime(2026, 1, 1, 8, 0),
        del_priority="3",
    )


def test_table_layout_matches_legacy_schema(engine):
    inspector = inspect(engine)
    columns = {column["name"]: column for column in inspector.get_columns("LIST_CANCELED")}
    assert list(columns) == [
        "APP_UID",
        "USR_UID",
        "TAS_UID",
        "PRO_UID",
        "APP_NUMBER",
        "APP_TITLE",
        "APP_PRO_TITLE",
        "APP_TAS_TITLE",
        "APP_CANCELED_DATE",
        "DEL_INDEX",
        "DEL_PREVIOUS_USR_UID",
        "DEL_CURRENT_USR_USERNAME",
        "DEL_CURRENT_USR_FIRSTNAME",
        "DEL_CURRENT_USR_LASTNAME",
        "DEL_DELEGATE_DATE",
        "DEL_INIT_DATE",
        "DEL_DUE_DATE",
        "DEL_PRIORITY",
        "PRO_ID",
        "USR_ID",
        "TAS_ID",
    ]
    assert inspector.get_pk_constraint("LIST_CANCELED")["constrained_columns"] == ["APP_UID"]
    assert columns["DEL_DELEGATE_DATE"]["nullable"] is False
    assert columns["APP_CANCELED_DATE"]["nullable"] is True

    indexes = {index["name"]: index["column_names"] for index in inspector.get_indexes("LIST_CANCELED")}
    assert indexes == {
        "indexCanceledUser": ["USR_UID"],
        "INDEX_PRO_ID": ["PRO_ID"],
        "INDEX_USR_ID": ["USR_ID"],
        "INDEX_TAS_ID": ["TAS_ID"],
    }


def test_new_row_defaults(db_session):
    db_session.add(ListCanceled(app_uid="a" * 32, del_delegate_date=datetime(2026, 1, 1)))
    db_session.commit()

    row = db_session.get(ListCanceled, "a" * 32)
    assert row.usr_uid == ""
    assert row.app_number == 0
    assert row.del_index == 0
    assert row.del_priority == "3"
    assert row.del_previous_usr_uid == ""
    assert row.pro_id == 0
    assert row.app_title is None


def test_list_canceled_requests_uses_column_names(client, db_session):
    db_session.add_all(
        [
            _row("a1", canceled_at=datetime(2026, 3, 1), number=1, title="Older"),
            _row("a2", canceled_at=datetime(2026, 3, 5), number=2, title="Newer", user_uid="u2"),
        ]
    )
    db_session.commit()

    response = client.get("/canceled-requests")
    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body["meta"]["total"] == 2
    assert body["meta"]["sort_by"] == "app_canceled_date"
    assert [item["APP_UID"] for item in body["data"]] == ["a2", "a1"]
    assert body["data"][0]["APP_TITLE"] == "Newer"
    assert body["data"][0]["DEL_PRIORITY"] == "3"

    by_user = client.get("/canceled-requests", params={"user_uid": "u2"}).json()
    assert [item["APP_UID"] for item in by_user["data"]] == ["a2"]

    by_title = client.get("/canceled-requests", params={"filter": "older"}).json()
    assert [item["APP_UID"] for item in by_title["data"]] == ["a1"]


def test_get_canceled_request(client, db_session):
    db_session.add(_row("a1", canceled_at=datetime(2026, 3, 1)))
    db_session.commit()

    assert client.get("/canceled-requests/a1").json()["APP_NUMBER"] == 1
    missing = client.get("/canceled-requests/zz")
    assert missing.status_code == HTTPStatus.NOT_FOUND
    assert missing.json() == {"message": "Canceled request not found"}


def test_canceling_a_request_shows_up_in_the_list(client, user, process):
    started = client.post(
        "/requests",
        json={"process_uuid": str(process.uuid), "user_uuid": str(user.uuid)},
    ).json()
    client.post(f"/requests/{started['uuid']}/cancel")

    body = client.get("/canceled-requests", params={"process_uid": process.uuid.hex}).json()
    assert body["meta"]["total"] == 1
    item = body["data"][0]
    assert item["APP_UID"] == started["uuid"].replace("-", "")
    assert item["APP_NUMBER"] == started["number"]
    assert item["DEL_CURRENT_USR_USERNAME"] == "jdoe"


def test_purge_endpoint_deletes_older_rows(client, db_session):
    db_session.add_all(
        [
            _row("old", canceled_at=datetime(2025, 1, 1)),
            _row("new", canceled_at=datetime(2026, 6, 1)),
            _row("undated", canceled_at=None),
        ]
    )
    db_session.commit()

    response = client.post("/canceled-requests/purge", json={"canceled_before": "2026-01-01T00:00:00Z"})
    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"deleted": 1}

    remaining = {row.app_uid for row in db_session.query(ListCanceled).all()}
    assert remaining == {"new", "undated"}


def test_purge_converts_aware_cutoff_to_utc(db_session):
    db_session.add(_row("edge", canceled_at=datetime(2026, 1, 1, 4, 30)))
    db_session.commit()

    # 2026-01-01 00:00 in UTC-05:00 is 05:00 UTC
    cutoff = datetime(2026, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert purge_canceled_before(db_session, cutoff) == 1


def test_retention_engine_purges_with_configured_window(db_session):
    db_session.add_all(
        [
            _row("stale", canceled_at=datetime(2026, 1, 1)),
            _row("fresh", canceled_at=datetime(2026, 3, 25)),
        ]
    )
    db_session.commit()

    engine = CanceledListRetentionEngine(
        session_factory=lambda: db_session,
        settings_provider=lambda: Settings(canceled_list_retention_days=30),
    )
    deleted = engine.run_purge(now=datetime(2026, 4, 1, tzinfo=timezone.utc))
    assert deleted == 1
    assert [row.app_uid for row in db_session.query(ListCanceled).all()] == ["fresh"]


def test_retention_engine_disabled_without_retention(db_session):
    engine = CanceledListRetentionEngine(
        session_factory=lambda: db_session,
        settings_provider=lambda: Settings(canceled_list_retention_days=None),
    )
    engine.start()
    assert engine.running is False
    assert engine.run_purge() == 0


def test_retention_engine_ignores_invalid_cron(db_session):
    engine = CanceledListRetentionEngine(
        session_factory=lambda: db_session,
        settings_provider=lambda: Settings(canceled_list_retention_days=10, canceled_list_purge_cron="not a cron"),
    )
    engine.start()
    assert engine.running is False


def test_retention_engine_schedules_purge_on_configured_cron(db_session):
    engine = CanceledListRetentionEngine(
        session_factory=lambda: db_session,
        settings_provider=lambda: Settings(
            canceled_list_retention_days=7,
            canceled_list_purge_cron="0 3 * * *",
            canceled_list_purge_timezone="Europe/Berlin",
        ),
    )

    async def _start_and_inspect():
        engine.start()
        try:
            assert engine.running is True
            job = engine.purge_job
            assert job is not None
            assert job.id == PURGE_JOB_ID
            assert isinstance(job.trigger, CronTrigger)
            assert str(job.trigger.timezone) == "Europe/Berlin"
            fields = {field.name: str(field) for field in job.trigger.fields}
            assert fields["minute"] == "0"
            assert fields["hour"] == "3"
        finally:
            engine.shutdown()

    asyncio.run(_start_and_inspect())
    assert engine.running is False
    assert engine.purge_job is None
