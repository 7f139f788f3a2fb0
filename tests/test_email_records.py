"""邮件发送记录：登记、终态迁移与查询。"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from refdata.core.enums import EmailStatusEnum
from refdata.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from refdata.store import ReferenceDataStore


def _record(store: ReferenceDataStore, to_email: str = "ops@example.com"):
    return store.record_email_attempt(to_email, "系统维护通知", "<p>周六维护</p>", is_html=True)


def test_record_attempt_starts_pending(store: ReferenceDataStore):
    record = _record(store)

    assert record.status == EmailStatusEnum.PENDING
    assert record.is_html is True
    assert record.send_time is None
    assert record.error_msg is None


def test_record_attempt_validates_address(store: ReferenceDataStore):
    with pytest.raises(ValidationError) as exc_info:
        store.record_email_attempt("not-an-address", "主题", "内容")

    assert exc_info.value.data[0]["field"] == "to_email"


def test_mark_sent_records_send_time(store: ReferenceDataStore):
    record = _record(store)
    sent_at = datetime(2025, 9, 30, 16, 5, 26, tzinfo=timezone(timedelta(hours=8)))

    sent = store.mark_email_sent(record.id, send_time=sent_at)

    assert sent.status == EmailStatusEnum.SENT
    assert sent.send_time.replace(tzinfo=None) == sent_at.replace(tzinfo=None)


def test_mark_failed_keeps_error_message(store: ReferenceDataStore):
    record = _record(store)

    failed = store.mark_email_failed(record.id, "SMTP 连接超时")

    assert failed.status == EmailStatusEnum.FAILED
    assert failed.error_msg == "SMTP 连接超时"
    assert failed.send_time is None


def test_terminal_records_cannot_transition_again(store: ReferenceDataStore):
    record = _record(store)
    store.mark_email_sent(record.id)

    with pytest.raises(InvalidStateError):
        store.mark_email_failed(record.id, "重复回调")
    with pytest.raises(InvalidStateError):
        store.mark_email_sent(record.id)
    assert store.get_email_record(record.id).status == EmailStatusEnum.SENT


def test_missing_record_is_not_found(store: ReferenceDataStore):
    with pytest.raises(NotFoundError):
        store.mark_email_sent(9999)
    with pytest.raises(NotFoundError):
        store.get_email_record(9999)


def test_list_email_records_filters_by_recipient_and_status(store: ReferenceDataStore):
    first = _record(store, "ops@example.com")
    second = _record(store, "dev@example.com")
    third = _record(store, "ops@example.com")
    store.mark_email_failed(first.id, "退信")

    page = store.list_email_records(to_email="ops@")
    assert page.total == 2
    assert [item.id for item in page.list] == [third.id, first.id]

    failed = store.list_email_records(status="failed")
    assert [item.id for item in failed.list] == [first.id]

    pending = store.list_email_records(status=EmailStatusEnum.PENDING, size=1)
    assert pending.total == 2
    assert pending.list[0].id in {second.id, third.id}
