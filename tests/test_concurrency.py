"""并发迁移：同一条记录被多个调用方同时迁移时只有一个成功。"""

from __future__ import annotations

import threading
from typing import Callable, List

from refdata.core.enums import EmailStatusEnum, NoticeStatusEnum
from refdata.core.exceptions import InvalidStateError
from refdata.store import ReferenceDataStore


def _race(*callables: Callable[[], object]) -> tuple[List[object], List[Exception]]:
    barrier = threading.Barrier(len(callables))
    results: List[object] = []
    errors: List[Exception] = []
    lock = threading.Lock()

    def runner(func: Callable[[], object]) -> None:
        barrier.wait()
        try:
            outcome = func()
        except Exception as exc:  # noqa: BLE001 - collected for assertions
            with lock:
                errors.append(exc)
        else:
            with lock:
                results.append(outcome)

    threads = [threading.Thread(target=runner, args=(func,)) for func in callables]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results, errors


def test_racing_sent_and_failed_leave_one_terminal_state(store: ReferenceDataStore):
    record = store.record_email_attempt("ops@example.com", "主题", "内容")

    results, errors = _race(
        lambda: store.mark_email_sent(record.id),
        lambda: store.mark_email_failed(record.id, "SMTP 连接超时"),
    )

    assert len(results) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], InvalidStateError)
    final = store.get_email_record(record.id)
    assert final.status == results[0].status
    assert final.status in {EmailStatusEnum.SENT, EmailStatusEnum.FAILED}


def test_racing_publishers_have_exactly_one_winner(store: ReferenceDataStore):
    notice = store.create_notice("系统维护通知", "<p>周六维护</p>")

    results, errors = _race(
        lambda: store.publish_notice(notice.id, publisher_id=1),
        lambda: store.publish_notice(notice.id, publisher_id=2),
    )

    assert len(results) == 1
    assert [type(error) for error in errors] == [InvalidStateError]
    final = store.get_notice(notice.id)
    assert final.status == NoticeStatusEnum.PUBLISHED
    assert final.publisher_id == results[0].publisher_id
