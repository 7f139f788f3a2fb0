"""业务异常在 FastAPI 应用中的统一响应结构。"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from refdata.core.exceptions import register_exception_handlers
from refdata.core.logger import set_correlation_id
from refdata.core.responses import create_response
from refdata.store import ReferenceDataStore


@pytest.fixture()
def client(store: ReferenceDataStore):
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/configs/{key}")
    def read_config(key: str):
        return {"value": store.get_config_value(key)}

    @app.post("/notices/{notice_id}/withdraw")
    def withdraw(notice_id: int):
        return store.withdraw_notice(notice_id).model_dump()

    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def test_not_found_is_rendered_as_envelope(client: TestClient):
    response = client.get("/configs/missing.key")

    assert response.status_code == 404
    payload = response.json()
    assert payload["code"] == 404
    assert payload["data"] is None
    assert "missing.key" in payload["msg"]


def test_disabled_and_state_errors_keep_their_status(client: TestClient, store: ReferenceDataStore):
    store.upsert_config("login.captcha", "true", "boolean")
    store.set_config_status("login.captcha", "disabled")
    notice = store.create_notice("草稿", "<p>内容</p>")

    disabled = client.get("/configs/login.captcha")
    assert disabled.status_code == 403
    assert disabled.json()["code"] == 403

    conflict = client.post(f"/notices/{notice.id}/withdraw")
    assert conflict.status_code == 409
    assert conflict.json()["data"] == {"status": "draft"}


def test_successful_value_passes_through(client: TestClient, store: ReferenceDataStore):
    store.upsert_config("upload.allowed_types", '["jpg","png"]', "json")

    response = client.get("/configs/upload.allowed_types")

    assert response.status_code == 200
    assert response.json() == {"value": ["jpg", "png"]}


def test_unexpected_errors_become_internal_server_error(client: TestClient):
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"msg": "服务器内部错误", "data": None, "code": 500}


def test_correlation_id_is_echoed_in_meta():
    set_correlation_id("req-123")
    try:
        payload = create_response("ok", {"id": 1})
    finally:
        set_correlation_id(None)

    assert payload["meta"] == {"correlation_id": "req-123"}
