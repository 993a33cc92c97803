"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from conftest import SUMMARY_SCREEN, FakeFetcher, FakeOCRProvider, FakeRecorder, FakeResolver

from ringfit.service.field_normalizer_service import FieldNormalizerService
from ringfit.service.ocr_service import OCRService
from ringfit.service.pipeline_service import PipelineService
from ringfit.transport.http.server import create_app

IMG = "https://pbs.twimg.com/media/one.jpg"


@pytest.fixture
def recorder():
    return FakeRecorder()


@pytest.fixture
def client(settings, fixed_now, recorder):
    pipeline = PipelineService(
        settings,
        resolver=FakeResolver([IMG]),
        fetcher=FakeFetcher(),
        ocr=OCRService(FakeOCRProvider({IMG: SUMMARY_SCREEN, "shot.png": SUMMARY_SCREEN})),
        normalizer=FieldNormalizerService(clock=lambda: fixed_now),
        recorder=recorder,
    )
    return TestClient(create_app(pipeline))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_record(client, recorder):
    resp = client.post("/api/record", json={"url": "https://t.co/3KVqTlU4vZ"}, headers={"X-Request-ID": "abc"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["message"] == "Successfully recorded"
    assert body["result"]["meta"]["request_id"] == "abc"
    assert body["result"]["ok"] is True
    assert len(recorder.calls) == 3


def test_record_dry_run(client, recorder):
    resp = client.post("/api/record?dry_run=true", json={"url": "https://t.co/3KVqTlU4vZ"})
    assert resp.status_code == 200
    assert resp.json()["result"]["images"][0]["fields"]["calorie"] == "98.12"
    assert recorder.calls == []


def test_record_invalid_body(client):
    assert client.post("/api/record", json={"link": "x"}).status_code == 422
    assert client.post("/api/record", json={"url": "not a url"}).status_code == 422


def test_record_collaborator_failure(settings, fixed_now):
    pipeline = PipelineService(
        settings,
        resolver=FakeResolver([]),
        fetcher=FakeFetcher(),
        ocr=OCRService(FakeOCRProvider({})),
        normalizer=FieldNormalizerService(clock=lambda: fixed_now),
        recorder=FakeRecorder(),
    )
    client = TestClient(create_app(pipeline))
    resp = client.post("/api/record", json={"url": "https://t.co/3KVqTlU4vZ"})
    assert resp.status_code == 500
    assert resp.json()["detail"].startswith("Record failed")


def test_record_nothing_recorded_is_a_failure(settings, fixed_now):
    recorder = FakeRecorder()
    pipeline = PipelineService(
        settings,
        resolver=FakeResolver([IMG]),
        fetcher=FakeFetcher(),
        ocr=OCRService(FakeOCRProvider({IMG: []})),
        normalizer=FieldNormalizerService(clock=lambda: fixed_now),
        recorder=recorder,
    )
    client = TestClient(create_app(pipeline))
    resp = client.post("/api/record", json={"url": "https://t.co/3KVqTlU4vZ"})
    assert resp.status_code == 500
    assert resp.json()["detail"].startswith("Record failed")
    assert "nothing recorded" in resp.json()["detail"]
    assert recorder.calls == []


def test_extract_upload(client, recorder):
    resp = client.post("/api/extract", files={"file": ("shot.png", b"\x89PNG", "image/png")})
    assert resp.status_code == 200
    body = resp.json()
    assert body["fields"]["date"] == "20191021"
    assert body["matches"]["date"]["text"] == "10/21"
    assert recorder.calls == []


def test_settings_hide_token(client):
    body = client.get("/api/settings").json()
    assert body["pixela"]["user"] == "alice"
    assert "token" not in body["pixela"]
