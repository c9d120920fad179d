"""Shared fixtures: settings, alerts and a recording stub endpoint."""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from config import HttpClientSettings, WeComRobotSettings
from schemas.models.alert import Alert

WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key=test-robot-key"


@pytest.fixture
def settings():
    return WeComRobotSettings(webhook_url=WEBHOOK_URL, http=HttpClientSettings())


@pytest.fixture
def firing_alert():
    return Alert(
        labels={"alertname": "HighCPU", "instance": "node-1", "severity": "critical"},
        annotations={"summary": "CPU usage above 90%"},
        starts_at=datetime.now(timezone.utc) - timedelta(minutes=5),
        generator_url="http://prometheus.local/graph?g0.expr=cpu",
    )


@pytest.fixture
def resolved_alert():
    now = datetime.now(timezone.utc)
    return Alert(
        labels={"alertname": "HighCPU", "instance": "node-2", "severity": "critical"},
        annotations={"summary": "CPU usage above 90%"},
        starts_at=now - timedelta(hours=1),
        ends_at=now - timedelta(minutes=1),
    )


class StubEndpoint:
    """httpx handler that records requests and replies with a fixed body."""

    def __init__(self, body=b'{"errcode":0,"errmsg":"ok"}', status_code=200):
        self.body = body
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body)

    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def stub_endpoint():
    return StubEndpoint()


@pytest.fixture
def make_endpoint():
    return StubEndpoint
