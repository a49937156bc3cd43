import httpx
import pytest
import requests
from fastapi.testclient import TestClient

import evaluator
import lexer
import orchestrator
import parser

LEX_BASE = "http://lexer.test"
PARSE_BASE = "http://parser.test"
EVAL_BASE = "http://eval.test"


class Router(httpx.AsyncBaseTransport):
    """Dispatch async requests to in-process ASGI apps by host."""

    def __init__(self, apps):
        self.apps = {httpx.URL(base).host: httpx.ASGITransport(app=app) for base, app in apps.items()}

    async def handle_async_request(self, request):
        return await self.apps[request.url.host].handle_async_request(request)


@pytest.fixture
def lex_client():
    return TestClient(lexer.app)


@pytest.fixture
def eval_client():
    return TestClient(evaluator.app)


@pytest.fixture
def parse_client(monkeypatch, eval_client):
    """Parser service whose evaluator hop lands on the in-process eval app."""
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        assert url.startswith(EVAL_BASE)
        calls.append((url, headers))
        return eval_client.post(url[len(EVAL_BASE):], json=json, headers=headers)

    monkeypatch.setattr(parser, "EVAL_URL", EVAL_BASE)
    monkeypatch.setattr(requests, "post", fake_post)
    client = TestClient(parser.app)
    client.forwarded = calls
    return client


@pytest.fixture
def gateway_client(monkeypatch, parse_client):
    real_client = httpx.AsyncClient
    transport = Router({LEX_BASE: lexer.app, PARSE_BASE: parser.app})

    def client_factory(**kwargs):
        return real_client(transport=transport, **kwargs)

    monkeypatch.setattr(orchestrator, "LEX_URL", f"{LEX_BASE}/lex")
    monkeypatch.setattr(orchestrator, "PARSE_URL", f"{PARSE_BASE}/run")
    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return TestClient(orchestrator.app)
