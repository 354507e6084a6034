from __future__ import annotations

import json
from concurrent.futures import Future

import pytest

from beacon_core import http_client

SERVER = "https://beacon.test"
BEACON_URL = f"{SERVER}/beacon"
SUMMARY_URL = f"{SERVER}/summary"
WEBHOOK_URL = "https://hooks.test/notify"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object = None, raw: bytes | None = None) -> None:
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        elif body is not None:
            self.content = json.dumps(body).encode()
        else:
            self.content = b""
        self.closed = False

    def json(self) -> object:
        return json.loads(self.content)

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for requests.Session. Routes are (method, url) -> responses; the last one sticks."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict]] = []
        self._routes: dict[tuple[str, str], list] = {}

    def route(self, method: str, url: str, *responses: object) -> None:
        self._routes[(method, url)] = list(responses)

    def post(self, url: str, json: object = None, timeout: float | None = None) -> FakeResponse:
        return self._dispatch("POST", url, {"json": json})

    def get(self, url: str, params: dict | None = None, timeout: float | None = None) -> FakeResponse:
        return self._dispatch("GET", url, {"params": params})

    def calls_to(self, method: str, url: str) -> list[dict]:
        return [kw for m, u, kw in self.calls if m == method and u == url]

    def _dispatch(self, method: str, url: str, kwargs: dict) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        queue = self._routes.get((method, url))
        if not queue:
            return FakeResponse(404)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item


class InlineExecutor:
    """Runs submitted work immediately so continuations fire synchronously."""

    def submit(self, fn, *args):
        future: Future = Future()
        try:
            future.set_result(fn(*args))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True) -> None:
        pass


class DeferredExecutor:
    """Holds submitted work until run_all(), to model calls completing later."""

    def __init__(self) -> None:
        self.pending: list[tuple[Future, object, tuple]] = []

    def submit(self, fn, *args):
        future: Future = Future()
        self.pending.append((future, fn, args))
        return future

    def run_all(self) -> None:
        while self.pending:
            future, fn, args = self.pending.pop(0)
            try:
                future.set_result(fn(*args))
            except Exception as e:
                future.set_exception(e)

    def shutdown(self, wait: bool = True) -> None:
        pass


class FakeTimer:
    def __init__(self, name: str, period: float, fn) -> None:
        self.name = name
        self.period = period
        self.fn = fn
        self.started = False
        self.cancelled = False

    def start(self) -> "FakeTimer":
        self.started = True
        return self

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.fn()


class TimerRecorder:
    def __init__(self) -> None:
        self.created: list[FakeTimer] = []

    def __call__(self, name: str, period: float, fn) -> FakeTimer:
        timer = FakeTimer(name, period, fn)
        self.created.append(timer)
        return timer

    def live(self, name: str) -> FakeTimer:
        matches = [t for t in self.created if t.name == name and not t.cancelled]
        assert len(matches) == 1, f"expected one live {name} timer, got {len(matches)}"
        return matches[0]


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeSession:
    session = FakeSession()
    monkeypatch.setattr(http_client, "http", session)
    return session
