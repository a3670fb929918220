"""Fakes shared by the test modules. No test touches the network."""

from __future__ import annotations

import json

import httpx

SAFE_REPLY = "VERDICT: SAFE\nEXPLANATION: Looks fine.\nNEXT_STEPS: Proceed; stay alert."


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeModel:
    """Records every prompt pair and returns (or raises) a canned reply."""

    def __init__(self, reply: str | Exception = SAFE_REPLY):
        self.reply = reply
        self.calls: list[tuple[str, str]] = []

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def turnstile_transport(
    *,
    success: bool = True,
    error_codes: list[str] | None = None,
    status_code: int = 200,
    seen: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        body = {"success": success, "error-codes": error_codes or []}
        return httpx.Response(status_code, content=json.dumps(body), headers={"content-type": "application/json"})

    return httpx.MockTransport(handler)


def probe_transport(
    *,
    headers: dict[str, str] | None = None,
    status_code: int = 200,
    seen: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, headers=headers or {})

    return httpx.MockTransport(handler)


def failing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)
