"""Rate-limit gate and resilient client behaviour."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from catalog_ingest.adapters.http_resilience import MinIntervalGate, ResilientClient
from catalog_ingest.config.http_resilience import NO_RETRY, ResilienceConfig, RetryPolicy
from tests.helpers.catalog import FakeClock


def test_gate_spaces_consecutive_calls_by_min_interval() -> None:
    clock = FakeClock()
    gate = MinIntervalGate(0.8, clock=clock, sleep=clock.sleep)
    starts: list[float] = []

    async def scenario() -> None:
        for _ in range(5):
            async with gate:
                starts.append(clock())

    asyncio.run(scenario())

    assert starts[-1] - starts[0] == pytest.approx(4 * 0.8)
    assert clock.sleeps == pytest.approx([0.8] * 4)


def test_gate_does_not_wait_when_interval_already_elapsed() -> None:
    clock = FakeClock()
    gate = MinIntervalGate(0.5, clock=clock, sleep=clock.sleep)

    async def scenario() -> None:
        async with gate:
            pass
        clock.now += 2.0
        async with gate:
            pass

    asyncio.run(scenario())

    assert clock.sleeps == []


def test_gate_records_failed_calls() -> None:
    clock = FakeClock()
    gate = MinIntervalGate(1.0, clock=clock, sleep=clock.sleep)

    async def failing() -> None:
        async with gate:
            raise RuntimeError("upstream down")

    async def scenario() -> None:
        with pytest.raises(RuntimeError):
            await failing()
        async with gate:
            pass

    asyncio.run(scenario())

    assert gate.last_call == pytest.approx(1.0)
    assert clock.sleeps == pytest.approx([1.0])


def test_gate_serialises_concurrent_callers() -> None:
    clock = FakeClock()
    gate = MinIntervalGate(0.8, clock=clock, sleep=clock.sleep)
    starts: list[float] = []

    async def call() -> None:
        async with gate:
            starts.append(clock())

    async def scenario() -> None:
        await asyncio.gather(*(call() for _ in range(3)))

    asyncio.run(scenario())

    assert sorted(starts) == pytest.approx([0.0, 0.8, 1.6])


def test_gate_rejects_negative_interval() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        MinIntervalGate(-1)


def _client(
    transport: httpx.MockTransport,
    *,
    retry: RetryPolicy = NO_RETRY,
    gate: MinIntervalGate | None = None,
) -> ResilientClient:
    config = ResilienceConfig(name="test", base_url="https://api.test/", retry=retry, cache=None)
    return ResilientClient(config, gate=gate, transport=transport)


def test_client_sends_every_request_through_gate() -> None:
    clock = FakeClock()
    gate = MinIntervalGate(0.8, clock=clock, sleep=clock.sleep)
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))

    async def scenario() -> list[int]:
        async with _client(transport, gate=gate) as client:
            return [(await client.get(f"items/{number}")).status_code for number in range(3)]

    statuses = asyncio.run(scenario())

    assert statuses == [200, 200, 200]
    assert clock.sleeps == pytest.approx([0.8, 0.8])


def test_client_without_retry_returns_first_failure() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(503)

    async def scenario() -> int:
        async with _client(httpx.MockTransport(handler)) as client:
            return (await client.get("flaky")).status_code

    assert asyncio.run(scenario()) == 503
    assert len(calls) == 1


def test_client_retries_server_errors_when_configured() -> None:
    responses = iter([httpx.Response(503), httpx.Response(200, json={"ok": True})])

    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return next(responses)

    retry = RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0)

    async def scenario() -> int:
        async with _client(httpx.MockTransport(handler), retry=retry) as client:
            return (await client.get("flaky")).status_code

    assert asyncio.run(scenario()) == 200
