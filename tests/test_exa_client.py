import asyncio
import time
from types import SimpleNamespace

import pytest

from agentic_invest.services.exa import (
    ExaAuthError,
    ExaClient,
    ExaConfig,
    ExaRateLimitError,
    ExaServerError,
    ExaTimeoutError,
)


class StubSdk:
    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.kwargs = None

    def answer(self, **kwargs):
        self.kwargs = kwargs
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def _answer(sdk: StubSdk, config: ExaConfig | None = None):
    async def run():
        client = ExaClient("key", config=config)
        client._client = sdk
        return await client.answer("How is PLTR doing?")

    return asyncio.run(run())


def test_answer_maps_citations():
    sdk = StubSdk(
        SimpleNamespace(
            answer="PLTR is up.",
            citations=[
                SimpleNamespace(url="https://example.com/1", title="One", text=None),
                SimpleNamespace(url="https://example.com/2", title=None, text=None),
            ],
        )
    )

    response = _answer(sdk)

    assert response.answer == "PLTR is up."
    assert [c.title for c in response.citations] == ["One", ""]
    assert sdk.kwargs["query"] == "How is PLTR doing?"
    assert sdk.kwargs["text"] is False


@pytest.mark.parametrize(
    "message, expected",
    [
        ("401 Unauthorized", ExaAuthError),
        ("429 rate limit reached", ExaRateLimitError),
        ("502 Bad Gateway", ExaServerError),
    ],
)
def test_errors_are_classified(message, expected):
    with pytest.raises(expected):
        _answer(StubSdk(error=Exception(message)))


def test_slow_call_times_out():
    with pytest.raises(ExaTimeoutError):
        _answer(StubSdk(response=None, delay=0.3), ExaConfig(timeout_seconds=0.05))
