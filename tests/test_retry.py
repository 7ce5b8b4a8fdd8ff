import pytest

from core.exceptions import RetryExhaustedError, UploadError
from core.storage import retry as retry_module
from core.storage.retry import RetryPolicy, with_retry


def test_delay_doubles_per_attempt():
    policy = RetryPolicy()
    assert policy.max_attempts == 3
    assert [policy.delay_for(attempt) for attempt in (1, 2)] == [1.0, 2.0]


@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"base_delay": -1.0}])
def test_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


@pytest.mark.asyncio()
async def test_sleeps_between_attempts_only(monkeypatch):
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(retry_module.asyncio, "sleep", fake_sleep)
    calls = 0

    async def always_fails() -> None:
        nonlocal calls
        calls += 1
        raise TimeoutError("network timeout")

    with pytest.raises(UploadError) as excinfo:
        await with_retry("upload", "drawings/a/data.json", always_fails, error_cls=UploadError)

    assert calls == 3
    assert delays == [1.0, 2.0]
    error = excinfo.value
    assert error.attempts == 3
    assert error.operation == "upload"
    assert error.key == "drawings/a/data.json"
    assert isinstance(error.last_error, TimeoutError)
    assert isinstance(error.__cause__, TimeoutError)
    assert str(error) == "Failed to upload file after 3 attempts: network timeout"


@pytest.mark.asyncio()
async def test_returns_first_success():
    attempts = []

    async def succeeds_on_third() -> str:
        attempts.append(len(attempts) + 1)
        if len(attempts) < 3:
            raise ConnectionError("reset")
        return "ok"

    result = await with_retry("download", "k", succeeds_on_third, policy=RetryPolicy(base_delay=0.0))
    assert result == "ok"
    assert attempts == [1, 2, 3]


@pytest.mark.asyncio()
async def test_default_error_class():
    async def fails() -> None:
        raise RuntimeError("bucket not found")

    with pytest.raises(RetryExhaustedError, match="bucket not found"):
        await with_retry("delete", "k", fails, policy=RetryPolicy(max_attempts=1))
