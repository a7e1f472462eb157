"""Tests for the readiness probe."""

import pytest
import requests
from unittest.mock import MagicMock, patch

from karen.integrations.readiness import ServiceNotReadyError, main, wait_for_service


def _response(status_code: int) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    return response


def test_ready_on_first_404():
    with patch("karen.integrations.readiness.requests.get", return_value=_response(404)) as get, patch(
        "karen.integrations.readiness.time.sleep"
    ) as sleep:
        wait_for_service("http://karen", retries=3, interval=1)

    get.assert_called_once()
    sleep.assert_not_called()


def test_retries_until_404():
    responses = [requests.ConnectionError("refused"), _response(502), _response(404)]
    with patch("karen.integrations.readiness.requests.get", side_effect=responses) as get, patch(
        "karen.integrations.readiness.time.sleep"
    ) as sleep:
        wait_for_service("http://karen", retries=5, interval=0.5)

    assert get.call_count == 3
    assert sleep.call_count == 2
    sleep.assert_called_with(0.5)


def test_gives_up_after_retries():
    with patch("karen.integrations.readiness.requests.get", return_value=_response(200)) as get, patch(
        "karen.integrations.readiness.time.sleep"
    ):
        with pytest.raises(ServiceNotReadyError):
            wait_for_service("http://karen", retries=2, interval=1)

    # First attempt plus two retries.
    assert get.call_count == 3


def test_main_exit_codes(monkeypatch):
    monkeypatch.delenv("HOST", raising=False)
    assert main([]) == 2

    with patch("karen.integrations.readiness.wait_for_service") as wait:
        assert main(["localhost:8000"]) == 0
    wait.assert_called_once_with("http://localhost:8000")

    with patch("karen.integrations.readiness.wait_for_service", side_effect=ServiceNotReadyError("Failed too many times.")):
        assert main(["localhost:8000"]) == 1
