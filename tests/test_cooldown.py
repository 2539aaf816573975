from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from profile_change.services import check_cooldown, evaluate_cooldown
from utils.errors import RateLimitError

NOW = datetime(2026, 10, 19, 12, 0, 0)


def req(status, days_ago, id=1):
    return SimpleNamespace(id=id, status=status, requested_at=NOW - timedelta(days=days_ago))


def test_approved_request_30_days_ago_blocks():
    result = evaluate_cooldown([req("approved", 30)], now=NOW)
    assert result.allowed is False
    assert result.retry_after_days == 30


def test_approved_request_61_days_ago_allows():
    assert evaluate_cooldown([req("approved", 61)], now=NOW).allowed is True


def test_empty_history_allows():
    assert evaluate_cooldown([], now=NOW).allowed is True


@pytest.mark.parametrize("status", ["pending", "rejected"])
def test_only_approved_requests_count(status):
    assert evaluate_cooldown([req(status, 1)], now=NOW).allowed is True


def test_any_approved_request_in_window_blocks_and_reports_latest():
    history = [req("rejected", 2, id=3), req("approved", 10, id=2), req("approved", 50, id=1)]
    result = evaluate_cooldown(history, now=NOW)
    assert result.allowed is False
    assert result.blocking_request_id == 2
    assert result.retry_after_days == 50


def test_window_length_is_configurable():
    assert evaluate_cooldown([req("approved", 10)], now=NOW, window_days=7).allowed is True


def test_check_cooldown_raises_rate_limit():
    with pytest.raises(RateLimitError) as exc:
        check_cooldown([req("approved", 59)], now=NOW)
    assert exc.value.retry_after_days == 1
    assert exc.value.status_code == 429
