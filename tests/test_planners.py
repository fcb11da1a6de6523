from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pywebfleet._api.stops import plan_stop_retrieval
from pywebfleet._api.tracks import plan_track_retrieval
from pywebfleet.aggregator import RetrievalPlan
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import WebfleetRequestError
from pywebfleet.models import TimeRange, UpstreamErrorSignal


@pytest.fixture
def amsterdam_config() -> WebfleetConfig:
    return WebfleetConfig(
        account="acme",
        username="api-user",
        password="secret",
        apikey="key-1",
        time_zone="Europe/Amsterdam",
    )


def test_track_range_of_49_real_hours_is_refused(amsterdam_config: WebfleetConfig) -> None:
    plan = plan_track_retrieval(
        amsterdam_config,
        "042",
        range_from="2025-10-25T00:00:00",
        range_to="2025-10-27T00:00:00",
    )
    assert isinstance(plan, UpstreamErrorSignal)
    assert plan.error_code == 9002


def test_track_range_of_47_real_hours_across_spring_change_is_sent(amsterdam_config: WebfleetConfig) -> None:
    plan = plan_track_retrieval(
        amsterdam_config,
        "042",
        range_from="2025-03-29T00:00:00",
        range_to="2025-03-31T00:30:00",
    )
    assert isinstance(plan, RetrievalPlan)
    (request,) = plan.requests
    assert request.params["rangefrom_string"] == "28/03/2025 23:00:00"
    assert request.params["rangeto_string"] == "30/03/2025 22:30:00"


def test_stop_windows_across_autumn_change_stay_within_48_hours(amsterdam_config: WebfleetConfig) -> None:
    plan = plan_stop_retrieval(
        amsterdam_config,
        "042",
        range_from="2025-10-25T00:00:00",
        range_to="2025-10-28T00:00:00",
    )
    assert [(r.params["rangefrom"], r.params["rangeto"]) for r in plan.requests] == [
        ("2025-10-24T22:00:00Z", "2025-10-26T22:00:00Z"),
        ("2025-10-26T22:00:01Z", "2025-10-27T23:00:00Z"),
    ]


def test_oversized_stop_window_is_rejected(
    amsterdam_config: WebfleetConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    start = datetime(2025, 1, 10, tzinfo=UTC)
    oversized = TimeRange(start=start, end=start + timedelta(hours=72))
    monkeypatch.setattr("pywebfleet._api.stops.split_range", lambda *_args: [oversized])

    with pytest.raises(WebfleetRequestError, match="exceeds"):
        plan_stop_retrieval(amsterdam_config, "042", range_from=start, range_to=oversized.end)
