"""Test fixtures."""

import datetime

import pytest

from worldtime.adjustment import AdjustmentRule
from worldtime.provider import StaticRulesProvider, StaticZone
from worldtime.transition import LAST_OCCURRENCE, FloatingDateRule

SUNDAY = 0


@pytest.fixture(name="static_provider")
def mock_static_provider() -> StaticRulesProvider:
    """Fixture with an in memory zone using EU rules at a fixed UTC+1 offset."""
    rule = AdjustmentRule(
        date_start=datetime.date(1996, 1, 1),
        date_end=datetime.date.max,
        daylight_transition_start=FloatingDateRule(
            month=3,
            day_of_week=SUNDAY,
            occurrence=LAST_OCCURRENCE,
            time_of_day=datetime.timedelta(hours=2),
        ),
        daylight_transition_end=FloatingDateRule(
            month=10,
            day_of_week=SUNDAY,
            occurrence=LAST_OCCURRENCE,
            time_of_day=datetime.timedelta(hours=3),
        ),
    )
    return StaticRulesProvider(
        {
            "Test/Standard": StaticZone(
                tzinfo=datetime.timezone(datetime.timedelta(hours=1)), rules=[rule]
            ),
            "Test/NoDst": StaticZone(tzinfo=datetime.timezone.utc),
        }
    )
