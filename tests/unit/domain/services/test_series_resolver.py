from __future__ import annotations

from gridsense.domain.services.series_resolver import SeriesResolver
from tests.conftest import make_reading


def test_resolve_prefers_meter_id() -> None:
    reading = make_reading(10.0, meter_id="  m-42 ")

    assert SeriesResolver().resolve(reading) == "m-42"


def test_resolve_takes_first_usable_meter_field() -> None:
    reading = make_reading(10.0, meter_id="", meterId=17.0, meter="ignored")

    assert SeriesResolver().resolve(reading) == "17"


def test_resolve_falls_back_to_area_and_customer() -> None:
    reading = make_reading(10.0, area="NO2", customer="acme", meter=True)

    assert SeriesResolver().resolve(reading) == "NO2:acme"


def test_resolve_payload_is_total() -> None:
    assert SeriesResolver.resolve_payload({}, "unknown", "unknown") == "unknown:unknown"
