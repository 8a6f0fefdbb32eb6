"""Alternate constructors and registration forms."""
from __future__ import annotations

import pytest

from entity_counter.base.errors import UnsupportedTypeError
from entity_counter.base.models import TrackedType
from entity_counter.config import CounterSettings
from entity_counter.counter import EntityCounter
from entity_counter.tests.helpers import FakeStore, scripted_entity, wait_idle


def test_registration_forms_are_equivalent():
    Alpha = scripted_entity("Alpha")
    Beta = scripted_entity("Beta")
    Gamma = scripted_entity("Gamma")
    counter = EntityCounter(None, TrackedType(Alpha, 1), (Beta, 2), Gamma, default_limit=9)

    assert [(r.name, r.limit) for r in counter.registrations] == [  # nosec B101
        ("Alpha", 1),
        ("Beta", 2),
        ("Gamma", None),
    ]
    assert counter.snapshot_key == "EntityCounter_Alpha_Beta_Gamma_Counts"  # nosec B101


def test_bare_type_falls_back_to_default_limit(make_counter):
    Alpha = scripted_entity("Alpha")
    store = FakeStore()
    counter = make_counter(store, Alpha, default_limit=4)
    assert wait_idle(counter)  # nosec B101
    assert counter.limit(Alpha) == 4  # nosec B101


def test_with_default_limit_applies_to_every_type(make_counter, fast_settings):
    Alpha = scripted_entity("Alpha")
    Beta = scripted_entity("Beta")
    store = FakeStore()
    store.counts = {"Alpha": 1, "Beta": 2}
    counter = EntityCounter.with_default_limit(store, Alpha, Beta, default_limit=3, settings=fast_settings)
    try:
        assert wait_idle(counter)  # nosec B101
        assert counter.limit(Alpha) == 3 and counter.limit(Beta) == 3  # nosec B101
        assert counter.combined_limit() == 6  # nosec B101
        assert counter.combined_remaining() == 3  # nosec B101
        assert counter.default_limit == 3  # nosec B101
    finally:
        counter.stop_tracking()


def test_from_settings_resolves_per_type_limits():
    Alpha = scripted_entity("Alpha")
    Beta = scripted_entity("Beta")
    Gamma = scripted_entity("Gamma")
    settings = CounterSettings(default_limit=5, limits={"Alpha": 1, "Beta": None})
    counter = EntityCounter.from_settings(None, Alpha, Beta, Gamma, settings=settings)

    assert {r.name: r.limit for r in counter.registrations} == {  # nosec B101
        "Alpha": 1,
        "Beta": None,
        "Gamma": 5,
    }


def test_from_settings_reads_environment(monkeypatch):
    Alpha = scripted_entity("Alpha")
    monkeypatch.setenv("ENTITY_COUNTER_DEFAULT_LIMIT", "12")
    counter = EntityCounter.from_settings(None, Alpha)
    assert counter.registrations[0].limit == 12  # nosec B101


def test_tracked_type_rejects_non_types():
    with pytest.raises(UnsupportedTypeError) as info:
        TrackedType.coerce(("not-a-type", 3))  # type: ignore[arg-type]
    assert info.value.code.value == "unsupported_type"  # nosec B101


def test_from_settings_uses_configured_default_limit():
    Alpha = scripted_entity("Alpha")
    Beta = scripted_entity("Beta")
    Untracked = scripted_entity("Untracked")
    settings = CounterSettings(default_limit=7, limits={"Alpha": 2})
    counter = EntityCounter.from_settings(None, Alpha, Beta, settings=settings)

    assert counter.default_limit == 7  # nosec B101
    assert counter.limit(Untracked) == 7  # nosec B101
    assert counter.remaining(Untracked) == 7  # nosec B101
    assert counter.limit(Beta) == 7  # nosec B101

    explicit = EntityCounter.from_settings(None, Alpha, settings=settings, default_limit=1)
    assert explicit.default_limit == 1  # nosec B101
    assert explicit.registrations[0].limit == 2  # nosec B101
