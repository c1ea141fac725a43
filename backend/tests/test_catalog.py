"""Name normalization, display dedupe and slot addressing."""

from types import SimpleNamespace

import pytest

from workout_rotation.services.catalog import dedupe_by_name, is_non_stop_sparring, normalize_name_key
from workout_rotation.services.errors import ValidationError
from workout_rotation.services.slots import SlotAddress


@pytest.mark.parametrize(
    "a,b",
    [
        ("Flutter Kicks", "flutter kick"),
        ("  Jab Cross  ", "jab cross"),
        ("Squats", "squat"),
    ],
)
def test_normalize_name_key_equal(a, b):
    assert normalize_name_key(a) == normalize_name_key(b)


def test_normalize_keeps_non_plural_endings():
    assert normalize_name_key("Bench Press") == "bench press"
    assert normalize_name_key("Core Focus") == "core focus"
    assert normalize_name_key("") == ""
    assert normalize_name_key(None) == ""


@pytest.mark.parametrize("name", ["Non-Stop Sparring", "nonstop sparring", "NON STOP SPARRING", "Non-stop  Sparring"])
def test_is_non_stop_sparring(name):
    assert is_non_stop_sparring(name)


def test_is_not_non_stop_sparring():
    assert not is_non_stop_sparring("Sparring")
    assert not is_non_stop_sparring(None)


def test_dedupe_keeps_first_of_each_name():
    rows = [
        SimpleNamespace(id=1, name="Flutter Kicks"),
        SimpleNamespace(id=2, name="flutter kick"),
        SimpleNamespace(id=3, name="Burpees"),
    ]
    assert [r.id for r in dedupe_by_name(rows)] == [1, 3]


def test_slot_address_defaults_phase_for_station1():
    addr = SlotAddress.parse(1, 2)
    assert addr.phase == 1
    assert addr.group == "phase1"
    assert SlotAddress.parse(2, 0, phase=2).phase is None
    assert SlotAddress.parse(3, 1).label() == "Station 3 slot B"


@pytest.mark.parametrize("station,slot,phase", [(4, 0, None), (0, 0, None), (2, 3, None), (1, -1, 1), (1, 0, 3)])
def test_slot_address_rejects_out_of_range(station, slot, phase):
    with pytest.raises(ValidationError):
        SlotAddress.parse(station, slot, phase)
