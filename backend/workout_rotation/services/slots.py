"""Slot addressing and the id bookkeeping shared by the assembler and the slot editor."""

from collections.abc import Iterator
from dataclasses import dataclass

from workout_rotation.models.exercise import Exercise
from workout_rotation.models.workout import Workout
from workout_rotation.schedule import SLOTS_PER_GROUP, STATIONS, DayPlan
from workout_rotation.services.errors import ValidationError


def make_slot(ex: Exercise) -> dict:
    """Slot value: reference plus a name snapshot that survives renames and deletes."""
    return {"exercise_id": ex.id, "name": ex.name}


def slot_id(slot: dict | None) -> int | None:
    if not isinstance(slot, dict):
        return None
    return slot.get("exercise_id")


@dataclass(frozen=True)
class SlotAddress:
    station: int
    slot_index: int
    phase: int | None = None  # 1 or 2, station 1 only

    @classmethod
    def parse(cls, station: int, slot_index: int, phase: int | None = None) -> "SlotAddress":
        if station not in STATIONS:
            raise ValidationError("Invalid station (1, 2, or 3)")
        if not 0 <= slot_index < SLOTS_PER_GROUP:
            raise ValidationError("Invalid slot_index (0, 1, or 2)")
        if station != 1:
            return cls(station=station, slot_index=slot_index, phase=None)
        if phase is None:
            phase = 1
        if phase not in (1, 2):
            raise ValidationError("Invalid phase (1 or 2)")
        return cls(station=station, slot_index=slot_index, phase=phase)

    @property
    def group(self) -> str:
        if self.station == 1:
            return f"phase{self.phase}"
        return f"station{self.station}"

    def label(self) -> str:
        letter = "ABC"[self.slot_index]
        if self.station == 1:
            return f"Station 1 Phase {self.phase} slot {letter}"
        return f"Station {self.station} slot {letter}"


def iter_slots(workout: Workout) -> Iterator[tuple[SlotAddress, dict]]:
    station1 = workout.station1 or {}
    for phase in (1, 2):
        for i, slot in enumerate(station1.get(f"phase{phase}") or []):
            yield SlotAddress(1, i, phase), slot
    for i, slot in enumerate(workout.station2 or []):
        yield SlotAddress(2, i), slot
    for i, slot in enumerate(workout.station3 or []):
        yield SlotAddress(3, i), slot


def workout_exercise_ids(workout: Workout) -> list[int]:
    ids = [slot_id(slot) for _, slot in iter_slots(workout)]
    return [i for i in ids if i is not None]


def other_slot_ids(workout: Workout, target: SlotAddress, plan: DayPlan) -> set[int]:
    """Ids placed anywhere in the day except the target slot and its replicated siblings."""
    out: set[int] = set()
    for addr, slot in iter_slots(workout):
        if addr == target:
            continue
        if plan.replicated_phase1 and target.group == "phase1" and addr.group == "phase1":
            continue
        i = slot_id(slot)
        if i is not None:
            out.add(i)
    return out


def group_slots(workout: Workout, address: SlotAddress) -> list[dict]:
    """Copy of the group holding the address (new list, so the JSON column sees a new value)."""
    if address.station == 1:
        return [dict(s) for s in (workout.station1 or {}).get(address.group) or []]
    return [dict(s) for s in getattr(workout, address.group) or []]


def write_slot(workout: Workout, address: SlotAddress, ex: Exercise) -> None:
    """Replace one slot by assigning a fresh copy of its whole column (one UPDATE)."""
    slots = group_slots(workout, address)
    while len(slots) <= address.slot_index:
        slots.append({"exercise_id": None, "name": None})
    slots[address.slot_index] = make_slot(ex)
    if address.station == 1:
        station1 = {k: [dict(s) for s in v] for k, v in (workout.station1 or {}).items()}
        station1.setdefault("phase1", [])
        station1.setdefault("phase2", [])
        station1[address.group] = slots
        workout.station1 = station1
    else:
        setattr(workout, address.group, slots)
