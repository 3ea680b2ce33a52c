"""
control_center.py
=================
Per-intersection traffic-light scheduler.

Time is cut into ticks of :data:`TICK_DURATION` milliseconds. Each light in
turn gets ``green_duration`` green ticks followed by ``yellow_duration``
yellow ticks while every other light is red. A lone light gets an extra
red tail of ``green_duration`` ticks so it does not jump straight back to
green.

:meth:`ControlCenter.update` only acts on whole ticks: a late call catches
up by several ticks at once, and the sub-tick remainder is carried into the
next call so drift does not accumulate.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from geometry import Point
from markings import Light, LightState, Marking

log = logging.getLogger("signals")

TICK_DURATION = 1000  # ms


class ControlCenter:
    def __init__(self, center: Point, lights: Optional[Sequence[Light]] = None, *,
                 timestamp: float, green_duration: int = 2, yellow_duration: int = 1):
        self.center = Point(*center)
        self.lights: List[Light] = list(lights or [])
        self.green_duration = green_duration
        self.yellow_duration = yellow_duration
        self.current_tick = 0
        self.previous_timestamp = timestamp
        self._apply_tick()

    def __repr__(self):
        return f"ControlCenter(center={tuple(self.center)}, lights={len(self.lights)}, tick={self.current_tick})"

    @property
    def phase_length(self) -> int:
        return self.green_duration + self.yellow_duration

    def total_ticks(self) -> int:
        if not self.lights:
            return 0
        if len(self.lights) == 1:
            return self.green_duration * 2 + self.yellow_duration
        return len(self.lights) * self.phase_length

    def add_light(self, light: Light):
        self.lights.append(light)
        self._apply_tick()

    def update(self, timestamp: float) -> None:
        if not self.lights:
            return
        delta = timestamp - self.previous_timestamp
        if delta < TICK_DURATION:
            return
        steps = int(delta // TICK_DURATION)
        self.previous_timestamp = timestamp - delta % TICK_DURATION
        self.current_tick = (self.current_tick + steps) % self.total_ticks()
        if steps > 1:
            log.debug("control center %s caught up %d ticks", tuple(self.center), steps)
        self._apply_tick()

    def _apply_tick(self):
        if not self.lights:
            return
        self._set_all(LightState.RED)
        index = self.current_tick // self.phase_length
        if len(self.lights) == 1 and index > 0:
            # red tail of the single-light cycle
            self.lights[0].state = LightState.RED
            return
        in_phase = self.current_tick % self.phase_length
        self.lights[index].state = LightState.GREEN if in_phase < self.green_duration else LightState.YELLOW

    def _set_all(self, state: LightState):
        for light in self.lights:
            light.state = state

    def to_record(self):
        return {"center": self.center.to_record(),
                "greenDuration": self.green_duration,
                "yellowDuration": self.yellow_duration,
                "lights": [l.to_record() for l in self.lights]}

    @classmethod
    def load(cls, data, markings: Sequence[Marking], timestamp: float) -> "ControlCenter":
        """Rebuild a controller, reusing the already-loaded light markings whose
        centers match the record."""
        centers = {Point.load(l["center"]) for l in data.get("lights", [])}
        lights = [m for m in markings if isinstance(m, Light) and m.center in centers]
        return cls(Point.load(data["center"]), lights, timestamp=timestamp,
                   green_duration=data.get("greenDuration", 2),
                   yellow_duration=data.get("yellowDuration", 1))
