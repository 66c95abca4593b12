"""
G-code post processor: Toolpath -> instruction stream.

The emitter is a small state machine. A ToolheadState value (position,
cumulative extrusion, positioning mode) goes into every emission step and a
new one comes out, next to the text the step produced. The running
extrusion total is never reset within a run.

Instruction vocabulary (one instruction per line, whitespace separated,
``;`` starts a comment):

  G0 / G1      rapid / linear move, optional X Y Z E F words
  G28          home; the tracked position returns to the origin
  G90 / G91    absolute / relative positioning
  G21          millimetre units
  M104 / M140  set nozzle / bed temperature
  M109 / M190  wait for nozzle / bed temperature
  M84          disable motors

Plotter segments use the four-step pen cycle: travel to the start with the
pen up, lower the pen, draw, lift the pen. Extrusion segments travel to the
start and then draw every following point with a cumulative E value.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from svgslicer.core.config import PrinterSettings
from svgslicer.core.logging import get_logger
from svgslicer.slicing.toolpath import Layer, Toolpath, ToolpathSegment, ToolpathType

logger = get_logger(__name__)

# Clearance above the bed after homing (mm)
SAFE_LIFT = 15.0
# Relative lift of the end sequence (mm)
END_LIFT = 10.0


class PositioningMode(Enum):
    """Coordinate interpretation of move words."""

    ABSOLUTE = "G90"
    RELATIVE = "G91"


@dataclass(frozen=True)
class ToolheadState:
    """
    Machine state as known from the instructions emitted so far.

    Attributes:
        x, y, z: Tracked head position (mm)
        extrusion: Cumulative E value (mm of filament)
        positioning_mode: Absolute or relative move interpretation
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    extrusion: float = 0.0
    positioning_mode: PositioningMode = PositioningMode.ABSOLUTE

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def moved(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
    ) -> "ToolheadState":
        """State after a move with the given axis words."""
        if self.positioning_mode is PositioningMode.RELATIVE:
            return replace(
                self,
                x=self.x + (x or 0.0),
                y=self.y + (y or 0.0),
                z=self.z + (z or 0.0),
            )
        return replace(
            self,
            x=self.x if x is None else x,
            y=self.y if y is None else y,
            z=self.z if z is None else z,
        )

    def extruded(self, amount: float) -> "ToolheadState":
        return replace(self, extrusion=self.extrusion + amount)

    def homed(self) -> "ToolheadState":
        return replace(self, x=0.0, y=0.0, z=0.0)

    def with_mode(self, mode: PositioningMode) -> "ToolheadState":
        return replace(self, positioning_mode=mode)


def calculate_extrusion(
    length: float,
    layer_height: float,
    nozzle_diameter: float,
    filament_diameter: float,
) -> float:
    """
    Filament length needed to lay a bead of ``length`` mm.

    The bead is approximated as a ``layer_height x nozzle_diameter``
    rectangle; its volume is divided by the filament cross-section.
    """
    filament_radius = filament_diameter / 2
    volume = length * layer_height * nozzle_diameter
    return volume / (math.pi * filament_radius**2)


def format_number(value: float) -> str:
    """Integral values without a decimal point, others as shortest repr."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class GCodeProgram:
    """Emitted instruction stream plus the final toolhead state."""

    text: str
    state: ToolheadState
    move_count: int
    zero_length_moves: int = 0

    @property
    def line_count(self) -> int:
        return len(self.text.splitlines())


class GCodePostProcessor:
    """
    Serializes a Toolpath into G-code.

    Each ``*_move`` step takes the current ToolheadState and returns the
    instruction line together with the next state, so a sequence of steps
    can be replayed and checked in isolation.
    """

    def __init__(self, printer: PrinterSettings, prefix: str = ""):
        self.printer = printer
        self.prefix = prefix

    # ── Formatting steps ─────────────────────────────────────────────

    @staticmethod
    def comment(text: str) -> str:
        return f"; {text}"

    def rapid_move(
        self,
        state: ToolheadState,
        *,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
        feed: Optional[float] = None,
    ) -> Tuple[str, ToolheadState]:
        """``G0`` move without extrusion."""
        words = self._axis_words(x, y, z)
        if feed is not None:
            words.append(f"F{format_number(feed)}")
        return " ".join(["G0", *words]), state.moved(x, y, z)

    def linear_move(
        self,
        state: ToolheadState,
        *,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
        extrusion: Optional[float] = None,
        feed: Optional[float] = None,
    ) -> Tuple[str, ToolheadState]:
        """
        ``G1`` move; ``extrusion`` is the filament added by this move and is
        written as the new cumulative E value.
        """
        words = self._axis_words(x, y, z)
        next_state = state.moved(x, y, z)
        if extrusion is not None:
            next_state = next_state.extruded(extrusion)
            words.append(f"E{next_state.extrusion:.5f}")
        if feed is not None:
            words.append(f"F{format_number(feed)}")
        return " ".join(["G1", *words]), next_state

    @staticmethod
    def _axis_words(
        x: Optional[float], y: Optional[float], z: Optional[float]
    ) -> List[str]:
        words = []
        if x is not None:
            words.append(f"X{x:.3f}")
        if y is not None:
            words.append(f"Y{y:.3f}")
        if z is not None:
            words.append(f"Z{z:.3f}")
        return words

    def extrusion_for(self, length: float) -> float:
        """Filament for a bead of ``length`` mm, multiplier applied."""
        p = self.printer
        extrude = calculate_extrusion(
            length, p.layer_height, p.nozzle_diameter, p.filament_diameter
        )
        return extrude * p.extrusion_multiplier

    # ── Program sections ─────────────────────────────────────────────

    def header(self, toolpath: Toolpath, state: ToolheadState) -> Tuple[List[str], ToolheadState]:
        """Banner, prefix, heating, homing and the initial safe lift."""
        p = self.printer
        plotter = not toolpath.kind.extrudes
        lines = [
            self.comment(f"Generated by svgslicer ({toolpath.kind.label})"),
            self.comment(
                f"Settings: Nozzle {format_number(p.nozzle_diameter)}mm, "
                f"Layer {format_number(p.layer_height)}mm"
            ),
            "",
            self.prefix,
            "",
        ]

        if plotter:
            lines.append(self.comment("Plotter Mode: Temps disabled"))
        else:
            lines.extend(
                [
                    f"M104 S{format_number(p.temperature)}",
                    f"M140 S{format_number(p.bed_temperature)}",
                    f"M109 S{format_number(p.temperature)}",
                    f"M190 S{format_number(p.bed_temperature)}",
                ]
            )

        lines.append(PositioningMode.ABSOLUTE.value)
        state = state.with_mode(PositioningMode.ABSOLUTE)
        lines.append("G21")
        lines.append("G28")
        state = state.homed()

        lift = p.z_hop + SAFE_LIFT if plotter else SAFE_LIFT
        line, state = self.rapid_move(state, z=lift, feed=p.travel_speed)
        lines.extend([line, ""])
        return lines, state

    def layer_start(
        self, toolpath: Toolpath, layer: Layer, state: ToolheadState
    ) -> Tuple[List[str], ToolheadState]:
        """Layer comment; extrusion modes also drop to the layer height."""
        lines = [self.comment(f"Layer {layer.index + 1} (Z={layer.z:.3f})")]
        if toolpath.kind.extrudes:
            line, state = self.linear_move(state, z=layer.z, feed=self.printer.travel_speed)
            lines.append(line)
        return lines, state

    def footer(self, toolpath: Toolpath, state: ToolheadState) -> Tuple[List[str], ToolheadState]:
        """Cool down, lift clear and park at the back of the bed."""
        p = self.printer
        lines = ["", self.comment("End")]
        if toolpath.kind.extrudes:
            lines.extend(["M104 S0", "M140 S0"])

        lines.append(PositioningMode.RELATIVE.value)
        state = state.with_mode(PositioningMode.RELATIVE)
        lines.append(f"G0 Z{format_number(END_LIFT)}")
        state = state.moved(z=END_LIFT)
        lines.append(PositioningMode.ABSOLUTE.value)
        state = state.with_mode(PositioningMode.ABSOLUTE)
        lines.append(f"G0 X0 Y{format_number(p.bed_depth)}")
        state = state.moved(x=0.0, y=p.bed_depth)
        lines.append("M84")
        return lines, state

    # ── Segment emission ─────────────────────────────────────────────

    def plot_segment(
        self, segment: ToolpathSegment, z: float, state: ToolheadState
    ) -> Tuple[List[str], ToolheadState]:
        """Pen cycle: travel lifted, lower, draw, lift."""
        p = self.printer
        z_lift = z + p.z_hop
        start = segment.get_start_point()
        lines: List[str] = []

        line, state = self.rapid_move(state, x=start.x, y=start.y, feed=p.travel_speed)
        lines.append(line)
        line, state = self.linear_move(state, z=z, feed=p.travel_speed)
        lines.append(line)
        for point in segment.points[1:]:
            line, state = self.linear_move(state, x=point.x, y=point.y, feed=p.print_speed)
            lines.append(line)
        line, state = self.rapid_move(state, z=z_lift, feed=p.travel_speed)
        lines.append(line)
        return lines, state

    def extrude_segment(
        self, segment: ToolpathSegment, state: ToolheadState
    ) -> Tuple[List[str], ToolheadState, int]:
        """
        Travel to the first point, then extrude through the rest.

        Returns:
            Lines, next state and the number of zero-length moves emitted
        """
        p = self.printer
        start = segment.get_start_point()
        lines: List[str] = []
        zero_length = 0

        line, state = self.rapid_move(state, x=start.x, y=start.y, feed=p.travel_speed)
        lines.append(line)
        prev = start
        for point in segment.points[1:]:
            length = prev.distance_to(point)
            if length == 0:
                zero_length += 1
            line, state = self.linear_move(
                state,
                x=point.x,
                y=point.y,
                extrusion=self.extrusion_for(length),
                feed=p.print_speed,
            )
            lines.append(line)
            prev = point
        return lines, state, zero_length

    # ── Main generation pipeline ─────────────────────────────────────

    def emit(self, toolpath: Toolpath) -> GCodeProgram:
        """Emit the complete program for ``toolpath``."""
        state = ToolheadState()
        lines, state = self.header(toolpath, state)
        moves = 0
        zero_length = 0

        for layer in toolpath.layers:
            layer_lines, state = self.layer_start(toolpath, layer, state)
            lines.extend(layer_lines)
            for segment in layer.segments:
                if not segment.points:
                    continue
                if segment.type is ToolpathType.PLOT:
                    seg_lines, state = self.plot_segment(segment, layer.z, state)
                else:
                    seg_lines, state, zeros = self.extrude_segment(segment, state)
                    zero_length += zeros
                lines.extend(seg_lines)
                moves += len(seg_lines)

        footer_lines, state = self.footer(toolpath, state)
        lines.extend(footer_lines)

        if zero_length:
            logger.info("zero_length_moves_emitted", count=zero_length)
        logger.info(
            "gcode_generated",
            kind=toolpath.kind.value,
            lines=len(lines),
            moves=moves,
            extrusion=round(state.extrusion, 5),
        )
        return GCodeProgram(
            text="\n".join(lines) + "\n",
            state=state,
            move_count=moves,
            zero_length_moves=zero_length,
        )

    def generate(self, toolpath: Toolpath) -> str:
        """Complete program as a string."""
        return self.emit(toolpath).text
