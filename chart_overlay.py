# file: chart_overlay.py
from typing import Callable, List, Protocol

from models import Direction, Marker, ParsedInstruction

ENTRY_COLORS = {
    Direction.BUY: "entry-buy",
    Direction.SELL: "entry-sell",
}
RISK_COLOR = "risk"
REWARD_COLOR = "reward"


class ChartSurface(Protocol):
    """
    Поверхность графика (внешний виджет).

    on_ready() owns readiness: it calls the callback once the surface can
    take markers, now or later. Retries and backoff live on that side.
    """

    def clear_markers(self) -> None: ...

    def add_marker(self, marker: Marker) -> None: ...

    def on_ready(self, callback: Callable[[], None]) -> None: ...


def project_markers(instruction: ParsedInstruction) -> List[Marker]:
    """Entry, then SL, then TP1..TPn in the order the targets were written."""
    markers = []
    if instruction.entry_min is not None:
        markers.append(Marker(
            price=instruction.entry_min,
            label="Entry",
            color_class=ENTRY_COLORS[instruction.direction],
        ))
    if instruction.stop_loss is not None:
        markers.append(Marker(price=instruction.stop_loss, label="SL", color_class=RISK_COLOR))
    for index, target in enumerate(instruction.targets, start=1):
        markers.append(Marker(price=target, label=f"TP{index}", color_class=REWARD_COLOR))
    return markers


def draw_markers(surface: ChartSurface, markers: List[Marker]):
    # Full replace, no diffing against what is on the chart
    surface.clear_markers()
    for marker in markers:
        surface.add_marker(marker)


def publish_overlay(surface: ChartSurface, instruction: ParsedInstruction) -> List[Marker]:
    markers = project_markers(instruction)
    surface.on_ready(lambda: draw_markers(surface, markers))
    return markers
