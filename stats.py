from typing import Any, Iterable, Mapping

from models import DEFAULT_COLOR, ColorTotal, ScheduleSummary
from timeutils import format_duration


def _field(slot: Any, name: str):
    if isinstance(slot, Mapping):
        return slot.get(name)
    return getattr(slot, name, None)


def summarize(slots: Iterable[Any]) -> ScheduleSummary:
    """
    Total scheduled hours per color plus the grand total.

    Works on Slot objects and on loose records. A missing color counts
    towards the default color and a missing duration counts as zero.
    Colors are ordered by descending hours; ties keep discovery order.
    """
    totals: dict[str, float] = {}
    for slot in slots:
        color = _field(slot, "color") or DEFAULT_COLOR
        totals[color] = totals.get(color, 0) + (_field(slot, "duration") or 0)

    # sorted() is stable, so equal totals stay in discovery order
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    grand_total = sum(hours for _, hours in ordered)

    return ScheduleSummary(
        by_color=dict(ordered),
        total=grand_total,
        total_label=format_duration(grand_total),
        entries=[ColorTotal(color=c, hours=h, label=format_duration(h)) for c, h in ordered],
    )
