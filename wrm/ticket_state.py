# wrm/ticket_state.py
"""Time-aware ticket classification.

  FUTURE     start is after now
  ACTIVE     now falls inside [start, end]
  UNTOUCHED  past, never edited after creation
  CONFIRMED  past, edited after creation

Only edits of title/description/custom properties count as interactions;
moving or resizing a ticket does not.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, Optional

from .model import Ticket
from .util.tz import now_ms as _now_ms

FUTURE = "FUTURE"
ACTIVE = "ACTIVE"
UNTOUCHED = "UNTOUCHED"
CONFIRMED = "CONFIRMED"

TICKET_STATES = (FUTURE, ACTIVE, UNTOUCHED, CONFIRMED)

TICKET_STATE_COLORS: Dict[str, Dict[str, str]] = {
    FUTURE: {"border": "#e5e5e5", "background": "transparent", "text": "#000000"},
    ACTIVE: {"border": "#22c55e", "background": "rgba(34, 197, 94, 0.1)", "text": "#000000"},
    UNTOUCHED: {"border": "#ef4444", "background": "rgba(239, 68, 68, 0.1)", "text": "#000000"},
    CONFIRMED: {"border": "#f59e0b", "background": "rgba(245, 158, 11, 0.1)", "text": "#000000"},
}


@dataclass(frozen=True)
class TicketStateInfo:
    state: str
    border_color: str
    background_color: str
    text_color: str

    @property
    def is_active(self) -> bool:
        return self.state == ACTIVE

    @property
    def is_past(self) -> bool:
        return self.state in (UNTOUCHED, CONFIRMED)

    @property
    def is_future(self) -> bool:
        return self.state == FUTURE


def calculate_ticket_state(ticket: Ticket, now_ms: Optional[int] = None) -> str:
    now = _now_ms() if now_ms is None else int(now_ms)

    if ticket.start_ms > now:
        return FUTURE
    if ticket.end_ms >= now:
        return ACTIVE

    last = ticket.last_interaction_ms
    if last is None or last == ticket.created_at_ms:
        return UNTOUCHED
    return CONFIRMED


def ticket_state_info(ticket: Ticket, now_ms: Optional[int] = None) -> TicketStateInfo:
    state = calculate_ticket_state(ticket, now_ms)
    colors = TICKET_STATE_COLORS[state]
    return TicketStateInfo(
        state=state,
        border_color=colors["border"],
        background_color=colors["background"],
        text_color=colors["text"],
    )


def is_valid_interaction(ticket: Ticket, interaction_ms: int) -> bool:
    if ticket.created_at_ms is None:
        return True
    return int(interaction_ms) > ticket.created_at_ms


def mark_interacted(ticket: Ticket, now_ms: Optional[int] = None) -> Ticket:
    """Record an edit; call for title/description/property changes only."""
    now = _now_ms() if now_ms is None else int(now_ms)
    return dataclasses.replace(ticket, last_interaction_ms=now)
