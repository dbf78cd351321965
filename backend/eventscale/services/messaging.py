"""Prefilled chat messages and deep links for scale invitations.

Nothing here sends anything: callers get the text and a link to open.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote

from eventscale.core.config import CHAT_BASE_URL, DEFAULT_COUNTRY_CODE, GUEST_ROLE, PUBLIC_BASE_URL
from eventscale.models import Event

_NON_DIGITS = re.compile(r"\D")


def first_name(full_name: Optional[str]) -> str:
    parts = (full_name or "").split()
    return parts[0] if parts else ""


def format_event_date(event: Event) -> str:
    return event.date.strftime("%d/%m/%Y") if event.date else ""


def format_event_time(event: Event) -> str:
    return event.time.strftime("%H:%M") if event.time else ""


def normalize_phone(raw: Optional[str], country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Strip everything but digits and make sure the country code leads."""
    digits = _NON_DIGITS.sub("", raw or "")
    if not digits:
        return ""
    if digits.startswith(country_code):
        return digits
    return f"{country_code}{digits}"


def build_chat_deep_link(phone: str, text: str, base_url: str = CHAT_BASE_URL) -> str:
    return f"{base_url}/{normalize_phone(phone)}?text={quote(text, safe='')}"


def build_confirmation_url(token: str, base_url: str = PUBLIC_BASE_URL) -> str:
    return f"{base_url}/confirmar/{token}"


def is_guest_role(role: Optional[str]) -> bool:
    return (role or "").strip().lower() == GUEST_ROLE.lower()


def compose_invite_text(event: Event, assignee_first_name: str, confirmation_url: str) -> str:
    lines = [
        f"Hi {assignee_first_name}, grace and peace!",
        f"You are invited to *{event.title}* on {format_event_date(event)} at {format_event_time(event)}.",
    ]
    if event.location:
        lines.append(f"Location: {event.location}")
    lines.append(f"Please let us know if you can come: {confirmation_url}")
    return "\n".join(lines)


def compose_assignment_text(event: Event, role: str, assignee_first_name: str, confirmation_url: str) -> str:
    lines = [
        f"Hi {assignee_first_name}, grace and peace!",
        f"You are on the scale for *{event.title}* on {format_event_date(event)} at {format_event_time(event)}.",
        f"Your role: *{role}*",
    ]
    if event.location:
        lines.append(f"Location: {event.location}")
    lines.append(f"Please confirm your participation here: {confirmation_url}")
    return "\n".join(lines)


def compose_scale_message(event: Event, role: str, assignee_name: Optional[str], confirmation_url: str) -> str:
    name = first_name(assignee_name)
    if is_guest_role(role):
        return compose_invite_text(event, name, confirmation_url)
    return compose_assignment_text(event, role, name, confirmation_url)


def compose_share_text(event: Event) -> str:
    """One-line summary used when sharing an event on social channels."""
    text = f"{event.title} — {format_event_date(event)} at {format_event_time(event)}"
    if event.location:
        text += f" | {event.location}"
    return text
