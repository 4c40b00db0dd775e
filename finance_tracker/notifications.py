"""Human-readable notifications from database change events.

The realtime transport is not handled here. Callers pass any iterable of
change events (a list, a generator reading from a socket, ...) and
:func:`notification_feed` lazily yields notifications for it. Passing a
fresh iterable restarts the feed.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence

from .errors import ValidationError
from .formatting import format_currency
from .logging_setup import get_logger
from .models import to_amount

logger = get_logger(__name__)

INSERT = 'insert'
UPDATE = 'update'
DELETE = 'delete'
EVENT_TYPES = (INSERT, UPDATE, DELETE)

TRANSACTION_ENTITY = 'transaction'
ACCOUNT_ENTITY = 'account'
ENTITIES = (TRANSACTION_ENTITY, ACCOUNT_ENTITY)

_TABLE_ENTITIES = {
    'transactions': TRANSACTION_ENTITY,
    'transaction': TRANSACTION_ENTITY,
    'users': ACCOUNT_ENTITY,
    'accounts': ACCOUNT_ENTITY,
    'account': ACCOUNT_ENTITY,
}

# Account fields worth telling the user about, with their display names.
ACCOUNT_FIELDS = (
    ('full_name', 'name'),
    ('email_notifications', 'email notification settings'),
    ('push_notifications', 'push notification settings'),
    ('theme', 'theme'),
    ('language', 'language'),
    ('timezone', 'timezone'),
)

_TITLES = {
    TRANSACTION_ENTITY: 'Transaction Update',
    ACCOUNT_ENTITY: 'Account Update',
}


@dataclass(frozen=True)
class ChangeEvent:
    """A typed row change: ``before`` and ``after`` are the row images."""

    event_type: str
    entity: str
    before: Mapping[str, Any] = field(default_factory=dict)
    after: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.event_type not in EVENT_TYPES:
            raise ValidationError(f"Unknown event type {self.event_type!r}")
        if self.entity not in ENTITIES:
            raise ValidationError(f"Unknown entity {self.entity!r}")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'ChangeEvent':
        """Parse a realtime payload (``eventType``, ``table``, ``old``, ``new``)."""
        event_type = str(payload.get('eventType') or payload.get('event_type') or '').lower()
        table = str(payload.get('table') or payload.get('entity') or '').lower()
        entity = _TABLE_ENTITIES.get(table, table)
        return cls(
            event_type=event_type,
            entity=entity,
            before=payload.get('old') or payload.get('before') or {},
            after=payload.get('new') or payload.get('after') or {},
        )


@dataclass(frozen=True)
class Notification:
    id: str
    title: str
    message: str
    time: datetime
    kind: str
    unread: bool = True


def _amount_text(row: Mapping[str, Any]) -> str:
    raw = row.get('amount')
    if raw is None or raw == '':
        amount = 0.0
    else:
        amount = to_amount(raw)
    return format_currency(abs(amount), currency=row.get('currency'))


def describe_transaction_event(event: ChangeEvent) -> str:
    if event.event_type == INSERT:
        row = event.after
        return f"New {row.get('type', 'transaction')} of {_amount_text(row)} added for {row.get('category', 'Uncategorized')}"
    if event.event_type == UPDATE:
        row = event.after
        return f"Transaction updated: {_amount_text(row)} for {row.get('category', 'Uncategorized')}"
    row = event.before or event.after
    return f"Transaction of {_amount_text(row)} has been deleted"


def changed_account_fields(before: Mapping[str, Any], after: Mapping[str, Any]) -> List[str]:
    """Display names of the tracked account fields that differ between images."""
    return [label for key, label in ACCOUNT_FIELDS if before.get(key) != after.get(key)]


def describe_account_event(event: ChangeEvent) -> Optional[str]:
    """Only updates are reported, and only when a tracked field changed."""
    if event.event_type != UPDATE:
        return None
    changes = changed_account_fields(event.before, event.after)
    if not changes:
        return None
    return f"Account settings updated: {', '.join(changes)}"


def describe_event(event: ChangeEvent) -> Optional[str]:
    """Message for ``event``, or ``None`` when there is nothing to report."""
    if event.entity == TRANSACTION_ENTITY:
        return describe_transaction_event(event)
    return describe_account_event(event)


def notification_feed(
    events: Iterable[Any], clock: Optional[Any] = None
) -> Iterator[Notification]:
    """Lazily turn change events (or raw payload dicts) into notifications.

    Events that produce no message are skipped, and so are malformed
    payloads, which are logged as warnings. ``clock`` is a zero-argument
    callable returning the timestamp to stamp on each notification.
    """
    now = clock or datetime.now
    for item in events:
        try:
            event = item if isinstance(item, ChangeEvent) else ChangeEvent.from_payload(item)
            message = describe_event(event)
        except ValidationError as exc:
            logger.warning("Dropping malformed change event: %s", exc)
            continue
        if message is None:
            logger.debug("Skipping %s %s event with nothing to report", event.entity, event.event_type)
            continue
        yield Notification(
            id=str(uuid.uuid4()),
            title=_TITLES[event.entity],
            message=message,
            time=now(),
            kind=event.entity,
        )


def unread_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if n.unread)


def mark_as_read(notifications: Sequence[Notification], notification_id: str) -> List[Notification]:
    """Return a new list with the matching notification marked read."""
    return [
        replace(n, unread=False) if n.id == notification_id else n
        for n in notifications
    ]


def newest_first(existing: Sequence[Notification], incoming: Iterable[Notification]) -> List[Notification]:
    """Prepend newly arrived notifications, most recent at the top."""
    fresh: List[Notification] = list(incoming)
    fresh.reverse()
    return fresh + list(existing)
