"""
Recurrence expander.

Turns a recurring event definition into the concrete occurrences that fall
inside a query range. Stored overrides (definitions with parent_event_id)
take precedence over the occurrence they replace.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional
from uuid import uuid4

from calendar_engine.core.exceptions import InvalidRecurrenceRule
from calendar_engine.core.logger import setup_logger
from calendar_engine.models.enums import RepeatType
from calendar_engine.models.event import EventDefinition
from calendar_engine.models.instance import EventInstance
from calendar_engine.utils.date_keys import iter_dates, to_date_key, utc_now

logger = setup_logger(__name__)

# (parent_event_id, occurrence date) of a stored override
OverrideKey = tuple[str, date]


def generated_instance_id(definition_id: str, occurrence_date: date) -> str:
    """Stable id of a generated occurrence."""
    return f"{definition_id}_{to_date_key(occurrence_date)}_gen"


def override_keys(definitions: Iterable[EventDefinition]) -> set[OverrideKey]:
    """Collect (parent id, date) pairs of every stored override."""
    return {
        (definition.parent_event_id, definition.original_date or definition.date)
        for definition in definitions
        if definition.parent_event_id
    }


def parse_repeat_type(definition: EventDefinition) -> RepeatType:
    """
    Read the repeat rule of a recurring definition.

    Raises:
        InvalidRecurrenceRule: If the stored rule is missing or unknown
    """
    try:
        return RepeatType(definition.repeat_type)
    except ValueError as exc:
        raise InvalidRecurrenceRule(definition.repeat_type, definition.id) from exc


def _instance_fields(definition: EventDefinition) -> dict:
    return definition.model_dump(
        exclude={"created_at", "updated_at", "original_date"},
    )


def base_instance(definition: EventDefinition) -> EventInstance:
    """The stored definition itself, resolved as an instance on its own date."""
    return EventInstance(**_instance_fields(definition), is_generated=False)


def build_occurrence(definition: EventDefinition, occurrence_date: date) -> EventInstance:
    """
    Build the generated occurrence of a definition on a given date.

    The definition is left untouched.
    """
    fields = _instance_fields(definition)
    fields.update(
        id=generated_instance_id(definition.id, occurrence_date),
        date=occurrence_date,
        recurring=False,
        parent_event_id=definition.id,
    )
    return EventInstance(**fields, is_generated=True)


class RecurrenceExpander:
    """Expands recurring event definitions into dated occurrences."""

    def occurrence_dates(
        self,
        definition: EventDefinition,
        range_start: date,
        range_end: date,
    ) -> list[date]:
        """
        Dates in [range_start, range_end] on which the rule matches.

        The anchor date is included when it is in range. Overrides are not
        considered here.

        Raises:
            InvalidRecurrenceRule: If the definition's rule is unknown
        """
        repeat_type = parse_repeat_type(definition)
        anchor = definition.date

        first = max(range_start, anchor)
        last = range_end
        if definition.repeat_until is not None:
            last = min(last, definition.repeat_until)

        return [
            current
            for current in iter_dates(first, last)
            if self._matches(repeat_type, anchor, current)
        ]

    @staticmethod
    def _matches(repeat_type: RepeatType, anchor: date, current: date) -> bool:
        if repeat_type == RepeatType.DAILY:
            return True

        if repeat_type == RepeatType.WEEKLY:
            return current.weekday() == anchor.weekday()

        if repeat_type == RepeatType.BIWEEKLY:
            if current.weekday() != anchor.weekday():
                return False
            weeks_diff = (current - anchor).days // 7
            return weeks_diff % 2 == 0

        if repeat_type == RepeatType.MONTHLY:
            # Months without the anchor's day are skipped, not rolled over
            return current.day == anchor.day

        return False

    def expand(
        self,
        definition: EventDefinition,
        range_start: date,
        range_end: date,
        overrides: Optional[set[OverrideKey]] = None,
    ) -> list[EventInstance]:
        """
        Resolve a recurring definition within an inclusive date range.

        Args:
            definition: A definition with recurring=True
            range_start: First date of the query range
            range_end: Last date of the query range
            overrides: (parent id, date) pairs already materialized in storage

        Returns:
            The base instance (if its date is in range) followed by the
            generated occurrences, in date order. Dates covered by an
            override are left out; the override is resolved separately.
        """
        if range_start > range_end:
            return []

        instances: list[EventInstance] = []
        if range_start <= definition.date <= range_end:
            instances.append(base_instance(definition))

        try:
            dates = self.occurrence_dates(definition, range_start, range_end)
        except InvalidRecurrenceRule as exc:
            logger.warning(f"{exc.message} on event {definition.id}; showing base occurrence only")
            return instances

        overrides = overrides or set()
        for occurrence_date in dates:
            if occurrence_date == definition.date:
                continue
            if (definition.id, occurrence_date) in overrides:
                continue
            instances.append(build_occurrence(definition, occurrence_date))

        return instances

    def materialize_override(
        self,
        definition: EventDefinition,
        occurrence_date: date,
        **changes,
    ) -> EventDefinition:
        """
        Convert one generated occurrence into a stored override record.

        Args:
            definition: The recurring definition the occurrence belongs to
            occurrence_date: Date of the occurrence being replaced
            **changes: Field values that differ from the definition
                (for example start_time/end_time after a drag)
        """
        now = utc_now()
        fields = definition.model_dump()
        fields.update(
            id=str(uuid4()),
            date=occurrence_date,
            recurring=False,
            repeat_type=None,
            repeat_until=None,
            parent_event_id=definition.id,
            original_date=occurrence_date,
            created_at=now,
            updated_at=now,
        )
        fields.update(changes)
        return EventDefinition(**fields)

    def materialize_series(self, definition: EventDefinition) -> list[EventDefinition]:
        """
        Materialize every generated occurrence of a bounded series.

        Only definitions with repeat_until can be materialized; an unbounded
        series returns an empty list.
        """
        if not definition.recurring or definition.repeat_until is None:
            return []
        try:
            dates = self.occurrence_dates(definition, definition.date, definition.repeat_until)
        except InvalidRecurrenceRule as exc:
            logger.warning(f"Cannot materialize series {definition.id}: {exc.message}")
            return []
        return [
            self.materialize_override(definition, occurrence_date)
            for occurrence_date in dates
            if occurrence_date != definition.date
        ]
