"""
Tests for recurring event expansion.
"""

from datetime import date

from calendar_engine.models.event import EventDefinition
from calendar_engine.services.recurrence_expander import (
    RecurrenceExpander,
    generated_instance_id,
    override_keys,
)


def _make_definition(**overrides) -> EventDefinition:
    data = {
        "id": "evt-1",
        "title": "Lecture",
        "date": date(2024, 1, 1),
        "start_time": "09:00",
        "end_time": "10:30",
        "recurring": True,
        "repeat_type": "weekly",
    }
    data.update(overrides)
    return EventDefinition(**data)


JAN_START = date(2024, 1, 1)
JAN_END = date(2024, 1, 31)


class TestExpandRules:
    """Tests for each repeat rule."""

    def test_weekly_until_bound(self):
        definition = _make_definition(repeat_until=date(2024, 1, 22))

        instances = RecurrenceExpander().expand(definition, JAN_START, JAN_END)

        assert [i.date for i in instances] == [
            date(2024, 1, 1),
            date(2024, 1, 8),
            date(2024, 1, 15),
            date(2024, 1, 22),
        ]
        assert instances[0].is_generated is False
        assert instances[0].id == "evt-1"
        assert all(i.is_generated for i in instances[1:])

    def test_daily(self):
        definition = _make_definition(repeat_type="daily", repeat_until=date(2024, 1, 5))
        instances = RecurrenceExpander().expand(definition, JAN_START, JAN_END)
        assert len(instances) == 5

    def test_biweekly_skips_alternate_weeks(self):
        definition = _make_definition(repeat_type="biweekly")
        dates = [i.date for i in RecurrenceExpander().expand(definition, JAN_START, JAN_END)]
        assert dates == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]

    def test_biweekly_parity_from_anchor_when_range_starts_later(self):
        definition = _make_definition(repeat_type="biweekly")
        dates = [
            i.date
            for i in RecurrenceExpander().expand(definition, date(2024, 1, 8), date(2024, 1, 21))
        ]
        assert dates == [date(2024, 1, 15)]

    def test_monthly_skips_short_months(self):
        definition = _make_definition(date=date(2024, 1, 31), repeat_type="monthly")
        dates = [
            i.date
            for i in RecurrenceExpander().expand(definition, date(2024, 1, 1), date(2024, 5, 31))
        ]
        assert dates == [date(2024, 1, 31), date(2024, 3, 31), date(2024, 5, 31)]


class TestExpandBoundaries:
    """Tests for range handling and unknown rules."""

    def test_anchor_outside_range_only_generates(self):
        definition = _make_definition()
        instances = RecurrenceExpander().expand(definition, date(2024, 1, 10), date(2024, 1, 20))
        assert [i.date for i in instances] == [date(2024, 1, 15)]
        assert instances[0].id == generated_instance_id("evt-1", date(2024, 1, 15))
        assert instances[0].id == "evt-1_2024-01-15_gen"
        assert instances[0].parent_event_id == "evt-1"
        assert instances[0].recurring is False

    def test_range_before_anchor_is_empty(self):
        definition = _make_definition(date=date(2024, 2, 1))
        assert RecurrenceExpander().expand(definition, JAN_START, JAN_END) == []

    def test_inverted_range_is_empty(self):
        assert RecurrenceExpander().expand(_make_definition(), JAN_END, JAN_START) == []

    def test_unknown_rule_yields_base_only(self):
        definition = _make_definition(repeat_type="fortnightly-ish")
        instances = RecurrenceExpander().expand(definition, JAN_START, JAN_END)
        assert [i.id for i in instances] == ["evt-1"]

    def test_missing_rule_yields_base_only(self):
        definition = _make_definition(repeat_type=None)
        instances = RecurrenceExpander().expand(definition, JAN_START, JAN_END)
        assert [i.id for i in instances] == ["evt-1"]

    def test_definition_is_not_mutated(self):
        definition = _make_definition()
        before = definition.model_dump()
        RecurrenceExpander().expand(definition, JAN_START, JAN_END)
        assert definition.model_dump() == before

    def test_repeated_expansion_is_identical(self):
        expander = RecurrenceExpander()
        definition = _make_definition(repeat_type="daily", repeat_until=date(2024, 1, 20))

        first = expander.expand(definition, JAN_START, JAN_END)
        second = expander.expand(definition, JAN_START, JAN_END)

        assert [i.model_dump() for i in first] == [i.model_dump() for i in second]
        assert [i.date for i in first] == sorted(i.date for i in first)


class TestOverrides:
    """Tests for stored overrides of single occurrences."""

    def test_override_suppresses_generated_occurrence(self):
        definition = _make_definition()
        override = _make_definition(
            id="ovr-1",
            date=date(2024, 1, 8),
            recurring=False,
            repeat_type=None,
            parent_event_id="evt-1",
            start_time="13:00",
            end_time="14:00",
        )

        instances = RecurrenceExpander().expand(
            definition, JAN_START, JAN_END, override_keys([definition, override])
        )

        assert date(2024, 1, 8) not in [i.date for i in instances]
        assert len(instances) == 4

    def test_materialize_override(self):
        expander = RecurrenceExpander()
        definition = _make_definition()

        override = expander.materialize_override(
            definition, date(2024, 1, 15), start_time="11:00", end_time="12:00"
        )

        assert override.id != definition.id
        assert override.parent_event_id == "evt-1"
        assert override.recurring is False
        assert override.repeat_type is None
        assert override.date == date(2024, 1, 15)
        assert override.original_date == date(2024, 1, 15)
        assert (override.start_time, override.end_time) == ("11:00", "12:00")
        assert override.title == "Lecture"

        # Round trip: the materialized date is no longer generated
        dates = [
            i.date for i in expander.expand(definition, JAN_START, JAN_END, override_keys([override]))
        ]
        assert date(2024, 1, 15) not in dates

    def test_override_moved_to_another_day_still_suppresses_original(self):
        expander = RecurrenceExpander()
        definition = _make_definition()
        moved = expander.materialize_override(definition, date(2024, 1, 15), date=date(2024, 1, 17))

        assert override_keys([moved]) == {("evt-1", date(2024, 1, 15))}

    def test_materialize_series(self):
        definition = _make_definition(repeat_until=date(2024, 1, 22))
        overrides = RecurrenceExpander().materialize_series(definition)
        assert [o.date for o in overrides] == [
            date(2024, 1, 8),
            date(2024, 1, 15),
            date(2024, 1, 22),
        ]
        assert all(o.parent_event_id == "evt-1" for o in overrides)

    def test_materialize_unbounded_series_is_empty(self):
        assert RecurrenceExpander().materialize_series(_make_definition()) == []
