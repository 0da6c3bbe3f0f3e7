"""Tests for the event model and recurrence rules."""

from datetime import date, timedelta

import pytest

from become.core.events import (
    Category,
    DecodeError,
    Event,
    EventDraft,
    RepeatKind,
    RepeatOption,
    ValidationError,
    Weekday,
    occurs_on,
    weekday_of,
)


# Fixtures
@pytest.fixture
def wednesday():
    return date(2025, 1, 15)


@pytest.fixture
def make_template():
    """Factory for creating repeating templates."""
    def _make(repeat: RepeatOption, exceptions=()) -> Event:
        return Event(
            id="t1",
            series_id="s1",
            title="Standup",
            start_time=32400,
            duration=1800,
            category=Category.MEETING,
            repeat_option=repeat,
            exception_dates=frozenset(exceptions),
        )
    return _make


def two_weeks(start: date) -> list[date]:
    return [start + timedelta(days=i) for i in range(14)]


class TestWeekday:
    def test_weekday_of(self, wednesday):
        assert weekday_of(wednesday) == Weekday.WEDNESDAY
        assert weekday_of(date(2025, 1, 12)) == Weekday.SUNDAY
        assert weekday_of(date(2025, 1, 18)) == Weekday.SATURDAY

    def test_sunday_is_one(self):
        assert int(Weekday.SUNDAY) == 1
        assert int(Weekday.SATURDAY) == 7

    @pytest.mark.parametrize("text, expected", [
        ("mon", Weekday.MONDAY),
        ("Wednesday", Weekday.WEDNESDAY),
        ("th", Weekday.THURSDAY),
        ("1", Weekday.SUNDAY),
    ])
    def test_parse(self, text, expected):
        assert Weekday.parse(text) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            Weekday.parse("funday")


class TestRepeatOption:
    def test_equality_on_tag_and_payload(self):
        assert RepeatOption.weekly([2, 4]) == RepeatOption.weekly([Weekday.WEDNESDAY, Weekday.MONDAY])
        assert RepeatOption.weekly([2]) != RepeatOption.weekly([3])
        assert RepeatOption.weekly([]) != RepeatOption.none()
        assert RepeatOption.daily() == RepeatOption(RepeatKind.DAILY)

    def test_only_weekly_carries_days(self):
        with pytest.raises(ValueError):
            RepeatOption(RepeatKind.DAILY, frozenset({Weekday.MONDAY}))

    def test_json(self):
        assert RepeatOption.none().to_json() == "none"
        assert RepeatOption.daily().to_json() == "daily"
        assert RepeatOption.weekly([4, 2]).to_json() == {"weekly": [2, 4]}

    def test_from_json(self):
        assert RepeatOption.from_json("daily") == RepeatOption.daily()
        assert RepeatOption.from_json({"weekly": [2, 4]}) == RepeatOption.weekly([2, 4])

    @pytest.mark.parametrize("bad", ["hourly", {"weekly": [9]}, {"weekly": 3}, {"weekly": [True]}, {"monthly": []}, None])
    def test_from_json_rejects(self, bad):
        with pytest.raises(DecodeError):
            RepeatOption.from_json(bad)

    def test_describe(self):
        assert RepeatOption.none().describe() == "Never"
        assert RepeatOption.weekly([4, 2]).describe() == "Weekly on Mon, Wed"


class TestOccursOn:
    def test_daily_every_day(self, make_template, wednesday):
        template = make_template(RepeatOption.daily())
        assert all(occurs_on(template, d) for d in two_weeks(wednesday))

    def test_weekly_matches_weekdays(self, make_template, wednesday):
        days = {Weekday.MONDAY, Weekday.WEDNESDAY}
        template = make_template(RepeatOption.weekly(days))
        for d in two_weeks(wednesday):
            assert occurs_on(template, d) == (weekday_of(d) in days)

    def test_weekly_without_days_never_occurs(self, make_template, wednesday):
        template = make_template(RepeatOption.weekly([]))
        assert not any(occurs_on(template, d) for d in two_weeks(wednesday))

    def test_single_event_never_resolves(self, make_template, wednesday):
        single = make_template(RepeatOption.none())
        assert occurs_on(single, wednesday) is False

    @pytest.mark.parametrize("repeat", [RepeatOption.daily(), RepeatOption.weekly([4])])
    def test_exception_suppresses_only_that_date(self, make_template, wednesday, repeat):
        template = make_template(repeat, exceptions=[wednesday])
        assert occurs_on(template, wednesday) is False
        assert occurs_on(template, wednesday + timedelta(days=7)) is True

    def test_scenario_mon_wed(self, make_template):
        template = make_template(RepeatOption.weekly([Weekday.MONDAY, Weekday.WEDNESDAY]))
        assert occurs_on(template, date(2025, 1, 14)) is False  # Tuesday
        assert occurs_on(template, date(2025, 1, 15)) is True

    def test_does_not_mutate(self, make_template, wednesday):
        template = make_template(RepeatOption.daily())
        occurs_on(template, wednesday)
        assert template.exception_dates == frozenset()


class TestEvent:
    def test_end_time(self, make_template):
        assert make_template(RepeatOption.daily()).end_time == 34200

    def test_with_exception_returns_copy(self, make_template, wednesday):
        template = make_template(RepeatOption.daily())
        suppressed = template.with_exception(wednesday)
        assert suppressed.exception_dates == {wednesday}
        assert template.exception_dates == frozenset()

    def test_to_dict(self, make_template, wednesday):
        template = make_template(RepeatOption.weekly([2, 4]), exceptions=[wednesday])
        assert template.to_dict() == {
            "id": "t1",
            "seriesId": "s1",
            "title": "Standup",
            "startTime": 32400,
            "duration": 1800,
            "category": "meeting",
            "repeatOption": {"weekly": [2, 4]},
            "exceptionDates": ["2025-01-15"],
        }

    def test_single_omits_series_id(self):
        event = Event(id="e1", title="Lunch", start_time=45000, duration=3600)
        data = event.to_dict()
        assert "seriesId" not in data
        assert data["repeatOption"] == "none"
        assert data["exceptionDates"] == []

    def test_from_dict(self, make_template, wednesday):
        template = make_template(RepeatOption.weekly([2, 4]), exceptions=[wednesday])
        assert Event.from_dict(template.to_dict()) == template

    def test_from_dict_defaults(self):
        event = Event.from_dict({"id": "e1", "title": "Nap", "startTime": 0, "duration": 60})
        assert event.category == Category.OTHER
        assert event.repeat_option == RepeatOption.none()
        assert event.series_id is None

    @pytest.mark.parametrize("record", [
        {"title": "No id", "startTime": 0, "duration": 60},
        {"id": "e1", "title": "Bad", "startTime": "9am", "duration": 60},
        {"id": "e1", "title": "Bad", "startTime": 0, "duration": 0},
        {"id": "e1", "title": "Bad", "startTime": -60, "duration": 60},
        {"id": "e1", "title": "Bad", "startTime": 0, "duration": float("nan")},
        {"id": "e1", "title": "Bad", "startTime": float("inf"), "duration": 60},
        {"id": "e1", "title": "Bad", "startTime": 0, "duration": 60, "category": "party"},
        {"id": "e1", "title": "Bad", "startTime": 0, "duration": 60, "exceptionDates": ["soon"]},
        "not a record",
    ])
    def test_from_dict_rejects(self, record):
        with pytest.raises(DecodeError):
            Event.from_dict(record)


class TestEventDraft:
    def test_duration(self, wednesday):
        draft = EventDraft(title="Gym", start_time=25200, end_time=28800, target_date=wednesday)
        assert draft.duration == 3600
        draft.validate()

    @pytest.mark.parametrize("start, end", [(3600, 3600), (3600, 1800)])
    def test_end_must_follow_start(self, wednesday, start, end):
        draft = EventDraft(title="Gym", start_time=start, end_time=end, target_date=wednesday)
        with pytest.raises(ValidationError):
            draft.validate()

    def test_blank_title(self, wednesday):
        draft = EventDraft(title="   ", start_time=0, end_time=60, target_date=wednesday)
        with pytest.raises(ValidationError):
            draft.validate()

    def test_negative_start(self, wednesday):
        draft = EventDraft(title="Early", start_time=-60, end_time=60, target_date=wednesday)
        with pytest.raises(ValidationError):
            draft.validate()

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)

    def test_from_event_round_trip(self, make_template, wednesday):
        template = make_template(RepeatOption.daily())
        draft = EventDraft.from_event(template, wednesday)
        assert draft.end_time == template.end_time
        assert draft.apply_to(template) == template

    def test_apply_to_strips_title(self, make_template, wednesday):
        template = make_template(RepeatOption.daily())
        draft = EventDraft.from_event(template, wednesday)
        draft.title = "  Retro  "
        assert draft.apply_to(template).title == "Retro"
