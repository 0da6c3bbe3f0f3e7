"""Mutation engine - applies create/move/resize/edit/delete to the store.

Every public operation is one synchronous read-modify-write per touched
collection, followed by a single notification once the writes are done.
"""

import logging
from dataclasses import replace
from datetime import date
from enum import Enum

from .core.events import (
    Event,
    EventDraft,
    MissingSeriesReference,
    RepeatOption,
    new_id,
)
from .core.gesture import DragGesture, GestureKind
from .core.timegrid import snap_move, snap_tile, snap_tile_top
from .notifications import NotificationBus
from .ports.event_store import EventStore

logger = logging.getLogger(__name__)


class SeriesScope(Enum):
    """Which part of a repeating series an edit or delete applies to."""

    THIS_OCCURRENCE = "this"
    ALL = "all"


def _index_of(events: list[Event], event_id: str) -> int | None:
    for i, e in enumerate(events):
        if e.id == event_id:
            return i
    return None


def _template_index(templates: list[Event], occurrence: Event) -> int:
    for i, t in enumerate(templates):
        if occurrence.series_id is not None and t.series_id == occurrence.series_id:
            return i
    raise MissingSeriesReference(occurrence.series_id)


class MutationEngine:
    """
    Turns user edits into persisted state.

    An event with a repeat rule handed to this engine is treated as an
    occurrence of its template on `target_date`; anything else is a
    standalone event stored under `target_date`.
    """

    def __init__(self, store: EventStore, bus: NotificationBus, snap_increment: float = 900):
        if snap_increment <= 0:
            raise ValueError(f"Snap increment must be positive, got {snap_increment}")
        self.store = store
        self.bus = bus
        self.snap_increment = snap_increment

    # ============== Create ==============

    def create_event(self, draft: EventDraft) -> Event:
        """Validate a draft and store it as a standalone event or a new series."""
        draft.validate()
        if draft.repeat_option.is_repeating:
            event = self._event_from_draft(draft, series_id=new_id())
            templates = self.store.load_master_templates()
            templates.append(event)
            self.store.save_master_templates(templates)
        else:
            event = self._event_from_draft(draft)
            self._append_to_day(draft.target_date, event)
        logger.debug(f"Created '{event.title}' ({event.repeat_option.describe()})")
        self.bus.post()
        return event

    # ============== Move / Resize ==============

    def commit_move(
        self,
        event: Event,
        target_date: date,
        new_start_time: float,
        increment: float | None = None,
    ) -> Event | None:
        """
        Commit a dragged tile's new start time.

        Returns the stored standalone event, or None when nothing changed.
        """
        start, duration = snap_move(new_start_time, event.duration, increment or self.snap_increment)
        return self._commit_times(event, target_date, start, duration)

    def commit_resize(
        self,
        event: Event,
        target_date: date,
        new_start_time: float,
        new_duration: float,
        increment: float | None = None,
        kind: GestureKind = GestureKind.RESIZE_BOTTOM,
    ) -> Event | None:
        """
        Commit a resized tile. Duration never drops below one snap increment.

        `kind` names the dragged edge. A top-edge resize keeps the end where
        `new_start_time + new_duration` puts it.
        """
        increment = increment or self.snap_increment
        if kind is GestureKind.RESIZE_TOP:
            start, duration = snap_tile_top(
                new_start_time, new_start_time + new_duration, increment, self.snap_increment
            )
        else:
            start, duration = snap_tile(new_start_time, new_duration, increment, self.snap_increment)
        return self._commit_times(event, target_date, start, duration)

    def commit_gesture(self, gesture: DragGesture, target_date: date) -> Event | None:
        """Finish a drag and commit it. Taps commit nothing."""
        proposal = gesture.finish()
        if proposal is None:
            return None
        if gesture.kind is GestureKind.MOVE:
            return self.commit_move(
                gesture.event, target_date, proposal.start_time, proposal.increment
            )
        return self.commit_resize(
            gesture.event,
            target_date,
            proposal.start_time,
            proposal.duration,
            proposal.increment,
            kind=gesture.kind,
        )

    def _commit_times(
        self, event: Event, target_date: date, start: float, duration: float
    ) -> Event | None:
        if start == event.start_time and duration == event.duration:
            logger.debug(f"'{event.title}' did not move, nothing to commit")
            return None

        if event.is_template:
            try:
                result = self._detach(
                    event,
                    target_date,
                    lambda t: Event(
                        id=new_id(),
                        title=t.title,
                        start_time=start,
                        duration=duration,
                        category=t.category,
                    ),
                )
            except MissingSeriesReference as e:
                logger.warning(f"Dropping commit for '{event.title}': {e}")
                return None
        else:
            singles = self.store.load_day(target_date)
            i = _index_of(singles, event.id)
            if i is None:
                logger.warning(f"'{event.title}' is no longer stored on {target_date}")
                return None
            result = replace(singles[i], start_time=start, duration=duration)
            singles[i] = result
            self.store.save_day(target_date, singles)

        self.bus.post()
        return result

    # ============== Edit ==============

    def edit_event(
        self,
        event: Event,
        target_date: date,
        draft: EventDraft,
        scope: SeriesScope = SeriesScope.THIS_OCCURRENCE,
    ) -> Event | None:
        """
        Apply form changes to an event rendered on `target_date`.

        For standalone events the scope is ignored. For occurrences,
        THIS_OCCURRENCE detaches the edited copy onto the draft's date and
        ALL rewrites the template for every future occurrence.
        """
        draft.validate()
        if event.is_template:
            try:
                if scope is SeriesScope.THIS_OCCURRENCE:
                    result = self._detach(
                        event,
                        target_date,
                        lambda t: self._event_from_draft(draft),
                        dest_date=draft.target_date,
                    )
                else:
                    result = self._edit_series(event, draft)
            except MissingSeriesReference as e:
                logger.warning(f"Dropping edit for '{event.title}': {e}")
                return None
        else:
            result = self._edit_single(event, target_date, draft)
            if result is None:
                return None

        self.bus.post()
        return result

    def _edit_single(self, event: Event, target_date: date, draft: EventDraft) -> Event | None:
        singles = self.store.load_day(target_date)
        i = _index_of(singles, event.id)
        if i is None:
            logger.warning(f"'{event.title}' is no longer stored on {target_date}")
            return None

        if draft.repeat_option.is_repeating:
            # A standalone event becomes the first template of a new series
            del singles[i]
            self.store.save_day(target_date, singles)
            template = self._event_from_draft(draft, series_id=new_id())
            templates = self.store.load_master_templates()
            templates.append(template)
            self.store.save_master_templates(templates)
            return template

        updated = draft.apply_to(singles[i])
        if draft.target_date == target_date:
            singles[i] = updated
            self.store.save_day(target_date, singles)
        else:
            del singles[i]
            self.store.save_day(target_date, singles)
            self._append_to_day(draft.target_date, updated)
        return updated

    def _edit_series(self, occurrence: Event, draft: EventDraft) -> Event:
        templates = self.store.load_master_templates()
        i = _template_index(templates, occurrence)

        if draft.repeat_option.is_repeating:
            templates[i] = draft.apply_to(templates[i])
            self.store.save_master_templates(templates)
            return templates[i]

        # Dropping the repeat rule ends the series; what remains is one standalone event
        del templates[i]
        self.store.save_master_templates(templates)
        standalone = self._event_from_draft(draft)
        self._append_to_day(draft.target_date, standalone)
        return standalone

    # ============== Delete ==============

    def delete_event(
        self,
        event: Event,
        target_date: date,
        scope: SeriesScope = SeriesScope.THIS_OCCURRENCE,
    ) -> bool:
        """
        Delete a standalone event, one occurrence, or a whole series.

        Standalone events detached from the series earlier are never
        touched. Returns True when something was removed.
        """
        if not event.is_template:
            singles = self.store.load_day(target_date)
            i = _index_of(singles, event.id)
            if i is None:
                logger.warning(f"'{event.title}' is no longer stored on {target_date}")
                return False
            del singles[i]
            self.store.save_day(target_date, singles)
        else:
            templates = self.store.load_master_templates()
            try:
                i = _template_index(templates, event)
            except MissingSeriesReference as e:
                logger.warning(f"Dropping delete for '{event.title}': {e}")
                return False
            if scope is SeriesScope.THIS_OCCURRENCE:
                templates[i] = templates[i].with_exception(target_date)
            else:
                del templates[i]
            self.store.save_master_templates(templates)

        self.bus.post()
        return True

    # ============== Helpers ==============

    def _detach(self, occurrence: Event, target_date: date, build, dest_date: date | None = None) -> Event:
        """
        Suppress a template on `target_date` and store a standalone copy.

        `build` receives the stored template and returns the new standalone
        event. The two writes are not atomic across keys.
        """
        templates = self.store.load_master_templates()
        i = _template_index(templates, occurrence)
        template = templates[i]
        templates[i] = template.with_exception(target_date)
        self.store.save_master_templates(templates)

        detached = build(template)
        self._append_to_day(dest_date or target_date, detached)
        logger.debug(f"Detached '{detached.title}' from series {template.series_id} on {target_date}")
        return detached

    def _append_to_day(self, target_date: date, event: Event) -> None:
        singles = self.store.load_day(target_date)
        singles.append(event)
        self.store.save_day(target_date, singles)

    @staticmethod
    def _event_from_draft(draft: EventDraft, series_id: str | None = None) -> Event:
        return Event(
            id=new_id(),
            title=draft.title.strip(),
            start_time=draft.start_time,
            duration=draft.duration,
            category=draft.category,
            repeat_option=draft.repeat_option if series_id else RepeatOption.none(),
            series_id=series_id,
        )
