"""
Unit Tests for the Note List View-Model.

Uses FakeNoteService (see unit conftest) so source switching, supersede
semantics and the stop grace period can be observed without a database.
"""

import asyncio

import pytest

from noteapp.backend.viewmodels.notes import NoteViewModel


@pytest.fixture
def notes(note_factory):
    return [
        note_factory(2, "Trip plan", "Pack bags", timestamp=2000),
        note_factory(1, "Groceries", "Milk and eggs", is_favorite=True, timestamp=1000),
    ]


@pytest.fixture
def view_model(fake_note_service, notes):
    fake_note_service.notes = notes
    return NoteViewModel(fake_note_service, stop_timeout=0)


class TestDerivation:
    """Tests for choosing the upstream source from the inputs."""

    @pytest.mark.asyncio
    async def test_observer_gets_current_list_immediately(self, view_model):
        received = []
        view_model.observe_notes(received.append)
        assert received == [[]]

    @pytest.mark.asyncio
    async def test_no_inputs_shows_all_notes(self, view_model, fake_note_service, wait_until):
        received = []
        view_model.observe_notes(received.append)

        await wait_until(lambda: len(received) == 2)
        assert [n.title for n in received[-1]] == ["Trip plan", "Groceries"]
        assert fake_note_service.requested == ["all"]

    @pytest.mark.asyncio
    async def test_query_uses_search_source(self, view_model, fake_note_service, wait_until):
        view_model.observe_notes(lambda notes: None)
        view_model.on_search_query_change("trip")

        await wait_until(lambda: [n.title for n in view_model.notes] == ["Trip plan"])
        assert fake_note_service.requested == ["all", "search:trip"]

    @pytest.mark.asyncio
    async def test_blank_query_counts_as_no_query(self, view_model, fake_note_service):
        view_model.observe_notes(lambda notes: None)
        view_model.on_search_query_change("   ")
        assert fake_note_service.requested == ["all", "all"]

    @pytest.mark.asyncio
    async def test_favorites_only(self, view_model, fake_note_service, wait_until):
        view_model.observe_notes(lambda notes: None)
        view_model.toggle_favorite_filter()

        await wait_until(lambda: [n.title for n in view_model.notes] == ["Groceries"])
        assert view_model.favorites_only is True
        assert fake_note_service.requested[-1] == "favorites"

    @pytest.mark.asyncio
    async def test_favorites_and_query_filters_favorites(self, view_model, fake_note_service, wait_until):
        view_model.observe_notes(lambda notes: None)
        view_model.set_favorites_only(True)
        view_model.on_search_query_change("MILK")
        await wait_until(lambda: [n.title for n in view_model.notes] == ["Groceries"])

        view_model.on_search_query_change("trip")
        await wait_until(lambda: view_model.notes == [])
        assert fake_note_service.requested[-1] == "favorites"

    @pytest.mark.asyncio
    async def test_list_follows_store_changes(self, view_model, fake_note_service, note_factory, wait_until):
        view_model.observe_notes(lambda notes: None)
        await wait_until(lambda: len(view_model.notes) == 2)

        fake_note_service.change([note_factory(3, "Only one")])

        await wait_until(lambda: [n.title for n in view_model.notes] == ["Only one"])

    @pytest.mark.asyncio
    async def test_inputs_without_observers_do_not_subscribe(self, view_model, fake_note_service):
        view_model.on_search_query_change("trip")
        view_model.toggle_favorite_filter()
        assert fake_note_service.requested == []
        assert not view_model.is_observing


class TestSupersede:
    """Only the latest input's source may deliver."""

    @pytest.mark.asyncio
    async def test_previous_upstream_is_disposed(self, view_model, broker):
        view_model.observe_notes(lambda notes: None)
        for query in ("t", "tr", "tri", "trip"):
            view_model.on_search_query_change(query)

        assert broker.subscriber_count("notes") == 1

    @pytest.mark.asyncio
    async def test_stale_result_never_arrives(self, view_model, fake_note_service, wait_until):
        gate = asyncio.Event()
        original_search = fake_note_service.search_notes

        def slow_search(query):
            query_obj = original_search(query)
            fetch = query_obj._fetch

            async def gated():
                if query == "slow":
                    await gate.wait()
                return await fetch()

            query_obj._fetch = gated
            return query_obj

        fake_note_service.search_notes = slow_search
        received = []
        view_model.observe_notes(received.append)
        view_model.on_search_query_change("slow")
        view_model.on_search_query_change("trip")
        await wait_until(lambda: [n.title for n in view_model.notes] == ["Trip plan"])

        gate.set()
        await asyncio.sleep(0.05)

        assert [n.title for n in view_model.notes] == ["Trip plan"]

    @pytest.mark.asyncio
    async def test_reobserving_after_input_change_skips_old_list(self, view_model, wait_until):
        first = view_model.observe_notes(lambda notes: None)
        await wait_until(lambda: len(view_model.notes) == 2)
        first.dispose()

        view_model.on_search_query_change("gro")
        received = []
        view_model.observe_notes(received.append)

        assert received[0] == []
        await wait_until(lambda: [n.title for n in received[-1]] == ["Groceries"])
        assert all(len(notes) < 2 for notes in received)

    @pytest.mark.asyncio
    async def test_new_observer_during_refetch_skips_old_list(self, view_model, wait_until):
        view_model.observe_notes(lambda notes: None)
        await wait_until(lambda: len(view_model.notes) == 2)

        view_model.toggle_favorite_filter()
        received = []
        view_model.observe_notes(received.append)

        assert received[0] == []
        await wait_until(lambda: [n.title for n in received[-1]] == ["Groceries"])


class TestStopTimeout:
    """Upstream lifetime after the last observer leaves."""

    @pytest.mark.asyncio
    async def test_zero_timeout_stops_immediately(self, view_model):
        subscription = view_model.observe_notes(lambda notes: None)
        assert view_model.is_observing

        subscription.dispose()

        assert not view_model.is_observing

    @pytest.mark.asyncio
    async def test_grace_period_keeps_upstream(self, fake_note_service, wait_until):
        view_model = NoteViewModel(fake_note_service, stop_timeout=0.1)
        subscription = view_model.observe_notes(lambda notes: None)

        subscription.dispose()
        assert view_model.is_observing

        await wait_until(lambda: not view_model.is_observing, timeout=1.0)

    @pytest.mark.asyncio
    async def test_reobserving_within_grace_reuses_upstream(self, fake_note_service):
        view_model = NoteViewModel(fake_note_service, stop_timeout=0.1)
        view_model.observe_notes(lambda notes: None).dispose()
        view_model.observe_notes(lambda notes: None)
        await asyncio.sleep(0.2)

        assert view_model.is_observing
        assert fake_note_service.requested == ["all"]


class TestCommands:
    """Fire-and-forget writes."""

    @pytest.mark.asyncio
    async def test_blank_insert_never_writes(self, view_model, fake_note_service):
        assert view_model.insert_note("   ", "body") is None
        await asyncio.sleep(0)
        fake_note_service.insert_note.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_trims_fields(self, view_model, fake_note_service):
        await view_model.insert_note("  Groceries ", " Milk  ")

        data = fake_note_service.insert_note.await_args.args[0]
        assert data.title == "Groceries"
        assert data.description == "Milk"
        assert data.id is None

    @pytest.mark.asyncio
    async def test_toggle_update_delete_delegate(self, view_model, fake_note_service, notes):
        await view_model.toggle_favorite(1)
        await view_model.update_note(notes[0])
        await view_model.delete_note(notes[1])

        fake_note_service.toggle_favorite.assert_awaited_once_with(1)
        fake_note_service.update_note.assert_awaited_once_with(notes[0])
        fake_note_service.delete_note.assert_awaited_once_with(notes[1])

    @pytest.mark.asyncio
    async def test_write_failure_reaches_error_handler(self, view_model, fake_note_service, wait_until):
        errors = []
        view_model.set_error_handler(errors.append)
        fake_note_service.delete_note.side_effect = RuntimeError("locked")

        view_model.delete_note(fake_note_service.notes[0])

        await wait_until(lambda: len(errors) == 1)
        assert str(errors[0]) == "locked"

    @pytest.mark.asyncio
    async def test_aclose_waits_for_pending_writes(self, view_model, fake_note_service):
        gate = asyncio.Event()

        async def slow_toggle(note_id):
            await gate.wait()

        fake_note_service.toggle_favorite.side_effect = slow_toggle
        view_model.observe_notes(lambda notes: None)
        task = view_model.toggle_favorite(1)

        closing = asyncio.create_task(view_model.aclose())
        await asyncio.sleep(0.01)
        assert not closing.done()

        gate.set()
        await closing
        assert task.done()
        assert not view_model.is_observing
