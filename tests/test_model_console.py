import logging

import pytest

from services import model_console as mc
from tests.console_fakes import DeferredWorker, ImmediateWorker, make_users
from utils.exceptions import RequestFailed


class _Events:
    def __init__(self, console):
        self.seen = []
        console.add_listener(self)

    def __call__(self, event, payload):
        self.seen.append((event, payload))

    def names(self):
        return [event for event, _ in self.seen]


def test_signed_out_console_makes_no_calls(make_console, fake_api):
    console = make_console()

    assert console.load_models() is None
    assert console.load_page() is None
    assert console.save() is None
    assert console.delete_record({"id": 1}, confirm=lambda _prompt: True) is None
    assert fake_api.calls == []


def test_sign_in_loads_models_and_first_page(make_console, fake_api, session):
    fake_api.records["User"] = make_users(3)
    console = make_console()
    events = _Events(console)

    console.sign_in("  tok  ")

    assert session.get() == "tok"
    assert console.connected
    assert console.model_names == ["User", "Post"]
    assert console.selected_model == "User"
    assert [row["id"] for row in console.page.items] == [1, 2, 3]
    assert console.page.columns == ["id", "email", "active", "createdAt"]
    assert events.names()[:3] == [mc.EVENT_SESSION, mc.EVENT_CONNECTION, mc.EVENT_MODELS]
    assert fake_api.calls_to("list_records") == [("list_records", "User", 0, 50)]


def test_blank_sign_in_stays_signed_out(make_console, fake_api):
    console = make_console()
    assert console.sign_in("   ") is None
    assert not console.is_authenticated
    assert fake_api.calls == []


def test_connection_failure_is_reported(make_console, fake_api):
    fake_api.fail_next("introspect", RequestFailed("Request failed (401)", status=401))
    console = make_console()
    events = _Events(console)

    console.sign_in("bad")

    assert not console.connected
    assert console.is_authenticated
    assert console.last_error == "Request failed (401)"
    assert (mc.EVENT_CONNECTION, False) in events.seen
    assert fake_api.calls_to("list_records") == []


def test_reconnect_keeps_selected_model(make_console, fake_api):
    console = make_console()
    console.sign_in("tok")
    console.select_model("Post")
    fake_api.calls.clear()

    console.load_models()

    assert console.selected_model == "Post"
    assert fake_api.calls_to("list_records") == []


def test_select_unknown_model_raises(make_console):
    console = make_console()
    console.sign_in("tok")
    with pytest.raises(ValueError):
        console.select_model("Nope")


def test_load_page_is_idempotent(make_console, fake_api):
    fake_api.records["User"] = make_users(5)
    console = make_console()
    console.sign_in("tok")

    console.load_page(skip=0, take=2)
    first = (console.page.items, console.page.total, console.skip, console.take)
    console.load_page(skip=0, take=2)
    second = (console.page.items, console.page.total, console.skip, console.take)

    assert first == second


def test_load_page_rejects_invalid_window(make_console):
    console = make_console()
    console.sign_in("tok")
    with pytest.raises(ValueError):
        console.load_page(skip=-1)
    with pytest.raises(ValueError):
        console.load_page(take=0)


@pytest.mark.parametrize("order", [(0, 1), (1, 0)])
def test_late_response_for_previous_model_is_ignored(make_console, fake_api, order):
    fake_api.records["User"] = make_users(2)
    fake_api.records["Post"] = [{"id": 9, "title": "hello", "meta": None}]
    worker = DeferredWorker()
    console = make_console(worker)
    console.sign_in("tok")
    worker.run()  # introspect -> queues the User page

    console.select_model("Post")  # queues the Post page
    assert worker.pending == 2
    first, second = order
    queued = list(worker.jobs)
    worker.jobs = [queued[first], queued[second]]
    worker.run_all()

    assert console.selected_model == "Post"
    assert [row["id"] for row in console.page.items] == [9]
    assert console.page.columns == ["id", "title", "meta"]


def test_stale_page_error_is_dropped(make_console, fake_api):
    fake_api.records["User"] = make_users(1)
    worker = DeferredWorker()
    console = make_console(worker)
    console.sign_in("tok")
    worker.run()  # introspect
    worker.run()  # first page

    fake_api.fail_next("list_records", RequestFailed("boom"))
    console.refresh()
    console.refresh()
    worker.run_all()

    assert console.last_error == ""
    assert console.page.total == 1


def test_sign_out_discards_in_flight_responses(make_console, fake_api):
    worker = DeferredWorker()
    console = make_console(worker)
    console.sign_in("tok")

    console.sign_out()
    worker.run_all()

    assert console.models == []
    assert console.selected_model is None
    assert not console.connected
    assert not console.is_authenticated


def test_paging_forward_and_back(make_console, fake_api):
    fake_api.records["User"] = make_users(45)
    console = make_console(page_size=20)
    console.sign_in("tok")

    assert not console.can_previous and console.can_next
    console.next_page()
    console.next_page()
    assert console.skip == 40
    assert len(console.page.items) == 5
    assert not console.can_next
    assert console.next_page() is None

    console.previous_page()
    assert console.skip == 20
    assert console.window.label() == "Showing 21-40 of 45"


def test_set_page_size_resets_to_first_page(make_console, fake_api):
    fake_api.records["User"] = make_users(120)
    console = make_console()
    console.sign_in("tok")
    console.next_page()

    console.set_page_size(100)

    assert (console.skip, console.take) == (0, 100)
    assert len(console.page.items) == 100
    assert console.set_page_size(100) is None


def test_page_error_is_recorded_then_cleared(make_console, fake_api):
    fake_api.records["User"] = make_users(1)
    console = make_console()
    console.sign_in("tok")

    fake_api.fail_next("list_records", RequestFailed("Database offline"))
    console.refresh()
    assert console.last_error == "Database offline"

    console.refresh()
    assert console.last_error == ""


def test_start_edit_seeds_only_scalar_fields(make_console, fake_api):
    fake_api.records["User"] = make_users(1)
    console = make_console()
    console.sign_in("tok")
    record = dict(console.page.items[0], posts=[{"id": 1}])

    console.start_edit(record)

    assert console.edit_id == 1
    assert not console.is_creating
    assert set(console.draft) == {"email", "active", "createdAt"}


def test_form_fields_carry_declared_types(make_console):
    console = make_console()
    console.sign_in("tok")
    kinds = {name: descriptor.type for name, descriptor in console.form_fields()}
    assert kinds == {"email": "String", "active": "Boolean", "createdAt": "DateTime"}


def test_create_then_list_shows_new_record(make_console, fake_api):
    console = make_console()
    console.sign_in("tok")
    events = _Events(console)
    console.update_draft("email", "new@example.com")

    console.save()

    assert fake_api.calls_to("create_record") == [
        ("create_record", "User", {"email": "new@example.com"})
    ]
    assert [row["email"] for row in console.page.items] == ["new@example.com"]
    assert console.draft == {}
    assert console.is_creating
    assert not console.saving
    assert mc.EVENT_SAVED in events.names()


def test_update_sends_edit_id(make_console, fake_api):
    fake_api.records["User"] = make_users(2)
    console = make_console()
    console.sign_in("tok")
    console.start_edit(console.page.items[1])
    console.update_draft("email", "changed@example.com")

    console.save()

    call = fake_api.calls_to("update_record")[0]
    assert call[1:3] == ("User", 2)
    assert call[3]["email"] == "changed@example.com"
    assert console.page.items[1]["email"] == "changed@example.com"
    assert console.edit_id is None


def test_second_save_while_pending_is_ignored(make_console, fake_api, caplog):
    worker = DeferredWorker()
    console = make_console(worker)
    console.sign_in("tok")
    worker.run_all()
    console.update_draft("email", "x@example.com")

    assert console.save() is not None
    with caplog.at_level(logging.WARNING, logger="services.model_console"):
        assert console.save() is None
    assert "Save already in progress" in caplog.text
    assert console.saving

    worker.run_all()

    assert len(fake_api.calls_to("create_record")) == 1
    assert not console.saving


def test_failed_save_keeps_draft(make_console, fake_api):
    console = make_console()
    console.sign_in("tok")
    events = _Events(console)
    fake_api.fail_next("create_record", RequestFailed("Unique constraint failed"))
    console.update_draft("email", "dup@example.com")

    console.save()

    assert console.draft == {"email": "dup@example.com"}
    assert console.last_error == "Unique constraint failed"
    assert (mc.EVENT_SAVE_FAILED, "Unique constraint failed") in events.seen
    assert not console.saving


def test_delete_requires_confirmation(make_console, fake_api):
    fake_api.records["User"] = make_users(1)
    console = make_console()
    console.sign_in("tok")
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return False

    assert console.delete_record(console.page.items[0], confirm=decline) is None
    assert prompts == [mc.DELETE_PROMPT]
    assert fake_api.calls_to("delete_record") == []


def test_deleting_last_row_of_last_page_keeps_offset(make_console, fake_api):
    fake_api.records["User"] = make_users(51)
    console = make_console()
    console.sign_in("tok")
    console.next_page()
    assert console.skip == 50 and len(console.page.items) == 1

    console.delete_record(console.page.items[0], confirm=lambda _prompt: True)

    assert console.skip == 50
    assert console.page.items == []
    assert console.page.total == 50
    assert console.can_previous
    assert not console.can_next


def test_deleting_edited_record_cancels_edit(make_console, fake_api):
    fake_api.records["User"] = make_users(2)
    console = make_console()
    console.sign_in("tok")
    record = console.page.items[0]
    console.start_edit(record)

    console.delete_record(record, confirm=lambda _prompt: True)

    assert console.is_creating
    assert console.draft == {}


def test_failed_delete_reports_error(make_console, fake_api):
    fake_api.records["User"] = make_users(1)
    fake_api.fail_next("delete_record", RequestFailed("Foreign key constraint failed"))
    console = make_console()
    console.sign_in("tok")
    events = _Events(console)

    console.delete_record(console.page.items[0], confirm=lambda _prompt: True)

    assert console.last_error == "Foreign key constraint failed"
    assert mc.EVENT_DELETE_FAILED in events.names()
    assert len(console.page.items) == 1


def test_switching_model_clears_draft(make_console):
    console = make_console()
    console.sign_in("tok")
    console.update_draft("email", "half-typed")

    console.select_model("Post")

    assert console.draft == {}
    assert console.is_creating


def test_listener_errors_are_logged(make_console, caplog):
    console = make_console()

    def broken(event, payload):
        raise RuntimeError("listener blew up")

    console.add_listener(broken)
    with caplog.at_level(logging.ERROR, logger="services.model_console"):
        console.sign_in("tok")

    assert console.connected
    assert "Console listener failed" in caplog.text


def test_dispatch_receives_every_result(fake_api, session):
    dispatched = []

    def dispatch(callback):
        dispatched.append(callback)

    worker = DeferredWorker()
    console = mc.ModelConsole(fake_api, session, run_async=worker, dispatch=dispatch)
    console.sign_in("tok")
    worker.run()

    assert not console.connected
    assert len(dispatched) == 1
    dispatched.pop()()
    assert console.connected


def test_failures_reach_queued_dispatch(fake_api, session):
    fake_api.records["User"] = make_users(1)
    queued = []
    console = mc.ModelConsole(
        fake_api, session, run_async=ImmediateWorker(), dispatch=queued.append
    )

    def drain():
        while queued:
            queued.pop(0)()

    console.sign_in("tok")
    drain()
    record = console.page.items[0]

    fake_api.fail_next("introspect", RequestFailed("Unauthorized", status=401))
    console.load_models()
    drain()
    assert console.last_error == "Unauthorized"

    fake_api.fail_next("list_records", RequestFailed("Database offline"))
    console.refresh()
    drain()
    assert console.last_error == "Database offline"
    assert not console.loading

    fake_api.fail_next("create_record", RequestFailed("Unique constraint failed"))
    console.save()
    drain()
    assert console.last_error == "Unique constraint failed"
    assert not console.saving

    fake_api.fail_next("delete_record", RequestFailed("Foreign key constraint failed"))
    console.delete_record(record, confirm=lambda _prompt: True)
    drain()
    assert console.last_error == "Foreign key constraint failed"


def test_delete_without_approval_is_refused(make_console, fake_api):
    fake_api.records["User"] = make_users(1)
    console = make_console()
    console.sign_in("tok")

    with pytest.raises(TypeError):
        console.delete_record(console.page.items[0])

    assert fake_api.calls_to("delete_record") == []


def test_save_finishing_after_model_switch_keeps_new_draft(make_console, fake_api):
    worker = DeferredWorker()
    console = make_console(worker)
    console.sign_in("tok")
    worker.run_all()
    events = _Events(console)
    console.update_draft("email", "typed for User")
    console.save()

    console.select_model("Post")
    console.update_draft("title", "typed for Post")
    worker.run_all()

    assert fake_api.calls_to("create_record") == [
        ("create_record", "User", {"email": "typed for User"})
    ]
    assert console.draft == {"title": "typed for Post"}
    assert console.is_creating
    assert not console.saving
    assert mc.EVENT_SAVED not in events.names()
    assert console.selected_model == "Post"


def test_loading_flag_tracks_page_requests(make_console, fake_api):
    worker = DeferredWorker()
    console = make_console(worker)
    console.sign_in("tok")
    worker.run()  # introspect queues the first page
    events = _Events(console)

    assert console.loading
    worker.run_all()

    assert not console.loading
    assert (mc.EVENT_LOADING, False) in events.seen
