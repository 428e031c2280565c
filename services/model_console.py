"""View-model behind the dynamic model console.

:class:`ModelConsole` owns everything the records page shows: the models
returned by introspection, the selected model, the current page of records,
the create/edit draft and the single "last error" slot. It knows nothing
about Qt. Network calls go through ``run_async`` and their results come back
through ``dispatch``, which the window points at the GUI thread.

Responses are matched against the request that produced them. A page
response is applied only if no newer page request was issued since and its
model is still the selected one, so a slow reply for a model the user has
already left never overwrites the current view.
"""
from __future__ import annotations

import functools
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from logic.pagination import DEFAULT_PAGE_SIZE, PageWindow, validate_window
from models.schema import FieldDescriptor, ModelDescriptor, Record, RecordPage
from services.admin_api import AdminApiClient
from utils.session_store import SessionStore

log = logging.getLogger(__name__)

Worker = Callable[[Callable[[], Any]], Any]
Dispatch = Callable[[Callable[[], None]], None]
Listener = Callable[[str, Any], None]
ConfirmFn = Callable[[str], bool]

# Events passed to listeners as ``listener(event, payload)``.
EVENT_SESSION = "session"
EVENT_MODELS = "models"
EVENT_CONNECTION = "connection"
EVENT_MODEL_SELECTED = "model_selected"
EVENT_PAGE = "page"
EVENT_DRAFT = "draft"
EVENT_SAVING = "saving"
EVENT_SAVED = "saved"
EVENT_SAVE_FAILED = "save_failed"
EVENT_DELETED = "deleted"
EVENT_DELETE_FAILED = "delete_failed"
EVENT_ERROR = "error"
EVENT_LOADING = "loading"

DELETE_PROMPT = "Delete this record?"


@dataclass(frozen=True)
class PageRequest:
    """Identity of one page request."""

    generation: int
    model: str
    skip: int
    take: int


def _call_now(callback: Callable[[], None]) -> None:
    callback()


class ModelConsole:
    def __init__(
        self,
        api: AdminApiClient,
        session: SessionStore,
        *,
        run_async: Optional[Worker] = None,
        dispatch: Optional[Dispatch] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.api = api
        self.session = session
        self._executor: Optional[ThreadPoolExecutor] = None
        if run_async is None:
            self._executor = ThreadPoolExecutor(max_workers=2)
            run_async = self._executor.submit
        self._run_async = run_async
        self._dispatch = dispatch or _call_now
        self._listeners: List[Listener] = []

        self.models: List[ModelDescriptor] = []
        self.selected_model: Optional[str] = None
        self.connected = False
        self.page = RecordPage(take=page_size)
        self.skip = 0
        self.take = page_size
        self.draft: Dict[str, Any] = {}
        self.edit_id: Any = None
        self.last_error = ""
        self.saving = False
        self.loading = False

        self._models_generation = 0
        self._page_generation = 0
        self._pending_page: Optional[PageRequest] = None

    # -- Listeners ----------------------------------------------------------

    def add_listener(self, callback: Listener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, event: str, payload: Any = None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception:
                log.exception("Console listener failed for %s", event)

    # -- Derived state ------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    @property
    def is_creating(self) -> bool:
        return self.edit_id is None

    @property
    def window(self) -> PageWindow:
        return PageWindow(skip=self.skip, take=self.take, total=self.page.total)

    @property
    def can_previous(self) -> bool:
        return self.window.has_previous

    @property
    def can_next(self) -> bool:
        return self.window.has_next

    @property
    def model_names(self) -> List[str]:
        return [model.name for model in self.models]

    @property
    def current_descriptor(self) -> Optional[ModelDescriptor]:
        for model in self.models:
            if model.name == self.selected_model:
                return model
        return None

    def form_fields(self) -> List[Tuple[str, FieldDescriptor]]:
        """Editable fields of the current page with their declared types."""

        descriptor = self.current_descriptor
        fields = []
        for name in self.page.editable_fields:
            declared = descriptor.field(name) if descriptor is not None else None
            fields.append((name, declared or FieldDescriptor(name=name)))
        return fields

    # -- Session ------------------------------------------------------------

    def sign_in(self, token: str) -> Optional[Future]:
        self.session.set(token)
        self._emit(EVENT_SESSION, self.is_authenticated)
        if not self.is_authenticated:
            return None
        return self.load_models()

    def sign_out(self) -> None:
        self.session.clear()
        # Bumping the generations drops anything still in flight.
        self._models_generation += 1
        self._page_generation += 1
        self._pending_page = None
        self.models = []
        self.selected_model = None
        self.connected = False
        self.page = RecordPage(take=self.take)
        self.skip = 0
        self.draft = {}
        self.edit_id = None
        self.last_error = ""
        self.loading = False
        self._emit(EVENT_SESSION, False)

    # -- Schema loader ------------------------------------------------------

    def load_models(self) -> Optional[Future]:
        """Fetch model descriptors; also serves as the connection test."""

        if not self.is_authenticated:
            return None
        self._models_generation += 1
        generation = self._models_generation

        def is_current() -> bool:
            return generation == self._models_generation

        return self._submit(
            self.api.introspect,
            self._apply_models,
            self._models_failed,
            is_current,
        )

    def _apply_models(self, models: List[ModelDescriptor]) -> None:
        self.models = list(models)
        self.connected = True
        self._clear_error()
        previous = self.selected_model
        if previous not in self.model_names:
            self.selected_model = self.models[0].name if self.models else None
        self._emit(EVENT_CONNECTION, True)
        self._emit(EVENT_MODELS, self.model_names)
        if self.selected_model != previous:
            self._model_changed()

    def _models_failed(self, exc: BaseException) -> None:
        self.connected = False
        self._record_error(exc)
        self._emit(EVENT_CONNECTION, False)

    def select_model(self, name: str) -> Optional[Future]:
        if name not in self.model_names:
            raise ValueError(f"Unknown model {name!r}")
        if name == self.selected_model:
            return None
        self.selected_model = name
        return self._model_changed()

    def _model_changed(self) -> Optional[Future]:
        self.draft = {}
        self.edit_id = None
        self.page = RecordPage(take=self.take)
        self.skip = 0
        self._emit(EVENT_MODEL_SELECTED, self.selected_model)
        self._emit(EVENT_DRAFT, None)
        self._emit(EVENT_PAGE, self.page)
        if self.selected_model is None:
            return None
        return self.load_page(reset=True)

    # -- Record browser -----------------------------------------------------

    def load_page(
        self,
        skip: Optional[int] = None,
        take: Optional[int] = None,
        reset: bool = False,
    ) -> Optional[Future]:
        if not self.is_authenticated or self.selected_model is None:
            return None
        model = self.selected_model
        if model not in self.model_names:
            raise ValueError(f"Unknown model {model!r}")
        skip = self.skip if skip is None else skip
        take = self.take if take is None else take
        if reset:
            skip = 0
        validate_window(skip, take)

        self._page_generation += 1
        request = PageRequest(self._page_generation, model, skip, take)
        self._pending_page = request
        self._set_loading(True)

        def is_current() -> bool:
            return (
                self._pending_page == request
                and self.selected_model == request.model
            )

        return self._submit(
            lambda: self.api.list_records(model, skip, take),
            lambda page: self._apply_page(request, page),
            self._page_failed,
            is_current,
        )

    def _apply_page(self, request: PageRequest, page: RecordPage) -> None:
        self._pending_page = None
        self._set_loading(False)
        self.page = page
        self.skip = request.skip
        self.take = request.take
        self._clear_error()
        self._emit(EVENT_PAGE, page)

    def _page_failed(self, exc: BaseException) -> None:
        self._pending_page = None
        self._set_loading(False)
        self._record_error(exc)

    def refresh(self) -> Optional[Future]:
        return self.load_page(reset=True)

    def previous_page(self) -> Optional[Future]:
        window = self.window
        if not window.has_previous:
            return None
        return self.load_page(skip=window.previous_skip())

    def next_page(self) -> Optional[Future]:
        window = self.window
        if not window.has_next:
            return None
        return self.load_page(skip=window.next_skip())

    def set_page_size(self, take: int) -> Optional[Future]:
        validate_window(0, take)
        if take == self.take:
            return None
        self.take = take
        return self.load_page(take=take, reset=True)

    # -- Draft / edit controller --------------------------------------------

    def start_edit(self, record: Record) -> None:
        id_field = self.page.id_field_name
        allowed = set(self.page.scalar_fields)
        self.edit_id = record.get(id_field)
        self.draft = {
            key: value
            for key, value in record.items()
            if key in allowed and key != id_field
        }
        self._emit(EVENT_DRAFT, self.edit_id)

    def cancel_edit(self) -> None:
        self.edit_id = None
        self.draft = {}
        self._emit(EVENT_DRAFT, None)

    def update_draft(self, name: str, value: Any) -> None:
        self.draft[name] = value

    def save(self) -> Optional[Future]:
        """Create or update from the draft; refused while a save is pending."""

        if self.saving:
            log.warning("Save already in progress; ignoring repeated submit")
            return None
        if not self.is_authenticated or self.selected_model is None:
            return None
        model = self.selected_model
        data = dict(self.draft)
        record_id = self.edit_id

        def job() -> Any:
            if record_id is None:
                return self.api.create_record(model, data)
            return self.api.update_record(model, record_id, data)

        self.saving = True
        self._emit(EVENT_SAVING, True)
        return self._submit(
            job,
            lambda result: self._save_succeeded(model, result),
            self._save_failed,
        )

    def _save_succeeded(self, model: str, result: Any) -> None:
        self.saving = False
        self._emit(EVENT_SAVING, False)
        if model != self.selected_model:
            # The draft on screen now belongs to another model.
            log.debug("Save for %s finished after switching models", model)
            return
        self.draft = {}
        self.edit_id = None
        self._clear_error()
        self._emit(EVENT_DRAFT, None)
        self._emit(EVENT_SAVED, result)
        self.load_page(reset=True)

    def _save_failed(self, exc: BaseException) -> None:
        self.saving = False
        self._record_error(exc)
        self._emit(EVENT_SAVING, False)
        self._emit(EVENT_SAVE_FAILED, str(exc))

    def delete_record(self, record: Record, confirm: ConfirmFn) -> Optional[Future]:
        """Delete ``record`` only once ``confirm`` approves; stays on this page."""

        if not self.is_authenticated or self.selected_model is None:
            return None
        if not confirm(DELETE_PROMPT):
            return None
        model = self.selected_model
        record_id = record.get(self.page.id_field_name)

        def succeeded(result: Any) -> None:
            self._clear_error()
            if self.edit_id is not None and self.edit_id == record_id:
                self.cancel_edit()
            self._emit(EVENT_DELETED, record_id)
            self.load_page()

        def failed(exc: BaseException) -> None:
            self._record_error(exc)
            self._emit(EVENT_DELETE_FAILED, str(exc))

        return self._submit(
            lambda: self.api.delete_record(model, record_id), succeeded, failed
        )

    # -- Plumbing -----------------------------------------------------------

    def _submit(
        self,
        job: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
        is_current: Optional[Callable[[], bool]] = None,
    ) -> Future:
        def finish(callback: Callable[[Any], None], value: Any) -> None:
            if is_current is not None and not is_current():
                log.debug("Dropping stale response")
                return
            callback(value)

        def done(fut: Future) -> None:
            if fut.cancelled():
                return
            try:
                result = fut.result()
            except Exception as exc:
                self._dispatch(functools.partial(finish, on_error, exc))
            else:
                self._dispatch(functools.partial(finish, on_success, result))

        future = self._run_async(job)
        future.add_done_callback(done)
        return future

    def _set_loading(self, value: bool) -> None:
        if self.loading != value:
            self.loading = value
            self._emit(EVENT_LOADING, value)

    def _record_error(self, exc: BaseException) -> None:
        self.last_error = str(exc) or exc.__class__.__name__
        self._emit(EVENT_ERROR, self.last_error)

    def _clear_error(self) -> None:
        if self.last_error:
            self.last_error = ""
            self._emit(EVENT_ERROR, "")

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None


__all__ = [
    "DELETE_PROMPT",
    "EVENT_CONNECTION",
    "EVENT_DELETED",
    "EVENT_DELETE_FAILED",
    "EVENT_DRAFT",
    "EVENT_ERROR",
    "EVENT_LOADING",
    "EVENT_MODELS",
    "EVENT_MODEL_SELECTED",
    "EVENT_PAGE",
    "EVENT_SAVED",
    "EVENT_SAVE_FAILED",
    "EVENT_SAVING",
    "EVENT_SESSION",
    "ModelConsole",
    "PageRequest",
]
