"""Records page: model selector, schema-driven form and paginated table."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from PyQt6.QtWidgets import (
    QComboBox,
    QGridLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from logic.field_widgets import cell_text
from logic.pagination import PAGE_SIZES
from models.schema import Record
from services import model_console as mc
from services.model_console import ModelConsole

from ..components import (
    Card,
    _call_if_exists,
    error_banner,
    field_label,
    section_title,
    set_banner_text,
)
from ..field_editors import FieldEditor, create_editor
from .base import ConsolePage

log = logging.getLogger(__name__)

FORM_COLUMNS = 2


class RecordsPage(ConsolePage):
    """Everything shown once a token is present."""

    def __init__(self, console: ModelConsole, parent=None):
        super().__init__(parent)
        self.console = console
        self._populating = False
        self._form_signature: Tuple[Tuple[str, str], ...] = ()
        self.editors: Dict[str, FieldEditor] = {}
        self.rows: List[Record] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(12)

        # Connection status
        status_row = QHBoxLayout()
        self.status_label = QLabel("Status: not connected")
        self.status_label.setObjectName("ConnectionStatus")
        self.test_button = QPushButton("Test connection")
        self.sign_out_button = QPushButton("Sign out")
        status_row.addWidget(self.status_label)
        status_row.addWidget(self.test_button)
        status_row.addStretch()
        status_row.addWidget(self.sign_out_button)
        layout.addLayout(status_row)

        self.error_label = error_banner()
        layout.addWidget(self.error_label)

        # Model selector
        model_row = QHBoxLayout()
        model_row.addWidget(QLabel("Model:"))
        self.model_combo = QComboBox()
        model_row.addWidget(self.model_combo)
        self.refresh_button = QPushButton("Refresh")
        model_row.addWidget(self.refresh_button)
        model_row.addStretch()
        layout.addLayout(model_row)

        # Create / edit form
        self.form_card = Card()
        self.form_title = section_title("Add record")
        self.form_card.layout().addWidget(self.form_title)
        self.form_host = QWidget()
        self.form_grid = QGridLayout(self.form_host)
        self.form_card.layout().addWidget(self.form_host)
        buttons = QHBoxLayout()
        self.save_button = QPushButton("Save")
        self.save_button.setObjectName("Primary")
        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.setVisible(False)
        buttons.addWidget(self.save_button)
        buttons.addWidget(self.cancel_button)
        buttons.addStretch()
        self.form_card.layout().addLayout(buttons)
        layout.addWidget(self.form_card)

        # Records table
        self.table = QTableWidget(0, 0)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setAlternatingRowColors(True)
        self.table.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.ResizeToContents
        )
        layout.addWidget(self.table)

        # Pager
        pager = QHBoxLayout()
        self.prev_button = QPushButton("Previous")
        self.next_button = QPushButton("Next")
        self.range_label = QLabel("")
        self.range_label.setObjectName("Hint")
        self.page_size_combo = QComboBox()
        for size in PAGE_SIZES:
            self.page_size_combo.addItem(str(size), size)
        pager.addWidget(self.prev_button)
        pager.addWidget(self.next_button)
        pager.addWidget(self.range_label)
        pager.addStretch()
        pager.addWidget(QLabel("Rows per page:"))
        pager.addWidget(self.page_size_combo)
        layout.addLayout(pager)

        self.test_button.clicked.connect(self._test_connection)
        self.sign_out_button.clicked.connect(self._sign_out)
        self.refresh_button.clicked.connect(self._refresh_clicked)
        self.model_combo.currentIndexChanged.connect(self._model_chosen)
        self.save_button.clicked.connect(self._save_clicked)
        self.cancel_button.clicked.connect(self._cancel_clicked)
        self.prev_button.clicked.connect(self._previous_clicked)
        self.next_button.clicked.connect(self._next_clicked)
        self.page_size_combo.currentIndexChanged.connect(self._page_size_chosen)

        self.console.add_listener(self._on_console_event)
        self._sync_page_size()
        self._render_all()

    # -- Console events -----------------------------------------------------

    def _on_console_event(self, event: str, payload: Any) -> None:
        if event in (mc.EVENT_MODELS, mc.EVENT_MODEL_SELECTED):
            self._populate_models()
        elif event == mc.EVENT_CONNECTION:
            self._render_status()
        elif event == mc.EVENT_PAGE:
            self._render_page()
        elif event == mc.EVENT_LOADING:
            self._render_pager()
        elif event == mc.EVENT_DRAFT:
            self._render_form()
        elif event == mc.EVENT_SAVING:
            self.save_button.setEnabled(not self.console.saving)
        elif event == mc.EVENT_ERROR:
            set_banner_text(self.error_label, self.console.last_error)
        elif event == mc.EVENT_SAVED:
            self._toast("success", "Record saved.")
        elif event == mc.EVENT_DELETED:
            self._toast("success", "Record deleted.")
        elif event == mc.EVENT_SAVE_FAILED:
            self._warn("Save failed", payload)
        elif event == mc.EVENT_DELETE_FAILED:
            self._warn("Delete failed", payload)

    def _render_all(self) -> None:
        self._render_status()
        self._populate_models()
        self._render_page()
        set_banner_text(self.error_label, self.console.last_error)

    def _render_status(self) -> None:
        connected = self.console.connected
        self.status_label.setText(
            "Status: connected" if connected else "Status: not connected"
        )
        _call_if_exists(self.status_label, "setProperty", "connected", connected)

    def _populate_models(self) -> None:
        self._populating = True
        try:
            self.model_combo.clear()
            selected_index = 0
            for index, name in enumerate(self.console.model_names):
                self.model_combo.addItem(name, name)
                if name == self.console.selected_model:
                    selected_index = index
            self.model_combo.setCurrentIndex(selected_index)
        finally:
            self._populating = False

    def _sync_page_size(self) -> None:
        take = self.console.take
        if take not in PAGE_SIZES:
            self.page_size_combo.addItem(str(take), take)
            index = len(PAGE_SIZES)
        else:
            index = PAGE_SIZES.index(take)
        self._populating = True
        try:
            self.page_size_combo.setCurrentIndex(index)
        finally:
            self._populating = False

    def _render_page(self) -> None:
        self._render_table()
        self._render_pager()
        self._render_form()

    def _render_table(self) -> None:
        page = self.console.page
        columns = page.columns
        self.rows = list(page.items)
        self.table.setColumnCount(len(columns) + 1)
        self.table.setHorizontalHeaderLabels([*columns, "Actions"])
        self.table.setRowCount(len(self.rows))
        for row_index, record in enumerate(self.rows):
            for col_index, column in enumerate(columns):
                item = QTableWidgetItem(cell_text(record.get(column)))
                self.table.setItem(row_index, col_index, item)
            self.table.setCellWidget(
                row_index, len(columns), self._row_actions(record)
            )

    def _row_actions(self, record: Record) -> QWidget:
        container = QWidget()
        row = QHBoxLayout(container)
        row.setContentsMargins(2, 2, 2, 2)
        edit_button = QPushButton("Edit")
        delete_button = QPushButton("Delete")
        delete_button.setObjectName("Danger")
        edit_button.clicked.connect(lambda *_args, r=record: self.edit_record(r))
        delete_button.clicked.connect(lambda *_args, r=record: self.delete_record(r))
        row.addWidget(edit_button)
        row.addWidget(delete_button)
        return container

    def _render_pager(self) -> None:
        window = self.console.window
        idle = not self.console.loading
        self.prev_button.setEnabled(idle and window.has_previous)
        self.next_button.setEnabled(idle and window.has_next)
        self.refresh_button.setEnabled(idle)
        self.range_label.setText(window.label())

    def _render_form(self) -> None:
        fields = self.console.form_fields()
        signature = tuple((name, descriptor.type) for name, descriptor in fields)
        if signature != self._form_signature:
            self._rebuild_form(fields)
            self._form_signature = signature
        for name, editor in self.editors.items():
            editor.set_value(self.console.draft.get(name))
        if self.console.is_creating:
            self.form_title.setText("Add record")
            self.save_button.setText("Save")
        else:
            self.form_title.setText(f"Edit record #{self.console.edit_id}")
            self.save_button.setText("Update")
        self.cancel_button.setVisible(not self.console.is_creating)
        self.save_button.setEnabled(not self.console.saving)

    def _rebuild_form(self, fields) -> None:
        log.debug("Rebuilding form with %d fields", len(fields))
        for editor in self.editors.values():
            _call_if_exists(editor.widget, "deleteLater")
        self.editors = {}
        old_host = self.form_host
        self.form_host = QWidget()
        self.form_grid = QGridLayout(self.form_host)
        for index, (name, descriptor) in enumerate(fields):
            editor = create_editor(descriptor.kind, name, self.console.update_draft)
            self.editors[name] = editor
            cell = QWidget()
            cell_layout = QVBoxLayout(cell)
            cell_layout.setContentsMargins(0, 0, 0, 0)
            cell_layout.addWidget(field_label(name, descriptor.type))
            cell_layout.addWidget(editor.widget)
            self.form_grid.addWidget(cell, index // FORM_COLUMNS, index % FORM_COLUMNS)
        layout = self.form_card.layout()
        _call_if_exists(layout, "replaceWidget", old_host, self.form_host)
        _call_if_exists(old_host, "deleteLater")

    # -- User actions -------------------------------------------------------

    def _test_connection(self) -> None:
        self.console.load_models()

    def _sign_out(self) -> None:
        self.console.sign_out()

    def _refresh_clicked(self) -> None:
        self.console.refresh()

    def _model_chosen(self, *_args) -> None:
        if self._populating:
            return
        name = self.model_combo.currentData()
        if name and name != self.console.selected_model:
            self.console.select_model(name)

    def _page_size_chosen(self, *_args) -> None:
        if self._populating:
            return
        take = self.page_size_combo.currentData()
        if take:
            self.console.set_page_size(int(take))

    def _previous_clicked(self) -> None:
        self.console.previous_page()

    def _next_clicked(self) -> None:
        self.console.next_page()

    def _save_clicked(self) -> None:
        self.console.save()

    def _cancel_clicked(self) -> None:
        self.console.cancel_edit()

    def edit_record(self, record: Record) -> None:
        self.console.start_edit(record)

    def delete_record(self, record: Record) -> None:
        confirm = self._context.confirm if self._context is not None else None
        self.console.delete_record(record, confirm=confirm or self._confirm)

    def _confirm(self, prompt: str) -> bool:
        answer = QMessageBox.question(
            self,
            "Confirm",
            prompt,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    def _toast(self, kind: str, message: str) -> None:
        if self._context is not None and self._context.show_toast:
            self._context.show_toast(kind, message)

    def _warn(self, title: str, message: Optional[str]) -> None:
        QMessageBox.warning(self, title, message or "Unknown error")
        self._toast("error", f"{title}: {message}")

    def refresh(self) -> None:
        self.console.refresh()

    def detach(self) -> None:
        self.console.remove_listener(self._on_console_event)


__all__ = ["RecordsPage"]
