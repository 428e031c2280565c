"""Token entry shown while no admin token is stored."""
from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtWidgets import (
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from ..components import Card, section_title
from .base import ConsolePage

LoginFn = Callable[[str], None]


class LoginPage(ConsolePage):
    def __init__(self, on_login: Optional[LoginFn] = None, parent=None):
        super().__init__(parent)
        self._on_login = on_login

        self.token_input = QLineEdit()
        self.token_input.setPlaceholderText("ADMIN_TOKEN")
        self.token_input.setEchoMode(QLineEdit.EchoMode.Password)

        self.login_button = QPushButton("Sign in")
        self.login_button.setObjectName("Primary")
        self.login_button.setDefault(True)
        self.login_button.clicked.connect(self.handle_login)
        self.token_input.returnPressed.connect(self.handle_login)

        hint = QLabel(
            "The token is the ADMIN_TOKEN value configured on the server."
        )
        hint.setObjectName("Hint")
        hint.setWordWrap(True)

        card = Card()
        card.layout().addWidget(section_title("Admin sign in"))
        card.layout().addWidget(QLabel("Paste the admin token:"))
        card.layout().addWidget(self.token_input)
        card.layout().addWidget(self.login_button)
        card.layout().addWidget(hint)

        layout = QVBoxLayout()
        layout.setContentsMargins(40, 40, 40, 40)
        layout.addStretch()
        layout.addWidget(card)
        layout.addStretch()
        self.setLayout(layout)

    def handle_login(self) -> None:
        token = self.token_input.text().strip()
        if not token:
            self.token_input.setFocus()
            return
        self.token_input.setText("")
        if self._on_login is not None:
            self._on_login(token)

    def on_attached(self) -> None:
        self.token_input.setFocus()


__all__ = ["LoginPage"]
