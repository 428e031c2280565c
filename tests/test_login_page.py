from tests.qt_stubs import patch_qt

patch_qt()

from ui.pages.login import LoginPage


def test_login_passes_stripped_token():
    received = []
    page = LoginPage(on_login=received.append)

    page.token_input.setText("  secret  ")
    page.login_button.clicked.emit()

    assert received == ["secret"]
    assert page.token_input.text() == ""


def test_blank_token_is_not_submitted():
    received = []
    page = LoginPage(on_login=received.append)

    page.token_input.setText("   ")
    page.token_input.returnPressed.emit()

    assert received == []
