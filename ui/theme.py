from __future__ import annotations

from typing import Optional
from PyQt6.QtWidgets import QApplication, QStatusBar

LIGHT_QSS = """
QWidget {
    background: #f7f8fa;
    color: #1f2933;
    font-family: 'Segoe UI', 'Noto Sans', Arial;
    font-size: 14px;
}
#Header {
    background: #ffffff;
    border-bottom: 1px solid #d9dee4;
}
#Title { font-size: 18px; font-weight: 800; }
#ConnectionStatus {
    border: 1px solid #d9dee4;
    border-radius: 10px;
    padding: 4px 10px;
    font-weight: 600;
}
#ConnectionStatus[connected="true"] { color: #2f9e44; }
#ConnectionStatus[connected="false"] { color: #868e96; }
QFrame#Card {
    background: #ffffff;
    border: 1px solid #d9dee4;
    border-radius: 12px;
}
QLabel#SectionTitle { font-size: 16px; font-weight: 700; }
QLabel#FieldType { color: #868e96; font-size: 12px; }
QLabel#ErrorBanner {
    background: #ffeeee;
    color: #990000;
    border: 1px solid #ffbbbb;
    border-radius: 8px;
    padding: 10px;
}
QLabel#Hint { color: #666666; }
QPushButton {
    background: #e9ecef;
    border: 1px solid #ced4da;
    padding: 6px 12px;
    border-radius: 8px;
}
QPushButton:hover { background: #dee2e6; }
QPushButton:disabled { color: #adb5bd; }
QPushButton#Primary { background: #1c7ed6; color: white; border: none; font-weight: 600; }
QPushButton#Primary:hover { background: #1971c2; }
QPushButton#Danger { color: #bb0000; }
QTableWidget { background: #ffffff; gridline-color: #eeeeee; font-family: monospace; }
QStatusBar { border-top: 1px solid #d9dee4; }
"""

DARK_QSS = """
QWidget {
    background: #1b1f24;
    color: #e9ecef;
    font-family: 'Segoe UI', 'Noto Sans', Arial;
    font-size: 14px;
}
#Header {
    background: #22272e;
    border-bottom: 1px solid #373e47;
}
#Title { font-size: 18px; font-weight: 800; }
#ConnectionStatus {
    border: 1px solid #373e47;
    border-radius: 10px;
    padding: 4px 10px;
    font-weight: 600;
}
#ConnectionStatus[connected="true"] { color: #69db7c; }
#ConnectionStatus[connected="false"] { color: #909296; }
QFrame#Card {
    background: #22272e;
    border: 1px solid #373e47;
    border-radius: 12px;
}
QLabel#SectionTitle { font-size: 16px; font-weight: 700; }
QLabel#FieldType { color: #909296; font-size: 12px; }
QLabel#ErrorBanner {
    background: #3b1219;
    color: #ffa8a8;
    border: 1px solid #862e2e;
    border-radius: 8px;
    padding: 10px;
}
QLabel#Hint { color: #909296; }
QPushButton {
    background: #2d333b;
    border: 1px solid #444c56;
    padding: 6px 12px;
    border-radius: 8px;
}
QPushButton:hover { background: #373e47; }
QPushButton:disabled { color: #5c636a; }
QPushButton#Primary { background: #1c7ed6; color: white; border: none; font-weight: 600; }
QPushButton#Primary:hover { background: #1971c2; }
QPushButton#Danger { color: #ff8787; }
QTableWidget { background: #22272e; gridline-color: #2d333b; font-family: monospace; }
QStatusBar { border-top: 1px solid #373e47; }
"""


def _toggle_theme(status_bar: Optional[QStatusBar] = None) -> None:
    """Toggle between light and dark themes."""
    app = QApplication.instance()
    if app is None:
        return
    is_dark = "1b1f24" in app.styleSheet()
    app.setStyleSheet(LIGHT_QSS if is_dark else DARK_QSS)
    if status_bar is not None:
        status_bar.showMessage("Light theme" if is_dark else "Dark theme")
