"""
Visual theme for the admin window.

The theme is passed to the window at construction instead of living in
module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Theme:
    """Window colours as CSS hex strings."""

    bg_main: str = "#f3f4f6"
    bg_sidebar: str = "#1e293b"
    bg_card: str = "#ffffff"
    accent: str = "#4099de"
    text_main: str = "#374151"
    text_sidebar: str = "#c8c8c8"
    border: str = "#e5e7eb"
    error: str = "#b91c1c"

    def stylesheet(self) -> str:
        """Return the Qt stylesheet for the main window."""
        return f"""
            QWidget#root {{ background: {self.bg_main}; }}
            QListWidget#sidebar {{
                background: {self.bg_sidebar};
                color: {self.text_sidebar};
                border: none;
                padding-top: 30px;
                font-size: 14px;
            }}
            QListWidget#sidebar::item {{ padding: 15px 20px; }}
            QListWidget#sidebar::item:selected {{
                background: {self.bg_sidebar};
                color: {self.accent};
                font-weight: bold;
            }}
            QFrame#card {{
                background: {self.bg_card};
                border: 1px solid {self.border};
                border-radius: 8px;
            }}
            QLabel {{ color: {self.text_main}; }}
            QLabel#heading {{ font-size: 20px; font-weight: bold; }}
            QLabel#fieldLabel {{ font-weight: bold; }}
            QLabel#status {{ color: #666; padding: 6px; }}
            QLabel#error {{ color: {self.error}; padding: 6px; }}
            QLineEdit, QComboBox {{
                border: 1px solid {self.border};
                border-radius: 4px;
                padding: 10px;
                background: {self.bg_card};
            }}
            QPushButton#primary {{
                background: {self.accent};
                color: white;
                border: none;
                border-radius: 4px;
                padding: 8px 16px;
            }}
            QPushButton#primary:disabled {{ background: {self.border}; }}
            QTableWidget {{ border: none; background: {self.bg_card}; }}
        """


NOVA = Theme()
