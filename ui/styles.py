"""
ui/styles.py
============
Style constants shared by the Tutorial Guide widgets.
Imported by ui/tutorial_window.py and ui/section_widgets.py.
"""

BTN_PRIMARY = """
    QPushButton {
        background-color: #3498db; color: white;
        border-radius: 8px; padding: 6px 14px;
    }
    QPushButton:hover { background-color: #2980b9; }
"""
BTN_NEUTRAL = """
    QPushButton {
        background-color: #ecf0f1; color: #2c3e50;
        border: 1px solid #d0d8e4; border-radius: 8px; padding: 6px 14px;
    }
    QPushButton:hover { background-color: #dfe6e9; }
"""
BTN_TRANSPORT = """
    QPushButton {
        background-color: #34495e; color: white;
        border-radius: 6px; padding: 3px 10px;
    }
    QPushButton:hover { background-color: #2c3e50; }
"""
LINK_LABEL = """
    QPushButton {
        color: #2980b9; background: transparent; border: none;
        text-decoration: underline; text-align: left; padding: 0px;
    }
    QPushButton:hover { color: #1f6391; }
"""
HELP_BOX_WARNING = (
    "background-color: #fff8e1; color: #7d6608;"
    "border: 1px solid #f1c40f; border-radius: 6px; padding: 10px;"
)

TITLE_COLOR = "#2c3e50"
