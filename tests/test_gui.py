"""Smoke tests for the Tkinter view; skipped without Tk or a display."""

import pytest

tk = pytest.importorskip("tkinter")

from calculator import Settings, ViewSettings  # noqa: E402


@pytest.fixture
def app():
    from calculator_gui import CalculatorApp
    try:
        window = CalculatorApp(Settings(), ViewSettings())
    except tk.TclError as exc:
        pytest.skip(f"no display: {exc}")
    window.withdraw()
    yield window
    window.destroy()


def test_keys_route_to_engine(app):
    for key in ("2", "+", "3", "Enter"):
        app.press_key(key)
    assert app.display_var.get() == "5"
    assert app.trail_var.get() == "2 + 3 = 5"
    assert app.history_list.get(0, "end") == ("2 + 3 = 5",)


def test_unbound_key_ignored(app):
    assert app.press_key("q") is None
    assert app.display_var.get() == "0"


def test_pending_operator_highlight(app):
    app.press_key("4")
    app.press_key("*")
    assert app.op_buttons["×"].cget("bg") == app.palette.accent
    assert app.op_buttons["+"].cget("bg") == app.palette.op_bg


def test_angle_menu_tracks_settings():
    from calculator_gui import CalculatorApp
    try:
        window = CalculatorApp(Settings(angle_mode="rad"), ViewSettings())
    except tk.TclError as exc:
        pytest.skip(f"no display: {exc}")
    try:
        window.withdraw()
        assert window.mode_var.get() == "rad"
        window.set_mode("deg")
        assert window.mode_var.get() == "deg"
        assert window.engine.settings.angle_mode == "deg"
    finally:
        window.destroy()


def test_toggle_theme(app):
    app.toggle_theme()
    assert app.view.theme == "dark"
    assert app.display_label.cget("bg") == app.palette.display_bg == "#0B1220"


def test_toggle_scientific_panel(app):
    assert not app.sci_frame.grid_info()
    app.toggle_scientific()
    assert app.view.scientific_panel is True
    assert app.sci_frame.grid_info()
    app.toggle_scientific()
    assert not app.sci_frame.grid_info()


def test_clear_empties_history_list(app):
    for key in ("9", "-", "1", "=", "Escape"):
        app.press_key(key)
    assert app.display_var.get() == "0"
    assert app.history_list.size() == 0
