from dataclasses import dataclass

import pytest
from pygame.math import Vector3

from ui.gui_panel import GuiPanel, Slider


@dataclass
class Params:
    elevation: float = 2.0
    azimuth: float = 180.0


def test_slider_clamps_and_notifies():
    params = Params()
    seen = []
    slider = Slider(params, "elevation", -90, 180, on_change=seen.append)
    assert slider.set_value(500) == 180
    assert slider.set_value(-500) == -90
    assert params.elevation == -90
    assert seen == [180, -90]


def test_slider_edits_vector_components():
    position = Vector3(100, -150, 8500)
    slider = Slider(position, "z", -1000, 10000, name="Move Z")
    slider.set_value(0)
    assert position.z == 0
    assert slider.fraction() == pytest.approx(1000 / 11000)


def test_empty_range_is_rejected():
    with pytest.raises(ValueError):
        Slider(Params(), "azimuth", 1, 0)


def test_set_from_x_maps_bar_to_range():
    slider = Slider(Params(), "azimuth", -180, 180)
    assert slider.set_from_x(150, 100, 100) == pytest.approx(0.0)
    assert slider.set_from_x(0, 100, 100) == -180
    assert slider.set_from_x(999, 100, 100) == 180


def test_rows_follow_folder_state():
    gui = GuiPanel(800)
    params = Params()
    gui.add(params, "elevation", -90, 180)
    folder = gui.add_folder("Submarine Position")
    folder.add(Vector3(), "x", -1000, 1000, name="Move X")
    folder.add(Vector3(), "y", -1000, 1000, name="Move Y")
    assert len(gui.rows()) == 4
    folder.close()
    assert len(gui.rows()) == 2
    folder.toggle()
    assert not folder.closed
    assert gui.height() == 4 * gui.row_height


def test_click_inside_panel_is_consumed():
    gui = GuiPanel(800)
    params = Params()
    gui.add(params, "elevation", -90, 180)
    bar_x, bar_w = gui.bar_span()
    y = gui.row_height / 2

    assert gui.handle_mouse_button((bar_x + bar_w, y), 1, True)
    assert params.elevation == 180
    # dragging keeps the slider even outside the panel
    assert gui.handle_mouse_motion((0, 500))
    assert params.elevation == -90
    assert gui.handle_mouse_button((0, 500), 1, False)
    assert not gui.handle_mouse_motion((0, 500))


def test_click_outside_panel_passes_through():
    gui = GuiPanel(800)
    gui.add(Params(), "elevation", -90, 180)
    assert not gui.handle_mouse_button((10, 10), 1, True)
    assert not gui.handle_mouse_button((gui.left + 5, gui.height() + 5), 1, True)
    assert not gui.handle_mouse_button((10, 10), 1, False)


def test_clicking_folder_header_toggles_it():
    gui = GuiPanel(800)
    folder = gui.add_folder("Submarine Position")
    folder.add(Vector3(), "x", -1000, 1000)
    assert gui.handle_mouse_button((gui.left + 5, 5), 1, True)
    assert folder.closed


def test_viewport_resize_moves_panel():
    gui = GuiPanel(800)
    gui.set_viewport(1200, 600)
    assert gui.left == 1200 - gui.width
