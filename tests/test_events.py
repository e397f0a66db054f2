import pygame
import pytest

from core.events import (
    InputQueue,
    KeyEvent,
    MouseButtonEvent,
    MouseMotionEvent,
    MouseWheelEvent,
    ResizeEvent,
    from_pygame,
)


@pytest.mark.parametrize(
    "event, expected",
    [
        (pygame.event.Event(pygame.KEYDOWN, key=pygame.K_w), KeyEvent(pygame.K_w, True)),
        (pygame.event.Event(pygame.KEYUP, key=pygame.K_d), KeyEvent(pygame.K_d, False)),
        (pygame.event.Event(pygame.VIDEORESIZE, w=640, h=480, size=(640, 480)), ResizeEvent(640, 480)),
        (pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(3, 4), button=1), MouseButtonEvent((3, 4), 1, True)),
        (pygame.event.Event(pygame.MOUSEBUTTONUP, pos=(3, 4), button=1), MouseButtonEvent((3, 4), 1, False)),
        (
            pygame.event.Event(pygame.MOUSEMOTION, pos=(5, 6), rel=(1, -1), buttons=(1, 0, 0)),
            MouseMotionEvent((5, 6), (1, -1), (True, False, False)),
        ),
        (pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=-1), MouseWheelEvent(-1)),
    ],
)
def test_from_pygame(event, expected):
    assert from_pygame(event) == expected


def test_unhandled_events_are_dropped():
    queue = InputQueue()
    assert not queue.push_pygame(pygame.event.Event(pygame.ACTIVEEVENT, gain=1, state=1))
    # legacy wheel buttons come through MOUSEWHEEL instead
    assert not queue.push_pygame(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(0, 0), button=4))
    assert len(queue) == 0


def test_drain_preserves_order_and_empties():
    queue = InputQueue()
    queue.push(KeyEvent(pygame.K_w, True))
    queue.push_pygame(pygame.event.Event(pygame.KEYUP, key=pygame.K_w))
    assert list(queue.drain()) == [KeyEvent(pygame.K_w, True), KeyEvent(pygame.K_w, False)]
    assert len(queue) == 0
