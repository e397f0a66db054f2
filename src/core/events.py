"""Input events decoupled from pygame's event loop.

The engine converts pygame events as they arrive and pushes them onto an
InputQueue; the scene drains the queue once, at the start of its frame, so
no handler ever runs in the middle of a frame.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Optional, Tuple, Union

import pygame


@dataclass(frozen=True)
class KeyEvent:
    key: int
    pressed: bool


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class MouseButtonEvent:
    pos: Tuple[int, int]
    button: int
    pressed: bool


@dataclass(frozen=True)
class MouseMotionEvent:
    pos: Tuple[int, int]
    rel: Tuple[int, int]
    buttons: Tuple[bool, bool, bool]


@dataclass(frozen=True)
class MouseWheelEvent:
    y: int


InputEvent = Union[KeyEvent, ResizeEvent, MouseButtonEvent, MouseMotionEvent, MouseWheelEvent]


def from_pygame(event) -> Optional[InputEvent]:
    """Translate a pygame event, or return None for event types we ignore."""
    if event.type == pygame.KEYDOWN:
        return KeyEvent(event.key, True)
    if event.type == pygame.KEYUP:
        return KeyEvent(event.key, False)
    if event.type == pygame.VIDEORESIZE:
        return ResizeEvent(int(event.w), int(event.h))
    if event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 2, 3):
        return MouseButtonEvent(tuple(event.pos), event.button, True)
    if event.type == pygame.MOUSEBUTTONUP and event.button in (1, 2, 3):
        return MouseButtonEvent(tuple(event.pos), event.button, False)
    if event.type == pygame.MOUSEMOTION:
        return MouseMotionEvent(tuple(event.pos), tuple(event.rel), tuple(bool(b) for b in event.buttons))
    if event.type == pygame.MOUSEWHEEL:
        return MouseWheelEvent(int(event.y))
    return None


class InputQueue:
    def __init__(self) -> None:
        self._events: Deque[InputEvent] = deque()

    def push(self, event: InputEvent) -> None:
        self._events.append(event)

    def push_pygame(self, event) -> bool:
        converted = from_pygame(event)
        if converted is None:
            return False
        self._events.append(converted)
        return True

    def drain(self) -> Iterator[InputEvent]:
        """Pop events in arrival order until the queue is empty."""
        while self._events:
            yield self._events.popleft()

    def __len__(self) -> int:
        return len(self._events)
