from __future__ import annotations

from typing import Optional, Sequence, Tuple

from pygame.math import Vector2

from .body import MassBody
from .errors import ConfigurationError

MAX_FOCUS_TARGETS = 9


class FocusSelector:
    """Numbered camera targets, one per digit key 1-9."""

    def __init__(self, targets: Sequence[MassBody]) -> None:
        if len(targets) > MAX_FOCUS_TARGETS:
            raise ConfigurationError(
                f"Focus selector must not have more than {MAX_FOCUS_TARGETS} targets, got {len(targets)}"
            )
        self._targets: Tuple[MassBody, ...] = tuple(targets)
        self._focused: Optional[MassBody] = None

    @property
    def targets(self) -> Tuple[MassBody, ...]:
        return self._targets

    @property
    def focused(self) -> Optional[MassBody]:
        return self._focused

    def focus(self, index: int) -> None:
        if 0 <= index < len(self._targets):
            self._focused = self._targets[index]

    def focused_position(self) -> Optional[Vector2]:
        if self._focused is None:
            return None
        return Vector2(self._focused.position)
