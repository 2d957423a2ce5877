"""Input event model for nesbridge."""
from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    PRESS = "press"
    RELEASE = "release"

    @property
    def dom_event(self) -> str:
        """DOM keyboard event type for this phase."""
        return "keydown" if self is Phase.PRESS else "keyup"


class InputSource(str, Enum):
    PHYSICAL = "physical"
    VIRTUAL = "virtual"
    TOUCH = "touch"


@dataclass(frozen=True)
class InputEvent:
    """A normalized key transition headed for the hosted content."""
    key_code: int
    phase: Phase
    source: InputSource
