# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""StoryNode value type for branching stories.

Each node of a story tree records the action the player took to reach it
and the outcome shown once it is reached. The text form is::

    action: "Open the door" outcome: "The hallway is dark."
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_STORY_PATTERN = re.compile(r'^action: "(?P<action>[^"]*)" outcome: "(?P<outcome>[^"]*)"\s*$')


@dataclass
class StoryNode:
    """A step of a branching story.

    Example:
        >>> node = StoryNode('Open the door', 'The hallway is dark.')
        >>> StoryNode.from_text(node.to_text()) == node
        True
    """

    action: str = ' '
    outcome: str = ' '

    def to_text(self) -> str:
        return f'action: "{self.action}" outcome: "{self.outcome}"'

    @classmethod
    def from_text(cls, text: str) -> StoryNode:
        """Parse the text form produced by to_text().

        Raises:
            ValueError: If text does not have the action/outcome shape.
        """
        match = _STORY_PATTERN.match(text)
        if match is None:
            raise ValueError(f"not a story node: {text!r}")
        return cls(match.group('action'), match.group('outcome'))
