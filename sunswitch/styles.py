# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Ordered collection of the styles in circulation."""

from typing import Iterable, Iterator, List, Optional

from sunswitch.models import Style, StyleType


class StyleSet:
    """Immutable, ordered sequence of styles.

    Order only matters for selection: the first style of a matching type
    wins, and the first style overall is used when no location is known.
    """

    def __init__(self, styles: Iterable[Style] = ()):
        self._styles: tuple = tuple(styles)

    def __iter__(self) -> Iterator[Style]:
        return iter(self._styles)

    def __len__(self) -> int:
        return len(self._styles)

    def __bool__(self) -> bool:
        return bool(self._styles)

    def __eq__(self, other) -> bool:
        if isinstance(other, StyleSet):
            return self._styles == other._styles
        return NotImplemented

    def __repr__(self) -> str:
        return f"StyleSet({list(self._styles)!r})"

    @property
    def count(self) -> int:
        return len(self._styles)

    @property
    def first(self) -> Optional[Style]:
        return self._styles[0] if self._styles else None

    def style_for(self, style_type: StyleType) -> Optional[Style]:
        """Return the first style tagged with style_type, or None."""
        for style in self._styles:
            if style.style_type == style_type:
                return style
        return None

    def styles_for(self, style_type: StyleType) -> List[Style]:
        """Return every style tagged with style_type, in order."""
        return [s for s in self._styles if s.style_type == style_type]

    def has_type(self, style_type: StyleType) -> bool:
        return self.style_for(style_type) is not None

    @property
    def supports_automatic_switching(self) -> bool:
        """True when more than one style is present.

        Counts styles, not distinct types: two day styles are enough.
        """
        return len(self._styles) > 1
