#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for kbconvert option objects.

All option classes are frozen dataclasses so a configuration can be shared
between concurrent conversions without copying.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> set[str]:
        """Return the names of all dataclass fields on this options class."""
        return {f.name for f in fields(cls)}  # type: ignore[arg-type]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build an instance from a flat mapping of field values.

        Parameters
        ----------
        data : dict
            Field names mapped to values; keys must be known fields

        Raises
        ------
        ValueError
            If ``data`` contains keys that are not fields of this class

        """
        unknown = set(data) - cls.field_names()
        if unknown:
            raise ValueError(f"Unknown option(s) for {cls.__name__}: {', '.join(sorted(unknown))}")
        return cls(**data)
