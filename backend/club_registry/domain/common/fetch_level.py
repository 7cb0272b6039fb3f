"""Fetch levels and the bounded expansion plan used by nested views."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FetchLevel(str, Enum):
	"""Caller-selected verbosity of a serialized entity."""

	DEFAULT = "default"
	COMPACT = "compact"
	ID_ONLY = "id_only"


@dataclass(frozen=True, slots=True)
class Expansion:
	"""How far a view may expand its relations.

	``level`` is the tier of the entity being built, ``descendant`` the tier of
	the entities nested directly inside it. ``depth`` is the remaining budget:
	each nested resolution spends one unit, and a ``DEFAULT`` request that
	arrives with no budget left is served as ``COMPACT`` so it issues no
	relation queries.
	"""

	level: FetchLevel = FetchLevel.DEFAULT
	descendant: FetchLevel = FetchLevel.ID_ONLY
	depth: int = 2

	@classmethod
	def root(
		cls,
		fetch_level: Optional[FetchLevel],
		descendant_fetch_level: Optional[FetchLevel],
		*,
		depth: int,
		default: FetchLevel = FetchLevel.DEFAULT,
	) -> "Expansion":
		return cls(
			level=fetch_level or default,
			descendant=descendant_fetch_level or FetchLevel.ID_ONLY,
			depth=max(depth, 0),
		)

	@property
	def effective_level(self) -> FetchLevel:
		if self.level is FetchLevel.DEFAULT and self.depth <= 0:
			return FetchLevel.COMPACT
		return self.level

	def nested(self) -> "Expansion":
		"""Plan for the entities one level down.

		Grandchildren fall back to ``ID_ONLY``; only the immediate caller's
		``descendant`` choice is honoured.
		"""
		return Expansion(
			level=self.descendant,
			descendant=FetchLevel.ID_ONLY,
			depth=max(self.depth - 1, 0),
		)
