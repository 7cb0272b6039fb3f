"""Academic year arithmetic."""

from __future__ import annotations

from datetime import date
from typing import Optional

from club_registry.settings import settings


def current_academic_year(today: Optional[date] = None, *, start_month: Optional[int] = None) -> int:
	"""The academic year ``today`` falls in.

	A year starts in ``start_month`` (May by default); earlier months still
	belong to the year that began the previous calendar year.
	"""
	today = today or date.today()
	start = start_month or settings.academic_year_start_month
	return today.year if today.month >= start else today.year - 1
