# apps/analytics/repositories/base.py
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Set, Tuple

from ..subjects import MetricsSubject

DateRange = Optional[Tuple[date, date]]


class ImpressionStore(ABC):
    """
    Read side of the impression log.

    The log may be split across partitions; implementations answer as if it
    were one table. A ``date_range`` is an inclusive ``(start, end)`` pair,
    ``(day, day)`` for a single date, or ``None`` for all time.
    """

    @abstractmethod
    def count(self, subject: MetricsSubject, date_range: DateRange = None,
              clicked_only: bool = False) -> int:
        pass

    @abstractmethod
    def group_counts_by_date(self, subject: MetricsSubject, date_range: Tuple[date, date],
                             clicked_only: bool = False) -> List[Tuple[date, int]]:
        """Non-empty days only, ordered by date."""

    @abstractmethod
    def min_max_date(self, subject: MetricsSubject,
                     date_range: DateRange = None) -> Optional[Tuple[date, date]]:
        pass

    @abstractmethod
    def distinct_dates(self, subject: MetricsSubject, date_range: DateRange = None,
                       clicked_only: bool = False) -> Set[date]:
        pass
