# peso_tracker/outputs/base.py
from abc import ABC, abstractmethod


class BaseOutput(ABC):
    """Exporter for expanded transaction rows."""

    @abstractmethod
    def append(self, transactions, month=None):
        """Write the rows, labelled with ``month`` (YYYY-MM) when given, and return the path."""
