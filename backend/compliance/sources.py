"""Data the engine consumes from its collaborators."""

from abc import ABC, abstractmethod
from typing import Optional

from .types import Document, Worker, WorkWeek


class ComplianceDataSource(ABC):
    """Loads the records a check needs. Implementations perform the I/O."""

    @abstractmethod
    async def load_week_with_entries(self, week_id: str) -> Optional[WorkWeek]:
        """The week with all its entries, or None if it does not exist."""

    @abstractmethod
    async def load_worker(self, worker_id: str) -> Optional[Worker]:
        """The worker, or None if it does not exist."""

    @abstractmethod
    async def load_documents(self, worker_id: str) -> list[Document]:
        """Every compliance document on file for the worker, revoked ones included."""
