"""Abstract base class for scenario repositories."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from apocaliptyx.models import StoredScenario


class RepositoryError(Exception):
    """Raised when the scenario store cannot answer a query or apply an update."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.message = message
        self.operation = operation
        super().__init__(self.message)


class ScenarioRepository(ABC):
    """Data-access gateway the duplicate detector reads candidates through.

    Implementations hand back flat ``StoredScenario`` objects and raise
    ``RepositoryError`` on any failure.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def find_by_hash(
        self, content_hash: str, exclude_id: Optional[str] = None
    ) -> List[StoredScenario]:
        """Return scenarios whose ``content_hash`` equals *content_hash*."""
        pass

    @abstractmethod
    async def find_active(
        self, exclude_id: Optional[str] = None, limit: Optional[int] = None
    ) -> List[StoredScenario]:
        """Return scenarios whose status is not ``CANCELLED``."""
        pass

    @abstractmethod
    async def find_missing_hash(self) -> List[StoredScenario]:
        """Return scenarios that have no ``content_hash`` yet."""
        pass

    @abstractmethod
    async def update_by_id(self, scenario_id: str, fields: Dict[str, Any]) -> None:
        """Apply a partial update to one scenario."""
        pass
