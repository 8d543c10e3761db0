"""
Authentication gate interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.value_objects.identity import Identity
from ...dto.record_dto import RequestContext


class AuthGate(ABC):
    """Resolves the caller's credentials to an identity."""

    @abstractmethod
    async def authenticate(self, context: RequestContext) -> Optional[Identity]:
        """Return the caller's identity, ``None``, or raise ``AuthenticationError``."""
        pass
