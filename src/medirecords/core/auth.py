"""
Authentication service for HIPAA compliance.
Supports API key authentication via X-API-Key or Authorization Bearer headers.

This service validates API keys to identify users accessing PHI.
All PHI access must be authenticated for HIPAA compliance.
"""

import logging
from typing import Dict, Optional

from ..application.dto.record_dto import RequestContext
from ..application.ports.services.auth_gate import AuthGate
from ..domain.value_objects.identity import Identity
from .config import AuthSettings, get_settings
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AuthService(AuthGate):
    """Authentication service for validating users and API keys"""

    def __init__(self, api_keys: Optional[str] = None, allowed_user_domain: Optional[str] = None):
        """Initialize authentication service with API keys from arguments or settings"""
        self.api_keys: Dict[str, str] = {}
        self.allowed_user_domain = allowed_user_domain

        if api_keys is None:
            auth_settings: AuthSettings = get_settings().auth
            api_keys = auth_settings.api_keys
            self.allowed_user_domain = allowed_user_domain or auth_settings.allowed_user_domain

        self._parse_api_keys(api_keys)
        if self.api_keys:
            logger.info(f"✅ Loaded {len(self.api_keys)} API key(s)")
        else:
            logger.warning("⚠️  No API keys configured. Authentication will fail for all requests.")

    def _parse_api_keys(self, api_keys_str: str) -> None:
        """
        Parse API keys string.
        Format: "key1:user1,key2:user2" (comma-separated key:user pairs)
        """
        if not api_keys_str or not api_keys_str.strip():
            return

        for pair in api_keys_str.split(","):
            pair = pair.strip()
            if not pair:
                continue

            if ":" in pair:
                key, user_id = (part.strip() for part in pair.split(":", 1))
                if key and user_id:
                    self.api_keys[key] = user_id
            else:
                # If no colon, use the key itself as user identifier
                self.api_keys[pair] = pair

    def validate_api_key(self, api_key: Optional[str]) -> str:
        """
        Validate API key and return user ID.

        Raises:
            AuthenticationError: If API key is invalid or missing
        """
        if not api_key:
            raise AuthenticationError(
                "Authentication required. Provide X-API-Key header or Authorization Bearer token."
            )

        # Remove "Bearer " prefix if present
        if api_key.startswith("Bearer "):
            api_key = api_key[7:].strip()

        user_id = self.api_keys.get(api_key)
        if user_id is None:
            logger.warning(f"❌ Invalid API key attempted: {api_key[:4]}...")
            raise AuthenticationError("Invalid API key or token")

        if self.allowed_user_domain and not user_id.endswith(self.allowed_user_domain):
            logger.warning(f"❌ User outside allowed domain rejected: {user_id}")
            raise AuthenticationError("User is not permitted", {"user_id": user_id})

        logger.debug(f"✅ API key validated for user: {user_id}")
        return user_id

    def get_user_from_request(self, api_key: Optional[str] = None, auth_header: Optional[str] = None) -> str:
        """
        Extract and validate user ID from request headers.

        Priority:
        1. X-API-Key header
        2. Authorization Bearer token
        """
        if api_key:
            return self.validate_api_key(api_key)

        if auth_header:
            if auth_header.startswith("Bearer "):
                return self.validate_api_key(auth_header[7:].strip())
            raise AuthenticationError("Unsupported authorization scheme")

        raise AuthenticationError(
            "Authentication required. Provide X-API-Key header or Authorization Bearer token."
        )

    async def authenticate(self, context: RequestContext) -> Optional[Identity]:
        """Resolve the request's credentials to an identity."""
        user_id = self.get_user_from_request(
            api_key=context.api_key, auth_header=context.authorization
        )
        return Identity(user_id)


# Global instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get global authentication service instance (singleton)"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
