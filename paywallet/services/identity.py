"""
Identity document verification provider
"""

import logging
from typing import Optional

import httpx

from paywallet.core.config import settings
from paywallet.schemas.requests import VerifyIdentityRequest

# Configure logging
logger = logging.getLogger(__name__)


class IdentityProvider:
    """Base identity provider interface"""

    async def verify_documents(self, request: VerifyIdentityRequest) -> bool:
        """
        Check the ID card images and selfie against the declared identity.

        Args:
            request: Identity verification request with base64 images

        Returns:
            True when the documents match the declared identity
        """
        raise NotImplementedError


class MockIdentityProvider(IdentityProvider):
    """Mock provider for development: any complete set of documents passes"""

    async def verify_documents(self, request):
        logger.info(f"Mock identity check for CIN {request.cin_number}")
        return all([request.cin_front_image, request.cin_back_image, request.selfie_image])


class HttpIdentityProvider(IdentityProvider):
    """Calls an external KYC API over HTTP"""

    def __init__(self, api_url: str, api_key: str, timeout: float = 30.0):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def verify_documents(self, request):
        payload = {
            "cin_number": request.cin_number,
            "full_name": request.full_name,
            "date_of_birth": request.date_of_birth.isoformat(),
            "cin_front_image": request.cin_front_image,
            "cin_back_image": request.cin_back_image,
            "selfie_image": request.selfie_image,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.api_url}/verifications",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"}
            )
            response.raise_for_status()
            data = response.json()

        verified = bool(data.get("verified"))
        logger.info(f"Identity provider answered verified={verified} for CIN {request.cin_number}")
        return verified


# Global provider instance
_provider: Optional[IdentityProvider] = None


def get_identity_provider() -> IdentityProvider:
    """Get the configured identity provider"""
    global _provider
    if _provider is None:
        if settings.kyc_api_url and settings.kyc_api_key:
            _provider = HttpIdentityProvider(settings.kyc_api_url, settings.kyc_api_key)
        else:
            _provider = MockIdentityProvider()
    return _provider


def set_identity_provider(provider: IdentityProvider) -> None:
    global _provider
    _provider = provider
