# -*- coding: utf-8 -*-
"""Biometric — platform credential wrapper.

A successful ceremony proves that the same physical device/user verified,
not which account is signed in. The bridge therefore holds no account
identity; ``AuthController`` pairs it with ``Profile.is_biometric_enabled``.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from ..config import settings

logger = logging.getLogger(__name__)

CHALLENGE_BYTES = 32
USER_HANDLE_BYTES = 16
# ES256 and RS256.
PUB_KEY_CRED_PARAMS = [{"alg": -7, "type": "public-key"}, {"alg": -257, "type": "public-key"}]


class PlatformCredentialAPI(Protocol):
    async def create(self, options: Dict[str, Any]) -> Any: ...

    async def get(self, options: Dict[str, Any]) -> Any: ...

    async def is_verifying_platform_authenticator_available(self) -> bool: ...


@dataclass(frozen=True)
class AccountHint:
    email: str
    display_name: str = ""


class BiometricBridge:
    def __init__(
        self,
        platform: Optional[PlatformCredentialAPI],
        *,
        timeout_sec: float | None = None,
        rp_name: str | None = None,
    ) -> None:
        self.platform = platform
        self.timeout_sec = settings.biometric_timeout_sec if timeout_sec is None else timeout_sec
        self.rp_name = rp_name or settings.rp_name

    async def is_available(self) -> bool:
        if self.platform is None:
            return False
        try:
            return bool(await self.platform.is_verifying_platform_authenticator_available())
        except Exception as exc:
            logger.debug("Authenticator availability probe failed: %s", exc)
            return False

    def registration_options(self, hint: AccountHint) -> Dict[str, Any]:
        return {
            "publicKey": {
                "challenge": secrets.token_bytes(CHALLENGE_BYTES),
                "rp": {"name": self.rp_name},
                "user": {
                    "id": secrets.token_bytes(USER_HANDLE_BYTES),
                    "name": hint.email or "user",
                    "displayName": hint.display_name or "User",
                },
                "pubKeyCredParams": PUB_KEY_CRED_PARAMS,
                "authenticatorSelection": {
                    "authenticatorAttachment": "platform",
                    "userVerification": "required",
                },
                "timeout": int(self.timeout_sec * 1000),
                "attestation": "none",
            }
        }

    def assertion_options(self) -> Dict[str, Any]:
        return {
            "publicKey": {
                "challenge": secrets.token_bytes(CHALLENGE_BYTES),
                "userVerification": "required",
                "timeout": int(self.timeout_sec * 1000),
            }
        }

    async def register(self, hint: AccountHint) -> bool:
        if self.platform is None:
            return False
        try:
            credential = await asyncio.wait_for(
                self.platform.create(self.registration_options(hint)), timeout=self.timeout_sec
            )
        except asyncio.TimeoutError:
            logger.info("Biometric registration timed out after %.0fs", self.timeout_sec)
            return False
        except Exception as exc:
            logger.error("Biometric registration error: %s", exc)
            return False
        return credential is not None

    async def authenticate(self) -> bool:
        if self.platform is None:
            return False
        try:
            assertion = await asyncio.wait_for(
                self.platform.get(self.assertion_options()), timeout=self.timeout_sec
            )
        except asyncio.TimeoutError:
            logger.info("Biometric assertion timed out after %.0fs", self.timeout_sec)
            return False
        except Exception as exc:
            logger.debug("Biometric auth error/cancelled: %s", exc)
            return False
        return assertion is not None
