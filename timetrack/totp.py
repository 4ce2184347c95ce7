"""
Time-based one-time code generation for the second login factor.
"""
import logging

import pyotp

from timetrack.errors import GenerationError

logger = logging.getLogger(__name__)


class TOTPGenerator:
    """Produces the current TOTP code for a base32 secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("TOTP secret is required")
        self._totp = pyotp.TOTP(secret.replace(" ", ""))

    def generate(self) -> str:
        try:
            return self._totp.now()
        except Exception as e:
            raise GenerationError(f"Failed to generate TOTP code: {e}") from e
