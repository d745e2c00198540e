"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification and reset links for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints links instead of mailing them.
    """

    def send_verification_link(self, email: str, url: str) -> None:
        """
        Log the verification link (simulates email delivery).

        Args:
            email: Recipient email address (normalized by domain layer)
            url: Signed verification URL
        """
        logger.info("[VERIFICATION] Email: %s Link: %s", email, url)

    def send_password_reset_link(self, email: str, url: str) -> None:
        """
        Log the password reset link (simulates email delivery).

        Args:
            email: Recipient email address
            url: Reset URL carrying the token
        """
        logger.info("[PASSWORD RESET] Email: %s Link: %s", email, url)
