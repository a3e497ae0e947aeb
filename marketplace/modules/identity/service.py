# marketplace/modules/identity/service.py
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.orm import Session

from marketplace.config.settings import settings
from marketplace.core.auth.service import AuthService
from marketplace.core.clock import utcnow
from marketplace.core.exceptions import UpstreamServiceError, ValidationError
from marketplace.shared.services.email_service import EmailService
from .repository import IdentityRepository
from .schemas import ClientType, ResetRole

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired reset token"
RESET_REQUESTED_MESSAGE = "If an account exists for this email, a password reset link has been sent"


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class CredentialResetService:
    """Single-use, time-bound password reset tokens scoped to an account role"""

    def __init__(
        self,
        db: Session,
        mail_sender: EmailService,
        clock: Callable[[], datetime] = utcnow
    ):
        self.db = db
        self.mail_sender = mail_sender
        self.clock = clock
        self.repository = IdentityRepository(db)

    async def request_reset(self, email: str, role: ResetRole, client_type: ClientType = ClientType.WEB) -> None:
        """
        Issue a reset token and mail the link.

        Unknown email/role combinations are a silent no-op. When the mail
        cannot be sent the stored token is cleared again and the caller gets
        the same outcome as for an unknown account.
        """
        account = self.repository.get_account_by_email_and_role(email, role.value)
        if account is None:
            logger.info(f"Password reset requested for unknown {role.value} account")
            return

        raw_token = secrets.token_hex(20)
        token_hash = hash_reset_token(raw_token)
        expires_at = self.clock() + timedelta(minutes=settings.reset_token_expire_minutes)

        self.repository.store_reset_token(account.id, token_hash, expires_at)

        reset_url = f"{settings.reset_base_url(client_type.value)}/reset-password/{raw_token}"

        try:
            await self.mail_sender.send_password_reset(
                to_email=account.email,
                user_name=account.name,
                reset_url=reset_url,
                role=role.value
            )
        except UpstreamServiceError:
            logger.error(f"Reset email failed for account {account.id}, token invalidated")
            self.repository.clear_reset_token(account.id, token_hash)
            return

        logger.info(f"Password reset token issued for {role.value} account {account.id}")

    async def consume_reset(self, raw_token: str, role: ResetRole, new_password: str) -> None:
        """Replace the credential if the token is valid; any mismatch gets the same error"""
        if not raw_token:
            raise ValidationError(INVALID_TOKEN_MESSAGE)

        consumed = self.repository.consume_reset_token(
            token_hash=hash_reset_token(raw_token),
            role=role.value,
            now=self.clock(),
            new_password_hash=AuthService.get_password_hash(new_password)
        )

        if not consumed:
            raise ValidationError(INVALID_TOKEN_MESSAGE)

        logger.info(f"Password reset completed for a {role.value} account")
