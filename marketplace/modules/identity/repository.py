# marketplace/modules/identity/repository.py
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from marketplace.shared.database.models import User
import logging

logger = logging.getLogger(__name__)

class IdentityRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_account_by_email_and_role(self, email: str, role: str) -> Optional[User]:
        return self.db.query(User).filter(
            User.email == email,
            User.role == role,
            User.is_active.is_(True)
        ).first()

    def store_reset_token(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        """Replace any previous reset token for the account"""
        self.db.query(User).filter(User.id == user_id).update(
            {
                User.reset_password_token: token_hash,
                User.reset_password_expire: expires_at
            },
            synchronize_session=False
        )
        self.db.commit()

    def clear_reset_token(self, user_id: int, token_hash: str) -> None:
        """Invalidate a token, unless a newer one already replaced it"""
        self.db.query(User).filter(
            User.id == user_id,
            User.reset_password_token == token_hash
        ).update(
            {
                User.reset_password_token: None,
                User.reset_password_expire: None
            },
            synchronize_session=False
        )
        self.db.commit()

    def consume_reset_token(self, token_hash: str, role: str, now: datetime, new_password_hash: str) -> bool:
        """
        Set the new credential and clear the token in one conditional write.

        Returns False when no account holds an unexpired token with that hash
        for that role.
        """
        try:
            updated = self.db.query(User).filter(
                User.reset_password_token == token_hash,
                User.role == role,
                User.reset_password_expire > now
            ).update(
                {
                    User.password_hash: new_password_hash,
                    User.reset_password_token: None,
                    User.reset_password_expire: None
                },
                synchronize_session=False
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return updated == 1
