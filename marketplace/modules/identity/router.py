# marketplace/modules/identity/router.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from marketplace.config.database import get_db
from marketplace.shared.services.email_service import EmailService, get_email_service
from .service import CredentialResetService, RESET_REQUESTED_MESSAGE
from .schemas import ResetRole, ForgotPasswordRequest, ResetPasswordRequest, PasswordResetResponse

router = APIRouter()

@router.post("/{role}/forgot-password", response_model=PasswordResetResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    role: ResetRole = Path(..., description="Account role: customer, vendor or delivery"),
    db: Session = Depends(get_db),
    mail_sender: EmailService = Depends(get_email_service)
):
    """
    Request a password reset link

    **Behaviour:**
    - Looks up the account only within the given role
    - Same answer whether or not the account exists
    - Link valid for 30 minutes, usable once
    - `client_type` (web, android, ios) selects the link base URL
    """
    service = CredentialResetService(db, mail_sender)
    await service.request_reset(payload.email, role, payload.client_type)

    return PasswordResetResponse(success=True, message=RESET_REQUESTED_MESSAGE)

@router.put("/{role}/reset-password/{reset_token}", response_model=PasswordResetResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    role: ResetRole = Path(..., description="Account role: customer, vendor or delivery"),
    reset_token: str = Path(..., description="Raw token from the reset link"),
    db: Session = Depends(get_db),
    mail_sender: EmailService = Depends(get_email_service)
):
    """
    Set a new password with a reset token

    **Errors:**
    - 400 for a wrong, expired, already used or other-role token (single message)
    """
    service = CredentialResetService(db, mail_sender)
    await service.consume_reset(reset_token, role, payload.password)

    return PasswordResetResponse(success=True, message="Password reset successful")
