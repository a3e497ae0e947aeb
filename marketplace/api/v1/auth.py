from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from marketplace.config.database import get_db
from marketplace.core.auth.service import AuthService
from marketplace.core.auth.schemas import UserLogin, TokenResponse, UserResponse
from marketplace.shared.database.models import User
from marketplace.core.auth.dependencies import get_current_user

router = APIRouter()

@router.post("/login-json", response_model=TokenResponse)
async def login_json(
    user_login: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login for every role

    **Body:**
    ```json
        {
            "email": "user@example.com",
            "password": "password123"
        }
    ```
    """
    user = db.query(User).filter(User.email == user_login.email).first()

    if not user or not AuthService.verify_password(user_login.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User inactive"
        )

    access_token = AuthService.create_access_token(data={
        "user_id": user.id,
        "email": user.email,
        "role": user.role
    })

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Current account information

    **Required headers:**
    - Authorization: Bearer {token}
    """
    return UserResponse.model_validate(current_user)
