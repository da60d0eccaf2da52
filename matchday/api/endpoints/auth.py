from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from matchday.api.dependencies import get_db
from matchday.core import security
from matchday.models.user import User
from matchday.schemas import auth_schemas, user_schemas
from matchday.services import auth_service, user_service

router = APIRouter()

def _issue_token(user: User) -> auth_schemas.Token:
    # The subject of the token ('sub') is the user's email
    access_token = security.create_access_token(data={"sub": user.email})
    return auth_schemas.Token(access_token=access_token, token_type="bearer", is_dormant=user.is_dormant)

@router.post("/signup", response_model=user_schemas.UserRead, status_code=status.HTTP_201_CREATED)
def signup(user_in: user_schemas.UserCreate, db: Session = Depends(get_db)):
    return user_service.create_user(db=db, user_in=user_in)

@router.post("/login", response_model=auth_schemas.Token)
def login(request: auth_schemas.LoginRequest, db: Session = Depends(get_db)):
    user = user_service.authenticate_user(db=db, email=request.email, password=request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)

@router.post("/google", response_model=auth_schemas.Token)
def login_with_google(
    request: auth_schemas.GoogleLoginRequest,
    db: Session = Depends(get_db)
):
    user = auth_service.verify_google_id_token(token=request.token, db=db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not verify Google token or create user",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)
