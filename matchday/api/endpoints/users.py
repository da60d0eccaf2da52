from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from matchday.api.dependencies import get_db
from matchday.models.user import User
from matchday.schemas import user_schemas
from matchday.services import auth_service, user_service

router = APIRouter()

@router.get("/me", response_model=user_schemas.UserRead)
def read_users_me(
    current_user: User = Depends(auth_service.get_current_user)
):
    return current_user

@router.post("/me/activate", response_model=user_schemas.UserRead)
def activate_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    return user_service.activate_dormant_user(db=db, user=current_user)

@router.get("/", response_model=List[user_schemas.UserRead])
def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(auth_service.get_admin_user),
):
    return user_service.list_users(db=db)

@router.patch("/{user_id}/role", response_model=user_schemas.UserRead)
def change_user_role(
    user_id: int,
    role_in: user_schemas.RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_active_user),
):
    return user_service.change_role(db=db, actor=current_user, target_user_id=user_id, new_role=role_in.role)
