from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from matchday.api.dependencies import get_db
from matchday.models.user import User
from matchday.schemas import push_schemas
from matchday.services import auth_service, push_service

router = APIRouter()

@router.put("/token", status_code=status.HTTP_204_NO_CONTENT)
def register_push_token(
    token_in: push_schemas.PushTokenRegister,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    push_service.save_push_token(db=db, user_id=current_user.id, token=token_in.token)

@router.delete("/token", status_code=status.HTTP_204_NO_CONTENT)
def revoke_push_token(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    push_service.delete_push_token(db=db, user_id=current_user.id)
