from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from matchday.api.dependencies import get_db
from matchday.models.user import User
from matchday.schemas import notification_schemas
from matchday.services import auth_service, notification_service

router = APIRouter()

@router.get("/", response_model=List[notification_schemas.NotificationRead])
def get_user_notifications_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
    skip: int = 0,
    limit: int = 100,
):
    return notification_service.get_user_notifications(
        db=db, user_id=current_user.id, skip=skip, limit=limit
    )

@router.patch("/{notification_id}/read", response_model=notification_schemas.NotificationRead)
def mark_notification_as_read_endpoint(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    # Service raises HTTPException for not found or forbidden
    return notification_service.mark_notification_as_read(
        db=db, notification_id=notification_id, current_user_id=current_user.id
    )

@router.post("/read-all", response_model=List[notification_schemas.NotificationRead])
def mark_all_user_notifications_as_read_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    return notification_service.mark_all_user_notifications_as_read(
        db=db, current_user_id=current_user.id
    )
