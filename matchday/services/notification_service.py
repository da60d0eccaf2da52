import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from matchday.models.match import Match
from matchday.models.notification import Notification
from matchday.models.user import User, UserRole

logger = logging.getLogger(__name__)

NEW_MATCH_TITLE = "A new match has been scheduled!"

def format_match_announcement(match: Match) -> str:
    when = match.match_date.isoformat()
    if match.match_start_time is not None:
        when += f" {match.match_start_time:02d}:00"
    return f"{match.title}\n{when} @ {match.location}"

def create_notification(db: Session, user_id: int, title: str, message: str) -> Notification:
    db_notification = Notification(user_id=user_id, title=title, message=message)
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification

def notify_members_of_new_match(db: Session, match: Match) -> List[Notification]:
    """Drop a new-match entry into the inbox of every member who is not dormant."""
    recipients = db.query(User.id).filter(User.role != UserRole.DORMANT.value).all()
    message = format_match_announcement(match)
    notifications = [
        Notification(user_id=user_id, title=NEW_MATCH_TITLE, message=message)
        for (user_id,) in recipients
    ]
    if not notifications:
        return []
    db.add_all(notifications)
    db.commit()
    logger.info(f"Created {len(notifications)} new-match notifications for match {match.id}")
    return notifications

def get_user_notifications(db: Session, user_id: int, skip: int = 0, limit: int = 100) -> List[Notification]:
    return db.query(Notification)\
        .filter(Notification.user_id == user_id)\
        .order_by(Notification.created_at.desc(), Notification.id.desc())\
        .offset(skip)\
        .limit(limit)\
        .all()

def mark_notification_as_read(db: Session, notification_id: int, current_user_id: int) -> Optional[Notification]:
    db_notification = db.query(Notification).filter(Notification.id == notification_id).first()

    if not db_notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")

    if db_notification.user_id != current_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to mark this notification as read")

    if not db_notification.read: # Avoid unnecessary db write if already read
        db_notification.read = True
        db.commit()
        db.refresh(db_notification)

    return db_notification

def mark_all_user_notifications_as_read(db: Session, current_user_id: int) -> List[Notification]:
    unread_notifications = db.query(Notification)\
        .filter(Notification.user_id == current_user_id, Notification.read.is_(False))\
        .all()

    if not unread_notifications:
        return []

    for notification in unread_notifications:
        notification.read = True

    db.commit()
    return unread_notifications
