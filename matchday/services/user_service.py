import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from matchday.core import security
from matchday.models.user import User, UserRole
from matchday.schemas import user_schemas

logger = logging.getLogger(__name__)

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()

def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

def create_user(db: Session, user_in: user_schemas.UserCreate) -> User:
    """Register a new member with an email/password login."""
    if get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"User with email {user_in.email} already exists")

    db_user = User(
        name=user_in.name,
        email=user_in.email.lower(),
        hashed_password=security.get_password_hash(user_in.password),
        role=UserRole.MEMBER.value,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")
    return db_user

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not user.hashed_password:
        return None
    if not security.verify_password(password, user.hashed_password):
        return None
    return user

def change_role(db: Session, actor: User, target_user_id: int, new_role: UserRole) -> User:
    """
    Change another member's role.

    Only the main admin may do this, the main admin's own role is fixed,
    and main_admin itself cannot be handed out.
    """
    if actor.role != UserRole.MAIN_ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the main admin can change roles")

    target = get_user_by_id(db, target_user_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if target.role == UserRole.MAIN_ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="The main admin's role cannot be changed")

    new_role = UserRole(new_role)
    if new_role == UserRole.MAIN_ADMIN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The main_admin role cannot be granted")

    if target.role != new_role.value:
        logger.info(f"User {actor.id} changed role of user {target.id}: {target.role} -> {new_role.value}")
        target.role = new_role.value
        db.commit()
        db.refresh(target)
    return target

def activate_dormant_user(db: Session, user: User) -> User:
    if user.role != UserRole.DORMANT.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Account is not dormant")
    user.role = UserRole.MEMBER.value
    db.commit()
    db.refresh(user)
    return user
