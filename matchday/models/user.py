import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from matchday.core.database import Base
from matchday.utils.datetime_utils import utcnow

class UserRole(str, enum.Enum):
    MAIN_ADMIN = "main_admin"
    SUB_ADMIN = "sub_admin"
    MEMBER = "member"
    DORMANT = "dormant"

ADMIN_ROLES = frozenset({UserRole.MAIN_ADMIN.value, UserRole.SUB_ADMIN.value})

class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('main_admin', 'sub_admin', 'member', 'dormant')", name="ck_users_role"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True) # Null for Google-only accounts
    google_id = Column(String, unique=True, index=True, nullable=True)
    role = Column(String, nullable=False, default=UserRole.MEMBER.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    votes = relationship("Vote", back_populates="user")
    comments = relationship("Comment", back_populates="user")
    notifications = relationship("Notification", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_dormant(self) -> bool:
        return self.role == UserRole.DORMANT.value
