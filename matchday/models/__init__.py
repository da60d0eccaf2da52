from matchday.core.database import Base

# Import all models here to ensure they are registered with Base.
# Tables are created on application startup, see matchday.main.
from .user import User, UserRole
from .match import Match, MatchStatus
from .vote import Vote, VoteStatus
from .comment import Comment
from .notification import Notification
from .push_token import PushToken
from .high_score import HighScore
