from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from chronochef.core.database import Base


class UserSession(Base):
    """Server-side login session, looked up by the id stored in the client cookie."""
    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sess = Column(JSON, nullable=False, default=dict)
    expire = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="sessions")

    __table_args__ = (Index("IDX_session_expire", "expire"),)
