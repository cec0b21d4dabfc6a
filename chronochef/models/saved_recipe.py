from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chronochef.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in development/tests)
StringList = JSON().with_variant(JSONB(), "postgresql")


class SavedRecipe(Base):
    """
    A recipe kept in a user's collection.

    Rows are either saved from a generation result (source="generated") or
    typed in by the user (source="user-added"). They are never updated in
    place: created on save/add, removed on delete.
    """
    __tablename__ = "saved_recipes"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    recipe_name = Column(Text, nullable=False)
    recipe_description = Column(Text, nullable=False)
    cook_time = Column(Text, nullable=False)
    ingredients = Column(StringList, nullable=False)  # List of strings
    instructions = Column(StringList, nullable=False)  # List of strings

    category = Column(String(32), nullable=False, default="main-entrees", server_default="main-entrees", index=True)
    source = Column(String(16), nullable=False, default="generated", server_default="generated")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    owner = relationship("User", back_populates="saved_recipes")

    def __repr__(self):
        return f"<SavedRecipe(id={self.id}, user_id={self.user_id}, name={self.recipe_name!r})>"
