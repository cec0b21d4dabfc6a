"""
Database access for users and their saved recipes.

Every recipe query carries an ``user_id ==`` predicate; there is no way
through this module to read or remove another user's rows.
"""
import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chronochef.core.database import get_db
from chronochef.core.exceptions import DuplicateKeyError
from chronochef.models.saved_recipe import SavedRecipe
from chronochef.models.user import User
from chronochef.schemas.recipe import SavedRecipeInsert, UserRecipeForm
from chronochef.schemas.user import UserUpsert

logger = logging.getLogger(__name__)


class RecipeStore:
    """CRUD over ``saved_recipes``, always scoped to one owner per call."""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: str):
        return self.db.query(SavedRecipe).filter(SavedRecipe.user_id == user_id)

    def _insert(self, insert: SavedRecipeInsert) -> SavedRecipe:
        saved = SavedRecipe(**insert.model_dump())
        self.db.add(saved)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(saved)
        logger.info(
            "Saved recipe %s for user %s (source=%s, category=%s)",
            saved.id, saved.user_id, saved.source, saved.category,
        )
        return saved

    def save_recipe(self, insert: SavedRecipeInsert) -> SavedRecipe:
        """Insert a row and return it with its id and timestamp."""
        return self._insert(insert)

    def add_user_recipe(self, form: UserRecipeForm, user_id: str) -> SavedRecipe:
        """Insert a recipe typed in by the user; source is always "user-added"."""
        insert = form.to_insert(user_id)
        return self._insert(insert.model_copy(update={"source": "user-added"}))

    def get_saved_recipes(self, user_id: str) -> List[SavedRecipe]:
        """All of the owner's rows, oldest first."""
        return self._owned(user_id).order_by(
            SavedRecipe.created_at.asc(), SavedRecipe.id.asc()
        ).all()

    def get_saved_recipes_by_category(
        self, user_id: str, category: Optional[str] = None
    ) -> List[SavedRecipe]:
        """Like get_saved_recipes, narrowed to one category when given."""
        query = self._owned(user_id)
        if category:
            query = query.filter(SavedRecipe.category == category)
        return query.order_by(SavedRecipe.created_at.asc(), SavedRecipe.id.asc()).all()

    def delete_saved_recipe(self, recipe_id: int, user_id: str) -> None:
        """
        Delete the row matching both id and owner.

        No match is not an error: deleting twice, or deleting someone
        else's id, does nothing.
        """
        deleted = self._owned(user_id).filter(
            SavedRecipe.id == recipe_id
        ).delete(synchronize_session=False)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if deleted:
            logger.info("Deleted recipe %s for user %s", recipe_id, user_id)
        else:
            logger.debug("No recipe %s owned by user %s to delete", recipe_id, user_id)


class UserStore:
    """Lookups and writes for ``users`` with unique-constraint semantics."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, **fields) -> User:
        """
        Insert a new user.

        Raises:
            DuplicateKeyError: email or username already taken
        """
        email = fields.get("email")
        username = fields.get("username")
        if email and self.get_user_by_email(email):
            raise DuplicateKeyError("email")
        if username and self.get_user_by_username(username):
            raise DuplicateKeyError("username")

        user = User(**fields)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent sign-up
            self.db.rollback()
            raise DuplicateKeyError("email" if email and "email" in str(e.orig) else "username")
        self.db.refresh(user)
        logger.info("Created user %s", user.id)
        return user

    def upsert_user(self, data: UserUpsert) -> User:
        """Insert, or merge profile fields into the user with the same id."""
        values = data.model_dump(exclude_unset=True)
        user = self.get_user(data.id)
        if user is None:
            user = User(**values)
            self.db.add(user)
        else:
            for field, value in values.items():
                if field != "id":
                    setattr(user, field, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateKeyError("email" if "email" in str(e.orig) else "username")
        self.db.refresh(user)
        return user


def get_recipe_store(db: Session = Depends(get_db)) -> RecipeStore:
    return RecipeStore(db)


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)
