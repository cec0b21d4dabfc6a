from chronochef.models.saved_recipe import SavedRecipe
from chronochef.models.session import UserSession
from chronochef.models.user import User

__all__ = ["SavedRecipe", "User", "UserSession"]
