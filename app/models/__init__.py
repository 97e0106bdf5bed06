from app.models.product import Product
from app.models.rbac import Role, UserRole
from app.models.user import User

__all__ = ["Product", "Role", "UserRole", "User"]
