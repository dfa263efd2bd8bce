"""
Repositories: one stateless class per entity.

Every method takes the SQLAlchemy ``Session`` as its first argument and returns
plain dicts. Methods that write commit the session themselves.
"""
from .user import User
from .restaurant import Restaurant
from .restaurant_user import RestaurantUser
from .category import Category
from .invoice import Invoice
from .expense import Expense

__all__ = ["User", "Restaurant", "RestaurantUser", "Category", "Invoice", "Expense"]
