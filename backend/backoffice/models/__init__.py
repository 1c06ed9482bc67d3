from .auth import User, SessionToken, ROLES, ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_STAFF
from .catalog import Product, Category
from .accounting import Invoice, Expense
from .audit import Transaction

__all__ = [
    'User', 'SessionToken', 'ROLES', 'ROLE_ADMIN', 'ROLE_SUPERVISOR', 'ROLE_STAFF',
    'Product', 'Category',
    'Invoice', 'Expense',
    'Transaction',
]
