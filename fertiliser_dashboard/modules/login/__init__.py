"""
Login module package exports.

- LoginController: sign-in flow (user lookup, bcrypt check, lockout).
- LoginForm: username/password dialog.
"""

from .controller import LoginController
from .form import LoginForm

__all__ = [
    "LoginController",
    "LoginForm",
]
