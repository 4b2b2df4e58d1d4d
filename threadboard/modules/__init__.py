"""
Modules package initialization.
This package contains all the functional modules of the application.
"""

from threadboard.modules import auth
from threadboard.modules import user_management
from threadboard.modules import posts
