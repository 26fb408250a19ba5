# userqr/blueprints/users/__init__.py
"""
Users Blueprint

Responsible for:
- List view (search, country filter, pagination)
- Add user form
- Bulk random add
- User detail with scan counter
"""

from flask import Blueprint

users_bp = Blueprint('users', __name__, url_prefix='/')

# Import routes after blueprint creation to avoid circular imports
from . import routes
