"""
Record store client for the ``users`` table.

All database access of the application goes through ``UserStore``. Database
errors are translated into ``FetchError`` / ``WriteError`` here so callers
never handle SQLAlchemy exceptions directly.
"""

import logging
from datetime import datetime

from sqlalchemy import update as sa_update
from sqlalchemy.exc import SQLAlchemyError

from models import db, User
from .errors import FetchError, WriteError, RecordNotFound

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = (
    'name', 'email', 'phone', 'address', 'gender', 'dob', 'occupation',
    'interests', 'newsletter', 'country', 'qr_code_url', 'no_of_times_scanned',
)


class UserStore:
    """Thin CRUD layer over Flask-SQLAlchemy. Needs an active app context."""

    def create(self, fields):
        """Insert a user and return it with its store-assigned id."""
        u = User(**{k: v for k, v in fields.items() if k in WRITABLE_FIELDS})
        u.created_at = datetime.utcnow()
        try:
            db.session.add(u)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Failed to insert user')
            raise WriteError(f'Could not create user: {e}') from e
        return u

    def update(self, user_id, patch):
        """Apply ``patch`` to one user as a single UPDATE statement."""
        unknown = set(patch) - set(WRITABLE_FIELDS)
        if unknown:
            raise ValueError(f'Unknown user fields: {", ".join(sorted(unknown))}')
        values = dict(patch, updated_at=datetime.utcnow())
        try:
            # no read before the write: concurrent SQLite writers only wait on the lock
            result = db.session.execute(
                sa_update(User).where(User.id == user_id).values(**values)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Failed to update user %s', user_id)
            raise WriteError(f'Could not update user {user_id}: {e}') from e
        if result.rowcount == 0:
            raise RecordNotFound(user_id)

    def fetch_all(self):
        """All users, newest first."""
        try:
            return User.query.order_by(User.created_at.desc()).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Failed to fetch users')
            raise FetchError(f'Could not load users: {e}') from e

    def fetch_one(self, user_id):
        try:
            u = User.query.filter_by(id=user_id).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Failed to fetch user %s', user_id)
            raise FetchError(f'Could not load user {user_id}: {e}') from e
        if u is None:
            raise RecordNotFound(user_id)
        return u
