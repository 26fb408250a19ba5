import enum
import uuid
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

# SQLAlchemy instance (init in app)
db = SQLAlchemy()


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable WAL mode and a busy timeout so concurrent writers wait instead of failing."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def init_db_events(app):
    """Initialize database event listeners for SQLite."""
    if app.config.get('SQLALCHEMY_DATABASE_URI', '').startswith('sqlite'):
        with app.app_context():
            event.listen(db.engine, "connect", _set_sqlite_pragma)


def _new_id():
    return str(uuid.uuid4())


class ImageState(enum.Enum):
    """Two-phase creation: a user is inserted first, its QR code is attached afterwards."""
    CREATED = 'created'
    IMAGE_ATTACHED = 'image_attached'


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(50), nullable=False)
    address = db.Column(db.String(300), nullable=False)
    gender = db.Column(db.String(20), nullable=False)
    dob = db.Column(db.String(10), nullable=False)  # ISO date, YYYY-MM-DD
    occupation = db.Column(db.String(200), nullable=False)
    interests = db.Column(db.JSON, nullable=False, default=list)
    newsletter = db.Column(db.Boolean, nullable=False, default=False)
    country = db.Column(db.String(10), nullable=False)
    qr_code_url = db.Column(db.Text, nullable=True)
    no_of_times_scanned = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def image_state(self):
        if self.qr_code_url:
            return ImageState.IMAGE_ATTACHED
        return ImageState.CREATED

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'gender': self.gender,
            'dob': self.dob,
            'occupation': self.occupation,
            'interests': list(self.interests or []),
            'newsletter': bool(self.newsletter),
            'country': self.country,
            'qr_code_url': self.qr_code_url,
            'no_of_times_scanned': self.no_of_times_scanned or 0,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<User {self.id} {self.name}>"
