import os

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise RuntimeError(
            "SECRET_KEY environment variable is required. "
            "Set it via: export SECRET_KEY='your-secure-random-key'"
        )

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f"sqlite:///{os.path.join(basedir, 'data', 'app.db')}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie security (flash messages live in the session)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'

    # Origin encoded into QR codes; falls back to the request host when empty
    PUBLIC_BASE_URL = os.environ.get('PUBLIC_BASE_URL', '')

    # Bulk generation
    BULK_USER_COUNT = int(os.environ.get('BULK_USER_COUNT', 10))
    BULK_CREATE_WORKERS = int(os.environ.get('BULK_CREATE_WORKERS', 10))

    # Scan-count increments run on a background thread unless disabled
    DETACHED_WRITES = True
