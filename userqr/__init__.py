# userqr/__init__.py - Application Factory Pattern
"""
Flask application factory for the User QR System.
Used to make testing and configuration easier.
"""

import logging
import os
import sys

from flask import Flask
from flask.logging import default_handler


def _configure_logging(app):
    """Log to stdout (good for Docker); enable file logging with LOG_TO_FILE=1."""
    app.logger.removeHandler(default_handler)
    if app.logger.handlers:
        # already configured by an earlier app instance (tests)
        return
    if os.environ.get('LOG_TO_FILE') == '1':
        from logging.handlers import RotatingFileHandler
        try:
            os.makedirs('logs', exist_ok=True)
            file_handler = RotatingFileHandler('logs/app.log', maxBytes=10240, backupCount=3)
            file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
        except OSError:
            # fallback to stderr if file logging cannot be configured
            app.logger.addHandler(logging.StreamHandler(sys.stderr))
            app.logger.warning('Could not configure file logging; logs will be sent to stderr')
    else:
        app.logger.addHandler(logging.StreamHandler(sys.stdout))
    app.logger.setLevel(logging.INFO)


def create_app(config_class=None):
    """
    Application Factory Pattern

    Args:
        config_class: Configuration class (default: Config from config.py)

    Returns:
        Flask application instance
    """
    app = Flask(__name__,
                template_folder='../templates',
                static_folder='../static')

    # Load configuration
    if config_class is None:
        from config import Config
        config_class = Config
    app.config.from_object(config_class)

    _configure_logging(app)
    app.logger.info('Application startup')

    # Ensure data directory exists when using a local sqlite file
    db_uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if db_uri.startswith('sqlite:///'):
        db_dir = os.path.dirname(db_uri.replace('sqlite:///', ''))
        if db_dir and not os.path.exists(db_dir):
            try:
                os.makedirs(db_dir, exist_ok=True)
            except OSError:
                app.logger.warning(f'Could not create directory for sqlite DB: {db_dir}')

    # Initialize extensions
    from userqr.extensions import init_extensions
    init_extensions(app)

    # Register blueprints
    from userqr.blueprints.users import users_bp
    app.register_blueprint(users_bp)

    from userqr.constants import COUNTRIES, country_label

    @app.context_processor
    def inject_constants():
        return {'COUNTRIES': COUNTRIES, 'country_label': country_label}

    # CLI commands for database management
    import click
    from models import db

    @app.cli.command('init-db')
    def init_db():
        """Create database tables."""
        db.create_all()
        click.echo('Initialized the database.')

    @app.cli.command('seed-users')
    @click.option('--count', '-n', default=None, type=int, help='Number of random users (default: BULK_USER_COUNT)')
    def seed_users(count):
        """Create random users with QR codes: flask seed-users -n 50"""
        from userqr.creation import create_many_random
        from userqr.errors import BulkCreateError
        from userqr.store import UserStore

        count = count if count is not None else app.config['BULK_USER_COUNT']
        origin = app.config.get('PUBLIC_BASE_URL') or 'http://localhost:5000'
        try:
            created = create_many_random(UserStore(), origin, count=count,
                                         max_workers=app.config['BULK_CREATE_WORKERS'])
        except BulkCreateError as e:
            app.logger.exception('seed-users failed')
            click.echo(f'Seeding failed: {e}')
            return
        app.logger.info(f'Random users created by CLI: {created}')
        click.echo(f'Created {created} random users')

    @app.cli.command('backup-db')
    @click.option('--output', '-o', default=None, help='Output file path (default: data/backup_YYYYMMDD_HHMMSS.db)')
    def backup_db(output):
        """Create a safe backup of the SQLite database (works with WAL mode)."""
        import sqlite3
        from datetime import datetime

        if not db_uri.startswith('sqlite'):
            click.echo('Backup command only works with SQLite databases')
            return

        source_path = db_uri.replace('sqlite:///', '')
        if not os.path.exists(source_path):
            click.echo(f'Database file not found: {source_path}')
            return

        if not output:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            output = os.path.join(os.path.dirname(source_path), f'backup_{timestamp}.db')

        output_dir = os.path.dirname(output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        try:
            # SQLite backup API is safe while the app is running
            source_conn = sqlite3.connect(source_path)
            dest_conn = sqlite3.connect(output)
            source_conn.backup(dest_conn)
            source_conn.close()
            dest_conn.close()
        except sqlite3.Error as e:
            click.echo(f'Backup failed: {e}')
            app.logger.exception('Database backup failed')
            return

        size_mb = os.path.getsize(output) / (1024 * 1024)
        click.echo(f'Backup created successfully: {output} ({size_mb:.2f} MB)')
        app.logger.info(f'Database backup created: {output}')

    return app
