import logging
from logging.config import fileConfig
from sqlalchemy import engine_from_config
from sqlalchemy import pool
from alembic import context
from flask import current_app

# this file is used by alembic and Flask-Migrate
config = context.config
fileConfig(config.config_file_name)
logger = logging.getLogger('alembic.env')

# the app's database URL wins over alembic.ini
config.set_main_option('sqlalchemy.url', current_app.config['SQLALCHEMY_DATABASE_URI'].replace('%', '%%'))
target_metadata = current_app.extensions['migrate'].db.metadata


def _is_sqlite():
    return config.get_main_option('sqlalchemy.url').startswith('sqlite')


def run_migrations_offline():
    url = config.get_main_option('sqlalchemy.url')
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True,
                      render_as_batch=_is_sqlite())
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix='sqlalchemy.',
        poolclass=pool.NullPool)
    with connectable.connect() as connection:
        # SQLite cannot ALTER most columns in place; batch mode recreates the table
        context.configure(connection=connection, target_metadata=target_metadata,
                          render_as_batch=_is_sqlite(), compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
