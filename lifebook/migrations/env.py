"""Alembic environment for Lifebook (primary store only)."""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from lifebook import create_app
from lifebook.core.storage.registry import load_models
from lifebook.extensions import db

config = context.config

if config.config_file_name:
    try:
        fileConfig(config.config_file_name)
    except (FileNotFoundError, KeyError):
        # Proceed without logging config if the ini is missing or incomplete
        pass

load_models()
target_metadata = db.metadata


def get_url() -> str:
    app = create_app(config.get_main_option("lifebook_env", "development"))
    url = app.config.get("SQLALCHEMY_DATABASE_URI")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; migrations only apply to the primary store")
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
