"""Flask-SQLAlchemy and Flask-Migrate singletons.

Only import-safe objects live here. Network handles (Redis, the catalog HTTP
session) belong to the per-app container, see ``favapi.core.container``.
"""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Stable names for constraints the models leave unnamed (indexes, FKs, PKs)
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)

# autoflush off: repositories flush explicitly to surface constraint errors
# at the call that caused them.
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask) -> None:
    """Bind ``db`` and ``migrate`` to ``app``.

    Importing :mod:`favapi.models` registers the clients, sessions and
    favorites tables on ``metadata`` before Alembic inspects it.
    """
    db.init_app(app)

    from favapi import models as _models  # noqa: F401

    migrate.init_app(app, db)
