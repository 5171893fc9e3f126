import click
from flask import current_app
from flask.cli import with_appcontext

from .. import db


@click.command('init-db')
@with_appcontext
def init_db():
    """Create relational tables and document store indexes."""
    from .. import models  # noqa: F401

    db.create_all()
    current_app.extensions['accolade']['achievement_store'].ensure_indexes()
    click.echo("Database initialized.")
