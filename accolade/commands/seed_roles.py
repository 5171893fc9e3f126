import click
from flask import current_app
from flask.cli import with_appcontext

from .. import db
from ..models import Role


@click.command('seed-roles')
@with_appcontext
def seed_roles():
    """Create the default role catalog entries that are missing."""
    created = 0
    for name, description in current_app.config['DEFAULT_ROLES'].items():
        if Role.get_by_name(name):
            continue
        db.session.add(Role(name=name, description=description))
        created += 1
    db.session.commit()
    click.echo(f"{created} role(s) created.")
