import click
from flask import current_app
from flask.cli import with_appcontext

from ..errors import ServiceError


@click.command('reconcile-mirror')
@click.option('--id', 'achievement_id', default=None, help='Repair a single achievement only')
@with_appcontext
def reconcile_mirror(achievement_id):
    """Rewrite the relational achievement mirror from the document store."""
    try:
        written = current_app.extensions['accolade']['achievements'].reconcile_mirror(achievement_id)
    except ServiceError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)
    click.echo(f"{written} mirror row(s) reconciled.")
