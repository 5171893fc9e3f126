import click
from flask import current_app
from flask.cli import with_appcontext

from ..errors import ServiceError
from ..models import Role


@click.command('create-admin')
@click.option('--username', prompt=True, help='Admin username')
@click.option('--email', prompt=True, help='Admin email')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Admin password')
@click.option('--full-name', default=None, help='Full name (defaults to username)')
@with_appcontext
def create_admin(username, email, password, full_name):
    """Create a user holding the admin role."""
    username = str(username).strip()

    admin_role = Role.get_by_name(current_app.config['ADMIN_ROLE'])
    if not admin_role:
        click.echo("Error: admin role not found. Run `flask seed-roles` first.", err=True)
        raise SystemExit(1)

    try:
        user = current_app.extensions['accolade']['users'].create(
            username=username,
            email=email,
            password=password,
            full_name=full_name or username,
            role_id=admin_role.id,
        )
    except ServiceError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)

    click.echo(f"Admin user '{user.username}' created.")
