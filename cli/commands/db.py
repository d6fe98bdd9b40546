import click

from catalog.errors import CatalogError
from ..utils import fail

DASHBOARD_LABELS = [
    ('book_count', 'Books'),
    ('book_instance_count', 'Copies'),
    ('book_instance_available_count', 'Copies available'),
    ('author_count', 'Authors'),
    ('genre_count', 'Genres'),
]

@click.command(name="init-db")
@click.pass_obj
def init_db(obj):
    """Create the catalog tables if they do not exist"""
    try:
        obj.database.init_db()
    except Exception as e:
        fail(f"Error creating tables: {str(e)}")
    click.echo(click.style("Database ready: ", fg='green') +
               click.style(obj.database.engine.url.render_as_string(hide_password=True), fg='cyan'))

@click.command()
@click.pass_obj
def dashboard(obj):
    """Show record counts for the whole catalog"""
    try:
        view = obj.handler.handle('index')
    except CatalogError as e:
        fail(f"Error: {str(e)}")

    if view.context['error']:
        fail(f"Could not load counts: {view.context['error']}")

    click.echo("\n" + click.style(view.context['title'], fg='blue', bold=True))
    for key, label in DASHBOARD_LABELS:
        click.echo(click.style(f"{label}: ", fg='blue') +
                   click.style(str(view.context['data'][key]), fg='cyan'))
