import click
from typing import Any, Dict, Mapping, Tuple

from catalog.composer import DEPENDENT_KEYS, LIST_KEYS
from catalog.errors import CatalogError
from catalog.models import DEPENDENTS, EntityKind
from catalog.services import Redirect
from ..utils import fail, parse_fields, print_errors, print_record

FIELD_OPTION = click.option(
    '-f', '--field', 'fields', multiple=True, metavar='FIELD=VALUE',
    help='Submitted field; repeat the option for each field (and for each genre)'
)

def summarize(kind: EntityKind, item: Dict[str, Any]) -> str:
    """One-line description of a listed record"""
    if kind is EntityKind.AUTHOR:
        return f"{item['name']} ({item['lifespan']})"
    if kind is EntityKind.GENRE:
        return item['name']
    if kind is EntityKind.BOOK:
        # Dependents lists carry the bare author id, list views the resolved author
        author = item.get('author')
        return f"{item['title']} by {author['name']}" if isinstance(author, Mapping) else item['title']

    book = item.get('book')
    label = book['title'] if isinstance(book, Mapping) else f"book {item.get('book_id') or book}"
    line = f"{label}: {item['imprint']} [{item['status']}]"
    if item['status'] != 'Available' and item.get('due_back_formatted'):
        line += f" due {item['due_back_formatted']}"
    return line

def run(obj, *args, **kwargs):
    try:
        return obj.handler.handle(*args, **kwargs)
    except CatalogError as e:
        fail(f"Error: {str(e)}")

@click.command(name="list")
@click.argument('kind')
@click.pass_obj
def list_records(obj, kind: str):
    """
    List every record of KIND in its default order.

    KIND is one of authors, genres, books or bookinstances.
    """
    view = run(obj, 'list', kind)
    kind = EntityKind.parse(kind)
    items = view.context[LIST_KEYS[kind]]

    click.echo("\n" + click.style(view.context['title'], fg='blue', bold=True))
    if not items:
        click.echo(f"No {kind.value} records.")
    for item in items:
        click.echo(click.style(f"[{item['id']}] ", fg='cyan') + summarize(kind, item))

@click.command()
@click.argument('kind')
@click.argument('entity_id')
@click.pass_obj
def show(obj, kind: str, entity_id: str):
    """Show one record with the records that reference it"""
    view = run(obj, 'detail', kind, {'id': entity_id})
    kind = EntityKind.parse(kind)

    click.echo("\n" + click.style(view.context['title'], fg='blue', bold=True))
    print_record(view.context[kind.value])
    if kind in DEPENDENT_KEYS:
        dependents = view.context[DEPENDENT_KEYS[kind]]
        click.echo(click.style(f"\nReferenced by {len(dependents)} record(s)", fg='blue'))
        dependent_kind = DEPENDENTS[kind][0]
        for item in dependents:
            click.echo(click.style(f"  [{item['id']}] ", fg='cyan') + summarize(dependent_kind, item))

def report_submission(response, action: str) -> None:
    if isinstance(response, Redirect):
        click.echo(click.style(f"{action}: ", fg='green') + click.style(response.path, fg='cyan'))
        return
    click.echo(click.style("Not saved, the submission has errors:", fg='red'))
    print_errors(response.context['errors'])
    raise click.exceptions.Exit(1)

@click.command()
@click.argument('kind')
@FIELD_OPTION
@click.pass_obj
def create(obj, kind: str, fields: Tuple[str, ...]):
    """
    Create a record of KIND from -f field=value options.

    Creating a genre whose name already exists returns the existing genre.
    """
    report_submission(run(obj, 'create_post', kind, raw_fields=parse_fields(fields)), "Saved")

@click.command()
@click.argument('kind')
@click.argument('entity_id')
@FIELD_OPTION
@click.pass_obj
def update(obj, kind: str, entity_id: str, fields: Tuple[str, ...]):
    """
    Replace every field of a record.

    Fields that are not given are submitted empty, as a form would submit them.
    """
    response = run(obj, 'update_post', kind, {'id': entity_id}, parse_fields(fields))
    report_submission(response, "Updated")

@click.command()
@click.argument('kind')
@click.argument('entity_id')
@click.pass_obj
def delete(obj, kind: str, entity_id: str):
    """Delete a record unless other records still reference it"""
    response = run(obj, 'delete_post', kind, {'id': entity_id})
    if isinstance(response, Redirect):
        click.echo(click.style(f"Deleted {EntityKind.parse(kind).value} {entity_id}", fg='green'))
        return

    kind = EntityKind.parse(kind)
    dependents = response.context[DEPENDENT_KEYS[kind]]
    click.echo(click.style(
        f"Cannot delete {kind.value} {entity_id}: still referenced by {len(dependents)} record(s)",
        fg='yellow'
    ))
    dependent_kind = DEPENDENTS[kind][0]
    for item in dependents:
        click.echo(click.style(f"  [{item['id']}] ", fg='cyan') + summarize(dependent_kind, item))
    raise click.exceptions.Exit(1)
