# cli/utils.py
from typing import Any, Dict, Iterable, Mapping, Tuple

import click

def parse_fields(pairs: Iterable[str]) -> Dict[str, Any]:
    """Turn repeated field=value options into a form submission.

    A field given more than once collects its values in a list, which is how
    several genres are selected for a book.
    """
    fields: Dict[str, Any] = {}
    for pair in pairs:
        if '=' not in pair:
            raise click.BadParameter(f"Expected field=value, got '{pair}'", param_hint='--field')
        name, value = pair.split('=', 1)
        name = name.strip()
        if name in fields:
            current = fields[name]
            fields[name] = (current if isinstance(current, list) else [current]) + [value]
        else:
            fields[name] = value
    return fields

def print_record(data: Mapping[str, Any], skip: Tuple[str, ...] = ('url',), indent: str = "") -> None:
    """Print a presented record as aligned name/value lines"""
    for key, value in data.items():
        if key in skip or value is None or value == '':
            continue
        if isinstance(value, Mapping):
            label = value.get('title') or value.get('name') or value.get('id')
            value = f"{label} ({value.get('url', '')})"
        elif isinstance(value, list):
            value = ', '.join(
                str(v.get('title') or v.get('name') or v.get('id')) if isinstance(v, Mapping) else str(v)
                for v in value
            )
        click.echo(indent + click.style(f"{key}: ", fg='blue') + click.style(str(value), fg='cyan'))

def print_errors(errors: Iterable[Mapping[str, Any]]) -> None:
    for error in errors:
        click.echo(click.style(f"  {error['field']}: {error['message']}", fg='red'))

def fail(message: str, code: int = 1) -> None:
    """Report an error in red on stderr and stop the command"""
    click.echo(click.style(message, fg='red'), err=True)
    raise click.exceptions.Exit(code)
