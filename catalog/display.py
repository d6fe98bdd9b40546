# catalog/display.py
"""Presentation values derived from stored records. Nothing here is persisted."""

from datetime import date
from typing import Any, Dict, Optional, Union

from catalog.models import Author, BookInstance, Entity, EntityKind, kind_of

def author_name(author: Author) -> str:
    """Full name, or an empty string unless both names are present"""
    if author.first_name and author.family_name:
        return f"{author.first_name} {author.family_name}"
    return ''

def url_for(kind: Union[EntityKind, str], entity_id: Any) -> str:
    return f"/catalog/{EntityKind.parse(kind).value}/{entity_id}"

def list_url(kind: Union[EntityKind, str]) -> str:
    return f"/catalog/{EntityKind.parse(kind).value}s"

def format_date(value: Optional[date]) -> str:
    """Medium date, e.g. 'Oct 17, 2026'"""
    if not isinstance(value, date):
        return ''
    return f"{value:%b} {value.day}, {value.year}"

def iso_date(value: Union[date, str, None]) -> str:
    """ISO form for pre-filling date inputs; unparsed input is passed through"""
    if isinstance(value, date):
        return value.isoformat()
    return value or ''

def lifespan(author: Author) -> str:
    return f"{format_date(author.date_of_birth)} - {format_date(author.date_of_death)}"

def present(entity: Entity) -> Dict[str, Any]:
    """JSON-ready mapping of an entity's fields plus its derived values"""
    kind = kind_of(entity)
    data = entity.model_dump(mode='json', warnings=False)
    if entity.id:
        data['url'] = url_for(kind, entity.id)

    if isinstance(entity, Author):
        data['name'] = author_name(entity)
        data['lifespan'] = lifespan(entity)
        for field in ('date_of_birth', 'date_of_death'):
            value = getattr(entity, field)
            data[f'{field}_formatted'] = format_date(value)
            data[f'{field}_iso'] = iso_date(value)
    elif isinstance(entity, BookInstance):
        data['due_back_formatted'] = format_date(entity.due_back)
        data['due_back_iso'] = iso_date(entity.due_back)
    elif kind is EntityKind.BOOK:
        data['genres'] = sorted(data.get('genres') or [], key=lambda g: (len(g), g))
    return data
