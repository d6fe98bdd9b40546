# catalog/validation.py
import logging
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Set, Union

from catalog.models import (
    BookInstanceStatus, Entity, EntityKind, ENTITY_TYPES, FieldError
)

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100

# Characters replaced with HTML entities in every free-text value
ESCAPES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
    '\\': '&#x5C;',
    '`': '&#96;',
})

ALPHANUMERIC = re.compile(r'[0-9A-Za-z]+')

FieldRule = Callable[[Mapping[str, Any]], List[FieldError]]

class ValidationResult(NamedTuple):
    normalized: Entity
    errors: List[FieldError]

    @property
    def ok(self) -> bool:
        return not self.errors

# Normalizers

def sanitize(value: Any) -> str:
    """Trim surrounding whitespace and escape markup-significant characters"""
    if value is None:
        return ''
    return str(value).strip().translate(ESCAPES)

def normalize_selection(value: Any) -> Set[str]:
    """Turn an absent, scalar or multi-valued form selection into a set of ids"""
    if value is None:
        return set()
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    if isinstance(value, (str, int)):
        return {sanitize(value)}
    return {sanitize(item) for item in value}

def parse_date(value: Any) -> Union[date, str, None]:
    """Parse an optional ISO-8601 date.

    Falsy input means the field was left blank. Input that does not parse
    is returned as sanitized text so the form can show it again.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return sanitize(text)

def status_or_default(value: Any) -> str:
    """Maintenance when the field was not submitted; anything else is checked"""
    if value is None:
        return BookInstanceStatus.MAINTENANCE.value
    return sanitize(value)

# Field rules

def required(field: str, message: str) -> FieldRule:
    def rule(values: Mapping[str, Any]) -> List[FieldError]:
        if values.get(field):
            return []
        return [FieldError(field=field, message=message)]
    return rule

def alphanumeric(field: str, message: str) -> FieldRule:
    def rule(values: Mapping[str, Any]) -> List[FieldError]:
        value = values.get(field)
        if not value or ALPHANUMERIC.fullmatch(value):
            return []
        return [FieldError(field=field, message=message)]
    return rule

def max_length(field: str, limit: int, message: str) -> FieldRule:
    def rule(values: Mapping[str, Any]) -> List[FieldError]:
        value = values.get(field) or ''
        if len(value) <= limit:
            return []
        return [FieldError(field=field, message=message)]
    return rule

def valid_date(field: str, message: str) -> FieldRule:
    def rule(values: Mapping[str, Any]) -> List[FieldError]:
        value = values.get(field)
        if value is None or isinstance(value, date):
            return []
        return [FieldError(field=field, message=message)]
    return rule

def one_of(field: str, choices: Iterable[str], message: str) -> FieldRule:
    allowed = frozenset(choices)

    def rule(values: Mapping[str, Any]) -> List[FieldError]:
        value = values.get(field)
        if value in allowed:
            return []
        return [FieldError(field=field, message=message)]
    return rule

NORMALIZERS: Dict[EntityKind, Dict[str, Callable[[Any], Any]]] = {
    EntityKind.AUTHOR: {
        'first_name': sanitize,
        'family_name': sanitize,
        'date_of_birth': parse_date,
        'date_of_death': parse_date,
    },
    EntityKind.GENRE: {
        'name': sanitize,
    },
    EntityKind.BOOK: {
        'title': sanitize,
        'author': sanitize,
        'summary': sanitize,
        'isbn': sanitize,
        'genres': normalize_selection,
    },
    EntityKind.BOOK_INSTANCE: {
        'book': sanitize,
        'imprint': sanitize,
        'status': status_or_default,
        'due_back': parse_date,
    },
}

RULES: Dict[EntityKind, List[FieldRule]] = {
    EntityKind.AUTHOR: [
        required('first_name', 'First name must be specified'),
        alphanumeric('first_name', 'First name has non-alphanumeric characters.'),
        max_length('first_name', NAME_MAX_LENGTH, f'First name must be at most {NAME_MAX_LENGTH} characters'),
        required('family_name', 'Family name must be specified'),
        alphanumeric('family_name', 'Family name has non-alphanumeric characters'),
        max_length('family_name', NAME_MAX_LENGTH, f'Family name must be at most {NAME_MAX_LENGTH} characters'),
        valid_date('date_of_birth', 'Invalid date of birth'),
        valid_date('date_of_death', 'Invalid date of death'),
    ],
    EntityKind.GENRE: [
        required('name', 'Genre name required'),
    ],
    EntityKind.BOOK: [
        required('title', 'Title must not be empty.'),
        required('author', 'Author must not be empty.'),
        required('summary', 'Summary must not be empty.'),
        required('isbn', 'ISBN must not be empty'),
    ],
    EntityKind.BOOK_INSTANCE: [
        required('book', 'Book must be specified'),
        required('imprint', 'Imprint must be specified'),
        one_of('status', [s.value for s in BookInstanceStatus], 'Invalid status'),
        valid_date('due_back', 'Invalid date'),
    ],
}

def _field_value(raw_fields: Any, field: str) -> Any:
    if isinstance(raw_fields, Mapping):
        return raw_fields.get(field)
    return getattr(raw_fields, field, None)

def normalize(kind: EntityKind, raw_fields: Any) -> Dict[str, Any]:
    """Sanitize every submitted field of a kind. Missing fields normalize too."""
    return {
        field: normalizer(_field_value(raw_fields, field))
        for field, normalizer in NORMALIZERS[kind].items()
    }

def validate(kind: Union[EntityKind, str], raw_fields: Any, entity_id: Any = None) -> ValidationResult:
    """Normalize submitted fields and run every rule of the kind.

    No rule short-circuits another: the result lists every failure across
    every field, in rule order. The normalized draft is returned either way
    so that a rejected form can be shown again with the user's input.

    Args:
        kind: Entity kind the fields describe
        raw_fields: Mapping (or object with attributes) of submitted values
        entity_id: Id of the record being updated, carried on the draft

    Returns:
        ValidationResult with the normalized draft and the field errors
    """
    kind = EntityKind.parse(kind)
    values = normalize(kind, raw_fields or {})
    errors = [error for rule in RULES[kind] for error in rule(values)]

    if entity_id is not None:
        values['id'] = str(entity_id)

    entity_type = ENTITY_TYPES[kind]
    if errors:
        logger.debug("Rejected %s: %s", kind.value, [e.message for e in errors])
        draft = entity_type.model_construct(**values)
    else:
        draft = entity_type(**values)
    return ValidationResult(draft, errors)
