"""Query parameter translation for book listings.

Request parameters use the bracket convention for comparisons::

    ?genre=Fantasy                     equality
    ?genre=Fantasy&genre=Mystery       membership
    ?publication_year[gte]=2000        comparison
    ?genre[in]=Fantasy,Mystery         membership

Only the operators in ``FilterOperator`` are understood and only whitelisted
model fields can be referenced. Anything else is rejected with
``InvalidQueryError`` so no lookup syntax reaches the ORM unchecked.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Model, Q

from .exceptions import InvalidQueryError

# Control parameters consumed by pagination, projection and ordering
RESERVED_PARAMS = frozenset({'select', 'sort', 'page', 'limit'})

DEFAULT_SORT = ('-created_at',)

_PARAM_PATTERN = re.compile(
    r'^(?P<field>[A-Za-z_][A-Za-z0-9_]*)(?:\[(?P<operator>[^\[\]]*)\])?$'
)
_NAME_SEPARATOR = re.compile(r'[\s,]+')


class FilterOperator(Enum):
    """Comparison operators; values are the matching ORM lookups."""

    EQUALS = 'exact'
    GT = 'gt'
    GTE = 'gte'
    LT = 'lt'
    LTE = 'lte'
    IN = 'in'


# Tokens accepted inside brackets; equality is expressed by a plain key
WIRE_OPERATORS = {
    'gt': FilterOperator.GT,
    'gte': FilterOperator.GTE,
    'lt': FilterOperator.LT,
    'lte': FilterOperator.LTE,
    'in': FilterOperator.IN,
}


@dataclass(frozen=True)
class FilterClause:
    """One field constraint of a query filter."""

    field: str
    operator: FilterOperator
    value: Any

    def to_q(self) -> Q:
        return Q(**{f'{self.field}__{self.operator.value}': self.value})


def parse_filter_params(
    params: Mapping,
    *,
    model: type[Model],
    allowed_fields: Iterable[str],
) -> list[FilterClause]:
    """
    Build filter clauses from request query parameters.

    Reserved control keys (select, sort, page, limit) are skipped.

    Args:
        params: QueryDict or plain mapping of str -> str | list[str]
        model: Model whose fields are filtered
        allowed_fields: Field names callers may filter on

    Returns:
        Clauses in parameter order

    Raises:
        InvalidQueryError: On unknown fields, unknown operators or values
            the model field cannot accept
    """
    allowed = frozenset(allowed_fields)
    clauses = []

    for key, values in _iter_param_lists(params):
        if key in RESERVED_PARAMS:
            continue

        match = _PARAM_PATTERN.match(key)
        if match is None:
            raise InvalidQueryError(f"Invalid filter parameter '{key}'")

        field = match.group('field')
        token = match.group('operator')

        if field not in allowed:
            raise InvalidQueryError(f"Filtering on '{field}' is not supported")

        if token is None:
            operator = FilterOperator.EQUALS if len(values) == 1 else FilterOperator.IN
        else:
            operator = WIRE_OPERATORS.get(token.strip().lower())
            if operator is None:
                raise InvalidQueryError(
                    f"Unsupported operator '{token}' for '{field}'. "
                    f"Use one of: {', '.join(WIRE_OPERATORS)}"
                )

        value = _coerce_value(model, field, operator, values)
        clauses.append(FilterClause(field=field, operator=operator, value=value))

    return clauses


def build_filter_q(clauses: Iterable[FilterClause]) -> Q:
    """AND all clauses together; no clauses matches everything."""
    condition = Q()
    for clause in clauses:
        condition &= clause.to_q()
    return condition


def parse_field_list(raw: Optional[str], *, allowed_fields: Iterable[str]) -> list[str]:
    """
    Parse a ``select`` parameter into an ordered list of field names.

    ``id`` is always included first when anything is selected.

    Raises:
        InvalidQueryError: If a name is not an allowed field
    """
    names = _split_names(raw)
    if not names:
        return []

    allowed = frozenset(allowed_fields)
    fields = ['id']
    for name in names:
        if name not in allowed:
            raise InvalidQueryError(f"Unknown field '{name}' in select")
        if name not in fields:
            fields.append(name)
    return fields


def parse_sort(
    raw: Optional[str],
    *,
    allowed_fields: Iterable[str],
    default: Iterable[str] = DEFAULT_SORT,
) -> list[str]:
    """
    Parse a ``sort`` parameter into ORM ordering expressions.

    A leading ``-`` sorts descending. Without a sort parameter the
    default (newest first) applies.

    Raises:
        InvalidQueryError: If a name is not an allowed field
    """
    names = _split_names(raw)
    if not names:
        return list(default)

    allowed = frozenset(allowed_fields)
    ordering = []
    seen = set()
    for token in names:
        descending = token.startswith('-')
        name = token[1:] if descending else token
        if name not in allowed:
            raise InvalidQueryError(f"Unknown field '{name}' in sort")
        if name in seen:
            continue
        seen.add(name)
        ordering.append(f'-{name}' if descending else name)
    return ordering


def _iter_param_lists(params: Mapping) -> Iterator[tuple[str, list]]:
    """Yield (key, values) pairs from a QueryDict or a plain mapping."""
    if hasattr(params, 'lists'):
        yield from params.lists()
        return
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            yield key, list(value)
        else:
            yield key, [value]


def _coerce_value(model, field_name, operator, raw_values):
    model_field = model._meta.get_field(field_name)

    if operator is FilterOperator.IN:
        parts = [
            part.strip()
            for raw in raw_values
            for part in str(raw).split(',')
            if part.strip()
        ]
        if not parts:
            raise InvalidQueryError(f"No values given for '{field_name}[in]'")
        return [_to_python(model_field, part) for part in parts]

    # Repeated comparison keys: the last one wins, like QueryDict.__getitem__
    value = _to_python(model_field, raw_values[-1])
    if value is None and operator is not FilterOperator.EQUALS:
        raise InvalidQueryError(f"A value is required for '{field_name}[{operator.value}]'")
    return value


def _to_python(model_field, raw):
    try:
        return model_field.to_python(raw)
    except DjangoValidationError:
        raise InvalidQueryError(f"Invalid value '{raw}' for '{model_field.name}'")


def _split_names(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [name for name in _NAME_SEPARATOR.split(str(raw).strip()) if name]
