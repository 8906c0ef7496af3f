"""
Small typed builder for Drive search queries.
https://developers.google.com/drive/api/guides/search-files
A query is a tree of Terms joined with And/Or/Not, str() gives the
'q' parameter.  Literals are escaped here so callers never build
query strings by hand.

    q = title_is("Budget 2024") & in_folder(folder.id) & not_trashed()
    session.files(q)
"""
import datetime

_OPERATORS = ["=", "!=", "<", "<=", ">", ">=", "contains", "in"]

def literal(value) -> str:
    """Serialize a Python value as a Drive query literal"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        value = value.astimezone(datetime.timezone.utc)
        return "'" + value.strftime("%Y-%m-%dT%H:%M:%S") + "'"
    s = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{s}'"

class GoogleDriveQuery():
    """Base of the query tree, gives the &, | and ~ combinators"""
    def __and__(self, other):
        return And(self, other)

    def __or__(self, other):
        return Or(self, other)

    def __invert__(self):
        return Not(self)

    def __eq__(self, other) -> bool:
        return isinstance(other, GoogleDriveQuery) and str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r})"

class Term(GoogleDriveQuery):
    """
    field operator value, e.g. Term("name", "=", "foo") -> name = 'foo'
    The 'in' operator is written the other way round the way Drive expects,
    Term("parents", "in", "abc") -> 'abc' in parents
    """
    def __init__(self, field: str, operator: str, value) -> None:
        if operator not in _OPERATORS:
            raise ValueError(f"Invalid query operator: {operator}")
        self.field = str(field)
        self.operator = operator
        self.value = value

    def __str__(self) -> str:
        if self.operator == "in":
            return f"{literal(self.value)} in {self.field}"
        return f"{self.field} {self.operator} {literal(self.value)}"

class _Compound(GoogleDriveQuery):
    _joiner = ""

    def __init__(self, *terms: GoogleDriveQuery) -> None:
        if not terms:
            raise ValueError(f"{self.__class__.__name__} needs at least one term")
        self.terms = []
        for t in terms:
            # flatten a and (b and c) so the output doesn't grow parens for nothing
            if type(t) is type(self):
                self.terms.extend(t.terms)
            else:
                self.terms.append(t)

    def __str__(self) -> str:
        parts = [f"({t})" if isinstance(t, _Compound) and len(t.terms) > 1 else str(t)
                 for t in self.terms]
        return f" {self._joiner} ".join(parts)

class And(_Compound):
    _joiner = "and"

class Or(_Compound):
    _joiner = "or"

class Not(GoogleDriveQuery):
    def __init__(self, term: GoogleDriveQuery) -> None:
        self.term = term

    def __str__(self) -> str:
        return f"not ({self.term})" if isinstance(self.term, _Compound) else f"not {self.term}"

def title_is(title: str) -> Term:
    return Term("name", "=", title)

def title_contains(text: str) -> Term:
    return Term("name", "contains", text)

def in_folder(folder_id: str) -> Term:
    return Term("parents", "in", folder_id)

def mime_type_is(mime_type: str) -> Term:
    return Term("mimeType", "=", mime_type)

def not_trashed() -> Term:
    return Term("trashed", "=", False)
