"""
JSON Schema dialect registry.

One immutable ``Draft`` per specification release (draft-04, draft-06,
draft-07, 2019-09 and 2020-12). A draft knows the keyword that declares a
schema's identifier, whether boolean schemas are legal, and which keywords
hold subschemas in which positions.
"""

import enum
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from jsonsdraft.constants import META_SCHEMA_URLS
from jsonsdraft.urlutil import UrlError, path_unescape, split

logger = logging.getLogger(__name__)


class Position(enum.Flag):
    """Where a keyword's value holds subschemas."""
    SELF = enum.auto()  # the value is a schema
    PROP = enum.auto()  # the values of the object are schemas
    ITEM = enum.auto()  # the elements of the array are schemas


class UnknownDraftError(ValueError):
    """Raised when a draft name or ordinal does not denote a known draft."""


# (ordinal that introduced the keyword, keyword, positions)
_SUBSCHEMA_KEYWORDS: List[Tuple[int, str, Position]] = [
    # core
    (4, 'definitions', Position.PROP),
    (4, 'not', Position.SELF),
    (4, 'allOf', Position.ITEM),
    (4, 'anyOf', Position.ITEM),
    (4, 'oneOf', Position.ITEM),
    # object
    (4, 'properties', Position.PROP),
    (4, 'additionalProperties', Position.SELF),
    (4, 'patternProperties', Position.PROP),
    # array
    (4, 'items', Position.SELF | Position.ITEM),
    (4, 'additionalItems', Position.SELF),
    (4, 'dependencies', Position.PROP),
    (6, 'propertyNames', Position.SELF),
    (6, 'contains', Position.SELF),
    (7, 'if', Position.SELF),
    (7, 'then', Position.SELF),
    (7, 'else', Position.SELF),
    (2019, '$defs', Position.PROP),
    (2019, 'dependentSchemas', Position.PROP),
    (2019, 'unevaluatedProperties', Position.SELF),
    (2019, 'unevaluatedItems', Position.SELF),
    # 'items' keeps its tuple form next to prefixItems
    (2020, 'prefixItems', Position.ITEM),
]


@dataclass(frozen=True, eq=False)
class Draft:
    """
    One JSON Schema dialect.

    Attributes:
        version: Ordinal of the release (4, 6, 7, 2019, 2020); later releases compare greater.
        id: The keyword declaring a schema's own identifier ('id' or '$id').
        bool_schema: Whether true/false are legal schemas.
        subschemas: Read-only map of keyword to the positions holding subschemas.
        url: Canonical meta-schema URL of the draft.
    """
    version: int
    id: str
    bool_schema: bool
    subschemas: Mapping[str, Position]
    url: str

    def __repr__(self) -> str:
        return f'Draft({self.version})'


def _build_draft(version: int) -> Draft:
    subschemas: Dict[str, Position] = {}
    for since, keyword, position in _SUBSCHEMA_KEYWORDS:
        if since <= version:
            subschemas[keyword] = subschemas.get(keyword, Position(0)) | position
    return Draft(
        version=version,
        id='id' if version < 6 else '$id',
        bool_schema=version >= 6,
        subschemas=MappingProxyType(subschemas),
        url=META_SCHEMA_URLS[version],
    )


# built once at import; the import lock makes this thread-safe
_DRAFTS: Mapping[int, Draft] = MappingProxyType({v: _build_draft(v) for v in (4, 6, 7, 2019, 2020)})

_URL_SUFFIXES: Mapping[str, int] = MappingProxyType({
    'json-schema.org/schema': max(_DRAFTS),
    'json-schema.org/draft/2020-12/schema': 2020,
    'json-schema.org/draft/2019-09/schema': 2019,
    'json-schema.org/draft-07/schema': 7,
    'json-schema.org/draft-06/schema': 6,
    'json-schema.org/draft-04/schema': 4,
})

_DRAFT_NAMES: Mapping[str, int] = MappingProxyType({
    'latest': max(_DRAFTS),
    '4': 4, 'draft4': 4, 'draft-04': 4,
    '6': 6, 'draft6': 6, 'draft-06': 6,
    '7': 7, 'draft7': 7, 'draft-07': 7,
    '2019': 2019, '2019-09': 2019, 'draft2019-09': 2019,
    '2020': 2020, '2020-12': 2020, 'draft2020-12': 2020,
})


def latest() -> Draft:
    """Return the most recent draft."""
    return _DRAFTS[max(_DRAFTS)]


def all_drafts() -> List[Draft]:
    """Return every known draft, oldest first."""
    return [_DRAFTS[v] for v in sorted(_DRAFTS)]


def get_draft(version: Union[int, str, Draft]) -> Draft:
    """
    Look up a draft by ordinal or name.

    Args:
        version: An ordinal such as 7 or 2020, or a name such as 'draft7',
            '2019-09' or 'latest'. A Draft is returned as it is.

    Raises:
        UnknownDraftError: If the value does not denote a known draft.
    """
    if isinstance(version, Draft):
        return version
    if isinstance(version, int) and not isinstance(version, bool):
        ordinal = version if version in _DRAFTS else None
    else:
        ordinal = _DRAFT_NAMES.get(str(version).strip().lower())
    if ordinal is None:
        raise UnknownDraftError(f"Unknown JSON Schema draft: {version!r}")
    return _DRAFTS[ordinal]


def draft_from_url(url: str) -> Optional[Draft]:
    """
    Find the draft whose meta-schema is identified by ``url``.

    The match ignores an http/https scheme and percent-encoding. URLs with a
    non-empty fragment never match.

    Returns:
        The draft, or None when the URL is not a known meta-schema URL.
    """
    url, fragment = split(url)
    if fragment:
        return None
    if url.startswith('http://'):
        url = url[len('http://'):]
    if url.startswith('https://'):
        url = url[len('https://'):]
    try:
        url = path_unescape(url)
    except UrlError:
        return None
    version = _URL_SUFFIXES.get(url)
    return _DRAFTS[version] if version is not None else None


def detect_draft(doc: Any, default: Draft) -> Draft:
    """
    Determine the draft of a schema document from its '$schema' keyword.

    Falls back to ``default`` when '$schema' is absent, not a string, or
    not a known meta-schema URL.
    """
    if isinstance(doc, dict):
        schema_url = doc.get('$schema')
        if isinstance(schema_url, str):
            draft = draft_from_url(schema_url)
            if draft is not None:
                return draft
            logger.warning("Unknown $schema %s, using draft %s", schema_url, default.version)
    return default
