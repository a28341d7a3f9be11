"""
Collects the resources (scopes with their own base URI) of a schema document.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from jsonsdraft.draft import Draft, Position
from jsonsdraft.urlutil import UrlError, escape, join_url, normalize_url, split

logger = logging.getLogger(__name__)


class InvalidIdError(Exception):
    """
    Raised when a schema's identifier cannot be resolved against its base URI.

    Attributes:
        ptr: JSON Pointer of the schema carrying the identifier.
        id: The identifier value.
    """

    def __init__(self, ptr: str, id: Optional[str] = None, base: Optional[str] = None) -> None:
        self.ptr = ptr
        self.id = id
        self.base = base
        super().__init__(f"invalid id {id!r} at {ptr!r}" + (f" (base {base})" if base else ''))


@dataclass(frozen=True)
class Resource:
    """A scope of a schema document, identified by an absolute URI without fragment."""
    id: str

    def __str__(self) -> str:
        return self.id


def iter_subschemas(draft: Draft, obj: Dict[str, Any], ptr: str) -> Iterator[Tuple[str, Any]]:
    """
    Yield (pointer, value) for every subschema position of a schema object.

    Values are yielded whatever their JSON type; callers skip non-objects.
    """
    for kw, pos in draft.subschemas.items():
        if kw not in obj:
            continue
        value = obj[kw]
        if Position.SELF in pos:
            yield f'{ptr}/{kw}', value
        if Position.ITEM in pos and isinstance(value, list):
            for i, item in enumerate(value):
                yield f'{ptr}/{kw}/{i}', item
        if Position.PROP in pos and isinstance(value, dict):
            for pname, pvalue in value.items():
                yield f'{ptr}/{kw}/{escape(pname)}', pvalue


def collect_resources(draft: Draft, json_doc: Any, base: str, ptr: str = '',
                      resources: Optional[Dict[str, Resource]] = None) -> Dict[str, Resource]:
    """
    Map the JSON Pointer of every resource in a schema document to its identity.

    A schema object declaring the draft's identifier keyword starts a new
    resource whose URI is the identifier resolved against the enclosing base
    URI, fragment removed. The document root is always a resource.

    Args:
        draft: The draft whose keywords are used to locate subschemas.
        json_doc: The schema value at ``ptr``.
        base: Absolute base URI in effect for ``json_doc``.
        ptr: JSON Pointer of ``json_doc`` within the document; '' for the root.
        resources: Map to add to; a new one is created when omitted.

    Returns:
        The resource map.

    Raises:
        InvalidIdError: If an identifier cannot be resolved. Collection stops
            there and the map must be discarded.
        UrlError: If ``base`` is not an absolute URL.
    """
    if resources is None:
        resources = {}
    # (node, base URI in effect for the node, pointer of the node)
    stack: List[Tuple[Any, str, str]] = [(json_doc, base, ptr)]
    while stack:
        node, node_base, node_ptr = stack.pop()
        node_id = node.get(draft.id) if isinstance(node, dict) else None
        if isinstance(node_id, str):
            try:
                node_base, _ = split(join_url(node_base, split(node_id)[0]))
            except UrlError as e:
                raise InvalidIdError(node_ptr, node_id, node_base) from e
            resources[node_ptr] = Resource(node_base)
            logger.debug("Resource %s at %r", node_base, node_ptr)
        elif not node_ptr:
            node_base, _ = split(normalize_url(node_base))
            resources[node_ptr] = Resource(node_base)
        if not isinstance(node, dict):
            continue

        children = [(child, node_base, child_ptr) for child_ptr, child in iter_subschemas(draft, node, node_ptr)]
        stack.extend(reversed(children))
    return resources
