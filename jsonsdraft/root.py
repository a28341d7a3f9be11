"""
A schema document together with its draft and resource map.
"""

from typing import Any, Dict, List, Optional, Tuple

import jsonpointer
from jsonpointer import JsonPointerException

from jsonsdraft.anchors import has_anchor
from jsonsdraft.draft import Draft, detect_draft, latest
from jsonsdraft.resources import Resource, collect_resources, iter_subschemas
from jsonsdraft.urlutil import join_url, normalize_url, path_unescape, split


class ResourceNotFoundError(LookupError):
    """Raised when no resource of the document has the requested URI."""


class AnchorNotFoundError(LookupError):
    """Raised when no schema in a resource declares the requested anchor."""


class PointerNotFoundError(LookupError):
    """Raised when a JSON Pointer does not lead to a value in the document."""


class SchemaRoot:
    """
    One parsed schema document.

    Attributes:
        url: The retrieval URL of the document, without fragment.
        doc: The parsed JSON document.
        draft: The draft the document is interpreted with.
        resources: Map of JSON Pointer to the resource starting there.
    """

    def __init__(self, url: str, doc: Any, draft: Optional[Draft] = None,
                 default_draft: Optional[Draft] = None) -> None:
        self.url, _ = split(normalize_url(url))
        self.doc = doc
        self.draft = draft or detect_draft(doc, default_draft or latest())
        self.resources: Dict[str, Resource] = collect_resources(self.draft, doc, self.url)

    def node_at(self, ptr: str) -> Any:
        """Return the value at a JSON Pointer."""
        try:
            return jsonpointer.resolve_pointer(self.doc, ptr)
        except JsonPointerException as e:
            raise PointerNotFoundError(f"{ptr!r} not found in {self.url}") from e

    def resource_for(self, ptr: str) -> Tuple[str, Resource]:
        """Return the pointer and identity of the innermost resource containing ``ptr``."""
        best = ''
        for res_ptr in self.resources:
            if len(res_ptr) > len(best) and (ptr == res_ptr or ptr.startswith(res_ptr + '/')):
                best = res_ptr
        return best, self.resources[best]

    def find_anchor(self, resource_ptr: str, anchor: str) -> Optional[str]:
        """
        Search a resource for the schema declaring ``anchor``.

        Nested resources with a different URI are not searched.

        Returns:
            The JSON Pointer of the schema, or None.
        """
        scope = self.resources[resource_ptr]
        stack: List[Tuple[str, Any]] = [(resource_ptr, self.node_at(resource_ptr))]
        while stack:
            ptr, node = stack.pop()
            if not isinstance(node, dict):
                continue
            if has_anchor(self.draft, node, anchor):
                return ptr
            for child_ptr, child in reversed(list(iter_subschemas(self.draft, node, ptr))):
                nested = self.resources.get(child_ptr)
                if nested is not None and nested != scope:
                    continue
                stack.append((child_ptr, child))
        return None

    def resolve_fragment(self, resource_ptr: str, fragment: str) -> str:
        """
        Resolve a URI fragment within a resource to a JSON Pointer of the document.

        The fragment is either empty, a JSON Pointer relative to the resource
        or an anchor name.
        """
        if not fragment:
            return resource_ptr
        if fragment.startswith('/'):
            ptr = resource_ptr + path_unescape(fragment)
            self.node_at(ptr)
            return ptr
        ptr = self.find_anchor(resource_ptr, path_unescape(fragment))
        if ptr is None:
            raise AnchorNotFoundError(f"anchor {fragment!r} not found in {self.resources[resource_ptr]}")
        return ptr

    def resolve(self, url: str) -> str:
        """Resolve an absolute URL that points into this document to a JSON Pointer."""
        before, fragment = split(url)
        before = normalize_url(before)
        # the outermost resource wins when fragment-only ids repeat a URI
        matches = sorted((ptr for ptr, res in self.resources.items() if res.id == before), key=len)
        if not matches:
            raise ResourceNotFoundError(f"no resource {before} in {self.url}")
        return self.resolve_fragment(matches[0], fragment)

    def resolve_ref(self, ptr: str, ref: str) -> str:
        """Resolve a '$ref' value found in the schema at ``ptr``."""
        _, resource = self.resource_for(ptr)
        return self.resolve(join_url(resource.id, ref))
