"""Anchor lookup for schema objects."""

from typing import Any

from jsonsdraft.draft import Draft
from jsonsdraft.urlutil import fragment_to_anchor, split


def has_anchor(draft: Draft, json_doc: Any, anchor: str) -> bool:
    """
    Check whether a schema declares the anchor ``anchor``.

    Before 2019-09 an anchor is the fragment of the identifier (``"id": "#foo"``
    or ``"$id": "#foo"``). From 2019-09 on it is declared with '$anchor' or
    '$dynamicAnchor'.

    Raises:
        InvalidAnchorError: If a legacy identifier fragment is not valid
            percent-encoded UTF-8.
    """
    if not isinstance(json_doc, dict):
        return False

    if draft.version < 2019:
        obj_id = json_doc.get(draft.id)
        if isinstance(obj_id, str):
            _, fragment = split(obj_id)
            return fragment_to_anchor(fragment) == anchor
        return False

    for kw in ('$anchor', '$dynamicAnchor'):
        value = json_doc.get(kw)
        if isinstance(value, str) and value == anchor:
            return True
    return False
