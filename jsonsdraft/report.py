"""
Command functions of the jsonsdraft command line utility.
"""

import json
import os
from typing import Dict, Optional

from jsonsdraft.constants import DEFAULT_DRAFT
from jsonsdraft.draft import detect_draft, get_draft
from jsonsdraft.loader import SchemaLoader, to_url
from jsonsdraft.root import AnchorNotFoundError, SchemaRoot


def load_root(input_file_path: str, base_uri: Optional[str] = None, default_draft: str = DEFAULT_DRAFT,
              loader: Optional[SchemaLoader] = None) -> SchemaRoot:
    """
    Load a schema document and collect its resources.

    Args:
        input_file_path: Local path or http(s)/file URL of the document.
        base_uri: Retrieval URI to assume instead of the document's location.
        default_draft: Draft used when the document has no known '$schema'.
        loader: Loader to fetch the document with.
    """
    if not input_file_path:
        raise ValueError('Input file path is required')
    loader = loader or SchemaLoader()
    url = to_url(input_file_path)
    doc = loader.load(url)
    return SchemaRoot(base_uri or url, doc, default_draft=get_draft(default_draft or DEFAULT_DRAFT))


def print_dialect(input_file_path: str, default_draft: str = DEFAULT_DRAFT) -> None:
    """Print the draft a schema document is interpreted with."""
    if not input_file_path:
        raise ValueError('Input file path is required')
    doc = SchemaLoader().load(to_url(input_file_path))
    draft = detect_draft(doc, get_draft(default_draft or DEFAULT_DRAFT))
    print(f'draft {draft.version}: {draft.url}')


def dump_resources(input_file_path: str, output_file_path: Optional[str] = None, base_uri: Optional[str] = None,
                   default_draft: str = DEFAULT_DRAFT) -> Dict[str, str]:
    """Write the resource map of a schema document as JSON, to a file or stdout."""
    root = load_root(input_file_path, base_uri, default_draft)
    resource_map = {ptr: res.id for ptr, res in sorted(root.resources.items())}
    text = json.dumps(resource_map, indent=4)
    if output_file_path:
        out_dir = os.path.dirname(output_file_path)
        if out_dir and not os.path.exists(out_dir):
            os.makedirs(out_dir, exist_ok=True)
        with open(output_file_path, 'w', encoding='utf-8') as f:
            f.write(text)
    else:
        print(text)
    return resource_map


def print_anchor(input_file_path: str, anchor: str, pointer: str = '', base_uri: Optional[str] = None,
                 default_draft: str = DEFAULT_DRAFT) -> str:
    """Print the JSON Pointer of the schema declaring ``anchor`` in the resource enclosing ``pointer``."""
    root = load_root(input_file_path, base_uri, default_draft)
    resource_ptr, resource = root.resource_for(pointer or '')
    ptr = root.find_anchor(resource_ptr, anchor)
    if ptr is None:
        raise AnchorNotFoundError(f"anchor {anchor!r} not found in {resource}")
    print(ptr)
    return ptr
