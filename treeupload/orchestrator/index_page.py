"""
HTML index page generation.

Renders a scanned directory tree as an ARIA tree view where every file is a
link to its content identifier on the portal.
"""
import html
from pathlib import Path
from typing import List, Mapping, Union

from ..errors import MissingIdentifierError
from ..models import DEFAULT_LINK_PREFIX, DirectoryNode
from .file_collector import IncludePredicate, scan_tree

INDEX_FILENAME = "directory.html"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
ul[role="tree"], ul[role="group"] {{ list-style: none; margin: 0; padding-left: 1.2em; }}
li[role="treeitem"] > span {{ cursor: pointer; font-weight: bold; }}
li[role="treeitem"] > span::before {{ content: "\\25B8 "; }}
li[aria-expanded="true"] > span::before {{ content: "\\25BE "; }}
li[aria-expanded="false"] > ul {{ display: none; }}
li.doc {{ padding: 0.1em 0; }}
</style>
</head>
<body>
{tree}
<script>
document.querySelectorAll('li[role="treeitem"] > span').forEach(function (label) {{
  label.addEventListener('click', function () {{
    var item = label.parentElement;
    item.setAttribute('aria-expanded', item.getAttribute('aria-expanded') === 'true' ? 'false' : 'true');
  }});
}});
</script>
</body>
</html>
"""


def _render_children(node: DirectoryNode, identifiers: Mapping[str, str], link_prefix: str, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, DirectoryNode):
            parts.append('<li role="treeitem" aria-expanded="false">')
            parts.append(f"<span>{html.escape(child.name)}</span>")
            parts.append('<ul role="group">')
            _render_children(child, identifiers, link_prefix, parts)
            parts.append("</ul>")
            parts.append("</li>")
            continue

        key = str(child.path)
        if key not in identifiers:
            raise MissingIdentifierError(key)
        href = html.escape(f"{link_prefix}{identifiers[key]}", quote=True)
        parts.append('<li role="treeitem" class="doc">')
        parts.append(f'<a href="{href}">{html.escape(child.name)}</a>')
        parts.append("</li>")


def render_tree(
    node: DirectoryNode,
    identifiers: Mapping[str, str],
    link_prefix: str = DEFAULT_LINK_PREFIX,
) -> str:
    """
    Render the children of node as nested tree items.

    Raises:
        MissingIdentifierError: if a file of the tree has no identifier
    """
    parts: List[str] = []
    _render_children(node, identifiers, link_prefix, parts)
    return "".join(parts)


def render(
    root: Union[str, Path],
    include: IncludePredicate,
    identifiers: Mapping[str, str],
    link_prefix: str = DEFAULT_LINK_PREFIX,
) -> str:
    """Re-scan root with the given filter and render it."""
    return render_tree(scan_tree(root, include), identifiers, link_prefix)


def build_index_page(
    node: DirectoryNode,
    identifiers: Mapping[str, str],
    title: str,
    link_prefix: str = DEFAULT_LINK_PREFIX,
) -> str:
    """Wrap the rendered tree in a complete HTML document."""
    label = html.escape(title)
    tree_html = (
        f'<h3 id="tree_label">Contents of {label}</h3>'
        '<ul role="tree" aria-labelledby="tree_label">'
        f"{render_tree(node, identifiers, link_prefix)}"
        "</ul>"
    )
    return PAGE_TEMPLATE.format(title=f"Contents of {label}", tree=tree_html)
