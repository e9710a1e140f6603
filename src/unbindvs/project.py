from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from unbindvs.errors import MalformedDocumentError
from unbindvs.scanner import clear_read_only

logger = logging.getLogger(__name__)

SCC_PREFIX = "Scc"
XML_DECLARATION = "<?xml version='1.0' encoding='utf-8'?>\n"

_generated_prefix_re = re.compile(r"ns\d+$")


@dataclass
class ProjectDocument:
    tree: ET.ElementTree
    namespaces: dict[str, str] = field(default_factory=dict)  # declared on the root
    prolog: list[ET.Element] = field(default_factory=list)
    epilog: list[ET.Element] = field(default_factory=list)

    @property
    def root(self) -> ET.Element:
        return self.tree.getroot()


class _ProjectBuilder(ET.TreeBuilder):
    """Tree builder that also keeps what sits outside the root element."""

    def __init__(self) -> None:
        super().__init__(insert_comments=True, insert_pis=True)
        self.namespaces: dict[str, str] = {}
        self.prolog: list[ET.Element] = []
        self.epilog: list[ET.Element] = []
        self._started = False
        self._depth = 0

    def start_ns(self, prefix: str, uri: str) -> None:
        if not self._started:
            self.namespaces[prefix] = uri

    def start(self, tag, attrs):
        self._started = True
        self._depth += 1
        return super().start(tag, attrs)

    def end(self, tag):
        self._depth -= 1
        return super().end(tag)

    def comment(self, text):
        if not self._depth:
            self._outside().append(ET.Comment(text))
        return super().comment(text)

    def pi(self, target, text=None):
        if not self._depth:
            self._outside().append(ET.ProcessingInstruction(target, text))
        return super().pi(target, text)

    def _outside(self) -> list[ET.Element]:
        return self.epilog if self._started else self.prolog


def local_name(qname: str) -> str:
    """``{uri}Name`` -> ``Name``."""
    return qname.rpartition("}")[2]


def _is_scc(qname: object) -> bool:
    # Comments and processing instructions carry a callable tag.
    return isinstance(qname, str) and local_name(qname).startswith(SCC_PREFIX)


def strip_scc(element: ET.Element) -> int:
    """Drop ``Scc*`` child elements and attributes below ``element``.

    Returns the number of elements and attributes removed.
    """
    removed = 0
    for key in [k for k in element.attrib if _is_scc(k)]:
        del element.attrib[key]
        removed += 1
    for child in [c for c in element if _is_scc(c.tag)]:
        _remove_child(element, child)
        removed += 1
    for child in element:
        removed += strip_scc(child)
    return removed


def _join_text(before: str | None, tail: str | None) -> str | None:
    # Between two pure-whitespace runs keep the later one, which carries
    # the indentation of whatever follows the removed child.
    if not (before or "").strip() and not (tail or "").strip():
        return tail
    return (before or "") + (tail or "")


def _remove_child(parent: ET.Element, child: ET.Element) -> None:
    index = list(parent).index(child)
    if index:
        previous = parent[index - 1]
        previous.tail = _join_text(previous.tail, child.tail)
    else:
        parent.text = _join_text(parent.text, child.tail)
    parent.remove(child)


def _is_qualified(root: ET.Element) -> bool:
    return all(
        element.tag.startswith("{")
        for element in root.iter()
        if isinstance(element.tag, str)
    )


@contextmanager
def _root_namespaces(document: ProjectDocument) -> Iterator[None]:
    """Serialize with the root's own prefixes, restoring the registry after.

    The default namespace is only reused when every element is qualified;
    otherwise unqualified elements would move into it on output.
    """
    saved = dict(ET._namespace_map)
    try:
        for prefix, uri in document.namespaces.items():
            if _generated_prefix_re.match(prefix):
                continue
            if not prefix and not _is_qualified(document.root):
                continue
            ET.register_namespace(prefix, uri)
        yield
    finally:
        ET._namespace_map.clear()
        ET._namespace_map.update(saved)


def load_project(path: Path) -> ProjectDocument:
    builder = _ProjectBuilder()
    try:
        tree = ET.parse(path, parser=ET.XMLParser(target=builder))
    except ET.ParseError as exc:
        raise MalformedDocumentError(path, str(exc)) from exc
    return ProjectDocument(
        tree=tree,
        namespaces=builder.namespaces,
        prolog=builder.prolog,
        epilog=builder.epilog,
    )


def save_project(path: Path, document: ProjectDocument) -> None:
    with _root_namespaces(document), path.open(
        "w", encoding="utf-8", errors="xmlcharrefreplace"
    ) as handle:
        handle.write(XML_DECLARATION)
        for node in document.prolog:
            handle.write(ET.tostring(node, encoding="unicode") + "\n")
        document.tree.write(handle, encoding="unicode")
        for node in document.epilog:
            handle.write("\n" + ET.tostring(node, encoding="unicode"))


def modify_project(path: Path, dry_run: bool = False) -> int:
    """Strip ``path`` in place and return the number of removed nodes."""
    print(f"Modifying project: {path}")
    document = load_project(path)
    removed = strip_scc(document.root)
    logger.debug("%s: removing %d Scc elements/attributes", path, removed)
    if dry_run:
        return removed
    clear_read_only(path)
    save_project(path, document)
    return removed
