"""Resource file parser, source/destination matcher and writer.

Resource files look like::

    <Resources code="en">
      <page name="General">
        <Resource tag="Title">Hello</Resource>
      </page>
    </Resources>

Uses lxml for XML handling.  Element names are compared by local name,
so files that declare a default namespace are read the same way.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from lxml import etree

from transeditor.errors import LoadError, SaveError
from transeditor.models import (
    LoadStats,
    ResourceDocument,
    ResourcePage,
    TranslationRecord,
    TranslationSession,
    deduplicate,
)

log = logging.getLogger(__name__)

ROOT_TAG = "Resources"
PAGE_TAG = "page"
RESOURCE_TAG = "Resource"

ProgressCallback = Callable[[int, int], None]

# ── Parsing ─────────────────────────────────────────────────────


def _localname(elem: etree._Element) -> str | None:
    """Return the element's local name, or None for comments and PIs."""
    if not isinstance(elem.tag, str):
        return None
    return etree.QName(elem).localname


def _children(elem: etree._Element, name: str) -> list[etree._Element]:
    return [child for child in elem if _localname(child) == name]


def _element_text(elem: etree._Element) -> str:
    """Full text content of an element, including text inside children."""
    return "".join(elem.itertext())


def parse_resources(path: str | Path) -> ResourceDocument:
    """Parse one resource file into a ResourceDocument.

    Raises:
        LoadError: If the file is missing, unreadable or not well-formed XML.
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(f"{path}: file not found")
    try:
        tree = etree.parse(str(path))  # noqa: S320 trusted local file
    except etree.XMLSyntaxError as exc:
        raise LoadError(f"{path}: {exc}") from exc
    except OSError as exc:
        raise LoadError(f"{path}: {exc}") from exc

    root = tree.getroot()
    if root is None:
        raise LoadError(f"{path}: document has no root element")

    namespaces = {prefix or "": uri for prefix, uri in root.nsmap.items()}
    attributes = dict(root.attrib)

    pages: list[ResourcePage] = []
    for page_elem in _children(root, PAGE_TAG):
        page = ResourcePage(name=page_elem.get("name", ""))
        for res_elem in _children(page_elem, RESOURCE_TAG):
            page.entries.append((res_elem.get("tag", ""), _element_text(res_elem)))
        pages.append(page)

    return ResourceDocument(
        pages=pages,
        namespaces=namespaces,
        attributes=attributes,
        file_path=str(path),
    )


def match_documents(
    source: ResourceDocument,
    destination: ResourceDocument,
    progress: ProgressCallback | None = None,
) -> tuple[list[TranslationRecord], LoadStats, bool]:
    """Build translation records by walking *source* against *destination*.

    Returns ``(records, stats, structure_changed)``.  Only keys present in
    the source are emitted; every destination entry sharing the key yields
    its own record, so duplicate destination entries show up as duplicate
    rows.  ``structure_changed`` is True when a source entry had no
    destination counterpart.
    """
    dest_index = destination.index()
    for (page_name, tag), values in dest_index.items():
        if len(values) > 1:
            log.warning(
                "Destination has %d entries for page '%s', tag '%s'",
                len(values), page_name, tag,
            )

    total = source.resource_count()
    records: list[TranslationRecord] = []
    stats = LoadStats()
    structure_changed = False

    for page in source.pages:
        for tag, source_text in page.entries:
            stats.total += 1
            matches = dest_index.get((page.name, tag))
            if not matches:
                structure_changed = True
                matches = [source_text]
            for localized in matches:
                record = TranslationRecord(
                    page_name=page.name,
                    resource_name=tag,
                    localized_value=localized,
                    source_value=source_text,
                )
                if record.is_pending:
                    stats.untranslated += 1
                records.append(record)
            if progress is not None:
                progress(stats.total, total)

    return records, stats, structure_changed


def load_pair(
    source_path: str | Path,
    destination_path: str | Path,
    progress: ProgressCallback | None = None,
) -> TranslationSession:
    """Load a source/destination file pair into a fresh TranslationSession.

    Raises:
        LoadError: If either file cannot be parsed.  No session is built.
    """
    log.info("Loading %s against %s", destination_path, source_path)
    source = parse_resources(source_path)
    destination = parse_resources(destination_path)

    records, stats, structure_changed = match_documents(source, destination, progress)
    log.info(
        "Loaded %d record(s): %d resource(s), %d not translated",
        len(records), stats.total, stats.untranslated,
    )

    return TranslationSession(
        records=records,
        namespaces=dict(destination.namespaces),
        attributes=dict(destination.attributes),
        source_code=source.code,
        destination_code=destination.code,
        source_path=str(source_path),
        destination_path=str(destination_path),
        stats=stats,
        structure_changed=structure_changed,
    )


# ── Writing ─────────────────────────────────────────────────────


def group_by_page(
    records: list[TranslationRecord],
) -> dict[str, list[TranslationRecord]]:
    """Group records by page name, pages in order of first appearance.

    Records of the same page are merged even when they are not adjacent.
    """
    groups: dict[str, list[TranslationRecord]] = {}
    for record in records:
        groups.setdefault(record.page_name, []).append(record)
    return groups


def build_tree(
    records: list[TranslationRecord],
    namespaces: dict[str, str],
    attributes: dict[str, str],
) -> etree._Element:
    """Build the ``<Resources>`` element for *records* (already deduplicated)."""
    default_ns = namespaces.get("")

    def qualify(name: str) -> str:
        return f"{{{default_ns}}}{name}" if default_ns else name

    nsmap = {
        (prefix or None): uri
        for prefix, uri in namespaces.items()
        if prefix != "xml"
    }
    root = etree.Element(qualify(ROOT_TAG), nsmap=nsmap)
    for name, value in attributes.items():
        root.set(name, value)

    for page_name, page_records in group_by_page(records).items():
        page = etree.SubElement(root, qualify(PAGE_TAG))
        page.set("name", page_name)
        for record in page_records:
            res = etree.SubElement(page, qualify(RESOURCE_TAG))
            res.set("tag", record.resource_name)
            res.text = record.localized_value

    return root


def serialize(
    records: list[TranslationRecord],
    namespaces: dict[str, str],
    attributes: dict[str, str],
) -> bytes:
    """Return the UTF-8, tab-indented XML document for *records*."""
    root = build_tree(records, namespaces, attributes)
    etree.indent(root, space="\t")
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")


def _default_file_mode() -> int:
    """Mode a plainly created file would get under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_resources(
    path: str | Path,
    records: list[TranslationRecord],
    namespaces: dict[str, str],
    attributes: dict[str, str],
    *,
    backup: bool = False,
) -> None:
    """Write records to a resource file atomically.

    Duplicate (page, tag) keys are dropped (first one wins) and records
    are grouped into one ``<page>`` per page name.

    Atomic write:
      1. Writes to a temporary file in the same directory.
      2. Uses os.replace() to atomically swap into place.
      3. If *backup* is True and the target file exists, creates a
         .bak copy before overwriting.

    Raises:
        SaveError: On any serialization or I/O failure.
    """
    path = Path(path)
    unique = deduplicate(records)
    if len(unique) != len(records):
        log.info("Dropping %d duplicate resource(s)", len(records) - len(unique))
    try:
        xml_bytes = serialize(unique, namespaces, attributes)
    except (ValueError, TypeError) as exc:
        raise SaveError(f"{path}: {exc}") from exc

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".xml.tmp")
        try:
            os.write(fd, xml_bytes)
            os.close(fd)
            fd = -1  # mark as closed

            if backup and path.exists():
                bak_path = path.with_suffix(path.suffix + ".bak")
                shutil.copy2(str(path), str(bak_path))

            # mkstemp creates 0600 files; keep the permissions the user expects
            if path.exists():
                shutil.copymode(str(path), tmp_path)
            else:
                os.chmod(tmp_path, _default_file_mode())

            os.replace(tmp_path, str(path))
        except BaseException:
            if fd >= 0:
                os.close(fd)
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    except OSError as exc:
        raise SaveError(f"{path}: {exc}") from exc

    log.info("Saved %d record(s) to %s", len(unique), path)
