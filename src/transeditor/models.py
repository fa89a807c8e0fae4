"""Data models for the resource translation editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from transeditor.errors import RecordNotFoundError, SaveError


@dataclass
class TranslationRecord:
    """One translatable resource: a page/tag key and its localized text.

    ``source_value`` is the reference-language text.  It is only used to
    flag untranslated rows and is never written back to disk.
    """

    page_name: str
    resource_name: str
    localized_value: str = ""
    source_value: str = field(default="", compare=False)

    @property
    def key(self) -> tuple[str, str]:
        return (self.page_name, self.resource_name)

    @property
    def is_pending(self) -> bool:
        """True when the localized text still matches the source (ignoring case)."""
        return self.localized_value.casefold() == self.source_value.casefold()


@dataclass
class ResourcePage:
    """A ``<page>`` element: its name and (tag, text) entries in file order."""

    name: str
    entries: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class ResourceDocument:
    """Parsed form of one resource XML file."""

    pages: list[ResourcePage] = field(default_factory=list)
    namespaces: dict[str, str] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    file_path: str | None = None

    @property
    def code(self) -> str:
        return self.attributes.get("code", "")

    def resource_count(self) -> int:
        return sum(len(p.entries) for p in self.pages)

    def index(self) -> dict[tuple[str, str], list[str]]:
        """Map (page name, tag) to every matching text, in document order."""
        result: dict[tuple[str, str], list[str]] = {}
        for page in self.pages:
            for tag, text in page.entries:
                result.setdefault((page.name, tag), []).append(text)
        return result


@dataclass
class LoadStats:
    total: int = 0
    untranslated: int = 0


def deduplicate(records: list[TranslationRecord]) -> list[TranslationRecord]:
    """Return *records* with later duplicates of a (page, tag) key dropped.

    Order is preserved and the first record seen for each key wins, even
    when a later duplicate carries a different edited value.
    """
    seen: set[tuple[str, str]] = set()
    result: list[TranslationRecord] = []
    for record in records:
        if record.key in seen:
            continue
        seen.add(record.key)
        result.append(record)
    return result


@dataclass
class TranslationSession:
    """Working state for one loaded (source, destination) file pair.

    Built from scratch by :func:`transeditor.resource_io.load_pair` on every
    load; the window only holds a reference to it.
    Whether edits are unsaved is tracked by the window's undo stack, not here.
    """

    records: list[TranslationRecord] = field(default_factory=list)
    # Root-level state of the destination file, written back verbatim
    namespaces: dict[str, str] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    source_code: str = ""
    destination_code: str = ""
    source_path: str | None = None
    destination_path: str | None = None
    stats: LoadStats = field(default_factory=LoadStats)
    # A source resource had no destination entry; saving adds it
    structure_changed: bool = False

    # ── Row access helpers ──────────────────────────────────────

    def row_count(self) -> int:
        return len(self.records)

    def record_at(self, row: int) -> TranslationRecord:
        return self.records[row]

    def pending_rows(self) -> list[int]:
        return [i for i, r in enumerate(self.records) if r.is_pending]

    # ── Editing ─────────────────────────────────────────────────

    def find(self, page_name: str, resource_name: str) -> TranslationRecord:
        """Return the first record with the given key.

        Raises:
            RecordNotFoundError: If no loaded record has that key.
        """
        for record in self.records:
            if record.page_name == page_name and record.resource_name == resource_name:
                return record
        raise RecordNotFoundError(page_name, resource_name)

    def edit(self, page_name: str, resource_name: str, new_value: str) -> str:
        """Set the localized value of the record keyed (page, tag).

        Returns the previous value.
        """
        record = self.find(page_name, resource_name)
        old = record.localized_value
        record.localized_value = new_value
        return old

    def set_value(self, row: int, new_value: str) -> str:
        """Set the localized value of the record at grid position *row*."""
        record = self.records[row]
        old = record.localized_value
        record.localized_value = new_value
        return old

    def deduplicate(self) -> int:
        """Drop duplicate keys in place and return how many were removed."""
        before = len(self.records)
        self.records = deduplicate(self.records)
        return before - len(self.records)

    # ── Persistence ─────────────────────────────────────────────

    def save(self, path: str | Path | None = None, *, backup: bool = False) -> None:
        """Write the session to *path* (default: the destination file).

        The in-memory records are only replaced by their deduplicated form
        once the file has been written; on ``SaveError`` nothing changes.
        """
        from transeditor.resource_io import write_resources

        target = path if path is not None else self.destination_path
        if target is None:
            raise SaveError("Session has no destination path")

        write_resources(
            target,
            self.records,
            self.namespaces,
            self.attributes,
            backup=backup,
        )
        self.deduplicate()
        self.destination_path = str(target)
        self.structure_changed = False
