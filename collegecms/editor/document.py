"""Structured document behind the rich text editor.

A document is a tree of ``Node`` objects rooted at a ``doc`` node:

* textblocks (``paragraph``, ``heading``, ``code_block``) hold ``text`` runs,
  each run carrying a tuple of ``Mark`` objects;
* containers (``blockquote``, ``callout``, lists including the ``task_list``
  checklist, list items, tables, rows and cells) hold blocks;
* atoms (``horizontal_rule``, ``image``, ``youtube``) hold nothing.

Hard line breaks are stored as ``"\\n"`` inside a run. Textblocks are mutated
in place so that a selection holding a reference to one survives structural
edits around it.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlsplit

TEXTBLOCKS = ("paragraph", "heading", "code_block")
ATOMS = ("horizontal_rule", "image", "youtube")
LISTS = ("bullet_list", "ordered_list", "task_list")
LIST_ITEMS = ("list_item", "task_item")
CELLS = ("table_cell", "table_header")
WRAPPERS = ("blockquote", "callout") + LISTS
BLOCK_PARENTS = ("doc", "blockquote", "callout") + LIST_ITEMS + CELLS

HEADING_LEVELS = (1, 2, 3)
ALIGNMENTS = ("left", "center", "right")

CALLOUT_BACKGROUND = "#f3f4f6"
CALLOUT_BORDER = "#e5e7eb"
YOUTUBE_WIDTH = 640
YOUTUBE_HEIGHT = 360

# Outermost first. Serialization nests marks in this order.
MARK_ORDER = (
    "link",
    "bold",
    "italic",
    "underline",
    "strike",
    "subscript",
    "superscript",
    "text_style",
    "highlight",
    "code",
)

SAFE_URL_SCHEMES = ("http", "https", "mailto", "tel")
SAFE_IMAGE_SCHEMES = ("http", "https")
_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")
_CONTROL_RE = re.compile(r"[\x00-\x20\x7f]+")
_COLOR_RE = re.compile(r"^(#[0-9a-fA-F]{3,8}|rgba?\([0-9\s.,%]+\)|[a-zA-Z]{3,20})$")


@dataclass(frozen=True)
class Mark:
    type: str
    attrs: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def of(cls, mark_type: str, **attrs) -> "Mark":
        if mark_type not in MARK_ORDER:
            raise ValueError(f"Unknown mark type '{mark_type}'")
        return cls(mark_type, tuple(sorted((k, v) for k, v in attrs.items() if v is not None)))

    def attr(self, name: str, default=None):
        return dict(self.attrs).get(name, default)

    def matches(self, mark_type: str, attrs: Optional[dict] = None) -> bool:
        if self.type != mark_type:
            return False
        own = dict(self.attrs)
        return all(own.get(key) == value for key, value in (attrs or {}).items())


def sort_marks(marks: Sequence[Mark]) -> Tuple[Mark, ...]:
    return tuple(sorted(marks, key=lambda mark: MARK_ORDER.index(mark.type)))


def add_mark(marks: Sequence[Mark], mark: Mark) -> Tuple[Mark, ...]:
    # One mark per type: a new color replaces the old one.
    return sort_marks([m for m in marks if m.type != mark.type] + [mark])


def remove_mark(marks: Sequence[Mark], mark_type: str) -> Tuple[Mark, ...]:
    return tuple(m for m in marks if m.type != mark_type)


@dataclass(eq=False)
class Node:
    type: str
    attrs: Dict[str, object] = field(default_factory=dict)
    content: List["Node"] = field(default_factory=list)
    text: str = ""
    marks: Tuple[Mark, ...] = ()

    @property
    def is_textblock(self) -> bool:
        return self.type in TEXTBLOCKS

    @property
    def is_atom(self) -> bool:
        return self.type in ATOMS

    @property
    def text_content(self) -> str:
        if self.type == "text":
            return self.text
        return "".join(child.text_content for child in self.content)


def text_run(text: str, marks: Sequence[Mark] = ()) -> Node:
    return Node("text", text=text, marks=sort_marks(marks))


def paragraph(text: str = "", **attrs) -> Node:
    return Node("paragraph", dict(attrs), [text_run(text)] if text else [])


def empty_doc() -> Node:
    return Node("doc", content=[paragraph()])


def table_cell(cell_type: str = "table_cell") -> Node:
    return Node(cell_type, {"colspan": 1, "rowspan": 1}, [paragraph()])


def build_table(rows: int, cols: int, with_header_row: bool = True) -> Node:
    table_rows = []
    for index in range(rows):
        cell_type = "table_header" if with_header_row and index == 0 else "table_cell"
        table_rows.append(Node("table_row", content=[table_cell(cell_type) for _ in range(cols)]))
    return Node("table", content=table_rows)


def list_item(list_type: str, content: List[Node], checked: bool = False) -> Node:
    if list_type == "task_list":
        return Node("task_item", {"checked": checked}, content)
    return Node("list_item", content=content)


def safe_url(value: Optional[str], schemes: Sequence[str] = SAFE_URL_SCHEMES) -> Optional[str]:
    """Return the trimmed URL, or None when it is blank or uses a scheme outside ``schemes``.

    Relative URLs have no scheme and are accepted. Control characters and
    whitespace are removed before the scheme check, so ``java\\tscript:`` is
    caught as well.
    """
    if value is None:
        return None
    url = str(value).strip()
    if not url:
        return None
    match = _SCHEME_RE.match(_CONTROL_RE.sub("", url).lower())
    if match and match.group(1) not in schemes:
        return None
    return url


def safe_color(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    color = str(value).strip()
    return color if _COLOR_RE.match(color) else None


YOUTUBE_HOSTS = (
    "youtube.com", "www.youtube.com", "m.youtube.com",
    "youtube-nocookie.com", "www.youtube-nocookie.com",
)
_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{6,20}$")


def youtube_embed_url(value: Optional[str]) -> Optional[str]:
    """The privacy-enhanced embed URL for a YouTube link, or None for anything else.

    Watch, short, embed and youtu.be links are accepted; other hosts are not.
    """
    if value is None:
        return None
    url = str(value).strip()
    if url.startswith("//"):
        url = "https:" + url
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
    except ValueError:
        return None
    if parts.scheme not in ("http", "https"):
        return None
    segments = [segment for segment in parts.path.split("/") if segment]
    video_id = None
    if host == "youtu.be" and segments:
        video_id = segments[0]
    elif host in YOUTUBE_HOSTS:
        if segments == ["watch"]:
            video_id = (parse_qs(parts.query).get("v") or [""])[0]
        elif len(segments) >= 2 and segments[0] in ("embed", "shorts", "live", "v"):
            video_id = segments[1]
    if not video_id or not _VIDEO_ID_RE.match(video_id):
        return None
    return f"https://www.youtube-nocookie.com/embed/{video_id}"


def callout_attrs(background_color: Optional[str] = None, border_color: Optional[str] = None) -> dict:
    return {
        "background_color": safe_color(background_color) or CALLOUT_BACKGROUND,
        "border_color": safe_color(border_color) or CALLOUT_BORDER,
    }


def callout(content: Optional[List[Node]] = None, background_color: Optional[str] = None,
            border_color: Optional[str] = None) -> Node:
    return Node("callout", callout_attrs(background_color, border_color), content or [paragraph()])


# ---- tree navigation ----

Path = Tuple[int, ...]


def walk(node: Node, path: Path = ()) -> Iterator[Tuple[Path, Node]]:
    """Pre-order walk of the descendants of ``node`` (text runs excluded)."""
    for index, child in enumerate(node.content):
        if child.type == "text":
            continue
        child_path = path + (index,)
        yield child_path, child
        if not child.is_textblock:
            yield from walk(child, child_path)


def textblocks(doc: Node) -> List[Node]:
    return [node for _, node in walk(doc) if node.is_textblock]


def leaves(doc: Node) -> List[Node]:
    return [node for _, node in walk(doc) if node.is_textblock or node.is_atom]


def node_at(doc: Node, path: Path) -> Node:
    node = doc
    for index in path:
        node = node.content[index]
    return node


def find_path(doc: Node, target: Node) -> Optional[Path]:
    for path, node in walk(doc):
        if node is target:
            return path
    return None


def first_textblock(node: Node) -> Optional[Node]:
    if node.is_textblock:
        return node
    for _, child in walk(node):
        if child.is_textblock:
            return child
    return None


# ---- text runs inside a textblock ----

def block_length(block: Node) -> int:
    return sum(len(run.text) for run in block.content)


def normalize_runs(block: Node) -> None:
    """Drop empty runs and merge neighbours that carry the same marks."""
    merged: List[Node] = []
    for run in block.content:
        if not run.text:
            continue
        if merged and merged[-1].marks == run.marks:
            merged[-1].text += run.text
        else:
            merged.append(run)
    block.content = merged


_COLLAPSIBLE = " \t\r\f"


def collapse_whitespace(texts: Sequence[str]) -> List[str]:
    """Run texts as an HTML renderer shows them.

    Whitespace collapses to one space, spaces at the block start or after a
    hard break disappear and trailing spaces at the block end are trimmed.
    The parser stores text in this form and the serializer writes it, so a
    body survives any number of load/save cycles unchanged.
    """
    collapsed = []
    previous = None
    for text in texts:
        chars = []
        for char in text:
            if char in _COLLAPSIBLE:
                if previous is None or previous in " \n":
                    continue
                char = " "
            chars.append(char)
            previous = char
        collapsed.append("".join(chars))
    for index in range(len(collapsed) - 1, -1, -1):
        collapsed[index] = collapsed[index].rstrip(" ")
        if collapsed[index]:
            break
    return collapsed


def _split_at(block: Node, offset: int) -> int:
    position = 0
    for index, run in enumerate(block.content):
        end = position + len(run.text)
        if offset == position:
            return index
        if position < offset < end:
            cut = offset - position
            block.content.insert(index + 1, text_run(run.text[cut:], run.marks))
            run.text = run.text[:cut]
            return index + 1
        position = end
    return len(block.content)


def split_runs(block: Node, start: int, end: int) -> List[Node]:
    """Split runs at ``start`` and ``end`` and return the runs in between."""
    if start >= end:
        return []
    first = _split_at(block, start)
    last = _split_at(block, end)
    return block.content[first:last]


def runs_in(block: Node, start: int, end: int) -> List[Node]:
    """Runs overlapping ``[start, end)`` without modifying the block."""
    found = []
    position = 0
    for run in block.content:
        run_end = position + len(run.text)
        if position < end and run_end > start:
            found.append(run)
        position = run_end
    return found


def slice_runs(block: Node, start: int, end: int) -> List[Node]:
    pieces = []
    position = 0
    for run in block.content:
        run_end = position + len(run.text)
        lo, hi = max(start, position), min(end, run_end)
        if lo < hi:
            pieces.append(text_run(run.text[lo - position:hi - position], run.marks))
        position = run_end
    return pieces


def delete_text(block: Node, start: int, end: int) -> None:
    for run in split_runs(block, start, end):
        run.text = ""
    normalize_runs(block)


def insert_runs(block: Node, offset: int, runs: Sequence[Node]) -> None:
    index = _split_at(block, offset)
    block.content[index:index] = list(runs)
    normalize_runs(block)


def marks_before(block: Node, offset: int) -> Tuple[Mark, ...]:
    """Marks of the character before ``offset`` (the first character at 0)."""
    if offset <= 0:
        return block.content[0].marks if block.content else ()
    position = 0
    for run in block.content:
        position += len(run.text)
        if offset <= position:
            return run.marks
    return block.content[-1].marks if block.content else ()


def marks_after(block: Node, offset: int) -> Tuple[Mark, ...]:
    position = 0
    for run in block.content:
        if position <= offset < position + len(run.text):
            return run.marks
        position += len(run.text)
    return ()
