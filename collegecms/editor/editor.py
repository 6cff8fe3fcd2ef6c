"""The rich text editor used for every content body.

``RichTextEditor`` owns a structured document, a selection and an undo
history. Every command returns ``True`` when it applied and ``False`` when it
is structurally inapplicable; ``can(command, ...)`` answers the same question
without touching the document, and ``is_active(name, ...)`` reports whether a
mark or node type is applied at the selection. Whenever a command changes the
serialized HTML, ``on_change`` receives the new HTML.

Positions are ``(textblock_index, offset)`` pairs, textblocks counted in
document order.
"""

import copy
import logging
from typing import Callable, List, Optional, Tuple

from collegecms.editor.document import (
    ALIGNMENTS,
    BLOCK_PARENTS,
    CELLS,
    HEADING_LEVELS,
    LISTS,
    SAFE_IMAGE_SCHEMES,
    WRAPPERS,
    YOUTUBE_HEIGHT,
    YOUTUBE_WIDTH,
    Mark,
    Node,
    add_mark,
    block_length,
    build_table,
    callout,
    callout_attrs,
    delete_text,
    find_path,
    first_textblock,
    insert_runs,
    leaves,
    list_item,
    marks_after,
    marks_before,
    node_at,
    normalize_runs,
    paragraph,
    remove_mark,
    runs_in,
    safe_color,
    safe_url,
    slice_runs,
    split_runs,
    table_cell,
    text_run,
    textblocks,
    youtube_embed_url,
)
from collegecms.editor.parser import parse_html
from collegecms.editor.serializer import serialize

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100
DEFAULT_PLACEHOLDER = "Start writing your content..."

Position = Tuple[int, int]

COMMANDS = (
    "toggle_bold", "toggle_italic", "toggle_underline", "toggle_strike",
    "toggle_code", "toggle_subscript", "toggle_superscript",
    "set_color", "unset_color", "toggle_highlight", "unset_highlight",
    "set_link", "unset_link",
    "toggle_heading", "set_paragraph", "toggle_code_block",
    "toggle_bullet_list", "toggle_ordered_list", "toggle_task_list", "toggle_task_checked",
    "toggle_blockquote", "set_callout", "toggle_callout", "unset_callout",
    "set_text_align", "unset_text_align",
    "insert_image", "insert_youtube", "set_horizontal_rule", "insert_table",
    "add_column_before", "add_column_after", "delete_column",
    "add_row_before", "add_row_after", "delete_row",
    "delete_table", "toggle_header_row",
    "unset_all_marks", "clear_nodes", "clear_formatting",
    "insert_text", "delete_selection",
    "undo", "redo",
)


class RichTextEditor:
    def __init__(
        self,
        content: str = "",
        on_change: Optional[Callable[[str], None]] = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ):
        self.on_change = on_change
        self.placeholder = placeholder
        self._undo: List[tuple] = []
        self._redo: List[tuple] = []
        self._load(content)

    # ---- content ----

    def _load(self, content: str) -> None:
        self._doc = parse_html(content)
        self._ensure_textblock()
        self._stored_marks: Optional[Tuple[Mark, ...]] = None
        first = textblocks(self._doc)[0]
        self._anchor = (first, 0)
        self._head = (first, 0)
        self._html = serialize(self._doc)

    def set_content(self, content: str, emit_update: bool = False) -> None:
        """Replace the whole document. History starts over from the new content."""
        self._load(content)
        self._undo.clear()
        self._redo.clear()
        logger.debug("[editor] content replaced chars=%s", self.character_count)
        if emit_update:
            self._emit()

    def get_html(self) -> str:
        return self._html

    def get_text(self, block_separator: str = "\n\n") -> str:
        return block_separator.join(block.text_content for block in textblocks(self._doc))

    @property
    def is_empty(self) -> bool:
        blocks = self._doc.content
        return len(blocks) == 1 and blocks[0].type == "paragraph" and not blocks[0].content

    @property
    def show_placeholder(self) -> bool:
        return self.is_empty

    @property
    def character_count(self) -> int:
        return sum(block_length(block) for block in textblocks(self._doc))

    @property
    def word_count(self) -> int:
        return len(self.get_text(" ").split())

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self._html)

    def _ensure_textblock(self) -> None:
        if not textblocks(self._doc):
            self._doc.content.append(paragraph())

    # ---- selection ----

    def _blocks(self) -> List[Node]:
        return textblocks(self._doc)

    def _index(self, node: Node) -> int:
        for index, block in enumerate(self._blocks()):
            if block is node:
                return index
        raise LookupError("selection points outside the document")

    def _position(self, pos: Tuple[Node, int]) -> Position:
        return self._index(pos[0]), pos[1]

    def _clamp(self, pos: Position) -> Tuple[Node, int]:
        blocks = self._blocks()
        index = max(0, min(pos[0], len(blocks) - 1))
        block = blocks[index]
        return block, max(0, min(pos[1], block_length(block)))

    @property
    def selection(self) -> Tuple[Position, Position]:
        return self._position(self._anchor), self._position(self._head)

    @property
    def empty(self) -> bool:
        return self._anchor[0] is self._head[0] and self._anchor[1] == self._head[1]

    def set_selection(self, anchor: Position, head: Optional[Position] = None) -> None:
        self._anchor = self._clamp(anchor)
        self._head = self._clamp(head if head is not None else anchor)
        self._stored_marks = None

    def set_cursor(self, index: int, offset: int = 0) -> None:
        self.set_selection((index, offset))

    def select_all(self) -> None:
        last = len(self._blocks()) - 1
        self.set_selection((0, 0), (last, block_length(self._blocks()[last])))

    def find_text(self, needle: str, occurrence: int = 1) -> bool:
        """Select the n-th occurrence of ``needle`` inside a single textblock."""
        if not needle:
            return False
        seen = 0
        for index, block in enumerate(self._blocks()):
            text = block.text_content
            start = text.find(needle)
            while start != -1:
                seen += 1
                if seen == occurrence:
                    self.set_selection((index, start), (index, start + len(needle)))
                    return True
                start = text.find(needle, start + 1)
        return False

    def _range(self) -> Tuple[int, int, int, int]:
        (ai, ao), (hi, ho) = self.selection
        if (ai, ao) <= (hi, ho):
            return ai, ao, hi, ho
        return hi, ho, ai, ao

    def _selected_blocks(self) -> List[Node]:
        fi, _, ti, _ = self._range()
        return self._blocks()[fi:ti + 1]

    def _segments(self) -> List[Tuple[Node, int, int]]:
        fi, fo, ti, to = self._range()
        segments = []
        for index, block in enumerate(self._blocks()[fi:ti + 1], start=fi):
            start = fo if index == fi else 0
            end = to if index == ti else block_length(block)
            segments.append((block, start, end))
        return segments

    def _cursor(self) -> Tuple[Node, int]:
        fi, fo, _, _ = self._range()
        return self._blocks()[fi], fo

    def _place_cursor(self, block: Node, offset: int = 0) -> None:
        self._anchor = (block, offset)
        self._head = (block, offset)

    def _path(self, node: Node):
        return find_path(self._doc, node)

    # ---- transactions and history ----

    def _snapshot(self) -> tuple:
        return copy.deepcopy(self._doc), self.selection, self._stored_marks

    def _restore(self, snapshot: tuple) -> None:
        doc, (anchor, head), stored = snapshot
        self._doc = copy.deepcopy(doc)
        self._anchor = self._clamp(anchor)
        self._head = self._clamp(head)
        self._stored_marks = stored
        self._html = serialize(self._doc)

    def _run(self, command: Callable[..., bool], *args) -> bool:
        before = self._snapshot()
        if not command(*args):
            return False
        self._ensure_textblock()
        html = serialize(self._doc)
        if html != self._html:
            self._undo.append(before)
            del self._undo[:-HISTORY_LIMIT]
            self._redo.clear()
            self._html = html
            self._emit()
        return True

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self._snapshot())
        self._restore(self._undo.pop())
        self._emit()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._snapshot())
        self._restore(self._redo.pop())
        self._emit()
        return True

    def _shadow(self) -> "RichTextEditor":
        shadow = RichTextEditor.__new__(RichTextEditor)
        shadow.on_change = None
        shadow.placeholder = self.placeholder
        shadow._undo = list(self._undo)
        shadow._redo = list(self._redo)
        shadow._restore((self._doc, self.selection, self._stored_marks))
        return shadow

    def can(self, command: str, *args, **kwargs) -> bool:
        """Whether ``command`` would apply at the current selection. Dry run on a copy."""
        if command not in COMMANDS:
            raise ValueError(f"Unknown editor command '{command}'")
        return bool(getattr(self._shadow(), command)(*args, **kwargs))

    # ---- marks ----

    def _cursor_marks(self) -> Tuple[Mark, ...]:
        if self._stored_marks is not None:
            return self._stored_marks
        block, offset = self._cursor()
        if block.type == "code_block":
            return ()
        after = marks_after(block, offset)
        # Typing at the end of a link does not extend it.
        return tuple(
            mark for mark in marks_before(block, offset) if mark.type != "link" or mark in after
        )

    def _marks_allowed(self) -> bool:
        return any(block.type != "code_block" for block in self._selected_blocks())

    def _mark_active(self, mark_type: str, attrs: Optional[dict] = None) -> bool:
        if self.empty:
            return any(mark.matches(mark_type, attrs) for mark in self._cursor_marks())
        found = False
        for block, start, end in self._segments():
            if block.type == "code_block":
                continue
            for run in runs_in(block, start, end):
                found = True
                if not any(mark.matches(mark_type, attrs) for mark in run.marks):
                    return False
        return found

    def _set_mark(self, mark: Mark) -> bool:
        if not self._marks_allowed():
            return False
        if self.empty:
            self._stored_marks = add_mark(self._cursor_marks(), mark)
            return True
        for block, start, end in self._segments():
            if block.type == "code_block":
                continue
            for run in split_runs(block, start, end):
                run.marks = add_mark(run.marks, mark)
            normalize_runs(block)
        return True

    def _unset_mark(self, mark_type: str) -> bool:
        if not self._marks_allowed():
            return False
        if self.empty:
            self._stored_marks = remove_mark(self._cursor_marks(), mark_type)
            return True
        for block, start, end in self._segments():
            for run in split_runs(block, start, end):
                run.marks = remove_mark(run.marks, mark_type)
            normalize_runs(block)
        return True

    def _toggle_mark(self, mark_type: str, attrs: Optional[dict] = None) -> bool:
        if self._mark_active(mark_type, attrs):
            return self._unset_mark(mark_type)
        return self._set_mark(Mark.of(mark_type, **(attrs or {})))

    def toggle_bold(self) -> bool:
        return self._run(self._toggle_mark, "bold")

    def toggle_italic(self) -> bool:
        return self._run(self._toggle_mark, "italic")

    def toggle_underline(self) -> bool:
        return self._run(self._toggle_mark, "underline")

    def toggle_strike(self) -> bool:
        return self._run(self._toggle_mark, "strike")

    def toggle_code(self) -> bool:
        return self._run(self._toggle_mark, "code")

    def toggle_subscript(self) -> bool:
        return self._run(self._toggle_mark, "subscript")

    def toggle_superscript(self) -> bool:
        return self._run(self._toggle_mark, "superscript")

    def set_color(self, color: str) -> bool:
        color = safe_color(color)
        if not color:
            return False
        return self._run(self._set_mark, Mark.of("text_style", color=color))

    def unset_color(self) -> bool:
        return self._run(self._unset_mark, "text_style")

    def toggle_highlight(self, color: Optional[str] = None) -> bool:
        attrs = {}
        if color is not None:
            attrs["color"] = safe_color(color)
            if not attrs["color"]:
                return False
        return self._run(self._toggle_mark, "highlight", attrs)

    def unset_highlight(self) -> bool:
        return self._run(self._unset_mark, "highlight")

    def unset_all_marks(self) -> bool:
        return self._run(self._unset_all_marks)

    def _unset_all_marks(self) -> bool:
        if self.empty:
            self._stored_marks = ()
            return True
        for block, start, end in self._segments():
            for run in split_runs(block, start, end):
                run.marks = ()
            normalize_runs(block)
        return True

    def get_mark_attributes(self, mark_type: str) -> dict:
        """Attributes of ``mark_type`` at the selection start, e.g. the href of a link."""
        if self.empty:
            marks = self._cursor_marks()
            block, offset = self._cursor()
            marks = marks + marks_after(block, offset)
        else:
            block, start, end = self._segments()[0]
            runs = runs_in(block, start, end)
            marks = runs[0].marks if runs else ()
        for mark in marks:
            if mark.type == mark_type:
                return dict(mark.attrs)
        return {}

    # ---- links ----

    def _extend_mark_range(self, mark_type: str) -> bool:
        """Select the whole run of ``mark_type`` around a collapsed cursor."""
        block, offset = self._cursor()
        mark = next(
            (m for m in marks_after(block, offset) + marks_before(block, offset) if m.type == mark_type),
            None,
        )
        if mark is None:
            return False
        spans = []
        position = 0
        for run in block.content:
            spans.append((position, position + len(run.text), mark in run.marks))
            position += len(run.text)
        start = end = None
        for run_start, run_end, has_mark in spans:
            if has_mark and run_start <= offset <= run_end:
                start, end = run_start, run_end
                break
        if start is None:
            return False
        for run_start, run_end, has_mark in spans:
            if has_mark and run_start == end:
                end = run_end
        for run_start, run_end, has_mark in reversed(spans):
            if has_mark and run_end == start:
                start = run_start
        self._anchor = (block, start)
        self._head = (block, end)
        return True

    def _set_link(self, href: str) -> bool:
        if not self._marks_allowed():
            return False
        mark = Mark.of("link", href=href)
        if self.empty and not self._extend_mark_range("link"):
            # Nothing to wrap: the URL itself becomes the link text.
            block, offset = self._cursor()
            insert_runs(block, offset, [text_run(href, add_mark(self._cursor_marks(), mark))])
            self._place_cursor(block, offset + len(href))
            self._stored_marks = None
            return True
        return self._set_mark(mark)

    def set_link(self, href: str) -> bool:
        href = safe_url(href)
        if not href:
            return False
        return self._run(self._set_link, href)

    def _unset_link(self) -> bool:
        if self.empty and not self._extend_mark_range("link"):
            return False
        return self._unset_mark("link")

    def unset_link(self) -> bool:
        return self._run(self._unset_link)

    # ---- textblock types ----

    def _set_block_type(self, block_type: str, attrs: dict) -> bool:
        for block in self._selected_blocks():
            align = block.attrs.get("text_align")
            block.type = block_type
            block.attrs = dict(attrs)
            if block_type == "code_block":
                for run in block.content:
                    run.marks = ()
                normalize_runs(block)
            elif align:
                block.attrs["text_align"] = align
        return True

    def _all_selected(self, block_type: str, **attrs) -> bool:
        return all(
            block.type == block_type and all(block.attrs.get(k) == v for k, v in attrs.items())
            for block in self._selected_blocks()
        )

    def toggle_heading(self, level: int) -> bool:
        if level not in HEADING_LEVELS:
            raise ValueError(f"Heading level must be one of {HEADING_LEVELS}")
        if self._all_selected("heading", level=level):
            return self._run(self._set_block_type, "paragraph", {})
        return self._run(self._set_block_type, "heading", {"level": level})

    def set_paragraph(self) -> bool:
        return self._run(self._set_block_type, "paragraph", {})

    def toggle_code_block(self) -> bool:
        if self._all_selected("code_block"):
            return self._run(self._set_block_type, "paragraph", {})
        return self._run(self._set_block_type, "code_block", {})

    def _set_text_align(self, align: Optional[str]) -> bool:
        targets = [b for b in self._selected_blocks() if b.type in ("paragraph", "heading")]
        if not targets:
            return False
        for block in targets:
            if align in (None, "left"):
                block.attrs.pop("text_align", None)
            else:
                block.attrs["text_align"] = align
        return True

    def set_text_align(self, align: str) -> bool:
        if align not in ALIGNMENTS:
            raise ValueError(f"Alignment must be one of {ALIGNMENTS}")
        return self._run(self._set_text_align, align)

    def unset_text_align(self) -> bool:
        return self._run(self._set_text_align, None)

    # ---- wrapping: lists and blockquotes ----

    def _ancestor(self, types) -> Optional[tuple]:
        """Innermost ancestor of one of ``types`` containing the whole selection."""
        fi, _, ti, _ = self._range()
        blocks = self._blocks()
        from_path, to_path = self._path(blocks[fi]), self._path(blocks[ti])
        for depth in range(len(from_path) - 1, 0, -1):
            prefix = from_path[:depth]
            node = node_at(self._doc, prefix)
            if node.type in CELLS:
                return None
            if node.type in types and to_path[:depth] == prefix:
                return prefix
        return None

    def _block_range(self) -> Optional[tuple]:
        fi, _, ti, _ = self._range()
        blocks = self._blocks()
        from_path, to_path = self._path(blocks[fi]), self._path(blocks[ti])
        depth = 0
        limit = min(len(from_path), len(to_path)) - 1
        while depth < limit and from_path[depth] == to_path[depth]:
            depth += 1
        parent_path = from_path[:depth]
        start, end = from_path[depth], to_path[depth]
        parent = node_at(self._doc, parent_path)
        while parent.type not in BLOCK_PARENTS:
            start = end = parent_path[-1]
            parent_path = parent_path[:-1]
            parent = node_at(self._doc, parent_path)
        return parent, start, end

    def _wrap(self, wrapper_type: str, attrs: Optional[dict] = None) -> bool:
        parent, start, end = self._block_range()
        children = parent.content[start:end + 1]
        if wrapper_type in LISTS:
            wrapper = Node(wrapper_type, content=[list_item(wrapper_type, [child]) for child in children])
            if wrapper_type == "ordered_list":
                wrapper.attrs["start"] = 1
        else:
            wrapper = Node(wrapper_type, dict(attrs or {}), children)
        parent.content[start:end + 1] = [wrapper]
        return True

    def _unwrap(self, path) -> None:
        node = node_at(self._doc, path)
        parent = node_at(self._doc, path[:-1])
        if node.type in LISTS:
            replacement = [block for item in node.content for block in item.content]
        else:
            replacement = list(node.content)
        parent.content[path[-1]:path[-1] + 1] = replacement

    def _lift_list_items(self, list_path) -> None:
        fi, _, ti, _ = self._range()
        blocks = self._blocks()
        depth = len(list_path)
        start = self._path(blocks[fi])[depth]
        end = self._path(blocks[ti])[depth]
        list_node = node_at(self._doc, list_path)
        parent = node_at(self._doc, list_path[:-1])
        replacement = []
        before, items, after = (
            list_node.content[:start], list_node.content[start:end + 1], list_node.content[end + 1:]
        )
        if before:
            replacement.append(Node(list_node.type, dict(list_node.attrs), before))
        for item in items:
            replacement.extend(item.content)
        if after:
            replacement.append(Node(list_node.type, dict(list_node.attrs), after))
        parent.content[list_path[-1]:list_path[-1] + 1] = replacement

    def _toggle_list(self, list_type: str) -> bool:
        list_path = self._ancestor(LISTS)
        if list_path is None:
            return self._wrap(list_type)
        list_node = node_at(self._doc, list_path)
        if list_node.type == list_type:
            self._lift_list_items(list_path)
        else:
            list_node.type = list_type
            list_node.attrs = {"start": 1} if list_type == "ordered_list" else {}
            list_node.content = [list_item(list_type, item.content) for item in list_node.content]
        return True

    def toggle_bullet_list(self) -> bool:
        return self._run(self._toggle_list, "bullet_list")

    def toggle_ordered_list(self) -> bool:
        return self._run(self._toggle_list, "ordered_list")

    def toggle_task_list(self) -> bool:
        return self._run(self._toggle_list, "task_list")

    def _task_items(self) -> List[Node]:
        """Innermost checklist item around each selected block."""
        items: List[Node] = []
        for block in self._selected_blocks():
            path = self._path(block)
            for depth in range(len(path) - 1, 0, -1):
                node = node_at(self._doc, path[:depth])
                if node.type in CELLS:
                    break
                if node.type == "task_item":
                    if not any(item is node for item in items):
                        items.append(node)
                    break
        return items

    def _toggle_task_checked(self) -> bool:
        items = self._task_items()
        if not items:
            return False
        checked = not all(item.attrs.get("checked") for item in items)
        for item in items:
            item.attrs["checked"] = checked
        return True

    def toggle_task_checked(self) -> bool:
        """Tick the checklist items at the selection, or untick them when all are ticked."""
        return self._run(self._toggle_task_checked)

    def _toggle_blockquote(self) -> bool:
        quote_path = self._ancestor(("blockquote",))
        if quote_path is None:
            return self._wrap("blockquote")
        self._unwrap(quote_path)
        return True

    def toggle_blockquote(self) -> bool:
        return self._run(self._toggle_blockquote)

    # ---- callout boxes ----

    def _set_callout(self, background_color: Optional[str], border_color: Optional[str]) -> bool:
        callout_path = self._ancestor(("callout",))
        if callout_path is not None:
            node_at(self._doc, callout_path).attrs = callout_attrs(background_color, border_color)
            return True
        if self.empty:
            return self._insert_block(callout(None, background_color, border_color))
        return self._wrap("callout", callout_attrs(background_color, border_color))

    def _unset_callout(self) -> bool:
        callout_path = self._ancestor(("callout",))
        if callout_path is None:
            return False
        self._unwrap(callout_path)
        return True

    @staticmethod
    def _colors_ok(*colors: Optional[str]) -> bool:
        return all(color is None or safe_color(color) for color in colors)

    def set_callout(self, background_color: Optional[str] = None, border_color: Optional[str] = None) -> bool:
        """Wrap the selection in a callout box, add an empty one at the cursor, or recolour the current one."""
        if not self._colors_ok(background_color, border_color):
            return False
        return self._run(self._set_callout, background_color, border_color)

    def toggle_callout(self, background_color: Optional[str] = None, border_color: Optional[str] = None) -> bool:
        if not self._colors_ok(background_color, border_color):
            return False
        if self._ancestor(("callout",)) is not None:
            return self._run(self._unset_callout)
        return self._run(self._set_callout, background_color, border_color)

    def unset_callout(self) -> bool:
        return self._run(self._unset_callout)

    # ---- clearing ----

    def _innermost_wrapper(self, block: Node):
        path = self._path(block)
        found = None
        for depth in range(1, len(path)):
            node = node_at(self._doc, path[:depth])
            if node.type in CELLS:
                found = None
            elif node.type in WRAPPERS:
                found = path[:depth]
        return found

    def _clear_nodes(self) -> bool:
        targets = self._selected_blocks()
        lifted = True
        while lifted:
            lifted = False
            for block in targets:
                wrapper = self._innermost_wrapper(block)
                if wrapper is not None:
                    self._unwrap(wrapper)
                    lifted = True
                    break
        for block in targets:
            block.type = "paragraph"
            block.attrs = {}
        return True

    def clear_nodes(self) -> bool:
        return self._run(self._clear_nodes)

    def clear_formatting(self) -> bool:
        """Strip every mark and turn the selected blocks into plain paragraphs."""
        return self._run(lambda: self._unset_all_marks() and self._clear_nodes())

    # ---- typing ----

    def _remove_node(self, node: Node) -> None:
        path = self._path(node)
        parent = node_at(self._doc, path[:-1])
        del parent.content[path[-1]]
        while not parent.content and parent.type != "doc":
            if parent.type in CELLS:
                parent.content.append(paragraph())
                return
            path = path[:-1]
            grandparent = node_at(self._doc, path[:-1])
            del grandparent.content[path[-1]]
            parent = grandparent

    def _delete_selection(self) -> bool:
        if self.empty:
            return False
        fi, fo, ti, to = self._range()
        blocks = self._blocks()
        first, last = blocks[fi], blocks[ti]
        if first is last:
            delete_text(first, fo, to)
        else:
            tail = slice_runs(last, to, block_length(last))
            delete_text(first, fo, block_length(first))
            ordered = leaves(self._doc)
            start = next(i for i, leaf in enumerate(ordered) if leaf is first)
            stop = next(i for i, leaf in enumerate(ordered) if leaf is last)
            for leaf in ordered[start + 1:stop + 1]:
                self._remove_node(leaf)
            insert_runs(first, block_length(first), tail)
        self._place_cursor(first, fo)
        return True

    def delete_selection(self) -> bool:
        return self._run(self._delete_selection)

    def _insert_text(self, text: str) -> bool:
        if not text:
            return False
        marks = self._cursor_marks()
        self._delete_selection()
        block, offset = self._cursor()
        if block.type == "code_block":
            marks = ()
        insert_runs(block, offset, [text_run(text, marks)])
        self._place_cursor(block, offset + len(text))
        self._stored_marks = None
        return True

    def insert_text(self, text: str) -> bool:
        """Type ``text`` at the cursor, replacing any selected content."""
        return self._run(self._insert_text, text)

    # ---- inserting block nodes ----

    def _insert_block(self, node: Node) -> bool:
        self._delete_selection()
        block, offset = self._cursor()
        path = self._path(block)
        parent = node_at(self._doc, path[:-1])
        index = path[-1]
        length = block_length(block)
        if length == 0 and block.type == "paragraph":
            parent.content[index:index + 1] = [node]
        elif offset == 0:
            parent.content.insert(index, node)
        elif offset >= length:
            parent.content.insert(index + 1, node)
        else:
            tail = Node(block.type, dict(block.attrs), slice_runs(block, offset, length))
            delete_text(block, offset, length)
            parent.content[index + 1:index + 1] = [node, tail]

        target = first_textblock(node)
        if target is None:
            # Atoms take no cursor: continue in the next textblock, adding one if needed.
            position = next(i for i, child in enumerate(parent.content) if child is node)
            following = parent.content[position + 1] if position + 1 < len(parent.content) else None
            target = first_textblock(following) if following is not None else None
            if target is None:
                target = paragraph()
                parent.content.insert(position + 1, target)
        self._place_cursor(target, 0)
        return True

    def insert_image(self, src: str, alt: Optional[str] = None, title: Optional[str] = None) -> bool:
        src = safe_url(src, SAFE_IMAGE_SCHEMES)
        if not src:
            return False
        attrs = {"src": src}
        if alt:
            attrs["alt"] = alt
        if title:
            attrs["title"] = title
        return self._run(self._insert_block, Node("image", attrs))

    def insert_youtube(self, url: str, width: int = YOUTUBE_WIDTH, height: int = YOUTUBE_HEIGHT) -> bool:
        """Embed a YouTube video at the cursor. Links to other sites are refused."""
        src = youtube_embed_url(url)
        if not src:
            return False
        return self._run(self._insert_block, Node("youtube", {"src": src, "width": width, "height": height}))

    def set_horizontal_rule(self) -> bool:
        return self._run(self._insert_block, Node("horizontal_rule"))

    # ---- tables ----

    def _table_context(self) -> Optional[tuple]:
        block, _ = self._cursor()
        path = self._path(block)
        for depth in range(len(path) - 2, -1, -1):
            node = node_at(self._doc, path[:depth])
            if node.type == "table":
                return path[:depth], node, path[depth], path[depth + 1]
        return None

    def _insert_table(self, rows: int, cols: int, with_header_row: bool) -> bool:
        if rows < 1 or cols < 1 or self._table_context() is not None:
            return False
        return self._insert_block(build_table(rows, cols, with_header_row))

    def insert_table(self, rows: int = 3, cols: int = 3, with_header_row: bool = True) -> bool:
        return self._run(self._insert_table, rows, cols, with_header_row)

    @staticmethod
    def _is_header_row(row: Node) -> bool:
        return bool(row.content) and all(cell.type == "table_header" for cell in row.content)

    def _add_column(self, after: bool) -> bool:
        context = self._table_context()
        if context is None:
            return False
        _, table, _, col = context
        at = col + 1 if after else col
        for row in table.content:
            cell_type = "table_header" if self._is_header_row(row) else "table_cell"
            row.content.insert(min(at, len(row.content)), table_cell(cell_type))
        return True

    def add_column_before(self) -> bool:
        return self._run(self._add_column, False)

    def add_column_after(self) -> bool:
        return self._run(self._add_column, True)

    def _add_row(self, after: bool) -> bool:
        context = self._table_context()
        if context is None:
            return False
        _, table, row_index, _ = context
        at = row_index + 1 if after else row_index
        width = max(len(row.content) for row in table.content)
        header = at == 0 and self._is_header_row(table.content[0])
        cell_type = "table_header" if header else "table_cell"
        table.content.insert(at, Node("table_row", content=[table_cell(cell_type) for _ in range(width)]))
        return True

    def add_row_before(self) -> bool:
        return self._run(self._add_row, False)

    def add_row_after(self) -> bool:
        return self._run(self._add_row, True)

    def _relocate_cursor(self, old_blocks: List[Node], hint: int) -> None:
        alive = {id(block) for block in self._blocks()}
        for block in old_blocks[hint:] + old_blocks[:hint][::-1]:
            if id(block) in alive:
                self._place_cursor(block, 0)
                return
        self._place_cursor(self._blocks()[0], 0)

    def _delete_table(self) -> bool:
        context = self._table_context()
        if context is None:
            return False
        table_path, table, _, _ = context
        old_blocks = self._blocks()
        inside = textblocks(table)
        hint = next(i for i, block in enumerate(old_blocks) if block is inside[-1]) + 1
        parent = node_at(self._doc, table_path[:-1])
        del parent.content[table_path[-1]]
        if not parent.content:
            parent.content.append(paragraph())
        self._ensure_textblock()
        self._relocate_cursor(old_blocks, hint)
        return True

    def delete_table(self) -> bool:
        return self._run(self._delete_table)

    def _delete_column(self) -> bool:
        context = self._table_context()
        if context is None:
            return False
        _, table, _, col = context
        if all(len(row.content) <= 1 for row in table.content):
            return self._delete_table()
        old_blocks = self._blocks()
        hint = self._index(self._cursor()[0])
        for row in table.content:
            if col < len(row.content):
                del row.content[col]
        table.content = [row for row in table.content if row.content]
        self._relocate_cursor(old_blocks, hint)
        return True

    def delete_column(self) -> bool:
        return self._run(self._delete_column)

    def _delete_row(self) -> bool:
        context = self._table_context()
        if context is None:
            return False
        _, table, row_index, _ = context
        if len(table.content) <= 1:
            return self._delete_table()
        old_blocks = self._blocks()
        hint = self._index(self._cursor()[0])
        del table.content[row_index]
        self._relocate_cursor(old_blocks, hint)
        return True

    def delete_row(self) -> bool:
        return self._run(self._delete_row)

    def _toggle_header_row(self) -> bool:
        context = self._table_context()
        if context is None:
            return False
        first_row = context[1].content[0]
        cell_type = "table_cell" if self._is_header_row(first_row) else "table_header"
        for cell in first_row.content:
            cell.type = cell_type
        return True

    def toggle_header_row(self) -> bool:
        return self._run(self._toggle_header_row)

    # ---- active state ----

    def is_active(self, name: Optional[str] = None, **attrs) -> bool:
        """Whether a mark or node is applied at the selection.

        ``is_active("bold")``, ``is_active("heading", level=2)``,
        ``is_active("highlight", color="#FFFF00")`` and
        ``is_active(text_align="center")`` are all valid queries.
        """
        if name is None:
            align = attrs.get("text_align")
            targets = [b for b in self._selected_blocks() if b.type in ("paragraph", "heading")]
            return bool(targets) and all(
                (block.attrs.get("text_align") or "left") == align for block in targets
            )
        if name in ("paragraph", "heading", "code_block"):
            return self._all_selected(name, **attrs)
        if name in ("bullet_list", "ordered_list", "task_list", "blockquote", "callout"):
            return self._ancestor((name,)) is not None
        if name == "task_item":
            items = self._task_items()
            return bool(items) and all(
                all(item.attrs.get(key) == value for key, value in attrs.items()) for item in items
            )
        if name == "table":
            return self._table_context() is not None
        return self._mark_active(name, attrs or None)
