"""Toolbar state for the rich text editor.

The toolbar maps buttons to editor commands, computes each button's
active/disabled state, owns the two colour pickers (at most one open at a
time) and asks for link, image and video URLs through an injected ``prompt``
callable ``prompt(message, default) -> str | None`` where ``None`` means the
user cancelled.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from collegecms.editor.editor import RichTextEditor

Prompt = Callable[[str, str], Optional[str]]

TEXT_COLORS = [
    "#000000", "#434343", "#666666", "#999999", "#b7b7b7", "#cccccc", "#d9d9d9", "#efefef", "#f3f3f3", "#ffffff",
    "#980000", "#ff0000", "#ff9900", "#ffff00", "#00ff00", "#00ffff", "#4a86e8", "#0000ff", "#9900ff", "#ff00ff",
    "#e6b8af", "#f4cccc", "#fce5cd", "#fff2cc", "#d9ead3", "#d0e0e3", "#c9daf8", "#cfe2f3", "#d9d2e9", "#ead1dc",
    "#dd7e6b", "#ea9999", "#f9cb9c", "#ffe599", "#b6d7a8", "#a2c4c9", "#a4c2f4", "#9fc5e8", "#b4a7d6", "#d5a6bd",
]

HIGHLIGHT_COLORS = [
    "#FFFF00", "#00FF00", "#00FFFF", "#FF00FF", "#FF0000", "#0000FF",
    "#FFD700", "#90EE90", "#87CEEB", "#FFB6C1", "#FFA07A", "#DDA0DD",
    "#F0E68C", "#98FB98", "#E6E6FA", "#FFDAB9", "#B0E0E6", "#FFEFD5",
]

CALLOUT_COLORS = [
    {"label": "Gray", "background": "#f3f4f6", "border": "#e5e7eb"},
    {"label": "Yellow", "background": "#fef3c7", "border": "#fcd34d"},
    {"label": "Green", "background": "#d1fae5", "border": "#6ee7b7"},
    {"label": "Blue", "background": "#dbeafe", "border": "#93c5fd"},
    {"label": "Purple", "background": "#ede9fe", "border": "#c4b5fd"},
    {"label": "Pink", "background": "#fce7f3", "border": "#f9a8d4"},
    {"label": "Red", "background": "#fee2e2", "border": "#fca5a5"},
    {"label": "Orange", "background": "#fff7ed", "border": "#fdba74"},
]

# Any valid video link; only used to ask the editor whether an embed fits at the cursor.
SAMPLE_VIDEO_URL = "https://www.youtube.com/watch?v=aqz-KE-bpKQ"


class Picker(Enum):
    NONE = "none"
    TEXT_COLOR = "text_color"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True)
class ToolbarItem:
    name: str
    title: str
    command: str
    args: Tuple = ()
    active: Optional[Tuple[Optional[str], Dict]] = None
    table_only: bool = False


@dataclass
class ButtonState:
    name: str
    title: str
    active: bool = False
    disabled: bool = False
    visible: bool = True


ITEMS: List[ToolbarItem] = [
    ToolbarItem("undo", "Undo (Ctrl+Z)", "undo"),
    ToolbarItem("redo", "Redo (Ctrl+Y)", "redo"),
    ToolbarItem("bold", "Bold (Ctrl+B)", "toggle_bold", active=("bold", {})),
    ToolbarItem("italic", "Italic (Ctrl+I)", "toggle_italic", active=("italic", {})),
    ToolbarItem("underline", "Underline (Ctrl+U)", "toggle_underline", active=("underline", {})),
    ToolbarItem("strike", "Strikethrough", "toggle_strike", active=("strike", {})),
    ToolbarItem("subscript", "Subscript", "toggle_subscript", active=("subscript", {})),
    ToolbarItem("superscript", "Superscript", "toggle_superscript", active=("superscript", {})),
    ToolbarItem("text_color", "Text Color", "set_color", args=("#000000",)),
    ToolbarItem("highlight", "Highlight", "toggle_highlight"),
    ToolbarItem("heading_1", "Heading 1", "toggle_heading", (1,), ("heading", {"level": 1})),
    ToolbarItem("heading_2", "Heading 2", "toggle_heading", (2,), ("heading", {"level": 2})),
    ToolbarItem("heading_3", "Heading 3", "toggle_heading", (3,), ("heading", {"level": 3})),
    ToolbarItem("bullet_list", "Bullet List", "toggle_bullet_list", active=("bullet_list", {})),
    ToolbarItem("ordered_list", "Numbered List", "toggle_ordered_list", active=("ordered_list", {})),
    ToolbarItem("task_list", "Task List / Checklist", "toggle_task_list", active=("task_list", {})),
    ToolbarItem("blockquote", "Quote", "toggle_blockquote", active=("blockquote", {})),
    ToolbarItem("callout", "Callout Box / Content Block", "toggle_callout", active=("callout", {})),
    ToolbarItem("align_left", "Align Left", "set_text_align", ("left",), (None, {"text_align": "left"})),
    ToolbarItem("align_center", "Align Center", "set_text_align", ("center",), (None, {"text_align": "center"})),
    ToolbarItem("align_right", "Align Right", "set_text_align", ("right",), (None, {"text_align": "right"})),
    ToolbarItem("link", "Add Link", "set_link", active=("link", {})),
    ToolbarItem("image", "Add Image", "insert_image"),
    ToolbarItem("youtube", "Add YouTube Video", "insert_youtube"),
    ToolbarItem("table", "Insert Table", "insert_table"),
    ToolbarItem("add_column_before", "Add Column Before", "add_column_before", table_only=True),
    ToolbarItem("add_column_after", "Add Column After", "add_column_after", table_only=True),
    ToolbarItem("add_row_before", "Add Row Before", "add_row_before", table_only=True),
    ToolbarItem("add_row_after", "Add Row After", "add_row_after", table_only=True),
    ToolbarItem("delete_column", "Delete Column", "delete_column", table_only=True),
    ToolbarItem("delete_row", "Delete Row", "delete_row", table_only=True),
    ToolbarItem("toggle_header_row", "Toggle Header Row", "toggle_header_row", table_only=True),
    ToolbarItem("delete_table", "Delete Table", "delete_table", table_only=True),
    ToolbarItem("code", "Inline Code", "toggle_code", active=("code", {})),
    ToolbarItem("code_block", "Code Block", "toggle_code_block", active=("code_block", {})),
    ToolbarItem("horizontal_rule", "Horizontal Line", "set_horizontal_rule"),
    ToolbarItem("clear_formatting", "Clear Formatting", "clear_formatting"),
]


@dataclass
class EditorToolbar:
    editor: RichTextEditor
    prompt: Optional[Prompt] = None
    picker: Picker = Picker.NONE
    items: Dict[str, ToolbarItem] = field(default_factory=lambda: {item.name: item for item in ITEMS})

    # ---- pickers ----

    def toggle_picker(self, picker: Picker) -> Picker:
        """Open ``picker`` (closing the other one) or close it when already open."""
        self.picker = Picker.NONE if self.picker == picker or picker == Picker.NONE else picker
        return self.picker

    def close_picker(self) -> None:
        self.picker = Picker.NONE

    def choose_text_color(self, color: str) -> bool:
        self.close_picker()
        return self.editor.set_color(color)

    def reset_text_color(self) -> bool:
        self.close_picker()
        return self.editor.unset_color()

    def choose_highlight(self, color: str) -> bool:
        self.close_picker()
        return self.editor.toggle_highlight(color)

    def remove_highlight(self) -> bool:
        self.close_picker()
        return self.editor.unset_highlight()

    def choose_callout(self, label: str) -> bool:
        """Put the selection in a callout box of the named colour, or recolour the box it is in."""
        colors = next((entry for entry in CALLOUT_COLORS if entry["label"] == label), None)
        if colors is None:
            raise ValueError(f"Unknown callout colour '{label}'")
        return self.editor.set_callout(colors["background"], colors["border"])

    # ---- prompts ----

    def _ask(self, message: str, default: str = "") -> Optional[str]:
        if self.prompt is None:
            return None
        return self.prompt(message, default)

    def set_link(self) -> bool:
        previous = self.editor.get_mark_attributes("link").get("href", "")
        url = self._ask("Enter URL", previous)
        if url is None:
            return False
        if not url.strip():
            return self.editor.unset_link()
        return self.editor.set_link(url)

    def add_image(self) -> bool:
        url = self._ask("Enter image URL")
        if not url or not url.strip():
            return False
        return self.editor.insert_image(url)

    def add_youtube(self) -> bool:
        url = self._ask("Enter YouTube URL (e.g., https://www.youtube.com/watch?v=...)")
        if not url or not url.strip():
            return False
        return self.editor.insert_youtube(url)

    # ---- buttons ----

    def press(self, name: str) -> bool:
        item = self.items.get(name)
        if item is None:
            raise ValueError(f"Unknown toolbar button '{name}'")
        if name == "text_color":
            self.toggle_picker(Picker.TEXT_COLOR)
            return True
        if name == "highlight":
            self.toggle_picker(Picker.HIGHLIGHT)
            return True
        if name == "link":
            return self.set_link()
        if name == "image":
            return self.add_image()
        if name == "youtube":
            return self.add_youtube()
        return bool(getattr(self.editor, item.command)(*item.args))

    def _is_active(self, item: ToolbarItem) -> bool:
        if item.name == "text_color":
            return self.picker == Picker.TEXT_COLOR
        if item.name == "highlight":
            return self.picker == Picker.HIGHLIGHT or self.editor.is_active("highlight")
        if item.active is None:
            return False
        name, attrs = item.active
        return self.editor.is_active(name, **attrs)

    def _is_disabled(self, item: ToolbarItem) -> bool:
        if item.name in ("link", "image", "youtube"):
            if self.prompt is None:
                return True
            sample = SAMPLE_VIDEO_URL if item.name == "youtube" else "https://example.com"
            return not self.editor.can(item.command, sample)
        return not self.editor.can(item.command, *item.args)

    def state(self) -> List[ButtonState]:
        in_table = self.editor.is_active("table")
        buttons = []
        for item in self.items.values():
            buttons.append(
                ButtonState(
                    name=item.name,
                    title=item.title,
                    active=self._is_active(item),
                    disabled=self._is_disabled(item),
                    visible=in_table or not item.table_only,
                )
            )
        return buttons

    def button(self, name: str) -> ButtonState:
        return next(state for state in self.state() if state.name == name)
