from collegecms.editor.editor import RichTextEditor
from collegecms.editor.toolbar import CALLOUT_COLORS, HIGHLIGHT_COLORS, TEXT_COLORS, EditorToolbar, Picker

__all__ = ["RichTextEditor", "EditorToolbar", "Picker", "TEXT_COLORS", "HIGHLIGHT_COLORS", "CALLOUT_COLORS"]
