"""Render an editor document as HTML."""

from html import escape
from typing import List

from collegecms.editor.document import (
    CALLOUT_BACKGROUND,
    CALLOUT_BORDER,
    YOUTUBE_HEIGHT,
    YOUTUBE_WIDTH,
    Mark,
    Node,
    collapse_whitespace,
)

LINK_REL = "noopener noreferrer nofollow"

MARK_TAGS = {
    "bold": "strong",
    "italic": "em",
    "underline": "u",
    "strike": "s",
    "code": "code",
    "subscript": "sub",
    "superscript": "sup",
    "link": "a",
    "text_style": "span",
    "highlight": "mark",
}


def _attr(name: str, value) -> str:
    return f' {name}="{escape(str(value), quote=True)}"'


def _align(node: Node) -> str:
    align = node.attrs.get("text_align")
    if align and align != "left":
        return _attr("style", f"text-align: {align}")
    return ""


def _open_mark(mark: Mark) -> str:
    if mark.type == "link":
        return f'<a{_attr("target", "_blank")}{_attr("rel", LINK_REL)}{_attr("href", mark.attr("href", ""))}>'
    if mark.type == "text_style":
        style = f"color: {mark.attr('color')}"
        return f'<span{_attr("style", style)}>'
    if mark.type == "highlight":
        color = mark.attr("color")
        if not color:
            return "<mark>"
        style = f"background-color: {color}; color: inherit"
        return f'<mark{_attr("data-color", color)}{_attr("style", style)}>'
    return f"<{MARK_TAGS[mark.type]}>"


def _close_mark(mark: Mark) -> str:
    return f"</{MARK_TAGS[mark.type]}>"


def _text(text: str, preformatted: bool) -> str:
    escaped = escape(text, quote=False)
    return escaped if preformatted else escaped.replace("\n", "<br>")


def serialize_inline(block: Node) -> str:
    # Marks shared with the previous run stay open, so a link spanning bold
    # and plain text renders as a single <a>.
    preformatted = block.type == "code_block"
    texts = [run.text for run in block.content]
    if not preformatted:
        texts = collapse_whitespace(texts)
    out: List[str] = []
    open_marks: List[Mark] = []
    for run, text in zip(block.content, texts):
        if not text:
            continue
        marks = [] if preformatted else list(run.marks)
        keep = 0
        while keep < len(open_marks) and keep < len(marks) and open_marks[keep] == marks[keep]:
            keep += 1
        out.extend(_close_mark(mark) for mark in reversed(open_marks[keep:]))
        out.extend(_open_mark(mark) for mark in marks[keep:])
        open_marks = marks
        out.append(_text(text, preformatted))
    out.extend(_close_mark(mark) for mark in reversed(open_marks))
    return "".join(out)


def _children(node: Node) -> str:
    return "".join(serialize_node(child) for child in node.content)


def serialize_node(node: Node) -> str:
    kind = node.type
    if kind == "paragraph":
        return f"<p{_align(node)}>{serialize_inline(node)}</p>"
    if kind == "heading":
        level = node.attrs.get("level", 1)
        return f"<h{level}{_align(node)}>{serialize_inline(node)}</h{level}>"
    if kind == "code_block":
        language = node.attrs.get("language")
        css = _attr("class", f"language-{language}") if language else ""
        return f"<pre><code{css}>{serialize_inline(node)}</code></pre>"
    if kind == "blockquote":
        return f"<blockquote>{_children(node)}</blockquote>"
    if kind == "bullet_list":
        return f"<ul>{_children(node)}</ul>"
    if kind == "ordered_list":
        start = node.attrs.get("start", 1)
        return f"<ol{_attr('start', start) if start != 1 else ''}>{_children(node)}</ol>"
    if kind == "list_item":
        return f"<li>{_children(node)}</li>"
    if kind == "task_list":
        return f'<ul data-type="taskList">{_children(node)}</ul>'
    if kind == "task_item":
        checked = bool(node.attrs.get("checked"))
        box = '<input type="checkbox" checked="checked">' if checked else '<input type="checkbox">'
        return (
            f'<li data-type="taskItem"{_attr("data-checked", "true" if checked else "false")}>'
            f"<label>{box}</label><div>{_children(node)}</div></li>"
        )
    if kind == "callout":
        background = node.attrs.get("background_color", CALLOUT_BACKGROUND)
        border = node.attrs.get("border_color", CALLOUT_BORDER)
        style = (
            f"background-color: {background}; border: 1px solid {border}; "
            "border-radius: 8px; padding: 16px; margin: 12px 0"
        )
        attrs = (
            _attr("data-type", "callout") + _attr("class", "callout-box")
            + _attr("data-background-color", background) + _attr("data-border-color", border)
            + _attr("style", style)
        )
        return f"<div{attrs}>{_children(node)}</div>"
    if kind == "table":
        return f"<table><tbody>{_children(node)}</tbody></table>"
    if kind == "table_row":
        return f"<tr>{_children(node)}</tr>"
    if kind in ("table_cell", "table_header"):
        tag = "th" if kind == "table_header" else "td"
        spans = _attr("colspan", node.attrs.get("colspan", 1)) + _attr("rowspan", node.attrs.get("rowspan", 1))
        return f"<{tag}{spans}>{_children(node)}</{tag}>"
    if kind == "horizontal_rule":
        return "<hr>"
    if kind == "image":
        attrs = "".join(
            _attr(name, node.attrs[name]) for name in ("src", "alt", "title") if node.attrs.get(name)
        )
        return f"<img{attrs}>"
    if kind == "youtube":
        attrs = (
            _attr("src", node.attrs["src"])
            + _attr("width", node.attrs.get("width", YOUTUBE_WIDTH))
            + _attr("height", node.attrs.get("height", YOUTUBE_HEIGHT))
            + _attr("allowfullscreen", "true")
        )
        return f'<div data-youtube-video=""><iframe{attrs}></iframe></div>'
    raise ValueError(f"Cannot serialize node type '{kind}'")


def serialize(doc: Node) -> str:
    if not doc.content:
        return "<p></p>"
    return _children(doc)
