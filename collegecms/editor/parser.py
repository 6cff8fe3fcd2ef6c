"""Parse stored HTML into an editor document.

Only node and mark types known to the editor survive. Scripts, styles and
embeds are dropped with their content (YouTube iframes excepted), unknown
wrappers are unwrapped to their text, attributes other than the few each node
reads are ignored, and links or images with unsafe URLs lose the link or the
image. Serializing the parsed document therefore yields sanitized HTML.
"""

import logging
import re
from typing import Iterator, List, Optional, Sequence

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from collegecms.editor.document import (
    HEADING_LEVELS,
    SAFE_IMAGE_SCHEMES,
    YOUTUBE_HEIGHT,
    YOUTUBE_WIDTH,
    Mark,
    Node,
    add_mark,
    callout,
    collapse_whitespace,
    empty_doc,
    list_item,
    normalize_runs,
    paragraph,
    safe_color,
    safe_url,
    text_run,
    youtube_embed_url,
)

logger = logging.getLogger(__name__)

DROP_TAGS = {
    "script", "style", "object", "embed", "noscript", "template",
    "head", "title", "meta", "link", "svg", "math", "form", "input", "button",
    "select", "textarea", "canvas", "video", "audio",
}
TRANSPARENT_BLOCKS = {
    "html", "body", "div", "section", "article", "header", "footer", "main",
    "aside", "nav", "figure", "figcaption", "center", "details", "summary",
    "dl", "dt", "dd", "address",
}
SIMPLE_MARKS = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "u": "underline",
    "s": "strike",
    "strike": "strike",
    "del": "strike",
    "code": "code",
    "sub": "subscript",
    "sup": "superscript",
}

_WHITESPACE = re.compile(r"[ \t\r\n\f]+")


def _style(tag: Tag) -> dict:
    rules = {}
    for declaration in (tag.get("style") or "").split(";"):
        name, sep, value = declaration.partition(":")
        if sep:
            rules[name.strip().lower()] = value.strip()
    return rules


def _text_align(tag: Tag) -> Optional[str]:
    align = (_style(tag).get("text-align") or tag.get("align") or "").lower()
    return align if align in ("center", "right") else None


def _marks_for(tag: Tag) -> List[Mark]:
    name = tag.name.lower()
    style = _style(tag)
    marks = []
    if name in SIMPLE_MARKS:
        if not (name == "b" and style.get("font-weight") == "normal"):
            marks.append(Mark.of(SIMPLE_MARKS[name]))
    elif name == "a":
        href = safe_url(tag.get("href"))
        if href:
            marks.append(Mark.of("link", href=href))
    elif name == "mark":
        color = safe_color(tag.get("data-color") or style.get("background-color"))
        marks.append(Mark.of("highlight", color=color))
    color = safe_color(style.get("color")) if name in ("span", "font") else None
    if name == "font":
        color = color or safe_color(tag.get("color"))
    if color:
        marks.append(Mark.of("text_style", color=color))
    return marks


def _parse_image(tag: Tag) -> Optional[Node]:
    src = safe_url(tag.get("src"), SAFE_IMAGE_SCHEMES)
    if not src:
        logger.debug("[editor] dropped image with unsafe src")
        return None
    attrs = {"src": src}
    for name in ("alt", "title"):
        if tag.get(name):
            attrs[name] = tag.get(name)
    return Node("image", attrs)


def _dimension(value, default: int) -> int:
    text = str(value or "")
    return int(text) if text.isdigit() and 0 < int(text) <= 4000 else default


def _parse_youtube(tag: Tag) -> Optional[Node]:
    src = youtube_embed_url(tag.get("src"))
    if not src:
        logger.debug("[editor] dropped embed that is not a YouTube video")
        return None
    return Node("youtube", {
        "src": src,
        "width": _dimension(tag.get("width"), YOUTUBE_WIDTH),
        "height": _dimension(tag.get("height"), YOUTUBE_HEIGHT),
    })


def _parse_callout(tag: Tag) -> List[Node]:
    background = tag.get("data-background-color") or _style(tag).get("background-color")
    return [callout(_parse_blocks(tag), background, tag.get("data-border-color"))]


def _parse_inline(node, marks: Sequence[Mark]) -> Iterator[Node]:
    """Yield text runs (and image or video atoms) for inline content."""
    if isinstance(node, PreformattedString):
        return
    if isinstance(node, NavigableString):
        text = _WHITESPACE.sub(" ", str(node))
        if text:
            yield text_run(text, marks)
        return
    name = node.name.lower()
    if name in DROP_TAGS:
        logger.debug("[editor] dropped <%s>", name)
        return
    if name == "br":
        yield text_run("\n", marks)
        return
    if name == "img":
        image = _parse_image(node)
        if image:
            yield image
        return
    if name == "iframe":
        video = _parse_youtube(node)
        if video:
            yield video
        return
    inner = tuple(marks)
    for mark in _marks_for(node):
        inner = add_mark(inner, mark)
    for child in node.children:
        yield from _parse_inline(child, inner)


def _finish(block: Node, runs: List[Node]) -> Node:
    for run, text in zip(runs, collapse_whitespace([run.text for run in runs])):
        run.text = text
    block.content = runs
    normalize_runs(block)
    return block


def _parse_textblock(tag: Tag, block_type: str, attrs: dict) -> List[Node]:
    """A paragraph or heading; images and videos inside it are hoisted out as blocks."""
    blocks: List[Node] = []
    runs: List[Node] = []
    for child in tag.children:
        for item in _parse_inline(child, ()):
            if item.type != "text":
                if runs:
                    blocks.append(_finish(Node(block_type, dict(attrs)), runs))
                    runs = []
                blocks.append(item)
            else:
                runs.append(item)
    if runs or not blocks:
        blocks.append(_finish(Node(block_type, dict(attrs)), runs))
    return blocks


def _parse_code_block(tag: Tag) -> List[Node]:
    attrs = {}
    code = tag.find("code")
    for css in (code.get("class") if code else None) or []:
        if css.startswith("language-"):
            attrs["language"] = css[len("language-"):]
    text = tag.get_text()
    return [Node("code_block", attrs, [text_run(text)] if text else [])]


def _task_checked(tag: Tag) -> bool:
    if tag.get("data-checked") is not None:
        return str(tag.get("data-checked")).lower() == "true"
    box = tag.find("input", attrs={"type": "checkbox"})
    return box is not None and box.has_attr("checked")


def _parse_list(tag: Tag) -> List[Node]:
    name = tag.name.lower()
    if name == "ul" and tag.get("data-type") == "taskList":
        list_type = "task_list"
    else:
        list_type = "ordered_list" if name == "ol" else "bullet_list"
    items = []
    for child in tag.children:
        if isinstance(child, Tag) and child.name.lower() == "li":
            if list_type == "task_list":
                # The checkbox label is presentation; the state lives in data-checked.
                body = [c for c in child.children if not (isinstance(c, Tag) and c.name.lower() == "label")]
                blocks = _parse_blocks_from(body) or [paragraph()]
                items.append(list_item(list_type, blocks, _task_checked(child)))
            else:
                items.append(list_item(list_type, _parse_blocks(child) or [paragraph()]))
        else:
            stray = _parse_blocks_from([child])
            if stray:
                items.append(list_item(list_type, stray))
    if not items:
        return []
    if list_type == "ordered_list":
        start = str(tag.get("start") or "1")
        return [Node("ordered_list", {"start": int(start) if start.isdigit() else 1}, items)]
    return [Node(list_type, content=items)]


def _child_tags(tag: Tag, names: Sequence[str]) -> List[Tag]:
    return [child for child in tag.children if isinstance(child, Tag) and child.name.lower() in names]


def _span(value) -> int:
    text = str(value or "1")
    return int(text) if text.isdigit() and int(text) > 0 else 1


def _parse_table(tag: Tag) -> List[Node]:
    row_tags = []
    for child in _child_tags(tag, ("tr", "thead", "tbody", "tfoot")):
        if child.name.lower() == "tr":
            row_tags.append(child)
        else:
            row_tags.extend(_child_tags(child, ("tr",)))
    rows = []
    for row_tag in row_tags:
        cells = []
        for cell_tag in _child_tags(row_tag, ("th", "td")):
            cell_type = "table_header" if cell_tag.name.lower() == "th" else "table_cell"
            attrs = {"colspan": _span(cell_tag.get("colspan")), "rowspan": _span(cell_tag.get("rowspan"))}
            cells.append(Node(cell_type, attrs, _parse_blocks(cell_tag) or [paragraph()]))
        if cells:
            rows.append(Node("table_row", content=cells))
    return [Node("table", content=rows)] if rows else []


def _parse_block(tag: Tag) -> Optional[List[Node]]:
    name = tag.name.lower()
    if name == "p":
        align = _text_align(tag)
        return _parse_textblock(tag, "paragraph", {"text_align": align} if align else {})
    if len(name) == 2 and name[0] == "h" and name[1] in "123456":
        attrs = {"level": min(int(name[1]), max(HEADING_LEVELS))}
        align = _text_align(tag)
        if align:
            attrs["text_align"] = align
        return _parse_textblock(tag, "heading", attrs)
    if name == "pre":
        return _parse_code_block(tag)
    if name == "blockquote":
        return [Node("blockquote", content=_parse_blocks(tag) or [paragraph()])]
    if name in ("ul", "ol"):
        return _parse_list(tag)
    if name == "table":
        return _parse_table(tag)
    if name == "hr":
        return [Node("horizontal_rule")]
    if name == "img":
        image = _parse_image(tag)
        return [image] if image else []
    if name == "iframe":
        video = _parse_youtube(tag)
        return [video] if video else []
    if name == "div" and tag.get("data-type") == "callout":
        return _parse_callout(tag)
    if name == "div" and tag.has_attr("data-youtube-video"):
        frame = tag.find("iframe")
        video = _parse_youtube(frame) if frame else None
        return [video] if video else []
    if name in TRANSPARENT_BLOCKS:
        return _parse_blocks(tag)
    return None


def _parse_blocks_from(children) -> List[Node]:
    blocks: List[Node] = []
    pending: List[Node] = []

    def flush():
        if pending:
            block = _finish(Node("paragraph"), list(pending))
            if block.content:
                blocks.append(block)
            pending.clear()

    for child in children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, Tag):
            name = child.name.lower()
            if name in DROP_TAGS:
                logger.debug("[editor] dropped <%s>", name)
                continue
            parsed = _parse_block(child)
            if parsed is not None:
                flush()
                blocks.extend(parsed)
                continue
        for item in _parse_inline(child, ()):
            if item.type != "text":
                flush()
                blocks.append(item)
            else:
                pending.append(item)
    flush()
    return blocks


def _parse_blocks(tag: Tag) -> List[Node]:
    return _parse_blocks_from(tag.children)


def parse_html(content: Optional[str]) -> Node:
    """Build a document from an HTML fragment. Blank input gives one empty paragraph."""
    if not content or not content.strip():
        return empty_doc()
    soup = BeautifulSoup(content, "html.parser")
    blocks = _parse_blocks_from(soup.children)
    return Node("doc", content=blocks or [paragraph()])
