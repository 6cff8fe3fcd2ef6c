"""HTML parsing, sanitizing and serialization of editor documents."""

from collegecms.editor.document import Mark, safe_color, safe_url
from collegecms.editor.parser import parse_html
from collegecms.editor.serializer import serialize

LINK_ATTRS = 'target="_blank" rel="noopener noreferrer nofollow"'


def _clean(html):
    return serialize(parse_html(html))


def test_blank_content_is_one_empty_paragraph():
    assert _clean("") == "<p></p>"
    assert _clean(None) == "<p></p>"
    assert _clean("   \n ") == "<p></p>"


def test_plain_text_is_wrapped_in_paragraph():
    assert _clean("hello") == "<p>hello</p>"


def test_scripts_styles_and_comments_are_dropped():
    html = "<script>alert(1)</script><style>p{}</style><p>a<!-- note -->b</p><iframe src='x'></iframe>"
    assert _clean(html) == "<p>ab</p>"


def test_unsafe_link_keeps_text_only():
    assert _clean('<p><a href="javascript:alert(1)">click</a></p>') == "<p>click</p>"
    assert _clean('<p><a href="java\tscript:alert(1)">click</a></p>') == "<p>click</p>"


def test_safe_link_gets_fixed_attributes():
    html = '<p><a href="https://example.com" onclick="x()" class="c">site</a></p>'
    assert _clean(html) == f'<p><a {LINK_ATTRS} href="https://example.com">site</a></p>'


def test_unknown_attributes_and_wrappers_are_removed():
    html = '<div class="card"><section><p class="lead" onclick="x()">z</p></section></div>'
    assert _clean(html) == "<p>z</p>"


def test_adjacent_runs_with_same_marks_merge():
    assert _clean("<p><strong>a</strong><b>b</b></p>") == "<p><strong>ab</strong></p>"


def test_shared_link_stays_open_across_runs():
    html = '<p><a href="https://x.io"><strong>b</strong> plain</a></p>'
    assert _clean(html) == f'<p><a {LINK_ATTRS} href="https://x.io"><strong>b</strong> plain</a></p>'


def test_non_bold_b_wrapper_is_ignored():
    assert _clean('<b style="font-weight: normal"><p>x</p></b>') == "<p>x</p>"


def test_headings_above_three_are_clamped():
    assert _clean("<h5>Deep</h5>") == "<h3>Deep</h3>"


def test_line_breaks_and_whitespace():
    assert _clean("<p>  a<br>b   c  </p>") == "<p>a<br>b c</p>"


def test_text_is_escaped():
    assert _clean("<p>1 &lt; 2 &amp; 3</p>") == "<p>1 &lt; 2 &amp; 3</p>"


def test_alignment_is_kept_for_center_and_right():
    assert _clean('<p style="text-align: center">c</p>') == '<p style="text-align: center">c</p>'
    assert _clean('<p style="text-align: left">l</p>') == "<p>l</p>"


def test_code_block_keeps_text_and_language():
    html = '<pre><code class="language-python">x = 1\nprint(x)</code></pre>'
    assert _clean(html) == html


def test_lists_and_start_attribute():
    assert _clean("<ul><li>a</li><li>b</li></ul>") == "<ul><li><p>a</p></li><li><p>b</p></li></ul>"
    assert _clean('<ol start="3"><li>c</li></ol>') == '<ol start="3"><li><p>c</p></li></ol>'


def test_table_cells_carry_spans():
    html = '<table><thead><tr><th>h</th></tr></thead><tr><td colspan="2">a</td></tr></table>'
    assert _clean(html) == (
        '<table><tbody>'
        '<tr><th colspan="1" rowspan="1"><p>h</p></th></tr>'
        '<tr><td colspan="2" rowspan="1"><p>a</p></td></tr>'
        '</tbody></table>'
    )


def test_images_are_hoisted_out_of_paragraphs():
    html = '<p>a<img src="https://cdn.example.com/i.png" alt="campus" onerror="x()">b</p>'
    assert _clean(html) == '<p>a</p><img src="https://cdn.example.com/i.png" alt="campus"><p>b</p>'


def test_unsafe_images_are_dropped():
    assert _clean('<p>a</p><img src="javascript:alert(1)">') == "<p>a</p>"
    assert _clean('<img src="data:image/png;base64,AAAA">') == "<p></p>"


def test_colors_and_highlights():
    html = '<p><span style="color: #ff0000">r</span><mark data-color="#FFFF00">h</mark><mark>y</mark></p>'
    assert _clean(html) == (
        '<p><span style="color: #ff0000">r</span>'
        '<mark data-color="#FFFF00" style="background-color: #FFFF00; color: inherit">h</mark>'
        "<mark>y</mark></p>"
    )


def test_serialized_output_parses_back_to_itself():
    html = (
        '<h2 style="text-align: right">T</h2><blockquote><p><em>q</em></p></blockquote>'
        f'<p><sub>2</sub><sup>3</sup><s>x</s><u>y</u><code>z</code><a {LINK_ATTRS} href="mailto:a@b.c">m</a></p><hr>'
    )
    assert _clean(html) == html
    assert _clean(_clean(html)) == html


def test_safe_url_and_color():
    assert safe_url(" https://x.io ") == "https://x.io"
    assert safe_url("/relative/path") == "/relative/path"
    assert safe_url("vbscript:msgbox") is None
    assert safe_url("") is None
    assert safe_url("mailto:a@b.c", ("http", "https")) is None
    assert safe_color("#abc") == "#abc"
    assert safe_color("rgb(1, 2, 3)") == "rgb(1, 2, 3)"
    assert safe_color("red; background: url(x)") is None


def test_mark_attributes_are_order_independent():
    assert Mark.of("link", title="t", href="a") == Mark("link", (("href", "a"), ("title", "t")))
    assert Mark.of("highlight", color=None).attrs == ()


def test_whitespace_is_stored_as_it_renders():
    for html, stored in [
        ("<p>hello </p>", "<p>hello</p>"),
        ("<hr><p> world</p>", "<hr><p>world</p>"),
        ("<p>a <b> b</b></p>", "<p>a <strong>b</strong></p>"),
    ]:
        assert _clean(html) == stored
        assert _clean(stored) == stored


def test_task_list_keeps_checked_state():
    html = (
        '<ul data-type="taskList"><li data-type="taskItem" data-checked="true"><label>'
        '<input type="checkbox" checked="checked"><span></span></label><div><p>Apply online</p></div></li>'
        '<li data-checked="false" data-type="taskItem"><label><input type="checkbox"></label>'
        "<div><p>Upload marksheet</p></div></li></ul>"
    )
    stored = (
        '<ul data-type="taskList"><li data-type="taskItem" data-checked="true"><label>'
        '<input type="checkbox" checked="checked"></label><div><p>Apply online</p></div></li>'
        '<li data-type="taskItem" data-checked="false"><label><input type="checkbox"></label>'
        "<div><p>Upload marksheet</p></div></li></ul>"
    )
    assert _clean(html) == stored
    assert _clean(stored) == stored


def test_task_item_without_data_attribute_reads_the_checkbox():
    assert _clean('<ul data-type="taskList"><li><input type="checkbox" checked> Done</li></ul>') == (
        '<ul data-type="taskList"><li data-type="taskItem" data-checked="true"><label>'
        '<input type="checkbox" checked="checked"></label><div><p>Done</p></div></li></ul>'
    )


def test_callout_keeps_its_colours():
    html = (
        '<div data-type="callout" data-background-color="#d1fae5" data-border-color="#6ee7b7" onclick="x()">'
        "<p>Hostel fees</p></div>"
    )
    stored = _clean(html)
    assert stored.startswith(
        '<div data-type="callout" class="callout-box" data-background-color="#d1fae5" data-border-color="#6ee7b7"'
    )
    assert "onclick" not in stored
    assert stored.endswith("<p>Hostel fees</p></div>")
    assert _clean(stored) == stored

    styled = _clean('<div data-type="callout" style="background-color: #dbeafe"><p>x</p></div>')
    assert 'data-background-color="#dbeafe" data-border-color="#e5e7eb"' in styled
    unsafe = _clean('<div data-type="callout" data-background-color="red;x:url(y)"><p>x</p></div>')
    assert 'data-background-color="#f3f4f6"' in unsafe


def test_youtube_embeds_survive_and_other_iframes_do_not():
    video = (
        '<div data-youtube-video=""><iframe src="https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ" '
        'width="640" height="480" allowfullscreen="true"></iframe></div>'
    )
    stored_by_old_admin = (
        '<div data-youtube-video><iframe width="640" height="480" allowfullscreen="true" autoplay="false" '
        'src="https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ?controls=1"></iframe></div>'
    )
    assert _clean(stored_by_old_admin) == video
    assert _clean(video) == video
    assert _clean('<iframe src="https://evil.example/embed/dQw4w9WgXcQ"></iframe><p>x</p>') == "<p>x</p>"
    assert _clean('<div data-youtube-video><iframe src="https://evil.example/x"></iframe></div>') == "<p></p>"


def test_inline_video_is_hoisted_out_of_paragraph():
    html = '<p>Watch <iframe src="https://youtu.be/dQw4w9WgXcQ"></iframe> now</p>'
    assert _clean(html) == (
        '<p>Watch</p><div data-youtube-video=""><iframe src="https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ" '
        'width="640" height="360" allowfullscreen="true"></iframe></div><p>now</p>'
    )
