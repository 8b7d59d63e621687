"""Sanitized HTML rendering, presentation-layer list repair, and clipboard text"""

from typing import Iterable, Optional

from freedocs.core.extract.formatting import escape_preserving_formatting
from freedocs.core.models import (
    CodeBlock,
    ErrorBlock,
    HeadingBlock,
    ImageBlock,
    Line,
    LineOp,
    ListBlock,
    ListItem,
    ParagraphBlock,
)
from freedocs.core.utils.text import escape_html


COPY_MODES = ('clean', 'additions', 'all')


def normalize_hierarchical_lists(blocks: list) -> list:
    """Number the items of ordered lists that follow a single-item ordered list.

    An ordered list with exactly one item sets a parent number; later ordered
    lists get "<parent>.<n>" on items without a number. Any other block resets it.
    """
    result = []
    parent: Optional[str] = None

    for block in blocks:
        if not isinstance(block, ListBlock) or block.type != 'ordered-list':
            parent = None
            result.append(block)
            continue

        if parent is not None and block.items:
            items = [
                item if item.custom_number is not None
                else item.model_copy(update={'custom_number': f"{parent}.{idx + 1}"})
                for idx, item in enumerate(block.items)
            ]
            result.append(block.model_copy(update={'items': items}))
            continue

        if len(block.items) == 1:
            first = block.items[0]
            if first.custom_number is not None:
                parent = str(first.custom_number).split('.')[0]
            else:
                parent = str(block.start_value) if block.start_value > 1 else '1'
        else:
            parent = None
        result.append(block)

    return result


def _inline(text: str, html: Optional[str], has_formatting: bool) -> str:
    if has_formatting and html:
        return escape_preserving_formatting(html)
    return escape_html(text)


def _code_line(line: Line) -> str:
    op = line.op.value
    return (
        f'<span class="line-{op}" data-op="{op}" data-clean="{escape_html(line.text)}">'
        f'{escape_html(line.original_text)}</span>\n'
    )


def render_code(block, block_id: str) -> str:
    """Render a code block or code list item with copy controls and one span per line."""
    changes = ' has-changes' if block.has_changes else ''
    if block.has_changes:
        controls = (
            f'<button class="copy-btn" data-mode="clean" data-target="{block_id}">Copy Clean</button>'
            f'<button class="copy-btn" data-mode="additions" data-target="{block_id}">Copy Additions</button>'
            f'<label class="toggle-deletions"><input type="checkbox" class="deletion-toggle" '
            f'data-target="{block_id}" checked> Show deletions</label>'
        )
    else:
        controls = f'<button class="copy-btn" data-mode="all" data-target="{block_id}">Copy</button>'

    return (
        f'<div class="freedocs-code-block{changes}" data-language="{escape_html(block.language or "text")}">\n'
        f'<div class="freedocs-code-controls">{controls}</div>\n'
        f'<pre class="freedocs-code" id="{block_id}"><code>'
        + ''.join(_code_line(line) for line in block.lines)
        + '</code></pre>\n</div>\n'
    )


def render_list(block: ListBlock, block_id: str) -> str:
    tag = 'ol' if block.type == 'ordered-list' else 'ul'
    start = f' start="{block.start_value}"' if block.start_value != 1 else ''
    parts = [f'<{tag} class="freedocs-list"{start}>\n']

    for idx, item in enumerate(block.items):
        number = escape_html(str(item.custom_number)) if item.custom_number is not None else None
        attr = f' data-custom-number="{number}"' if number is not None else ''
        label = f'<span class="custom-number">{number}</span>' if number is not None else ''
        if item.type == 'code':
            parts.append(f'<li{attr}>{label}{render_code(item, f"{block_id}-{idx}")}</li>\n')
        else:
            parts.append(f'<li{attr}>{label}{_inline(item.text, item.html, item.has_formatting)}</li>\n')

    parts.append(f'</{tag}>\n')
    return ''.join(parts)


def render_image(block: ImageBlock) -> str:
    attrs = [f'src="{escape_html(block.src)}"']
    if block.alt:
        attrs.append(f'alt="{escape_html(block.alt)}"')
    if block.title:
        attrs.append(f'title="{escape_html(block.title)}"')
    if block.width:
        attrs.append(f'width="{block.width}"')
    if block.height:
        attrs.append(f'height="{block.height}"')
    attrs.append(f'data-format="{escape_html(block.format)}"')
    attrs.append(f'data-is-archive-image="{str(block.is_archive_image).lower()}"')
    attrs.append(f'data-original-src="{escape_html(block.original_src)}"')

    classes = ['freedocs-image']
    if block.is_archive_image:
        classes.append('archive-image')
    if block.format != 'unknown':
        classes.append(f'format-{block.format}')
    attrs.append(f'class="{" ".join(classes)}"')

    html = f'<div class="freedocs-image-container">\n<img {" ".join(attrs)}/>\n'
    if block.is_archive_image:
        html += (
            '<div class="freedocs-image-metadata">'
            f'<span class="image-format">Format: {escape_html(block.format.upper())}</span>'
            '<span class="image-source">Source: Internet Archive</span>'
        )
        if block.original_src != block.src:
            html += f'<span class="original-url">Original: {escape_html(block.original_src)}</span>'
        html += '</div>\n'
    return html + '</div>\n'


def render_block(block, index: int) -> str:
    """Render one block; unknown block types render as nothing."""
    if isinstance(block, HeadingBlock):
        css = 'freedocs-heading formatted' if block.has_formatting else 'freedocs-heading'
        return f'<h{block.level} class="{css}">{_inline(block.text, block.html, block.has_formatting)}</h{block.level}>\n'
    if isinstance(block, ParagraphBlock):
        tag = 'blockquote' if block.type == 'blockquote' else 'p'
        css = f'freedocs-{"blockquote" if tag == "blockquote" else "paragraph"}'
        if block.has_formatting:
            css += ' formatted'
        return f'<{tag} class="{css}">{_inline(block.text, block.html, block.has_formatting)}</{tag}>\n'
    if isinstance(block, CodeBlock):
        code = render_code(block, f'code-block-{index}')
        if block.type == 'blockquote-code':
            return f'<blockquote class="freedocs-blockquote">\n{code}</blockquote>\n'
        return code
    if isinstance(block, ListBlock):
        return render_list(block, f'code-block-{index}')
    if isinstance(block, ImageBlock):
        return render_image(block)
    if isinstance(block, ErrorBlock):
        return f'<div class="freedocs-error">{escape_html(block.content)}</div>\n'
    return ''


def generate_sanitized_html(blocks: list) -> str:
    """Render blocks into one sanitized HTML string wrapped in a freedocs-content div."""
    body = ''.join(render_block(b, i) for i, b in enumerate(normalize_hierarchical_lists(blocks)))
    return f'<div class="freedocs-content">\n{body}</div>'


def _copy_lines(lines: Iterable[Line], mode: str) -> list[str]:
    if mode == 'clean':
        return [line.text for line in lines if line.op != LineOp.removed]
    if mode == 'additions':
        return [line.text for line in lines if line.op == LineOp.added]
    return [line.original_text for line in lines]


def _item_text(item: ListItem, mode: str) -> list[str]:
    if item.type == 'code':
        return _copy_lines(item.lines, mode)
    prefix = f"{item.custom_number}. " if item.custom_number is not None else ''
    return [f"{prefix}{item.text}"]


def copy_text(blocks: list, mode: str = 'clean') -> str:
    """Clipboard text for a whole document.

    clean drops removed code lines and strips markers, additions keeps only
    added code lines, all keeps every code line as authored. Prose is kept in
    every mode.
    """
    if mode not in COPY_MODES:
        raise ValueError(f"Unknown copy mode '{mode}'. Supported: {', '.join(COPY_MODES)}")

    chunks = []
    for block in blocks:
        if isinstance(block, CodeBlock):
            lines = _copy_lines(block.lines, mode)
            if lines:
                chunks.append('\n'.join(lines))
        elif isinstance(block, ListBlock):
            lines = [t for item in block.items for t in _item_text(item, mode)]
            if lines:
                chunks.append('\n'.join(lines))
        elif isinstance(block, (HeadingBlock, ParagraphBlock)):
            chunks.append(block.text)
    return '\n\n'.join(chunks).strip()
