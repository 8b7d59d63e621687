"""Block, line, and list-item models produced by the parse pipeline"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LineOp(str, Enum):
    """Diff operation carried by a code line"""
    added = "added"
    removed = "removed"
    unchanged = "unchanged"


class FrozenModel(BaseModel):
    """Immutable value object serialized with camelCase keys."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Line(FrozenModel):
    text:          str                 # diff marker stripped
    original_text: str                 # raw, marker included
    op:            LineOp = LineOp.unchanged
    is_grouped:    bool = False
    group_size:    Optional[int] = None


class ParseOptions(BaseModel):
    """Caller-controlled switches for a single parse call."""
    auto_detect_code: bool = True
    show_deletions:   bool = True
    extract_images:   bool = True
    base_url:         Optional[str] = None   # archive/page URL images are resolved against


class HeadingBlock(FrozenModel):
    type:           Literal["heading"] = "heading"
    level:          int = Field(ge=1, le=6)
    text:           str
    html:           Optional[str] = None
    has_formatting: bool = False


class ParagraphBlock(FrozenModel):
    """A prose paragraph, or a blockquote when type is 'blockquote'."""
    type:           Literal["paragraph", "blockquote"] = "paragraph"
    text:           str
    html:           Optional[str] = None
    has_formatting: bool = False
    lines:          list[Line] = Field(default_factory=list)


class CodeBlock(FrozenModel):
    """Diff-classified code; 'blockquote-code' when it came from a blockquote."""
    type:        Literal["code", "blockquote-code"] = "code"
    source_type: str
    language:    str
    lines:       list[Line] = Field(default_factory=list)
    has_changes: bool = False


class ListItem(FrozenModel):
    type:           Literal["list-item", "code"] = "list-item"
    text:           str
    custom_number:  Optional[Union[int, str]] = None
    lines:          list[Line] = Field(default_factory=list)
    has_formatting: bool = False
    html:           Optional[str] = None
    # set on code items only
    language:       Optional[str] = None
    source_type:    Optional[str] = None
    has_changes:    bool = False


class ListBlock(FrozenModel):
    type:        Literal["ordered-list", "unordered-list"]
    items:       list[ListItem] = Field(default_factory=list)
    start_value: int = 1


class ImageBlock(FrozenModel):
    type:             Literal["image"] = "image"
    src:              str
    alt:              str = ""
    title:            str = ""
    width:            Optional[int] = None
    height:           Optional[int] = None
    format:           str = "unknown"
    is_archive_image: bool = False
    original_src:     str = ""
    metadata:         dict[str, Any] = Field(default_factory=dict)


class ErrorBlock(FrozenModel):
    type:    Literal["error"] = "error"
    content: str


Block = Annotated[
    Union[HeadingBlock, ParagraphBlock, CodeBlock, ListBlock, ImageBlock, ErrorBlock],
    Field(discriminator="type"),
]


class ParseResult(BaseModel):
    """Blocks plus their sanitized HTML rendering."""
    blocks: list[Block]
    html:   str = ""

    def dump_blocks(self) -> list[dict[str, Any]]:
        """Return JSON-ready block dicts with camelCase keys."""
        return [b.model_dump(mode="json", by_alias=True) for b in self.blocks]


class SectionHeading(FrozenModel):
    level: int = Field(ge=1, le=6)
    text:  str


class SectionParagraph(FrozenModel):
    type: Literal["paragraph"] = "paragraph"
    text: str


class SectionList(FrozenModel):
    type:    Literal["list"] = "list"
    ordered: bool = False
    items:   list[str] = Field(default_factory=list)


class SectionCode(FrozenModel):
    type: Literal["code"] = "code"
    text: str


SectionBlock = Annotated[
    Union[SectionParagraph, SectionList, SectionCode],
    Field(discriminator="type"),
]


class Section(FrozenModel):
    """A heading (or none, for the intro) and the blocks under it."""
    id:      str
    heading: Optional[SectionHeading] = None
    blocks:  list[SectionBlock] = Field(default_factory=list)


class UniversalResult(FrozenModel):
    """Heading/section AST produced by the adapter registry."""
    sections:       list[Section]
    schema_version: int = 1
    source:         str
    diagnostics:    Optional[dict[str, Any]] = None
