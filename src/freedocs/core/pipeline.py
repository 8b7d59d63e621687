"""Pipeline step functions: source loading, parse, universal AST, and clipboard export orchestration"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from freedocs.config import Settings
from freedocs.core.adapters.registry import parse_universal
from freedocs.core.export import copy_text
from freedocs.core.models import ParseOptions, ParseResult, UniversalResult
from freedocs.core.parse import parse_html
from freedocs.core.utils.slug import slugify
from freedocs.errors import ContentError, InvalidUrlError
from freedocs.fetch.archive import ArchiveClient
from freedocs.fetch.urls import extract_doc_id, is_safe_url, to_mobile_basic, validate_google_docs_url


logger = logging.getLogger(__name__)


@dataclass
class Source:
    """Fetched document HTML plus where it came from."""
    html:     str
    slug:     str
    base_url: Optional[str] = None      # page the HTML was served from; images resolve against it
    service:  Optional[str] = None      # archive service for URL sources


def parse_archived_content(url: str, client: ArchiveClient, options: Optional[ParseOptions] = None) -> ParseResult:
    """Fetch an archived (or cached) page and parse it; images resolve against url."""
    content = client.get_cached_content(url)
    if content is None:
        content = client.get_archived_content(url)
    options = (options or ParseOptions()).model_copy(update={'base_url': url})
    return parse_html(content, options)


def load_source(source: str, settings: Settings, client: Optional[ArchiveClient] = None) -> Source:
    """Read a local HTML file, or fetch a Google Docs URL through the archive client.

    Raises InvalidUrlError for URLs that are not safe Google Docs URLs and
    ContentError for unreadable files.
    """
    path = Path(source)
    if path.is_file():
        try:
            html = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ContentError(f"Cannot read {path}: {e}") from e
        return Source(html=html, slug=slugify(path.stem))

    if not validate_google_docs_url(source):
        raise InvalidUrlError("Not a file or a Google Docs URL", source)
    mobile_url = to_mobile_basic(source)
    if not mobile_url or not is_safe_url(mobile_url):
        raise InvalidUrlError("URL failed the safety check", source)

    client = client or ArchiveClient(settings)
    snapshot = client.get_archive_snapshot(mobile_url)
    logger.info("Reading %s from %s", mobile_url, snapshot.service)
    html = client.get_cached_content(snapshot.url)
    if html is None:
        html = client.get_archived_content(snapshot.url)
    return Source(
        html=html,
        slug=slugify(extract_doc_id(source) or 'document'),
        base_url=snapshot.url,
        service=snapshot.service,
    )


def run_parse(
    source: Source,
    options: ParseOptions,
    output_dir: Path,
    ) -> tuple[ParseResult, Path, Path]:
    """Parse source and write <slug>.json (blocks) and <slug>.html. Returns (result, json_path, html_path)."""
    options = options.model_copy(update={'base_url': source.base_url})
    try:
        result = parse_html(source.html, options)
    except ContentError:
        raise
    except Exception as e:
        raise RuntimeError(f"Failed to parse {source.slug}: {e}") from e

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"{source.slug}.json"
    html_path = output_dir / f"{source.slug}.html"
    json_path.write_text(json.dumps(result.dump_blocks(), indent=2, ensure_ascii=False), encoding='utf-8')
    html_path.write_text(result.html, encoding='utf-8')
    return result, json_path, html_path


def run_universal(source: Source, debug: bool = False, threshold: Optional[float] = None) -> UniversalResult:
    return parse_universal(source.html, debug=debug, threshold=threshold)


def run_copy(source: Source, options: ParseOptions, mode: str) -> str:
    """Parse source and return clipboard text for mode (clean, additions, all)."""
    result = parse_html(source.html, options.model_copy(update={'base_url': source.base_url}))
    return copy_text(result.blocks, mode)
