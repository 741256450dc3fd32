"""Post preprocessing: slug and image URL normalization before display.

All functions return new values; posts passed in are never mutated.
"""

from __future__ import annotations

import re

from app.schemas.content import ContentIssue, Post
from app.utils.image_utils import DEFAULT_PLACEHOLDER, get_valid_image_url, is_valid_image_url
from app.utils.slug_utils import normalize_slug

_MARKDOWN_IMAGE = re.compile(r"!\[(.*?)\]\((.*?)\)")
_HTML_IMAGE = re.compile(r"<img(.*?)src=[\"'](.*?)[\"'](.*?)>")
_HTML_IMAGE_SRC = re.compile(r"<img\s+[^>]*src=['\"]([^'\"]+)['\"]", re.IGNORECASE)
_EMPTY_LINK = re.compile(r"\[.*?\]\(\s*\)")
_UNCLOSED_IMG = re.compile(r"<img([^>]*?)(?<!/)>")
_QUOTED = re.compile(r"^([\"'])(.*)\1$")

# Markdown -> plain text, applied in order
_TEXT_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"#+\s+(.*)\n"), r"\1 "),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"!\[(.*?)\]\((.*?)\)"), ""),
    (re.compile(r"\[(.*?)\]\((.*?)\)"), r"\1"),
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"\n"), " "),
)


def preprocess_blog_post(post: Post) -> Post:
    """Copy of ``post`` with normalized slug, featured image and body images."""
    update: dict[str, object] = {
        "slug": normalize_slug(post.slug),
        "featured_image": get_valid_image_url(post.featured_image) if post.featured_image else None,
    }
    if post.content:
        update["content"] = normalize_markdown_image_urls(post.content)
    return post.model_copy(update=update)


def preprocess_blog_posts(posts: list[Post] | None) -> list[Post]:
    return [preprocess_blog_post(post) for post in posts or []]


def extract_images_from_markdown(markdown: str) -> list[str]:
    """Image URLs from ``![alt](url)`` and ``<img src="url">``, de-duplicated in order."""
    if not markdown:
        return []

    images = [m.group(2).strip() for m in _MARKDOWN_IMAGE.finditer(markdown)]
    images += [m.group(2).strip() for m in _HTML_IMAGE.finditer(markdown)]
    return list(dict.fromkeys(url for url in images if url))


def normalize_markdown_image_urls(markdown: str) -> str:
    if not markdown:
        return markdown

    result = _MARKDOWN_IMAGE.sub(
        lambda m: f"![{m.group(1)}]({get_valid_image_url(m.group(2).strip())})",
        markdown,
    )
    return _HTML_IMAGE.sub(
        lambda m: f'<img{m.group(1)}src="{get_valid_image_url(m.group(2).strip())}"{m.group(3)}>',
        result,
    )


def _clean_url(url: str) -> str:
    compact = re.sub(r"\s+", "", url.strip())
    return _QUOTED.sub(r"\2", compact)


def fix_all_markdown_images(markdown: str) -> str:
    """Repair image references: empty URLs, stray whitespace or quotes, unclosed ``<img>``."""
    if not markdown:
        return markdown

    def fix_markdown(match: re.Match[str]) -> str:
        alt, url = match.group(1), match.group(2)
        if not url.strip():
            return f"![{alt or '이미지'}]({DEFAULT_PLACEHOLDER})"
        return f"![{alt}]({get_valid_image_url(_clean_url(url))})"

    def fix_html(match: re.Match[str]) -> str:
        prefix, url, suffix = match.groups()
        src = get_valid_image_url(_clean_url(url)) if url.strip() else DEFAULT_PLACEHOLDER
        return f'<img{prefix}src="{src}"{suffix}>'

    result = _MARKDOWN_IMAGE.sub(fix_markdown, markdown)
    result = _HTML_IMAGE.sub(fix_html, result)
    return _UNCLOSED_IMG.sub(lambda m: f"<img{m.group(1).rstrip()} />", result)


def analyze_markdown_content(content: str) -> list[ContentIssue]:
    """List invalid image URLs and empty links found in a markdown body."""
    if not content:
        return []

    issues: list[ContentIssue] = []
    for url in extract_images_from_markdown(content):
        if not is_valid_image_url(url):
            issues.append(
                ContentIssue(
                    type="invalid-image-url",
                    issue=f"유효하지 않은 이미지 URL: {url}",
                    original=url,
                )
            )

    for match in _HTML_IMAGE_SRC.finditer(content):
        src = match.group(1).strip()
        if not is_valid_image_url(src):
            issues.append(
                ContentIssue(
                    type="invalid-html-image-url",
                    issue=f"유효하지 않은 HTML 이미지 URL: {src}",
                    original=src,
                )
            )

    for link in _EMPTY_LINK.findall(content):
        issues.append(ContentIssue(type="empty-link", issue="빈 링크 발견", original=link))

    return issues


def extract_text_from_markdown(markdown: str) -> str:
    """Rough plain-text rendering of markdown, used for excerpts."""
    if not markdown:
        return ""
    text = markdown
    for pattern, replacement in _TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()
