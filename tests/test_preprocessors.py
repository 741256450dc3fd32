"""Unit tests for post and markdown preprocessing."""

from __future__ import annotations

from conftest import make_post

from app.utils.image_utils import DEFAULT_PLACEHOLDER
from app.utils.preprocessors import (
    analyze_markdown_content,
    extract_images_from_markdown,
    extract_text_from_markdown,
    fix_all_markdown_images,
    normalize_markdown_image_urls,
    preprocess_blog_post,
    preprocess_blog_posts,
)


def test_preprocess_blog_post_normalizes_without_mutating():
    post = make_post(
        "p1",
        "-career--coaching-",
        featured_image="/images/cover.png",
        content="![표지](/images/body.png)",
    )

    processed = preprocess_blog_post(post)

    assert processed.slug == "career-coaching"
    assert processed.featured_image == "https://example.com/images/cover.png"
    assert processed.content == "![표지](https://example.com/images/body.png)"
    assert post.slug == "-career--coaching-"
    assert post.featured_image == "/images/cover.png"


def test_preprocess_blog_post_keeps_missing_featured_image_empty():
    processed = preprocess_blog_post(make_post("p1", "plain-post"))
    assert processed.featured_image is None


def test_preprocess_blog_posts_handles_none():
    assert preprocess_blog_posts(None) == []
    assert [p.slug for p in preprocess_blog_posts([make_post("p1", "a--b")])] == ["a-b"]


def test_extract_images_deduplicates_in_order():
    markdown = (
        "![a](https://x.com/1.png) 본문 ![b]( https://x.com/1.png )\n"
        '<img alt="c" src="https://x.com/2.png">'
    )
    assert extract_images_from_markdown(markdown) == ["https://x.com/1.png", "https://x.com/2.png"]
    assert extract_images_from_markdown("") == []


def test_normalize_markdown_image_urls_covers_html_images():
    markdown = '<img class="wide" src="/images/a.png" />'
    assert normalize_markdown_image_urls(markdown) == (
        '<img class="wide" src="https://example.com/images/a.png" />'
    )


def test_fix_all_markdown_images_replaces_empty_url():
    assert fix_all_markdown_images("![](  )") == f"![이미지]({DEFAULT_PLACEHOLDER})"
    assert fix_all_markdown_images("![표지]()") == f"![표지]({DEFAULT_PLACEHOLDER})"


def test_fix_all_markdown_images_strips_quotes_and_whitespace():
    fixed = fix_all_markdown_images("![a]('https://x.com/ a.png')")
    assert fixed == "![a](https://x.com/a.png)"


def test_fix_all_markdown_images_closes_img_tags():
    fixed = fix_all_markdown_images('<img src="https://x.com/a.png">')
    assert fixed == '<img src="https://x.com/a.png" />'


def test_fix_all_markdown_images_leaves_closed_tags_alone():
    markdown = '<img src="https://x.com/a.png" />'
    assert fix_all_markdown_images(markdown) == markdown


def test_analyze_markdown_content_reports_issues():
    content = '![a](not-an-image) 설명\n<img src="broken">'
    issues = analyze_markdown_content(content)

    types = [issue.type for issue in issues]
    assert types.count("invalid-image-url") == 2
    assert types.count("invalid-html-image-url") == 1
    assert {issue.original for issue in issues} == {"not-an-image", "broken"}


def test_analyze_markdown_content_reports_empty_links():
    issues = analyze_markdown_content("자세한 내용은 [여기]() 참고")

    assert len(issues) == 1
    assert issues[0].type == "empty-link"
    assert issues[0].original == "[여기]()"


def test_analyze_markdown_content_clean_body():
    assert analyze_markdown_content("![a](https://x.com/a.png) [링크](https://x.com)") == []
    assert analyze_markdown_content("") == []


def test_extract_text_from_markdown():
    markdown = "# 제목\n**굵게** 그리고 *기울임* [링크](https://x.com) `code`\n![img](https://x.com/a.png)"
    assert extract_text_from_markdown(markdown) == "제목 굵게 그리고 기울임 링크 code"


def test_extract_text_drops_code_blocks():
    assert extract_text_from_markdown("앞\n```\nprint(1)\n```\n뒤") == "앞  뒤"
