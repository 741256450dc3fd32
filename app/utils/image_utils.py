"""Image URL helpers.

Featured images and images inside markdown bodies come from several places:
absolute CDN URLs, site-relative paths and bare Supabase storage paths. These
helpers turn them into absolute URLs and reject what cannot be displayed.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from app.core.config import settings

DEFAULT_PLACEHOLDER = "/images/placeholder.jpg"

# Host fragment -> provider name
STORAGE_PROVIDERS: dict[str, str] = {
    "supabase.co": "supabase",
    "imagedelivery.net": "cloudflare",
    "storage.googleapis.com": "gcs",
    "storage.cloud.google.com": "gcs",
    "amazonaws.com": "s3",
    "blob.core.windows.net": "azure",
    "res.cloudinary.com": "cloudinary",
    "imgix.net": "imgix",
    "imagekit.io": "imagekit",
}

IMAGE_EXTENSIONS = (
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".avif", ".bmp", ".tiff", ".ico",
)

SUPABASE_PUBLIC_PATH = "/storage/v1/object/public/"

_CLOUDINARY_UPLOAD = re.compile(r"/upload/")


def _is_absolute(url: str) -> bool:
    if url.startswith("data:"):
        return True
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def _hostname(url: str) -> str:
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def is_valid_image_url(url: str | None) -> bool:
    """Absolute URL that plausibly points at an image."""
    if not url or not _is_absolute(url):
        return False
    return (
        url.lower().endswith(IMAGE_EXTENSIONS)
        or any(host in url for host in STORAGE_PROVIDERS)
        or SUPABASE_PUBLIC_PATH in url
        or url.startswith("data:image/")
    )


def normalize_image_url(
    url: str | None,
    *,
    site_url: str | None = None,
    storage_url: str | None = None,
) -> str | None:
    """Turn a relative image reference into an absolute URL.

    Absolute URLs are returned unchanged. ``/path`` is prefixed with the site
    URL, ``storage/...`` is mapped to the Supabase public-object endpoint and
    other relative paths (including ``./path``) are joined to the site URL.
    Anything else is returned as given.
    """
    if not url:
        return None
    if _is_absolute(url):
        return url

    site = (settings.app.site_url if site_url is None else site_url).rstrip("/")
    storage = (settings.content_store.url or "") if storage_url is None else storage_url

    if url.startswith("/"):
        return f"{site}{url}"
    if url.startswith("storage/"):
        return f"{storage.rstrip('/')}{SUPABASE_PUBLIC_PATH}{url}"
    if "://" not in url and site:
        path = url[2:] if url.startswith("./") else url
        return f"{site}/{path}"
    return url


def get_valid_image_url(
    url: str | None,
    *,
    fallback_image: str = DEFAULT_PLACEHOLDER,
    use_placeholder: bool = True,
) -> str:
    """Normalized image URL, or the fallback when it is missing or invalid."""
    fallback = fallback_image if use_placeholder else ""
    if not url:
        return fallback
    if url.startswith("data:image/"):
        return url

    normalized = normalize_image_url(url)
    if normalized and is_valid_image_url(normalized):
        return normalized
    return fallback


def identify_storage_provider(url: str | None) -> str | None:
    if not url:
        return None
    hostname = _hostname(url)
    if not hostname:
        return None
    for host, provider in STORAGE_PROVIDERS.items():
        if host in hostname:
            return provider
    return None


def is_supabase_storage_url(url: str | None) -> bool:
    if not url:
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return "supabase.co" in (parts.hostname or "") and "/storage/v1/" in parts.path


def get_resized_image_url(
    url: str | None,
    *,
    width: int | None = None,
    height: int | None = None,
    quality: int = 80,
) -> str:
    """Provider-side resize URL for Cloudinary and Imgix, the valid URL otherwise."""
    if not url:
        return ""
    valid_url = get_valid_image_url(url, use_placeholder=False)
    if not valid_url:
        return ""

    provider = identify_storage_provider(valid_url)
    if provider == "cloudinary":
        transform = f"c_fit,w_{width or 'auto'},h_{height or 'auto'},q_{quality}"
        return _CLOUDINARY_UPLOAD.sub(f"/upload/{transform}/", valid_url, count=1)
    if provider == "imgix":
        params = []
        if width:
            params.append(f"w={width}")
        if height:
            params.append(f"h={height}")
        params.append(f"q={quality}")
        separator = "&" if "?" in valid_url else "?"
        return f"{valid_url}{separator}{'&'.join(params)}"
    # Supabase storage has no transform API in use; other providers unknown
    return valid_url
