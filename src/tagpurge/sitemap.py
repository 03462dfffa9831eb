"""Listing/sitemap URL resolution for file purges."""

from tagpurge.config import PurgeSettings
from tagpurge.types import ContentItem


def sitemap_url(site_url: str, content_type: str | None) -> str:
    """Sitemap for a content type, or the sitemap index when the type is unknown."""
    root = site_url.rstrip("/") + "/"
    if not content_type:
        return root + "sitemap_index.xml"
    return f"{root}{content_type}-sitemap.xml"


def listing_url(item: ContentItem, settings: PurgeSettings) -> str | None:
    """URL of the listing page that shows ``item``, if one is known."""
    if item.listing_url:
        return item.listing_url
    if not settings.site_url:
        return None
    return sitemap_url(settings.site_url, item.type)
