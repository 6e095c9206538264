"""Sitemap rendering."""

import xml.etree.ElementTree as ET
from typing import List, Optional

import pendulum

from ..models import Article

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

STATIC_PAGE_HINTS = {
    "": ("daily", "1.0"),
    "about": ("monthly", "0.8"),
    "contact": ("monthly", "0.5"),
    "newsletter": ("monthly", "0.5"),
    "topics": ("weekly", "0.6"),
    "archive": ("weekly", "0.6"),
}


def _format_lastmod(value) -> str:
    if value is None:
        return pendulum.now("UTC").to_iso8601_string()
    return pendulum.instance(value, tz="UTC").to_iso8601_string()


def _add_url(urlset: ET.Element, loc: str, lastmod: str, changefreq: str, priority: str) -> None:
    url = ET.SubElement(urlset, "url")
    ET.SubElement(url, "loc").text = loc
    ET.SubElement(url, "lastmod").text = lastmod
    ET.SubElement(url, "changefreq").text = changefreq
    ET.SubElement(url, "priority").text = priority


def build_sitemap(
    base_url: str,
    static_pages: List[str],
    articles: List[Article],
    now: Optional[pendulum.DateTime] = None,
) -> str:
    """
    Render the sitemap XML.

    Args:
        base_url: Public site root without trailing slash
        static_pages: Page paths relative to the root, "" for the home page
        articles: Public articles, each listed as /blog/<id>

    Returns:
        XML document as a string
    """
    base_url = base_url.rstrip("/")
    generated = (now or pendulum.now("UTC")).to_iso8601_string()
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

    for page in static_pages:
        changefreq, priority = STATIC_PAGE_HINTS.get(page, ("monthly", "0.5"))
        loc = f"{base_url}/{page}" if page else base_url
        _add_url(urlset, loc, generated, changefreq, priority)

    for article in articles:
        _add_url(
            urlset,
            f"{base_url}/blog/{article.id}",
            _format_lastmod(article.updated_at),
            "weekly",
            "0.7",
        )

    return XML_DECLARATION + ET.tostring(urlset, encoding="unicode")
