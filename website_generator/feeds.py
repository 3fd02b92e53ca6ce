"""
Crawler-facing artifacts: robots.txt, sitemap.xml, feed.xml and the verification key file
"""
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional, Sequence, Tuple

from config import STATIC_PAGES, SiteConfig
from records import Article
from website_generator.renderer import PageRenderer
from website_generator.utils import rfc822_date

INDEX_PATHS = ["/", "/articles/index.html"]


def static_paths() -> List[str]:
    return [f"/{route}" for route, _, _, _ in STATIC_PAGES]


def render_robots(config: SiteConfig) -> str:
    return f"User-agent: *\nAllow: /\nSitemap: {config.absolute_url('/sitemap.xml')}\n"


def render_sitemap(renderer: PageRenderer, articles: Sequence[Article]) -> str:
    """Home and index, every article, then the static pages"""
    config = renderer.config
    urls = [{"loc": config.absolute_url(p), "lastmod": ""} for p in INDEX_PATHS]
    for article in articles:
        urls.append({
            "loc": config.absolute_url(article.path),
            "lastmod": article.publish_date.isoformat() if article.publish_date else "",
        })
    urls.extend({"loc": config.absolute_url(p), "lastmod": ""} for p in static_paths())
    return renderer.render_template("sitemap.xml.j2", urls=urls)


def render_feed(renderer: PageRenderer, articles: Sequence[Article], limit: int = 20,
                build_time: Optional[datetime] = None) -> str:
    """RSS 2.0 feed of the newest articles; articles must already be sorted newest first"""
    config = renderer.config
    items = [
        {
            "title": article.title,
            "link": config.absolute_url(article.path),
            "description": article.description,
            "pub_date": rfc822_date(article.publish_date),
        }
        for article in articles[:limit]
    ]
    newest = next((a.publish_date for a in articles if a.publish_date), None)
    if build_time is not None:
        last_build = format_datetime(build_time.astimezone(timezone.utc))
    else:
        last_build = rfc822_date(newest)
    return renderer.render_template(
        "feed.xml.j2",
        site_name=config.site_name,
        site_url=config.site_url,
        description=f"The latest {config.site_name} guides and product roundups.",
        feed_url=config.absolute_url("/feed.xml"),
        last_build=last_build,
        items=items,
    )


def verification_file(key: str) -> Optional[Tuple[str, str]]:
    """(relative path, contents) for the search-engine key file, if configured"""
    key = (key or "").strip()
    if not re.fullmatch(r"[A-Za-z0-9_-]+", key):
        return None
    return f"{key}.txt", key
