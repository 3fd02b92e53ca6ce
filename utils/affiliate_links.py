"""
Outbound product link rewriting for affiliate programs
"""
import logging
import re
from urllib.parse import quote, urlencode, urlparse

from config import AMAZON_SEARCH, RETAILER_DOMAINS, SKIMLINKS_REDIRECT, SiteConfig

logger = logging.getLogger(__name__)


def _host(url: str) -> str:
    host = (urlparse(url).hostname or "").lower()
    if not host:
        raise ValueError(f"URL has no host: {url}")
    return host


def _matches_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def is_amazon(host: str) -> bool:
    return bool(re.search(r"(^|\.)amazon\.[a-z.]+$", host)) or _matches_domain(host, "amzn.to")


def is_retailer(host: str) -> bool:
    return any(_matches_domain(host, domain) for domain in RETAILER_DOMAINS)


def amazon_search_link(query: str, tag: str) -> str:
    return f"{AMAZON_SEARCH}?{urlencode({'k': query, 'tag': tag})}"


def _query_from_path(url: str) -> str:
    words = re.split(r"[^A-Za-z0-9]+", urlparse(url).path)
    return " ".join(w for w in words if w and w.lower() not in {"dp", "gp", "product", "ref"})


def rewrite_link(url: str, product_name: str, config: SiteConfig) -> str:
    """Rewrite a product link for the configured affiliate programs

    Amazon links become tagged search links, known retailers pass through,
    anything else goes through the Skimlinks redirect when a publisher id is
    set. Malformed URLs are returned unchanged.
    """
    url = (url or "").strip()
    if not url:
        return "#"

    try:
        host = _host(url)
        if is_amazon(host):
            if not config.amazon_tag:
                return url
            query = (product_name or "").strip() or _query_from_path(url)
            return amazon_search_link(query, config.amazon_tag)
        if is_retailer(host):
            return url
        if config.skimlinks_id:
            return SKIMLINKS_REDIRECT.format(pub_id=config.skimlinks_id, url=quote(url, safe=""))
        return url
    except ValueError as e:
        logger.debug(f"Could not rewrite link {url}: {e}")
        return url
