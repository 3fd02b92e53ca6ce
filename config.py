"""
Configuration file for the AutoSoundHQ site generator
"""
import os
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional
from dotenv import load_dotenv

load_dotenv()


class ConfigError(Exception):
    """Raised when a required setting is missing"""


# Website Configuration (defaults used when the environment is silent)
WEBSITE_CONFIG = {
    "site_name": "AutoSoundHQ",
    "site_url": "https://autosoundhq.vercel.app",
    "contact_email": "carsoundhq@gmail.com",
    "output_dir": "public",
    "templates_dir": "templates",
    "home_recent_limit": 6,
    "related_limit": 3,
    "feed_limit": 20,
    "max_products_per_article": 8,
}

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def log_level(value: Optional[str]) -> str:
    """Upper-cased level name, INFO when unset or unknown"""
    level = (value or "").strip().upper()
    return level if level in LOG_LEVELS else "INFO"


LOG_LEVEL = log_level(os.getenv("LOG_LEVEL"))

# Notion API Configuration
NOTION_API = {
    "base_url": "https://api.notion.com/v1",
    "version": "2022-06-28",
    "timeout": 30,
}

# Static pages - (route, title, description, body). Body may use {site_name} and {contact_email}.
STATIC_PAGES = [
    (
        "about.html",
        "About",
        "Who we are and how we pick car audio gear.",
        "<p>{site_name} helps drivers upgrade their sound with unbiased recommendations.</p>",
    ),
    (
        "contact.html",
        "Contact",
        "How to reach the {site_name} team.",
        '<p>Email us at <a href="mailto:{contact_email}">{contact_email}</a>.</p>',
    ),
    (
        "disclosure.html",
        "Affiliate Disclosure",
        "How {site_name} earns commissions.",
        "<p>We may earn a commission when you buy through links on our site. "
        "As an Amazon Associate we earn from qualifying purchases.</p>",
    ),
    (
        "privacy.html",
        "Privacy Policy",
        "What data {site_name} collects.",
        "<p>We use Google Analytics to understand traffic and improve our content. "
        "Partners may use cookies to track referrals.</p>",
    ),
    (
        "terms.html",
        "Terms of Use",
        "Terms for using {site_name}.",
        "<p>All content is for informational purposes only. "
        "Verify fitment and specifications before purchase.</p>",
    ),
]

# Weekly "Top 5" rotation - order is significant
WEEKLY_CATEGORIES = [
    "Coaxial Speakers",
    "Component Speakers",
    "4-Channel Amps",
    "Powered Subs",
    "Head Units",
    "Subwoofers",
]

# Retailers whose links pass through untouched
RETAILER_DOMAINS = {
    "crutchfield.com",
    "bestbuy.com",
    "walmart.com",
    "sonicelectronix.com",
    "target.com",
}

SKIMLINKS_REDIRECT = "https://go.skimresources.com/?id={pub_id}&xs=1&url={url}"
AMAZON_SEARCH = "https://www.amazon.com/s"

# Maps SiteConfig fields to environment variables
ENV_VARS = {
    "site_name": "SITE_NAME",
    "site_url": "SITE_URL",
    "amazon_tag": "AMAZON_TRACKING_ID",
    "skimlinks_id": "SKIMLINKS_PUB_ID",
    "ga4_id": "GA4_MEASUREMENT_ID",
    "notion_token": "NOTION_TOKEN",
    "db_articles": "NOTION_DB_ARTICLES",
    "db_products": "NOTION_DB_PRODUCTS",
    "db_keywords": "NOTION_DB_KEYWORDS",
    "newsletter_url": "NEWSLETTER_EMBED_URL",
    "verification_key": "SEARCH_VERIFICATION_KEY",
    "contact_email": "CONTACT_EMAIL",
    "output_dir": "OUTPUT_DIR",
    "templates_dir": "TEMPLATES_DIR",
    "home_recent_limit": "HOME_RECENT_LIMIT",
    "related_limit": "RELATED_LIMIT",
    "request_timeout": "NOTION_TIMEOUT",
}


@dataclass(frozen=True)
class SiteConfig:
    """Settings for one run, built once by load_config() and passed around"""
    site_name: str = WEBSITE_CONFIG["site_name"]
    site_url: str = WEBSITE_CONFIG["site_url"]
    amazon_tag: str = ""
    skimlinks_id: str = ""
    ga4_id: str = ""
    notion_token: str = ""
    db_articles: str = ""
    db_products: str = ""
    db_keywords: str = ""
    newsletter_url: str = ""
    verification_key: str = ""
    contact_email: str = WEBSITE_CONFIG["contact_email"]
    output_dir: str = WEBSITE_CONFIG["output_dir"]
    templates_dir: str = WEBSITE_CONFIG["templates_dir"]
    home_recent_limit: int = WEBSITE_CONFIG["home_recent_limit"]
    related_limit: int = WEBSITE_CONFIG["related_limit"]
    request_timeout: int = NOTION_API["timeout"]

    def require(self, *names: str):
        """Raise ConfigError listing every named setting that is empty"""
        missing = [ENV_VARS.get(name, name) for name in names if not getattr(self, name)]
        if missing:
            raise ConfigError(f"Missing env: {', '.join(missing)}")

    def absolute_url(self, path: str) -> str:
        """Canonical URL for a site-relative path"""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.site_url}{path}"


def _as_int(value: str, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> SiteConfig:
    """Build the run configuration from environment variables

    Empty variables fall back to the defaults above.
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, object] = {}
    for field in fields(SiteConfig):
        raw = (environ.get(ENV_VARS[field.name]) or "").strip()
        if not raw:
            continue
        if field.type is int or field.type == "int":
            values[field.name] = _as_int(raw, field.default)
        else:
            values[field.name] = raw

    if "site_url" in values:
        values["site_url"] = str(values["site_url"]).rstrip("/")
    return SiteConfig(**values)
