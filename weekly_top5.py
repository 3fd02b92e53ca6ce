#!/usr/bin/env python3
"""
Weekly "Top 5" roundup - creates an article from the Products database

The category rotates every calendar week with no stored state: the same
category is picked for every run inside one week.
"""
import logging
import sys
from datetime import date
from typing import Dict, List, Optional, Sequence

from config import LOG_FORMAT, LOG_LEVEL, WEEKLY_CATEGORIES, ConfigError, SiteConfig, load_config
from content_source import ContentSourceError, NotionContentSource
from records import ARTICLE_FIELDS, FieldSpec, Product, find_property, first_title_key, product_from_record
from seed_from_keywords import SeedError

logger = logging.getLogger(__name__)

EPOCH = date(1970, 1, 1)
TOP_N = 5
DESCRIPTION_FIELD = FieldSpec(("description", "summary"), ("rich_text",))


def pick_category_of_week(today: Optional[date] = None,
                          categories: Sequence[str] = WEEKLY_CATEGORIES) -> str:
    """categories[(days since epoch // 7) % len(categories)]"""
    today = today or date.today()
    week = (today - EPOCH).days // 7
    return categories[week % len(categories)]


def select_top_products(products: Sequence[Product], category: str, limit: int = TOP_N) -> List[Product]:
    """Cheapest first within the category (whole catalog if it has none); unpriced last"""
    candidates = [p for p in products if p.category == category] or list(products)
    ranked = sorted(candidates, key=lambda p: (p.price_value is None, p.price_value or 0.0))
    return ranked[:limit]


def digest_title(category: str, today: date) -> str:
    return f"Top 5 {category} — Week of {today.strftime('%b %d, %Y')}"


def digest_description(category: str, matched: bool) -> str:
    source = category if matched else "our latest inventory"
    return (
        f"Our updated {category.lower()} picks this week. Curated from {source} "
        "based on value, performance, and availability."
    )


def build_digest_properties(schema: Dict, title: str, description: str,
                            products: Sequence[Product], today: date) -> Dict:
    """Properties payload; only keys that exist in the Articles schema are set"""
    title_key = first_title_key(schema)
    if not title_key:
        raise SeedError("Articles DB has no title property.")

    properties = {title_key: {"title": [{"text": {"content": title}}]}}

    desc = find_property(schema, DESCRIPTION_FIELD.candidates, DESCRIPTION_FIELD.types)
    if desc:
        properties[desc[0]] = {"rich_text": [{"text": {"content": description}}]}

    status = find_property(schema, ("status",), ("select", "status"))
    if status:
        properties[status[0]] = {status[1]["type"]: {"name": "Published"}}

    published = find_property(schema, ("published", "is_published"), ("checkbox",))
    if published:
        properties[published[0]] = {"checkbox": True}

    publish_date = find_property(schema, ARTICLE_FIELDS["date"].candidates, ("date",))
    if publish_date:
        properties[publish_date[0]] = {"date": {"start": today.isoformat()}}

    relation = find_property(schema, ("products",), ("relation",))
    if relation:
        properties[relation[0]] = {"relation": [{"id": p.id} for p in products]}
    return properties


class WeeklyDigest:
    """Create this week's Top 5 article"""

    def __init__(self, config: SiteConfig, source: NotionContentSource):
        self.config = config
        self.source = source

    def run(self, today: Optional[date] = None) -> str:
        today = today or date.today()
        schema = (self.source.retrieve_database(self.config.db_articles).get("properties") or {})

        products = [product_from_record(r) for r in self.source.fetch_all(self.config.db_products)]
        category = pick_category_of_week(today)
        matched = any(p.category == category for p in products)
        if not matched:
            logger.info(f"No products in '{category}', using the whole catalog")
        top = select_top_products(products, category)

        title = digest_title(category, today)
        properties = build_digest_properties(
            schema, title, digest_description(category, matched), top, today
        )
        self.source.create_page(self.config.db_articles, properties)
        logger.info(f"Created weekly Top 5 article: {title} ({len(top)} products)")
        return title


def main() -> int:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    config = load_config()
    try:
        config.require("notion_token", "db_articles", "db_products")
        source = NotionContentSource(config.notion_token, timeout=config.request_timeout)
        WeeklyDigest(config, source).run()
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except (ContentSourceError, SeedError) as e:
        logger.error(f"weekly_top5 failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
