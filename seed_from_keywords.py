#!/usr/bin/env python3
"""
Seed a new Article row from the first unused Keyword row

Property names in the Articles database are detected from its schema, so
nothing is hard-coded beyond the candidate lists in records.py.
"""
import logging
import sys
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Tuple

from config import LOG_FORMAT, LOG_LEVEL, ConfigError, SiteConfig, load_config
from content_source import ContentSourceError, NotionContentSource
from records import ARTICLE_FIELDS, KEYWORD_FIELDS, FieldSpec, first_title_key, keyword_from_record, resolve_field

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Article"
KEYWORD_PAGE_SIZE = 10

# Writable variants of the article fields: the status must be a choice property
STATUS_FIELD = FieldSpec(("Status",), ("select", "status"), ("status",))


class SeedError(Exception):
    """The remote schema cannot be seeded (e.g. no title property)"""


@dataclass
class ArticleMapping:
    """Property names detected in the Articles database"""
    title_key: str
    desc_key: Optional[str] = None
    desc_type: str = "rich_text"
    published_key: Optional[str] = None
    status_key: Optional[str] = None
    status_type: str = "select"
    status_option: Optional[str] = None
    date_key: Optional[str] = None


def _status_option(prop: Dict) -> Optional[str]:
    """Prefer an option named like 'published', else the first option"""
    kind = prop.get("type", "select")
    options = (prop.get(kind) or {}).get("options") or []
    names = [o.get("name") for o in options if isinstance(o, dict) and o.get("name")]
    for name in names:
        if "published" in name.lower():
            return name
    return names[0] if names else None


def detect_article_mapping(properties: Dict) -> ArticleMapping:
    title_key = first_title_key(properties)
    if not title_key:
        raise SeedError("Articles DB has no title property.")

    mapping = ArticleMapping(title_key=title_key)

    desc = resolve_field(properties, ARTICLE_FIELDS["description"])
    if desc:
        mapping.desc_key = desc[0]
        mapping.desc_type = desc[1].get("type", "rich_text")

    published = resolve_field(properties, ARTICLE_FIELDS["published"])
    if published:
        mapping.published_key = published[0]
    else:
        status = resolve_field(properties, STATUS_FIELD)
        if status:
            mapping.status_key = status[0]
            mapping.status_type = status[1].get("type", "select")
            mapping.status_option = _status_option(status[1])

    found_date = resolve_field(properties, ARTICLE_FIELDS["date"])
    if found_date:
        mapping.date_key = found_date[0]
    return mapping


def build_article_properties(mapping: ArticleMapping, keyword: str, today: date) -> Dict:
    """Notion properties payload for the new article row"""
    title = keyword or DEFAULT_TITLE
    properties = {
        mapping.title_key: {"title": [{"text": {"content": title}}]},
    }
    if mapping.desc_key:
        kind = "title" if mapping.desc_type == "title" else "rich_text"
        properties[mapping.desc_key] = {kind: [{"text": {"content": f"Getting started with {title}."}}]}
    if mapping.published_key:
        properties[mapping.published_key] = {"checkbox": True}
    elif mapping.status_key and mapping.status_option:
        properties[mapping.status_key] = {mapping.status_type: {"name": mapping.status_option}}
    if mapping.date_key:
        properties[mapping.date_key] = {"date": {"start": today.isoformat()}}
    return properties


class KeywordSeeder:
    """Turn one unused keyword into a new article row"""

    def __init__(self, config: SiteConfig, source: NotionContentSource):
        self.config = config
        self.source = source

    def find_unused_keyword(self) -> Tuple[Optional[Dict], str, Optional[str]]:
        """(record, keyword title, used-flag property name) for the first unused keyword"""
        schema = self.source.retrieve_database(self.config.db_keywords)
        props = schema.get("properties") or {}
        if not first_title_key(props):
            raise SeedError("Keywords DB has no title property.")

        used = resolve_field(props, KEYWORD_FIELDS["used"])
        used_key = used[0] if used else None

        query_filter = {"property": used_key, "checkbox": {"equals": False}} if used_key else None
        page = self.source.query_database(
            self.config.db_keywords, filter=query_filter, page_size=KEYWORD_PAGE_SIZE
        )
        for record in page.get("results") or []:
            keyword = keyword_from_record(record)
            if not keyword.used:
                return record, keyword.title, used_key
        return None, "", used_key

    def create_article(self, keyword: str, today: date) -> Dict:
        schema = self.source.retrieve_database(self.config.db_articles)
        mapping = detect_article_mapping(schema.get("properties") or {})

        logger.info("Articles DB mapping:")
        logger.info(f"  titleKey     : {mapping.title_key}")
        logger.info(f"  descKey      : {mapping.desc_key or '(none)'}")
        logger.info(f"  checkbox Pub : {mapping.published_key or '(none)'}")
        logger.info(f"  select Status: {mapping.status_key or '(none)'}")
        logger.info(f"  dateKey      : {mapping.date_key or '(none)'}")

        properties = build_article_properties(mapping, keyword, today)
        return self.source.create_page(self.config.db_articles, properties)

    def mark_keyword_used(self, record: Dict, used_key: Optional[str]) -> bool:
        """Best effort: a failure here is logged, not raised"""
        if not used_key:
            return False
        try:
            self.source.update_page(record["id"], {used_key: {"checkbox": True}})
            return True
        except ContentSourceError as e:
            logger.warning(f"Could not mark keyword as used: {e}")
            return False

    def run(self, today: Optional[date] = None) -> Optional[str]:
        """Seed one article; returns the new page id, or None when nothing is left"""
        record, title, used_key = self.find_unused_keyword()
        if record is None:
            logger.info("No unused keywords found (or Keywords DB is empty). Nothing to seed.")
            return None

        keyword = title or DEFAULT_TITLE
        logger.info(f'Seeding article for keyword: "{keyword}"')
        created = self.create_article(keyword, today or date.today())
        logger.info(f"Created article page: {created.get('id')}")

        self.mark_keyword_used(record, used_key)
        logger.info("Done.")
        return created.get("id")


def main() -> int:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    config = load_config()
    try:
        config.require("notion_token", "db_keywords", "db_articles")
        source = NotionContentSource(config.notion_token, timeout=config.request_timeout)
        KeywordSeeder(config, source).run()
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except (ContentSourceError, SeedError) as e:
        logger.error(f"Seeding failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
