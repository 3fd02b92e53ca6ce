"""
Website generator that builds the static site from the Notion databases
Articles, product picks, index pages, legal pages, sitemap and RSS
"""
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from config import STATIC_PAGES, WEBSITE_CONFIG, SiteConfig
from content_source import NotionContentSource
from records import Article, Product, article_from_record, product_from_record, unique_slug
from utils.content_presets import preset_for
from utils.related_ranker import most_recent, rank_related
from website_generator.feeds import render_feed, render_robots, render_sitemap, verification_file
from website_generator.renderer import PageRenderer
from website_generator.utils import (
    article_list,
    article_schema,
    breadcrumb_schema,
    faq_schema,
    format_date,
    howto_schema,
    json_ld,
    products_section,
    related_section,
)

logger = logging.getLogger(__name__)

DISCLOSURE_NOTE = "<hr/><p><em>Disclosure:</em> We may earn a commission when you buy via links on our site.</p>"

STATIC_ASSETS = [
    ("styles.css", "assets/css/styles.css"),
    ("favicon.ico", "assets/img/favicon.ico"),
]


@dataclass
class BuildResult:
    """Summary of one build"""
    articles: List[Article] = field(default_factory=list)
    skipped: int = 0
    pages_written: int = 0
    pages_unchanged: int = 0
    files: List[str] = field(default_factory=list)


class WebsiteGenerator:
    """Generate the static site from the Articles and Products databases"""

    def __init__(self, config: SiteConfig, source: NotionContentSource,
                 renderer: Optional[PageRenderer] = None, asset_dir: Optional[Path] = None):
        self.config = config
        self.source = source
        self.renderer = renderer or PageRenderer(config)
        self.output_dir = Path(config.output_dir)
        self.asset_dir = Path(asset_dir) if asset_dir else Path.cwd()
        self.max_products = WEBSITE_CONFIG["max_products_per_article"]

    def generate(self) -> BuildResult:
        """Run one full build. Remote errors propagate and abort the build."""
        result = BuildResult()
        logger.info("=" * 60)
        logger.info(f"Starting site build into {self.output_dir}")
        logger.info("=" * 60)

        logger.info("Step 1/5: Loading products...")
        products = self._load_products()
        logger.info(f"✓ {len(products)} products loaded")

        logger.info("Step 2/5: Loading articles...")
        published = self._load_articles(result)
        logger.info(f"✓ {len(published)} published articles ({result.skipped} unpublished skipped)")

        self._ensure_directories()

        logger.info("Step 3/5: Generating article pages...")
        for article in published:
            self._generate_article(article, published, products, result)
        logger.info(f"✓ {len(published)} article pages generated")

        ordered = most_recent(published, len(published))
        result.articles = ordered

        logger.info("Step 4/5: Generating index, home and legal pages...")
        self._generate_index(ordered, result)
        self._generate_home(ordered, result)
        self._generate_legal_pages(result)
        logger.info("✓ Index, home and legal pages generated")

        logger.info("Step 5/5: Generating robots.txt, sitemap and feed...")
        self._generate_feeds(ordered, result)
        self._copy_static_assets()
        logger.info("✓ Crawler files generated")

        logger.info("=" * 60)
        logger.info(
            f"✓ Build complete: {result.pages_written} files written, "
            f"{result.pages_unchanged} unchanged, in {self.output_dir}"
        )
        logger.info("=" * 60)
        return result

    def _ensure_directories(self):
        (self.output_dir / "articles").mkdir(parents=True, exist_ok=True)
        (self.output_dir / "assets" / "css").mkdir(parents=True, exist_ok=True)
        (self.output_dir / "assets" / "img").mkdir(parents=True, exist_ok=True)

    def _load_products(self) -> Dict[str, Product]:
        """Products keyed by record id; skipped when no products database is configured"""
        if not self.config.db_products:
            logger.info("No products database configured, skipping product picks")
            return {}
        products = {}
        for record in self.source.fetch_all(self.config.db_products):
            product = product_from_record(record)
            if product.id:
                products[product.id] = product
        return products

    def _load_articles(self, result: BuildResult) -> List[Article]:
        """Published articles in source order, with slugs made unique"""
        used_slugs: Set[str] = set()
        published = []
        for record in self.source.fetch_all(self.config.db_articles):
            article = article_from_record(record)
            if not article.published:
                result.skipped += 1
                logger.debug(f"Skipping unpublished article: {article.title or article.id}")
                continue
            slug = unique_slug(article.slug, used_slugs)
            if slug != article.slug:
                logger.warning(f"Duplicate slug '{article.slug}', using '{slug}'")
                article.slug = slug
            published.append(article)
        return published

    def _generate_article(self, article: Article, published: List[Article],
                          products: Dict[str, Product], result: BuildResult):
        picks = [products[pid] for pid in article.related_product_ids if pid in products]
        picks = picks[:self.max_products]
        preset = preset_for(article.title)
        related = rank_related(article, published, limit=self.config.related_limit)

        parts = [f'<main class="container"><h1>{article.title}</h1>']
        if article.publish_date:
            parts.append(f'<p class="meta">Published {format_date(article.publish_date)}</p>')
        if article.description:
            parts.append(f"<p>{article.description}</p>")
        parts.append(products_section(picks, self.config))
        parts.append(preset.body_html)
        parts.append(related_section(related))
        parts.append(DISCLOSURE_NOTE + "</main>")
        body = "\n".join(part for part in parts if part)

        og_image = next((p.image_url for p in picks if p.image_url), "")
        blocks = [
            article_schema(self.config, article, og_image),
            faq_schema(preset.faq_entries),
            howto_schema(article.title, preset.howto_steps),
            breadcrumb_schema(self.config, article),
        ]
        html = self.renderer.render_page(
            f"{article.title} — {self.config.site_name}",
            article.description,
            body,
            canonical_path=article.path,
            structured_data=[json_ld(b) for b in blocks if b],
            og_image=og_image,
            og_type="article",
            og_title=article.title,
        )
        self._write(f"articles/{article.slug}.html", html, result)

    def _generate_index(self, ordered: List[Article], result: BuildResult):
        name = self.config.site_name
        body = f'<main class="container"><h1>Articles &amp; Guides</h1>\n{article_list(ordered)}\n</main>'
        html = self.renderer.render_page(
            f"{name} Articles",
            f"All {name} guides and product roundups.",
            body,
            canonical_path="/articles/index.html",
        )
        self._write("articles/index.html", html, result)

    def _generate_home(self, ordered: List[Article], result: BuildResult):
        name = self.config.site_name
        recent = ordered[:self.config.home_recent_limit]
        body = (
            '<section class="hero"><div class="container">\n'
            "<h1>Upgrade Your Car's Sound—Without Guesswork</h1>\n"
            "<p>We compare speakers, subs, amps, and head units across budgets and use-cases. "
            "Every pick links to trusted retailers. You buy, we may earn a commission.</p>\n"
            '<p><a class="btn" href="/articles/index.html">Browse Top Picks</a></p>\n'
            "</div></section>\n"
            f'<main class="container"><h2>Latest Guides</h2>\n{article_list(recent)}\n</main>'
        )
        html = self.renderer.render_page(
            f"{name} — The Easiest Way to Choose Car Audio",
            "Expert, no-fluff car audio picks.",
            body,
            canonical_path="/",
        )
        self._write("index.html", html, result)

    def _generate_legal_pages(self, result: BuildResult):
        values = {"site_name": self.config.site_name, "contact_email": self.config.contact_email}
        for route, title, description, body in STATIC_PAGES:
            html = self.renderer.legal_page(
                title, description.format(**values), body.format(**values), f"/{route}"
            )
            self._write(route, html, result)

    def _generate_feeds(self, ordered: List[Article], result: BuildResult):
        self._write("robots.txt", render_robots(self.config), result)
        self._write("sitemap.xml", render_sitemap(self.renderer, ordered), result)
        self._write("feed.xml", render_feed(self.renderer, ordered, WEBSITE_CONFIG["feed_limit"]), result)
        key_file = verification_file(self.config.verification_key)
        if key_file:
            self._write(key_file[0], key_file[1], result)
        elif self.config.verification_key:
            logger.warning("Ignoring search verification key with unexpected characters")

    def _copy_static_assets(self):
        """Copy styles.css and favicon.ico from the working directory when present"""
        for src_name, dest in STATIC_ASSETS:
            src = self.asset_dir / src_name
            if src.is_file():
                target = self.output_dir / dest
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src, target)
                logger.info(f"Copied static asset: {src_name}")

    def _write(self, rel_path: str, content: str, result: BuildResult) -> bool:
        """Write a file under the output root unless it already has this content"""
        path = self.output_dir / rel_path
        result.files.append(rel_path)
        data = content.encode("utf-8")
        if path.is_file() and path.read_bytes() == data:
            result.pages_unchanged += 1
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        result.pages_written += 1
        logger.debug(f"Wrote {path}")
        return True
