"""
Utility functions for website generator
Helper functions for fragments, dates and structured data
"""
import json
from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from typing import Dict, List, Optional, Sequence

from config import SiteConfig
from records import Article, Product
from utils.affiliate_links import rewrite_link
from utils.content_presets import FaqEntry, HowToStep


def format_date(value: Optional[date]) -> str:
    """Human readable date, e.g. 'March 04, 2024'"""
    if not value:
        return ""
    return value.strftime("%B %d, %Y")


def rfc822_date(value: Optional[date]) -> str:
    """RSS pubDate for a calendar date (midnight UTC)"""
    if not value:
        return ""
    return format_datetime(datetime.combine(value, time(0, 0), tzinfo=timezone.utc))


def json_ld(data: Dict) -> str:
    """Serialize a schema.org block for embedding in a <script> tag"""
    return json.dumps(data, ensure_ascii=False, sort_keys=False).replace("</", "<\\/")


def article_schema(config: SiteConfig, article: Article, image_url: str = "") -> Dict:
    schema = {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": article.title,
        "description": article.description,
        "mainEntityOfPage": {"@type": "WebPage", "@id": config.absolute_url(article.path)},
        "publisher": {"@type": "Organization", "name": config.site_name, "url": config.site_url},
    }
    if article.publish_date:
        schema["datePublished"] = article.publish_date.isoformat()
        schema["dateModified"] = article.publish_date.isoformat()
    if image_url:
        schema["image"] = image_url
    return schema


def faq_schema(entries: Sequence[FaqEntry]) -> Optional[Dict]:
    if not entries:
        return None
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": entry.question,
                "acceptedAnswer": {"@type": "Answer", "text": entry.answer},
            }
            for entry in entries
        ],
    }


def howto_schema(title: str, steps: Sequence[HowToStep]) -> Optional[Dict]:
    if not steps:
        return None
    return {
        "@context": "https://schema.org",
        "@type": "HowTo",
        "name": title,
        "step": [
            {"@type": "HowToStep", "position": i, "name": step.name, "text": step.text}
            for i, step in enumerate(steps, start=1)
        ],
    }


def breadcrumb_schema(config: SiteConfig, article: Article) -> Dict:
    crumbs = [
        ("Home", config.absolute_url("/")),
        ("Articles", config.absolute_url("/articles/index.html")),
        (article.title, config.absolute_url(article.path)),
    ]
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i, "name": name, "item": url}
            for i, (name, url) in enumerate(crumbs, start=1)
        ],
    }


def product_card(product: Product, config: SiteConfig) -> str:
    link = rewrite_link(product.link, product.name, config)
    details = " • ".join(part for part in (product.brand, product.specs) if part)
    parts = ['<article class="card">']
    if product.image_url:
        parts.append(f'  <img src="{product.image_url}" alt="{product.name}" loading="lazy" />')
    parts.append(f"  <h3>{product.name or 'Product'}</h3>")
    if details:
        parts.append(f"  <p>{details}</p>")
    if product.price_text:
        parts.append(f'  <p class="price">{product.price_text}</p>')
    if product.description:
        parts.append(f"  <p>{product.description}</p>")
    parts.append(f'  <p><a href="{link}" target="_blank" rel="sponsored noopener">View</a></p>')
    if product.pros:
        parts.append(f"  <p><small>Pros: {product.pros}</small></p>")
    if product.cons:
        parts.append(f"  <p><small>Cons: {product.cons}</small></p>")
    parts.append("</article>")
    return "\n".join(parts)


def products_section(products: Sequence[Product], config: SiteConfig) -> str:
    if not products:
        return ""
    cards = "\n".join(product_card(p, config) for p in products)
    return f'<h2>Top Picks</h2>\n<div class="grid">\n{cards}\n</div>'


def article_link_item(article: Article) -> str:
    dated = f' <small>{format_date(article.publish_date)}</small>' if article.publish_date else ""
    return f'<li><a href="{article.path}">{article.title}</a>{dated}</li>'


def related_section(related: Sequence[Article]) -> str:
    if not related:
        return ""
    items = "\n".join(article_link_item(a) for a in related)
    return f'<section class="related">\n<h2>Related Guides</h2>\n<ul>\n{items}\n</ul>\n</section>'


def article_list(articles: List[Article], empty_text: str = "No published articles yet.") -> str:
    if not articles:
        return f"<ul><li>{empty_text}</li></ul>"
    items = "\n".join(article_link_item(a) for a in articles)
    return f'<ul class="article-list">\n{items}\n</ul>'
