"""
Page renderer - wraps body fragments in the shared head/nav/footer shell
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, Template, TemplateNotFound

from config import SiteConfig

logger = logging.getLogger(__name__)

PACKAGE_TEMPLATES = Path(__file__).parent / "templates"

NAV_LINKS = [
    ("/articles/index.html", "Articles"),
    ("/about.html", "About"),
    ("/contact.html", "Contact"),
    ("/disclosure.html", "Affiliate Disclosure"),
]

FALLBACK_LAYOUT = '''<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{{ title }}</title>
    <meta name="description" content="{{ description }}"/>
    <link rel="canonical" href="{{ canonical_url }}" />
{%- for block in structured_data %}
    <script type="application/ld+json">{{ block }}</script>
{%- endfor %}
  </head>
  <body>
{{ body }}
<footer class="site-footer"><p>© {{ year }} {{ site_name }}. All rights reserved.</p></footer>
</body></html>
'''


def build_environment(templates_dir: Optional[str] = None) -> Environment:
    """Jinja2 environment: user overrides first, then the packaged templates

    Autoescape stays off; page fragments are trusted HTML built upstream.
    """
    loaders = []
    if templates_dir and Path(templates_dir).is_dir():
        loaders.append(FileSystemLoader(str(templates_dir)))
        logger.info(f"Using template overrides from {templates_dir}")
    loaders.append(FileSystemLoader(str(PACKAGE_TEMPLATES)))
    return Environment(loader=ChoiceLoader(loaders), autoescape=False)


class PageRenderer:
    """Render full HTML pages from a title, description and body fragment"""

    def __init__(self, config: SiteConfig, env: Optional[Environment] = None, year: Optional[int] = None):
        self.config = config
        self.env = env or build_environment(config.templates_dir)
        self.year = year or datetime.now().year
        self.layout = self._load_layout()

    def _load_layout(self) -> Template:
        try:
            return self.env.get_template("layout.html.j2")
        except TemplateNotFound as e:
            logger.warning(f"Layout template not found ({e}), using fallback layout")
            return Template(FALLBACK_LAYOUT)

    def render_page(self, title: str, description: str, body: str, *, canonical_path: str = "/",
                    structured_data: Optional[Sequence[str]] = None, og_image: str = "",
                    og_type: str = "website", og_title: str = "") -> str:
        """Substitute the placeholders of the shared shell; nothing is escaped"""
        context = {
            "title": title,
            "description": description or "",
            "body": body,
            "canonical_url": self.config.absolute_url(canonical_path),
            "og_title": og_title or title,
            "og_type": og_type,
            "og_image": og_image,
            "structured_data": list(structured_data or []),
            "site_name": self.config.site_name,
            "ga4_id": self.config.ga4_id,
            "skimlinks_id": self.config.skimlinks_id,
            "newsletter_url": self.config.newsletter_url,
            "nav_links": NAV_LINKS,
            "year": self.year,
        }
        return self.layout.render(**context) + "\n"

    def render_template(self, name: str, **context) -> str:
        """Render any other packaged template (sitemap, feed)"""
        return self.env.get_template(name).render(**context) + "\n"

    def legal_page(self, title: str, description: str, body_html: str, path: str) -> str:
        body = f'<main class="container"><h1>{title}</h1>{body_html}</main>'
        return self.render_page(f"{title} — {self.config.site_name}", description, body, canonical_path=path)
