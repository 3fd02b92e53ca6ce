"""
Record mapping - turns loosely-typed Notion records into Article, Product and Keyword views

Property names in the remote databases are user-editable, so every field is
looked up through an ordered list of candidate names (case-insensitive) and
an optional list of acceptable property types. A missing or mistyped
property yields an empty value, never an exception.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

TEXT_KINDS = ("title", "rich_text")
CHOICE_KINDS = ("select", "status")
UNTITLED_SLUG = "untitled"
SAFE_SLUG = re.compile(r"[A-Za-z0-9][A-Za-z0-9._~-]*")


@dataclass(frozen=True)
class FieldSpec:
    """Fallback chain for one field: exact candidates first, then loose needles"""
    candidates: Tuple[str, ...]
    types: Optional[Tuple[str, ...]] = None
    needles: Tuple[str, ...] = ()


ARTICLE_FIELDS = {
    "title": FieldSpec(("Title", "Name"), ("title",)),
    "slug": FieldSpec(("slug", "Slug", "URL Slug"), ("rich_text", "title", "url")),
    "description": FieldSpec(
        ("Description", "Intro", "Summary", "Desc", "Blurb"),
        ("rich_text", "title"),
        ("desc", "intro", "summary", "blurb"),
    ),
    "published": FieldSpec(("Published", "Is Published", "is_published"), ("checkbox",), ("published",)),
    "status": FieldSpec(("Status",), ("select", "status", "rich_text"), ("status",)),
    "date": FieldSpec(("Published At", "Date", "Published Date", "publish_date"), ("date",), ("date", "published")),
    "products": FieldSpec(("products", "Products", "Top Picks"), ("relation",)),
}

PRODUCT_FIELDS = {
    "name": FieldSpec(("name", "Name", "Title"), ("title", "rich_text")),
    "brand": FieldSpec(("brand", "Brand"), ("rich_text", "select", "title")),
    "category": FieldSpec(("category", "Category"), ("select", "multi_select", "rich_text")),
    "image_url": FieldSpec(("image_url", "Image URL", "Image"), ("url", "rich_text")),
    "link": FieldSpec(("url", "link", "Product URL", "Affiliate Link"), ("url", "rich_text")),
    "price": FieldSpec(("price", "Price", "msrp", "price_bucket"), ("number", "rich_text", "select")),
    "description": FieldSpec(("description", "Description", "Summary"), ("rich_text",)),
    "size": FieldSpec(("size", "Size"), ("rich_text", "select", "number")),
    "rms": FieldSpec(("rms_power", "RMS", "RMS Power"), ("number", "rich_text")),
    "impedance": FieldSpec(("impedance", "Impedance"), ("rich_text", "select", "number")),
    "sensitivity": FieldSpec(("sensitivity_db", "Sensitivity"), ("number", "rich_text")),
    "pros": FieldSpec(("pros", "Pros"), ("rich_text", "multi_select")),
    "cons": FieldSpec(("cons", "Cons"), ("rich_text", "multi_select")),
}

KEYWORD_FIELDS = {
    "title": FieldSpec(("Keyword", "Name", "Title"), ("title",)),
    "used": FieldSpec(("Used", "Is Used", "is_used", "used"), ("checkbox",), ("used",)),
}


# -------------------------
# Field extraction
# -------------------------
def _type_ok(prop: Dict, allowed_types: Optional[Sequence[str]]) -> bool:
    return allowed_types is None or prop.get("type") in allowed_types


def find_property(properties: Optional[Dict], candidates: Iterable[str],
                  allowed_types: Optional[Sequence[str]] = None) -> Optional[Tuple[str, Dict]]:
    """Return (name, property) for the first candidate present with an allowed type"""
    if not properties:
        return None
    by_lower = {}
    for name, prop in properties.items():
        if isinstance(prop, dict):
            by_lower.setdefault(name.lower(), (name, prop))

    for candidate in candidates:
        match = by_lower.get(candidate.lower())
        if match and _type_ok(match[1], allowed_types):
            return match
    return None


def find_property_loose(properties: Optional[Dict], needles: Iterable[str],
                        allowed_types: Optional[Sequence[str]] = None) -> Optional[Tuple[str, Dict]]:
    """Like find_property, but matches any property whose name contains a needle"""
    if not properties:
        return None
    needles = [n.lower() for n in needles]
    for name, prop in properties.items():
        if not isinstance(prop, dict):
            continue
        lower = name.lower()
        if any(n in lower for n in needles) and _type_ok(prop, allowed_types):
            return name, prop
    return None


def resolve_field(properties: Optional[Dict], spec: FieldSpec) -> Optional[Tuple[str, Dict]]:
    """Apply a FieldSpec: exact candidates, then the loose needles"""
    found = find_property(properties, spec.candidates, spec.types)
    if found is None and spec.needles:
        found = find_property_loose(properties, spec.needles, spec.types)
    return found


def first_title_key(properties: Optional[Dict]) -> Optional[str]:
    for name, prop in (properties or {}).items():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return name
    return None


def plain_text(runs) -> str:
    """Concatenate the text of a list of rich-text runs"""
    if not isinstance(runs, list):
        return ""
    parts = []
    for run in runs:
        if not isinstance(run, dict):
            continue
        text = run.get("plain_text")
        if text is None:
            text = (run.get("text") or {}).get("content", "")
        parts.append(text or "")
    return "".join(parts)


def property_value(prop: Optional[Dict]):
    """Convert one property to a plain value according to its type

    title/rich_text -> str, select/status -> option name, multi_select -> comma
    joined names, url/email/phone -> str, number -> number, date -> start
    string, checkbox -> bool, relation -> list of ids. Anything else -> "".
    """
    if not isinstance(prop, dict):
        return ""
    kind = prop.get("type")
    value = prop.get(kind) if kind else None

    if kind in TEXT_KINDS:
        return plain_text(value)
    if kind in CHOICE_KINDS:
        return (value or {}).get("name", "") if isinstance(value, dict) else ""
    if kind == "multi_select":
        return ", ".join(opt.get("name", "") for opt in (value or []) if isinstance(opt, dict))
    if kind in ("url", "email", "phone_number"):
        return value or ""
    if kind == "number":
        return "" if value is None else value
    if kind == "date":
        return (value or {}).get("start", "") if isinstance(value, dict) else ""
    if kind == "checkbox":
        return bool(value)
    if kind == "relation":
        return [ref["id"] for ref in (value or []) if isinstance(ref, dict) and ref.get("id")]

    logger.debug(f"Unsupported property type: {kind}")
    return ""


def extract(properties: Optional[Dict], spec: FieldSpec, default=""):
    found = resolve_field(properties, spec)
    if found is None:
        return default
    value = property_value(found[1])
    return default if value == "" else value


def extract_text(properties: Optional[Dict], spec: FieldSpec) -> str:
    value = extract(properties, spec)
    if isinstance(value, list):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() if value != "" else ""


# -------------------------
# Slugs and publishing
# -------------------------
def slugify(text: Optional[str]) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug or UNTITLED_SLUG


def article_slug(explicit: Optional[str], title: Optional[str]) -> str:
    """Trimmed explicit slug field when set, else the slugified title

    An explicit slug is kept verbatim (case included) so existing URLs do not
    move; only values that are not a safe file name get slugified.
    """
    explicit = (explicit or "").strip()
    if explicit:
        return explicit if SAFE_SLUG.fullmatch(explicit) else slugify(explicit)
    return slugify(title)


def unique_slug(slug: str, used: Set[str]) -> str:
    """First of slug, slug-2, slug-3... not yet in `used`; the result is added to `used`"""
    candidate = slug
    n = 1
    while candidate in used:
        n += 1
        candidate = f"{slug}-{n}"
    used.add(candidate)
    return candidate


def is_published(properties: Optional[Dict]) -> bool:
    """Published checkbox is true, or the status text is exactly 'published'"""
    if extract(properties, ARTICLE_FIELDS["published"], default=False) is True:
        return True
    status = extract(properties, ARTICLE_FIELDS["status"])
    return isinstance(status, str) and status.strip().lower() == "published"


def parse_date(value) -> Optional[date]:
    """Parse an ISO date or datetime string (dateutil for the odd formats); anything else -> None"""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return dateutil_parser.parse(value).date()
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable date: {value}")
        return None


def parse_price(value) -> Optional[float]:
    """Number properties pass through; text prices keep only digits and dots"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        digits = re.sub(r"[^0-9.]", "", value)
        try:
            return float(digits) if digits else None
        except ValueError:
            return None
    return None


def format_price(value) -> str:
    if isinstance(value, bool) or value in ("", None):
        return ""
    if isinstance(value, (int, float)):
        return f"${value:,.2f}"
    return str(value).strip()


def detect_category(name: str = "") -> str:
    """Guess a product category from its name when the database has none"""
    n = (name or "").lower()
    if "component" in n:
        return "Component Speakers"
    if "coax" in n:
        return "Coaxial Speakers"
    if "4-channel" in n or "4 channel" in n or "x4" in n:
        return "4-Channel Amps"
    if "powered sub" in n or "under-seat" in n or "pwe-" in n:
        return "Powered Subs"
    if "head unit" in n or "receiver" in n or "carplay" in n or "dmx" in n:
        return "Head Units"
    if "subwoofer" in n or re.match(r'^\d{1,2}("|in| inch)', n):
        return "Subwoofers"
    return "Coaxial Speakers"


# -------------------------
# Derived views
# -------------------------
@dataclass
class Article:
    id: str
    title: str
    slug: str
    description: str = ""
    published: bool = False
    publish_date: Optional[date] = None
    related_product_ids: List[str] = field(default_factory=list)

    @property
    def path(self) -> str:
        return f"/articles/{self.slug}.html"


@dataclass
class Product:
    id: str
    name: str
    brand: str = ""
    category: str = ""
    image_url: str = ""
    link: str = ""
    price_text: str = ""
    price_value: Optional[float] = None
    description: str = ""
    specs: str = ""
    pros: str = ""
    cons: str = ""


@dataclass
class Keyword:
    id: str
    title: str
    used: bool = False


def _title_of(properties: Optional[Dict], spec: FieldSpec) -> str:
    title = extract_text(properties, spec)
    if title:
        return title
    key = first_title_key(properties)
    return property_value(properties[key]).strip() if key else ""


def article_from_record(record: Dict) -> Article:
    props = record.get("properties") or {}
    title = _title_of(props, ARTICLE_FIELDS["title"])
    related = extract(props, ARTICLE_FIELDS["products"], default=[])
    return Article(
        id=record.get("id", ""),
        title=title,
        slug=article_slug(extract_text(props, ARTICLE_FIELDS["slug"]), title),
        description=extract_text(props, ARTICLE_FIELDS["description"]),
        published=is_published(props),
        publish_date=parse_date(extract(props, ARTICLE_FIELDS["date"])),
        related_product_ids=related if isinstance(related, list) else [],
    )


def product_from_record(record: Dict) -> Product:
    props = record.get("properties") or {}
    name = _title_of(props, PRODUCT_FIELDS["name"])
    price_raw = extract(props, PRODUCT_FIELDS["price"])
    rms = extract_text(props, PRODUCT_FIELDS["rms"])
    sensitivity = extract_text(props, PRODUCT_FIELDS["sensitivity"])
    specs = [
        extract_text(props, PRODUCT_FIELDS["size"]),
        f"{rms}W RMS" if rms else "",
        extract_text(props, PRODUCT_FIELDS["impedance"]),
        f"{sensitivity} dB" if sensitivity else "",
    ]
    price_spec_found = resolve_field(props, PRODUCT_FIELDS["price"])
    price_is_bucket = price_spec_found is not None and price_spec_found[1].get("type") == "select"
    return Product(
        id=record.get("id", ""),
        name=name,
        brand=extract_text(props, PRODUCT_FIELDS["brand"]),
        category=extract_text(props, PRODUCT_FIELDS["category"]) or detect_category(name),
        image_url=extract_text(props, PRODUCT_FIELDS["image_url"]),
        link=extract_text(props, PRODUCT_FIELDS["link"]),
        price_text=format_price(price_raw),
        price_value=None if price_is_bucket else parse_price(price_raw),
        description=extract_text(props, PRODUCT_FIELDS["description"]),
        specs=" • ".join(s for s in specs if s),
        pros=extract_text(props, PRODUCT_FIELDS["pros"]),
        cons=extract_text(props, PRODUCT_FIELDS["cons"]),
    )


def keyword_from_record(record: Dict) -> Keyword:
    props = record.get("properties") or {}
    return Keyword(
        id=record.get("id", ""),
        title=_title_of(props, KEYWORD_FIELDS["title"]),
        used=extract(props, KEYWORD_FIELDS["used"], default=False) is True,
    )
