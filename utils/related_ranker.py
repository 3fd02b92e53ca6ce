"""
Related articles - ranks other articles by title token overlap
"""
import re
from datetime import date
from typing import List, Sequence, Set

from records import Article

STOPWORDS = {
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
    'is', 'are', 'was', 'be', 'how', 'what', 'which', 'why', 'when', 'your', 'you', 'my',
    'our', 'it', 'its', 'this', 'that', 'vs', 'best', 'top', 'guide', 'new', 'do', 'does',
}


def tokenize(title: str) -> Set[str]:
    words = re.split(r"[^a-z0-9]+", (title or "").lower())
    return {w for w in words if w and w not in STOPWORDS}


def overlap_score(a: Set[str], b: Set[str]) -> float:
    """Jaccard-style overlap: |a & b| / max(1, |a| + |b| - |a & b|)"""
    shared = len(a & b)
    return shared / max(1, len(a) + len(b) - shared)


def _recency(article: Article) -> int:
    return article.publish_date.toordinal() if article.publish_date else date.min.toordinal()


def most_recent(articles: Sequence[Article], limit: int) -> List[Article]:
    """Newest first; undated articles last, ties by title"""
    dated = sorted(articles, key=lambda a: (a.publish_date is None, -_recency(a), a.title.lower()))
    return dated[:max(0, limit)]


def rank_related(target: Article, candidates: Sequence[Article], limit: int = 3) -> List[Article]:
    """Pick up to `limit` related articles for `target`

    Every other article is ranked: higher overlap first, ties broken by the
    more recent publish date, then title. Zero-overlap articles stay in the
    ranking, so when nothing overlaps the result is the most recent others
    and the list is never empty while another article exists.
    """
    target_tokens = tokenize(target.title)
    scored = [
        (overlap_score(target_tokens, tokenize(candidate.title)), candidate)
        for candidate in candidates
        if candidate.slug != target.slug
    ]
    scored.sort(key=lambda item: (-item[0], -_recency(item[1]), item[1].title.lower()))
    return [candidate for _, candidate in scored[:max(0, limit)]]
