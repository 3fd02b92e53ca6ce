"""Tests for record field extraction, slugs and the published filter"""
import unittest
from datetime import date

from helpers import checkbox, date_prop, multi_select, number, page, relation, rich, select, title, url
from records import (
    ARTICLE_FIELDS,
    article_from_record,
    article_slug,
    detect_category,
    extract,
    find_property,
    find_property_loose,
    is_published,
    keyword_from_record,
    parse_date,
    parse_price,
    product_from_record,
    property_value,
    slugify,
    unique_slug,
)


class TestFindProperty(unittest.TestCase):
    """Candidate-list property lookup"""

    def test_name_match_is_case_insensitive(self):
        props = {"DESCRIPTION": rich("hello")}
        found = find_property(props, ["description"])
        self.assertEqual(found[0], "DESCRIPTION")

    def test_type_filter_rejects_wrong_type(self):
        props = {"Published": rich("yes")}
        self.assertIsNone(find_property(props, ["Published"], ["checkbox"]))

    def test_candidates_are_tried_in_order(self):
        props = {"Summary": rich("second"), "Intro": rich("first")}
        found = find_property(props, ["Intro", "Summary"])
        self.assertEqual(found[0], "Intro")

    def test_later_candidate_used_when_earlier_has_wrong_type(self):
        props = {"Description": number(3), "Blurb": rich("text")}
        found = find_property(props, ["Description", "Blurb"], ["rich_text"])
        self.assertEqual(found[0], "Blurb")

    def test_missing_properties_return_none(self):
        self.assertIsNone(find_property(None, ["Title"]))
        self.assertIsNone(find_property({}, ["Title"]))

    def test_loose_match_uses_substring(self):
        props = {"Publish Date (UTC)": date_prop("2024-01-01")}
        found = find_property_loose(props, ["date"], ["date"])
        self.assertEqual(found[0], "Publish Date (UTC)")


class TestPropertyValue(unittest.TestCase):
    """Conversion of each property kind to a plain value"""

    def test_text_kinds_concatenate_runs(self):
        prop = {"type": "rich_text", "rich_text": [{"plain_text": "Amp "}, {"plain_text": "Tuning"}]}
        self.assertEqual(property_value(prop), "Amp Tuning")

    def test_text_content_used_when_plain_text_missing(self):
        prop = {"type": "title", "title": [{"text": {"content": "Draft"}}]}
        self.assertEqual(property_value(prop), "Draft")

    def test_select_and_multi_select(self):
        self.assertEqual(property_value(select("Published")), "Published")
        self.assertEqual(property_value(select(None)), "")
        self.assertEqual(property_value(multi_select("Bass", "Loud")), "Bass, Loud")

    def test_scalar_kinds(self):
        self.assertEqual(property_value(url("https://x.test")), "https://x.test")
        self.assertEqual(property_value(url(None)), "")
        self.assertEqual(property_value(number(129.99)), 129.99)
        self.assertEqual(property_value(number(None)), "")
        self.assertEqual(property_value(date_prop("2024-03-01")), "2024-03-01")
        self.assertEqual(property_value(date_prop(None)), "")
        self.assertIs(property_value(checkbox(True)), True)

    def test_relation_returns_ids(self):
        self.assertEqual(property_value(relation("a", "b")), ["a", "b"])

    def test_unknown_or_absent_is_empty(self):
        self.assertEqual(property_value(None), "")
        self.assertEqual(property_value({"type": "formula", "formula": {}}), "")


class TestSlugs(unittest.TestCase):

    def test_slugify_collapses_non_alphanumerics(self):
        self.assertEqual(slugify("  Best 6.5\" Speakers -- 2024! "), "best-6-5-speakers-2024")

    def test_slugify_is_idempotent(self):
        for text in ["Tune Your Amp Gain", "Über Bass!!", "a--b", "already-a-slug"]:
            once = slugify(text)
            self.assertEqual(slugify(once), once)

    def test_empty_slug_falls_back_to_placeholder(self):
        self.assertEqual(slugify(""), "untitled")
        self.assertEqual(slugify(None), "untitled")
        self.assertEqual(slugify("!!!"), "untitled")

    def test_explicit_slug_wins(self):
        self.assertEqual(article_slug("  my-slug ", "Some Title"), "my-slug")
        self.assertEqual(article_slug("My Slug", "Some Title"), "my-slug")
        self.assertEqual(article_slug("", "Some Title"), "some-title")

    def test_explicit_slug_is_kept_verbatim(self):
        self.assertEqual(article_slug("My-Post", "Other"), "My-Post")
        self.assertEqual(article_slug("amp_guide.v2", "Other"), "amp_guide.v2")

    def test_unsafe_explicit_slug_is_slugified(self):
        self.assertEqual(article_slug("../etc/passwd", "Other"), "etc-passwd")
        self.assertEqual(article_slug(".hidden", "Other"), "hidden")

    def test_record_without_title_gets_placeholder_slug(self):
        article = article_from_record(page("p1", Status=select("Published")))
        self.assertEqual(article.title, "")
        self.assertEqual(article.slug, "untitled")

    def test_unique_slug_suffixes_duplicates(self):
        used = set()
        self.assertEqual(unique_slug("amp", used), "amp")
        self.assertEqual(unique_slug("amp", used), "amp-2")
        self.assertEqual(unique_slug("amp", used), "amp-3")

    def test_unique_slug_skips_suffixes_already_taken(self):
        used = set()
        self.assertEqual(unique_slug("amp-guide", used), "amp-guide")
        self.assertEqual(unique_slug("amp-guide-2", used), "amp-guide-2")
        self.assertEqual(unique_slug("amp-guide", used), "amp-guide-3")
        self.assertEqual(unique_slug("amp-guide-2", used), "amp-guide-2-2")
        self.assertEqual(used, {"amp-guide", "amp-guide-2", "amp-guide-3", "amp-guide-2-2"})


class TestPublishedFilter(unittest.TestCase):

    def test_checkbox_true_wins_over_draft_status(self):
        props = page("p", Published=checkbox(True), Status=select("Draft"))["properties"]
        self.assertTrue(is_published(props))

    def test_status_published_any_case(self):
        for status in ["Published", "PUBLISHED", "published"]:
            props = page("p", Status=select(status))["properties"]
            self.assertTrue(is_published(props), status)

    def test_status_must_match_exactly(self):
        props = page("p", Status=select("Published Recently"))["properties"]
        self.assertFalse(is_published(props))

    def test_rich_text_status_is_accepted(self):
        props = page("p", Status=rich(" published "))["properties"]
        self.assertTrue(is_published(props))

    def test_unchecked_without_status_is_not_published(self):
        self.assertFalse(is_published(page("p", Published=checkbox(False))["properties"]))
        self.assertFalse(is_published({}))
        self.assertFalse(is_published(None))


class TestDerivedViews(unittest.TestCase):

    def test_article_from_record(self):
        record = page(
            "a1",
            Name=title("Tune Your Amp Gain"),
            Intro=rich("Dial it in."),
            Published=checkbox(True),
            Date=date_prop("2024-05-02T10:00:00.000Z"),
            Products=relation("p1", "p2"),
        )
        article = article_from_record(record)
        self.assertEqual(article.title, "Tune Your Amp Gain")
        self.assertEqual(article.slug, "tune-your-amp-gain")
        self.assertEqual(article.description, "Dial it in.")
        self.assertTrue(article.published)
        self.assertEqual(article.publish_date, date(2024, 5, 2))
        self.assertEqual(article.related_product_ids, ["p1", "p2"])
        self.assertEqual(article.path, "/articles/tune-your-amp-gain.html")

    def test_title_falls_back_to_any_title_property(self):
        article = article_from_record(page("a2", Headline=title("Odd Schema")))
        self.assertEqual(article.title, "Odd Schema")

    def test_mistyped_fields_degrade_to_empty(self):
        record = page("a3", Title=title("X"), Products=rich("not a relation"), Date=rich("soon"))
        article = article_from_record(record)
        self.assertEqual(article.related_product_ids, [])
        self.assertIsNone(article.publish_date)

    def test_product_from_record(self):
        record = page(
            "p1",
            name=title("Rockford R165X3 Coaxial"),
            brand=rich("Rockford Fosgate"),
            size=rich("6.5\""),
            rms_power=number(45),
            impedance=rich("4 ohm"),
            url=url("https://www.amazon.com/dp/B000"),
            image_url=url("https://img.test/r.jpg"),
            price=number(59),
            pros=rich("Cheap"),
        )
        product = product_from_record(record)
        self.assertEqual(product.name, "Rockford R165X3 Coaxial")
        self.assertEqual(product.specs, "6.5\" • 45W RMS • 4 ohm")
        self.assertEqual(product.price_value, 59.0)
        self.assertEqual(product.price_text, "$59.00")
        self.assertEqual(product.category, "Coaxial Speakers")
        self.assertEqual(product.pros, "Cheap")

    def test_product_price_variants(self):
        text_price = product_from_record(page("p", name=title("Amp"), price=rich("$1,299.50")))
        self.assertEqual(text_price.price_value, 1299.50)
        bucket = product_from_record(page("p", name=title("Amp"), price_bucket=select("$$")))
        self.assertIsNone(bucket.price_value)
        self.assertEqual(bucket.price_text, "$$")

    def test_product_category_select_wins(self):
        product = product_from_record(page("p", name=title("Mystery Box"), category=select("Head Units")))
        self.assertEqual(product.category, "Head Units")

    def test_keyword_from_record(self):
        keyword = keyword_from_record(page("k1", Keyword=title("amp wiring kit"), Used=checkbox(True)))
        self.assertEqual(keyword.title, "amp wiring kit")
        self.assertTrue(keyword.used)
        self.assertFalse(keyword_from_record(page("k2", Keyword=title("x"))).used)


class TestHelpers(unittest.TestCase):

    def test_extract_default_when_missing(self):
        self.assertEqual(extract({}, ARTICLE_FIELDS["description"]), "")
        self.assertEqual(extract({}, ARTICLE_FIELDS["products"], default=[]), [])

    def test_parse_date(self):
        self.assertEqual(parse_date("2024-01-31"), date(2024, 1, 31))
        self.assertEqual(parse_date("2024-01-31T23:00:00+00:00"), date(2024, 1, 31))
        self.assertEqual(parse_date("March 4, 2024"), date(2024, 3, 4))
        self.assertIsNone(parse_date("next week"))
        self.assertIsNone(parse_date(""))

    def test_parse_price(self):
        self.assertEqual(parse_price(10), 10.0)
        self.assertEqual(parse_price("$99"), 99.0)
        self.assertIsNone(parse_price("call us"))
        self.assertIsNone(parse_price(True))

    def test_detect_category(self):
        self.assertEqual(detect_category("JL Audio 10\" subwoofer"), "Subwoofers")
        self.assertEqual(detect_category("12in W3v3"), "Subwoofers")
        self.assertEqual(detect_category("Pioneer DMX-W4600NEX"), "Head Units")
        self.assertEqual(detect_category("Kicker PXA300.4 4-channel"), "4-Channel Amps")
        self.assertEqual(detect_category("Something Else"), "Coaxial Speakers")


if __name__ == '__main__':
    unittest.main()
