from pageprobe.selectors.escape import (
    css_attr_equals,
    css_identifier,
    css_string,
    link_text_xpath,
    normalize_space,
    text_contains_xpath,
    xpath_literal,
)


def test_xpath_literal_plain_text_uses_single_quotes():
    assert xpath_literal("Apples") == "'Apples'"


def test_xpath_literal_with_apostrophe_uses_double_quotes():
    assert xpath_literal("Bob's") == '"Bob\'s"'


def test_xpath_literal_with_both_quotes_uses_concat():
    assert xpath_literal('it\'s "x"') == "concat('it', \"'\", 's \"x\"')"


def test_xpath_literal_with_leading_and_trailing_apostrophes():
    assert xpath_literal("'\"'") == "concat(\"'\", '\"', \"'\")"


def test_text_contains_xpath_cannot_break_out_of_the_literal():
    hostile = "x') or ('1'='1"
    xpath = text_contains_xpath(hostile)
    assert xpath == "//*[contains(., \"x') or ('1'='1\")]"


def test_link_text_xpath_exact_and_partial():
    assert link_text_xpath("Home") == "//a[normalize-space(string(.))='Home']"
    assert link_text_xpath("Ho", partial=True) == "//a[contains(normalize-space(string(.)), 'Ho')]"
    assert link_text_xpath("  Home\t page ") == "//a[normalize-space(string(.))='Home page']"


def test_css_string_escapes_quotes_backslashes_and_controls():
    assert css_string('a"b') == '"a\\"b"'
    assert css_string("a\\b") == '"a\\\\b"'
    assert css_string("a\nb") == '"a\\a b"'


def test_css_identifier_escapes_leading_digit_and_punctuation():
    assert css_identifier("btn-primary") == "btn-primary"
    assert css_identifier("1col") == "\\31 col"
    assert css_identifier("-2x") == "-\\32 x"
    assert css_identifier("a.b") == "a\\.b"
    assert css_identifier("-") == "\\-"


def test_css_attr_equals():
    assert css_attr_equals("id", 'weird"id') == '[id="weird\\"id"]'


def test_normalize_space_trims_and_collapses_like_xpath():
    assert normalize_space("  Subscribe \n to\tnews ") == "Subscribe to news"
    assert normalize_space("   ") == ""
