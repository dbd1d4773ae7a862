from pro2html.directives import Directive, match_directive, parse_attributes, parse_int

# ---------------------------------------------------------------------------
# match_directive
# ---------------------------------------------------------------------------


def test_match_name_and_value():
    d = match_directive("{title: Amazing Grace}")
    assert d.name == "title"
    assert d.value == "Amazing Grace"


def test_match_bare_name():
    d = match_directive("{soc}")
    assert d.name == "soc"
    assert d.value == ""


def test_match_empty_value():
    d = match_directive("{diagrams:}")
    assert d.name == "diagrams"
    assert d.value == ""


def test_name_lowercased_and_trimmed():
    d = match_directive("{ Title :  Hello  }")
    assert d.name == "title"
    assert d.value == "Hello"


def test_surrounding_whitespace_ignored():
    assert match_directive("   {title: X}   ").name == "title"


def test_value_may_contain_colons():
    assert match_directive("{time: 12:30}").value == "12:30"


def test_non_directive_lines():
    assert match_directive("plain lyric") is None
    assert match_directive("[G]Amazing grace") is None
    assert match_directive("{title: unclosed") is None
    assert match_directive("before {title: X}") is None
    assert match_directive("{title: X} after") is None


def test_nested_brace_is_not_a_directive():
    assert match_directive("{title: a}b}") is None


# ---------------------------------------------------------------------------
# Conditional directives
# ---------------------------------------------------------------------------


def test_base_of_plain_directive_is_its_name():
    d = match_directive("{start_of_chorus}")
    assert d.base == "start_of_chorus"
    assert d.condition is None


def test_conditional_splits_on_first_hyphen():
    d = match_directive("{textfont-print-a4: Times}")
    assert d.base == "textfont"
    assert d.condition == "print-a4"
    assert d.value == "Times"


# ---------------------------------------------------------------------------
# parse_attributes
# ---------------------------------------------------------------------------


def test_attributes_double_quotes():
    assert parse_attributes('label="Chorus 1"') == {"label": "Chorus 1"}


def test_attributes_single_quotes():
    assert parse_attributes("src='a.png' scale='50%'") == {"src": "a.png", "scale": "50%"}


def test_attributes_without_equals():
    assert parse_attributes("Chorus 1") == {}


def test_attributes_unquoted_values_ignored():
    assert parse_attributes("label=Chorus") == {}


def test_match_directive_extracts_attributes():
    d = match_directive('{meta: name="value" author="someone"}')
    assert d.attributes == {"name": "value", "author": "someone"}
    # the raw value is still available as a positional fallback
    assert d.value == 'name="value" author="someone"'


def test_directive_default_attributes_empty():
    assert Directive(name="x").attributes == {}


# ---------------------------------------------------------------------------
# parse_int
# ---------------------------------------------------------------------------


def test_parse_int_leading_digits():
    assert parse_int("3 semitones") == 3
    assert parse_int(" -2") == -2
    assert parse_int("+1") == 1


def test_parse_int_without_digits():
    assert parse_int("up") is None
    assert parse_int("") is None
