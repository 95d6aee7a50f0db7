from __future__ import annotations

from rebaser.lexer import LexicalScanner, Scanner, find_imports, find_urls


def _values(text):
    return [s.value for s in find_urls(text)]


def _specifiers(text):
    return [s.specifier for s in find_imports(text)]


def test_unquoted_url_span():
    text = "a { background: url(img/a.png); }"
    (span,) = list(find_urls(text))
    assert span.value == "img/a.png"
    assert text[span.start:span.end] == "img/a.png"


def test_quoted_url_span_excludes_quotes():
    text = "a { background: url( 'img/a b.png' ); }"
    (span,) = list(find_urls(text))
    assert span.value == "img/a b.png"
    assert text[span.start - 1] == "'" and text[span.end] == "'"


def test_url_whitespace_is_trimmed():
    text = "a { b: url(  img/a.png  ) }"
    (span,) = list(find_urls(text))
    assert text[span.start:span.end] == "img/a.png"


def test_empty_url():
    (span,) = list(find_urls("a { b: url() }"))
    assert span.value == ""
    assert span.start == span.end


def test_url_is_case_insensitive_and_needs_word_boundary():
    assert _values("a { b: URL(x.png); c: myurl(y.png); d: data-url(z.png) }") == ["x.png"]


def test_url_escapes_are_kept():
    assert _values(r"a { b: url(a\).png) }") == [r"a\).png"]


def test_multiple_urls_in_order():
    text = "a { b: url(1.png), url('2.png'); } c { d: url(\"3.png\") }"
    spans = list(find_urls(text))
    assert [s.value for s in spans] == ["1.png", "2.png", "3.png"]
    assert [s.start for s in spans] == sorted(s.start for s in spans)


def test_url_with_nested_function_is_ignored():
    assert _values("a { b: url(foo(\"x\")) }") == []


def test_comments_and_strings_are_skipped():
    text = """
    /* url(commented.png) @import "nope"; */
    // url(line.png) @use "nope";
    a { content: "url(string.png)"; b: url(real.png); }
    """
    assert _values(text) == ["real.png"]
    assert _specifiers(text) == []


def test_protocol_inside_unquoted_url_is_not_a_comment():
    assert _values("a { b: url(//cdn.example.com/x.png); c: url(d.png) }") == [
        "//cdn.example.com/x.png",
        "d.png",
    ]


def test_import_span_includes_quotes():
    text = '@import "theme/colors";'
    (span,) = list(find_imports(text))
    assert span.specifier == "theme/colors"
    assert span.rule == "import"
    assert text[span.start:span.end] == '"theme/colors"'


def test_import_list():
    text = "@import 'a', \"b\" ,'c';"
    spans = list(find_imports(text))
    assert [s.specifier for s in spans] == ["a", "b", "c"]
    assert all(text[s.start] in "'\"" and text[s.end - 1] in "'\"" for s in spans)


def test_use_and_forward_take_one_specifier():
    text = '@use "sass:math";\n@forward "src/list" hide list-reset;\n@use "a" as b, "c";'
    spans = list(find_imports(text))
    assert [(s.rule, s.specifier) for s in spans] == [
        ("use", "sass:math"),
        ("forward", "src/list"),
        ("use", "a"),
    ]


def test_import_url_is_reported_as_url_only():
    text = "@import url(theme.css);"
    assert _specifiers(text) == []
    assert _values(text) == ["theme.css"]


def test_unquoted_indented_import_is_not_reported():
    assert _specifiers("@import foo\n") == []


def test_rule_keyword_needs_boundary():
    assert _specifiers('@imports "x"; @user "y"; @use-it "z";') == []


def test_urls_and_imports_from_one_text():
    text = '@use "@angular/material" as mat;\n.a { b: url(x.png) }\n@import "y";'
    assert _specifiers(text) == ["@angular/material", "y"]
    assert _values(text) == ["x.png"]


def test_unterminated_constructs_do_not_fail():
    assert _values("a { b: url(x.png") == []
    assert _specifiers('@import "unterminated') == []
    assert _values("a { b: url('x.png) }") == []


def test_scanner_protocol():
    scanner = LexicalScanner()
    assert isinstance(scanner, Scanner)
    # Restartable: two passes give the same spans
    text = "a { b: url(x.png) }"
    assert list(scanner.find_urls(text)) == list(scanner.find_urls(text))


def test_line_comments_can_be_disabled():
    text = ".a { grid-area: 1 // 2; background: url(x.png) } @import \"b\";"
    assert list(find_urls(text)) == []
    assert [s.value for s in find_urls(text, line_comments=False)] == ["x.png"]
    assert [s.specifier for s in find_imports(text, line_comments=False)] == ["b"]
    # Block comments are still skipped
    assert list(find_urls("/* url(a.png) */", line_comments=False)) == []
    assert [s.value for s in LexicalScanner().find_urls(text, False)] == ["x.png"]
