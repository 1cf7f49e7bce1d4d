"""
Тесты сканера плейсхолдеров.
"""

from hte.scanner import DirectiveKind, PlaceholderScanner, classify, iter_tags, normalize_whitespace


class TestPlaceholderScanner:

    def setup_method(self):
        self.scanner = PlaceholderScanner()

    def test_no_placeholders(self):
        assert self.scanner.scan("plain text { not } a tag") == []

    def test_simple_pipeline(self):
        text = "Hi {{ name | upper }}!"
        (p,) = self.scanner.scan(text)
        assert p.kind is DirectiveKind.PIPELINE
        assert p.directive == "name | upper"
        assert p.text == "{{ name | upper }}"
        assert text[p.start:p.end] == p.text

    def test_spans_are_ordered_and_disjoint(self):
        text = "{{a}} and {{ b }} and {{c}}"
        found = self.scanner.scan(text)
        assert [p.directive for p in found] == ["a", "b", "c"]
        assert all(left.end <= right.start for left, right in zip(found, found[1:]))

    def test_classification(self):
        assert classify("if x") is DirectiveKind.CONDITIONAL
        assert classify("IF x") is DirectiveKind.CONDITIONAL
        assert classify("for a in b") is DirectiveKind.LOOP
        assert classify("set a = 1") is DirectiveKind.ASSIGNMENT
        assert classify("import header.html") is DirectiveKind.IMPORT
        assert classify("iffy") is DirectiveKind.PIPELINE
        assert classify("settings.value") is DirectiveKind.PIPELINE
        assert classify("format") is DirectiveKind.PIPELINE

    def test_block_span_covers_closer(self):
        text = "A{{ if x }}yes{{ else }}no{{ endif }}B"
        (p,) = self.scanner.scan(text)
        assert p.kind is DirectiveKind.CONDITIONAL
        assert p.text == "{{ if x }}yes{{ else }}no{{ endif }}"
        assert p.directive == p.text
        assert p.closed

    def test_nested_blocks_of_same_kind(self):
        text = "{{ if a }}{{ if b }}AB{{ endif }}A{{ endif }}tail{{ x }}"
        found = self.scanner.scan(text)
        assert len(found) == 2
        assert found[0].text.endswith("A{{ endif }}")
        assert found[1].directive == "x"

    def test_nested_loops(self):
        text = "{{ for r in rows }}{{ for c in r }}{{ c }}{{ endfor }}{{ endfor }}"
        (p,) = self.scanner.scan(text)
        assert p.kind is DirectiveKind.LOOP
        assert p.end == len(text)

    def test_unclosed_block(self):
        text = "{{ if a }}never closed {{ name }}"
        found = self.scanner.scan(text)
        assert found[0].closed is False
        assert found[0].text == "{{ if a }}"
        assert found[1].directive == "name"

    def test_unterminated_delimiter_ignored(self):
        assert self.scanner.scan("{{ name") == []

    def test_nbsp_entity_normalized(self):
        (p,) = self.scanner.scan("{{&nbsp;if&nbsp;x&nbsp;}}A{{ endif }}")
        assert p.kind is DirectiveKind.CONDITIONAL
        assert normalize_whitespace("a&nbsp;b") == "a b"

    def test_rescan_is_idempotent(self):
        text = "{{ a }}{{ set b = 1 }}"
        assert self.scanner.scan(text) == self.scanner.scan(text)


def test_iter_tags_keywords():
    tags = list(iter_tags("{{ ELSEIF x }}{{endfor}}"))
    assert [t.keyword for t in tags] == ["elseif", "endfor"]


def test_branch_keyword_before_parenthesis():
    tags = list(iter_tags("{{elseif(x == 2)}}{{ else.note }}{{ elsewhere }}{{endif}}"))
    assert [t.keyword for t in tags] == ["elseif", "else.note", "elsewhere", "endif"]
