"""
Тесты источника шаблонов: корень, алиасы и защита от выхода за корень.
"""

from pathlib import Path

import pytest

from hte.errors import TemplateNotFoundError, TemplatePathError, TemplateRootError
from hte.sources import FileTemplateSource, is_reference, split_reference


def test_split_reference():
    assert split_reference("@templates/a/b.html") == ("@templates", "a/b.html")
    with pytest.raises(TemplateRootError):
        split_reference("@templates")
    with pytest.raises(TemplateRootError):
        split_reference("@templates/  ")


def test_is_reference():
    assert is_reference("@x/y")
    assert not is_reference("x@y")


class TestFileTemplateSource:

    def test_aliases_are_normalized(self, templates):
        source = FileTemplateSource(aliases={"templates/": templates, "@other": templates})
        assert set(source.aliases) == {"@templates", "@other"}

    def test_load_alias(self, templates):
        source = FileTemplateSource.from_mapping(None, {"@t": str(templates)})
        assert source.load("@t/parts/total.html").startswith("{{ set shown = 1 }}")

    def test_unknown_alias(self, templates):
        source = FileTemplateSource(aliases={"t": templates})
        with pytest.raises(TemplateRootError, match="Unknown template alias '@x'"):
            source.load("@x/header.html")

    def test_load_import_relative_to_root(self, templates):
        source = FileTemplateSource(root=templates)
        assert source.load_import(" header.html ") == "<h1>{{ title }}</h1>"

    def test_load_import_without_root(self):
        with pytest.raises(TemplateRootError, match="Template root is not configured"):
            FileTemplateSource().load_import("header.html")

    def test_missing_root_directory(self, tmp_path: Path):
        source = FileTemplateSource(root=tmp_path / "nope")
        with pytest.raises(TemplateRootError, match="Template root not found"):
            source.load_import("header.html")

    def test_escape_is_rejected(self, templates):
        (templates.parent / "secret.html").write_text("secret", encoding="utf-8")
        source = FileTemplateSource(root=templates)
        with pytest.raises(TemplatePathError):
            source.load_import("../secret.html")

    def test_missing_file(self, templates):
        source = FileTemplateSource(root=templates)
        with pytest.raises(TemplateNotFoundError) as exc:
            source.load_import("parts/none.html")
        assert exc.value.path.endswith("none.html")
