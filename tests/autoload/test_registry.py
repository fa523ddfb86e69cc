"""Tests for the explicit and namespace registration tables."""

import os
from pathlib import Path

import pytest

from nsloader.autoload.registry import ExplicitRegistry
from nsloader.autoload.registry import NamespaceRegistry
from nsloader.autoload.registry import canonical_directory
from nsloader.autoload.registry import normalize_prefix
from nsloader.autoload.registry import split_name
from nsloader.diagnostics import DirectoryNotFoundError


class TestExplicitRegistry:
    """Tests for ExplicitRegistry."""

    def test_lookup_is_case_insensitive(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Foo", "/srv/override/Foo.py")

        assert registry.lookup("Acme.Foo") == Path("/srv/override/Foo.py")
        assert registry.lookup("acme.foo") == Path("/srv/override/Foo.py")
        assert registry.lookup("ACME.FOO") == Path("/srv/override/Foo.py")
        assert "aCmE.fOo" in registry

    def test_relative_path_joined_to_modules_root(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Foo", "legacy/foo.py")

        assert str(registry.lookup("Acme.Foo")) == f"{tmp_path}/legacy/foo.py"

    def test_relative_path_is_normalized_by_pathlib(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Foo", "./legacy//foo.py")

        assert registry.lookup("Acme.Foo") == Path(f"{tmp_path}/./legacy//foo.py")
        assert str(registry.lookup("Acme.Foo")) == f"{tmp_path}/legacy/foo.py"

    def test_registered_name_keeps_spelling(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Foo", "foo.py")

        assert registry.registered_name("ACME.foo") == "Acme.Foo"
        assert registry.registered_name("Acme.Bar") is None

    def test_absolute_path_kept(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Foo", "/opt/foo.py")

        assert registry.lookup("Acme.Foo") == Path("/opt/foo.py")

    def test_relative_path_without_root_kept_as_given(self):
        registry = ExplicitRegistry(lambda: None)
        registry.register("Acme.Foo", "legacy/foo.py")

        assert registry.lookup("Acme.Foo") == Path("legacy/foo.py")

    def test_missing_file_is_accepted(self, tmp_path):
        """Existence is only checked when the file is loaded."""
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Ghost", "does/not/exist.py")

        assert registry.lookup("Acme.Ghost") is not None

    def test_overwrite(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Foo", "/a.py")
        registry.register("ACME.FOO", "/b.py")

        assert len(registry) == 1
        assert registry.lookup("acme.foo") == Path("/b.py")

    def test_unknown_name(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        assert registry.lookup("Nope") is None
        assert 42 not in registry

    def test_is_namespace(self, tmp_path):
        registry = ExplicitRegistry(lambda: tmp_path)
        registry.register("Acme.Tools.Hammer", "/hammer.py")

        assert registry.is_namespace("Acme")
        assert registry.is_namespace("acme.tools")
        assert not registry.is_namespace("Acme.Tools.Hammer")
        assert not registry.is_namespace("Acm")


class TestNormalizePrefix:
    def test_appends_single_separator(self):
        assert normalize_prefix("Acme") == "Acme."
        assert normalize_prefix("Acme.Tools") == "Acme.Tools."

    def test_trims_surrounding_separators(self):
        assert normalize_prefix(".Acme.Tools.") == "Acme.Tools."
        assert normalize_prefix("..Acme..") == "Acme."

    def test_catch_all(self):
        assert normalize_prefix("") == ""
        assert normalize_prefix(".") == ""


class TestSplitName:
    def test_underscores_only_in_tail(self):
        assert split_name("Acme.My_Widget") == ("Acme.", "My/Widget")
        assert split_name("Acme_Corp.Sub.Foo_Bar") == ("Acme_Corp.Sub.", "Foo/Bar")

    def test_name_without_namespace(self):
        assert split_name("Plain_Name") == ("", "Plain/Name")
        assert split_name("Plain") == ("", "Plain")


class TestCanonicalDirectory:
    def test_resolves_real_path(self, tmp_path):
        (tmp_path / "a").mkdir()
        assert canonical_directory(tmp_path / "a" / ".." / "a") == (tmp_path / "a").resolve()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryNotFoundError):
            canonical_directory(tmp_path / "missing")

    def test_file_is_not_a_directory(self, tmp_path):
        (tmp_path / "file.txt").write_text("x")
        with pytest.raises(DirectoryNotFoundError):
            canonical_directory(tmp_path / "file.txt")


class TestNamespaceRegistration:
    """Tests for NamespaceRegistry.register."""

    def test_directory_ends_with_one_separator(self, modules_dir):
        registry = NamespaceRegistry()
        registry.register("Acme", modules_dir)
        registry.register("Other", str(modules_dir) + os.sep + os.sep)

        for _prefix, directory in registry.items():
            assert directory.endswith(os.sep)
            assert not directory.endswith(os.sep + os.sep)

    def test_prefix_normalized(self, modules_dir):
        registry = NamespaceRegistry()
        registry.register(".Acme.Tools", modules_dir)

        assert [prefix for prefix, _ in registry.items()] == ["Acme.Tools."]

    def test_missing_directory_leaves_table_unchanged(self, modules_dir, tmp_path):
        registry = NamespaceRegistry()
        registry.register("Acme", modules_dir)
        before = registry.items()

        with pytest.raises(DirectoryNotFoundError):
            registry.register("Acme", tmp_path / "missing")
        with pytest.raises(DirectoryNotFoundError):
            registry.register("New", tmp_path / "missing")

        assert registry.items() == before

    def test_last_registration_wins(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        registry = NamespaceRegistry()
        registry.register("Acme.", first)
        registry.register("Acme", second)

        assert len(registry) == 1
        assert registry.items() == [("Acme.", str(second.resolve()) + os.sep)]

    def test_requires_extensions(self):
        with pytest.raises(ValueError):
            NamespaceRegistry(extensions=())


class TestNamespaceResolution:
    """Tests for candidate building and probing."""

    def test_namespace_path_from_prefix_remainder(self, modules_dir, write_unit):
        target = write_unit(modules_dir, "Widgets/Gadget.py")
        registry = NamespaceRegistry()
        registry.register("Acme.", modules_dir)

        assert registry.resolve_candidates("Acme.Widgets.Gadget") == target

    def test_underscore_in_tail_becomes_directory(self, modules_dir, write_unit):
        target = write_unit(modules_dir, "My/Widget.py")
        registry = NamespaceRegistry()
        registry.register("Acme.", modules_dir)

        assert registry.resolve_candidates("Acme.My_Widget") == target

    def test_underscore_in_namespace_kept(self, modules_dir, write_unit):
        target = write_unit(modules_dir, "Acme_Corp/Foo.py")
        registry = NamespaceRegistry()
        registry.register("", modules_dir)

        assert registry.resolve_candidates("Acme_Corp.Foo") == target

    def test_prefix_match_is_case_insensitive(self, modules_dir, write_unit):
        target = write_unit(modules_dir, "widgets/Gadget.py")
        registry = NamespaceRegistry()
        registry.register("Acme.", modules_dir)

        assert registry.resolve_candidates("acme.widgets.Gadget") == target

    def test_non_matching_prefix_not_probed(self, modules_dir, write_unit):
        write_unit(modules_dir, "Gadget.py")
        registry = NamespaceRegistry()
        registry.register("Acme.", modules_dir)

        assert registry.resolve_candidates("Other.Gadget") is None
        assert list(registry.candidates("Other.Gadget")) == []

    def test_primary_extension_first(self, modules_dir, write_unit):
        write_unit(modules_dir, "Acme/Foo.pyc")
        write_unit(modules_dir, "Acme/Foo.pyw")
        primary = write_unit(modules_dir, "Acme/Foo.py")
        registry = NamespaceRegistry()
        registry.register("", modules_dir)

        assert registry.resolve_candidates("Acme.Foo") == primary

    def test_fallback_extensions_in_order(self, modules_dir, write_unit):
        write_unit(modules_dir, "Acme/Foo.pyc")
        fallback = write_unit(modules_dir, "Acme/Foo.pyw")
        registry = NamespaceRegistry()
        registry.register("", modules_dir)

        assert registry.resolve_candidates("Acme.Foo") == fallback

    def test_custom_extensions(self, modules_dir, write_unit):
        target = write_unit(modules_dir, "Acme/Foo.inc")
        registry = NamespaceRegistry(extensions=(".src", ".inc"))
        registry.register("", modules_dir)

        assert registry.resolve_candidates("Acme.Foo") == target

    def test_directory_named_like_file_is_ignored(self, modules_dir):
        (modules_dir / "Acme" / "Foo.py").mkdir(parents=True)
        registry = NamespaceRegistry()
        registry.register("", modules_dir)

        assert registry.resolve_candidates("Acme.Foo") is None

    def test_specific_mapping_used_when_catch_all_misses(self, tmp_path, write_unit):
        root = tmp_path / "root"
        acme = tmp_path / "acme"
        root.mkdir()
        acme.mkdir()
        target = write_unit(acme, "Widgets/Gadget.py")
        registry = NamespaceRegistry()
        registry.register("", root)
        registry.register("Acme.", acme)

        assert registry.resolve_candidates("Acme.Widgets.Gadget") == target

    def test_registration_order_decides_between_matches(self, tmp_path, write_unit):
        root = tmp_path / "root"
        acme = tmp_path / "acme"
        root.mkdir()
        acme.mkdir()
        in_root = write_unit(root, "Acme/Widgets/Gadget.py")
        write_unit(acme, "Widgets/Gadget.py")
        registry = NamespaceRegistry()
        registry.register("", root)
        registry.register("Acme.", acme)

        assert registry.resolve_candidates("Acme.Widgets.Gadget") == in_root

    def test_prefer_longest_prefix(self, tmp_path, write_unit):
        root = tmp_path / "root"
        acme = tmp_path / "acme"
        root.mkdir()
        acme.mkdir()
        write_unit(root, "Acme/Widgets/Gadget.py")
        specific = write_unit(acme, "Widgets/Gadget.py")
        registry = NamespaceRegistry(prefer_longest_prefix=True)
        registry.register("", root)
        registry.register("Acme.", acme)

        assert registry.resolve_candidates("Acme.Widgets.Gadget") == specific

    def test_candidates_probe_order(self, tmp_path):
        root = tmp_path / "root"
        acme = tmp_path / "acme"
        root.mkdir()
        acme.mkdir()
        registry = NamespaceRegistry(extensions=(".py", ".pyw"))
        registry.register("", root)
        registry.register("Acme.", acme)

        candidates = list(registry.candidates("Acme.My_Widget"))

        assert candidates == [
            root.resolve() / "Acme" / "My" / "Widget.py",
            root.resolve() / "Acme" / "My" / "Widget.pyw",
            acme.resolve() / "My" / "Widget.py",
            acme.resolve() / "My" / "Widget.pyw",
        ]

    def test_empty_registry(self):
        assert NamespaceRegistry().resolve_candidates("Acme.Foo") is None

    def test_resolve_directory(self, modules_dir):
        (modules_dir / "Acme" / "Widgets").mkdir(parents=True)
        registry = NamespaceRegistry()
        registry.register("", modules_dir)

        assert registry.resolve_directory("Acme") == modules_dir.resolve() / "Acme"
        assert registry.resolve_directory("Acme.Widgets") == modules_dir.resolve() / "Acme" / "Widgets"
        assert registry.resolve_directory("Acme.Gizmos") is None

    def test_is_namespace_above_prefix(self, tmp_path):
        registry = NamespaceRegistry()
        registry.register("Vendor.Acme.", tmp_path)
        registry.register("", tmp_path)

        assert registry.is_namespace("Vendor")
        assert registry.is_namespace("vendor.acme")
        assert not registry.is_namespace("Vendor.Acme.Tools")
        assert not registry.is_namespace("Other")
