"""Tests for the xyaml YAML loader and dumper."""

import pytest as _pytest
import yaml as _yaml

import xyaml.tree as tree


class TestParse:
    """Tests for parse()."""

    def test_parses_mapping_in_order(self) -> None:
        """Mappings keep document order."""
        data = tree.parse("z: 1\na: 2\nm: 3\n")
        assert list(data) == ["z", "a", "m"]

    def test_empty_input_is_null(self) -> None:
        """Empty input parses as null."""
        assert tree.parse("") is None

    def test_scalars_keep_their_types(self) -> None:
        """Scalars are typed, not strings."""
        assert tree.parse("[1, 1.5, true, null, x]") == [1, 1.5, True, None, "x"]

    def test_aliases_are_detached(self) -> None:
        """Aliased nodes become independent copies."""
        data = tree.parse("base: &b {port: 80}\ncopy: *b\n")
        assert data["base"] == data["copy"]
        assert data["base"] is not data["copy"]

        data["copy"]["port"] = 81
        assert data["base"]["port"] == 80

    def test_recursive_alias_rejected(self) -> None:
        """A node containing itself cannot be detached."""
        with _pytest.raises(tree.RecursiveDocumentError):
            tree.parse("&a [1, *a]")

    def test_nested_alias_expansion_limited(self) -> None:
        """Aliases that multiply on every level are rejected early."""
        lines = ["a0: &a0 [" + ", ".join(["x"] * 10) + "]"]
        for level in range(1, 8):
            refs = ", ".join([f"*a{level - 1}"] * 10)
            lines.append(f"a{level}: &a{level} [{refs}]")

        with _pytest.raises(tree.RepetitionLimitError):
            tree.parse("\n".join(lines) + "\n")

    def test_moderate_alias_reuse_allowed(self) -> None:
        """Reusing an anchor a few dozen times stays within the limit."""
        refs = "\n".join("- *item" for _ in range(40))
        data = tree.parse(f"- &item {{host: db, port: 5432, tags: [a, b, c]}}\n{refs}\n")
        assert len(data) == 41
        assert data[40] == {"host": "db", "port": 5432, "tags": ["a", "b", "c"]}

    def test_malformed_yaml_raises(self) -> None:
        """Syntax errors surface as yaml.YAMLError."""
        with _pytest.raises(_yaml.YAMLError):
            tree.parse("a: [1, 2")

    def test_python_tags_not_constructed(self) -> None:
        """Only safe YAML is accepted."""
        with _pytest.raises(_yaml.YAMLError):
            tree.parse("!!python/object/apply:os.system ['true']")


class TestCoreSchema:
    """Plain scalars resolve by the YAML 1.2 core schema."""

    WORKFLOW = "on: push\ntime: 1:30\nmode: 0755\nflag: yes\nstamp: 2024-01-01\n"

    def test_yaml11_lookalikes_stay_strings(self) -> None:
        """on/yes, sexagesimal, leading-zero and date scalars are strings."""
        assert tree.parse(self.WORKFLOW) == {
            "on": "push",
            "time": "1:30",
            "mode": "0755",
            "flag": "yes",
            "stamp": "2024-01-01",
        }

    def test_untouched_document_round_trips(self) -> None:
        """Dumping a parsed document writes the same scalars back."""
        assert tree.dump(tree.parse(self.WORKFLOW)) == self.WORKFLOW

    @_pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("~", None),
            ("Null", None),
            ("-12", -12),
            ("0o17", 15),
            ("0x1F", 31),
            ("1.5", 1.5),
            ("1e3", 1000.0),
            ("-.inf", float("-inf")),
            ("012", "012"),
            ("yes", "yes"),
            ("off", "off"),
            ("1_000", "1_000"),
        ],
    )
    def test_scalar_resolution(self, text: str, expected) -> None:
        """Only core-schema spellings become typed values."""
        value = tree.parse(text)
        assert value == expected
        assert type(value) is type(expected)

    def test_merge_keys_not_applied(self) -> None:
        """'<<' is an ordinary key."""
        data = tree.parse("base: &b {port: 80}\nsite:\n  <<: *b\n")
        assert data["site"] == {"<<": {"port": 80}}

    @_pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("true", "'true'"),
            ("null", "'null'"),
            ("0x10", "'0x10'"),
            ("yes", "yes"),
            ("on", "on"),
            ("0755", "0755"),
        ],
    )
    def test_strings_quoted_only_when_ambiguous(self, value: str, expected: str) -> None:
        """Strings are quoted exactly when the core schema would retype them."""
        assert tree.dump_inline(value) == expected


class TestDump:
    """Tests for dump() and dump_inline()."""

    def test_block_style_keeps_order(self) -> None:
        """Output is block style and unsorted."""
        text = tree.dump({"z": 1, "a": [1, 2]})
        assert text.index("z:") < text.index("a:")
        assert "[" not in text
        assert tree.parse(text) == {"z": 1, "a": [1, 2]}

    def test_shared_values_written_without_anchors(self) -> None:
        """Identical objects are written twice, not aliased."""
        shared = {"port": 80}
        text = tree.dump({"a": shared, "b": shared})
        assert "&" not in text
        assert "*" not in text

    def test_unicode_written_as_is(self) -> None:
        """Non-ASCII text is not escaped by default."""
        assert "grüße" in tree.dump({"text": "grüße"})

    @_pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("a", "a"),
            (1, "1"),
            (None, "null"),
            (True, "true"),
            ([0], "[0]"),
            ([0, 1], "[0, 1]"),
            ({"k": "v"}, "{k: v}"),
            ("1", "'1'"),
        ],
    )
    def test_dump_inline(self, value, expected: str) -> None:
        """Single values dump on one line without document markers."""
        assert tree.dump_inline(value) == expected
