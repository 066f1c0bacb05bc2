# tests/domain/manifest/test_manifest_package.py

"""
run this test with:
python -m pytest tests/domain/manifest/test_manifest_package.py -v
"""

import pytest
from pydantic import ValidationError

from domain.manifest import MANIFEST_FORMAT_VERSION, BugsReference, Dependency, Manifest, PackageBase


def _manifest_with_deps(*deps):
    return Manifest(name="root", dependencies=[Dependency(**d) for d in deps])


class TestFindDep:
    """Lookup of a dependency slot by hash or name."""

    def test_finds_by_hash_and_by_name(self):
        m = _manifest_with_deps({"name": "a", "hash": "H1"}, {"name": "b", "hash": "H2"})

        assert m.find_dep("H2") is m.dependencies[1]
        assert m.find_dep("b") is m.dependencies[1]
        assert m.find_dep("H1") is m.dependencies[0]

    def test_absent_returns_none(self):
        m = _manifest_with_deps({"name": "a", "hash": "H1"}, {"name": "b", "hash": "H2"})
        assert m.find_dep("zzz") is None

    def test_empty_manifest_has_no_deps(self):
        assert Manifest().find_dep("anything") is None

    def test_first_match_in_declared_order_wins(self):
        """A name colliding with an earlier hash resolves to the earlier entry."""
        m = _manifest_with_deps({"name": "x", "hash": "H1"}, {"name": "H1", "hash": "H9"})
        assert m.find_dep("H1") is m.dependencies[0]

    def test_same_name_different_hashes_are_distinct(self):
        m = _manifest_with_deps({"name": "dup", "hash": "A"}, {"name": "dup", "hash": "B"})

        assert m.find_dep("B") is m.dependencies[1]
        assert m.find_dep("dup") is m.dependencies[0]

    def test_dependency_hashes_keep_order(self):
        m = _manifest_with_deps({"name": "a", "hash": "H1"}, {"name": "b", "hash": "H2"}, {"name": "a2", "hash": "H1"})
        assert m.dependency_hashes() == ["H1", "H2", "H1"]


class TestDecoding:

    def test_aliases_map_to_attributes(self):
        m = Manifest.model_validate({
            "name": "pkg",
            "gxDependencies": [{"name": "dep", "hash": "QmDep", "version": "1.0.0"}],
            "releaseCmd": "git push",
            "tagCmd": "git tag",
            "subtoolRequired": True,
            "gxVersion": "0.12.1",
        })

        assert m.dependencies[0].hash == "QmDep"
        assert m.release_cmd == "git push"
        assert m.tag_cmd == "git tag"
        assert m.subtool_required is True
        assert m.gx_version == "0.12.1"

    def test_dependency_without_hash_is_rejected(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"gxDependencies": [{"name": "nohash"}]})

    def test_wrong_type_is_rejected(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"name": 42})

    @pytest.mark.parametrize("value", ["yes", "true", 1, 0])
    def test_subtool_required_must_be_a_json_bool(self, value):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"subtoolRequired": value})

    def test_unknown_keys_are_ignored(self):
        m = Manifest.model_validate({"name": "pkg", "extra": {"x": 1}})
        assert "extra" not in m.to_document()

    def test_null_bugs_becomes_empty_object(self):
        m = Manifest.model_validate({"bugs": None})
        assert m.bugs == BugsReference()

    def test_keywords_keep_order_and_duplicates(self):
        m = Manifest.model_validate({"keywords": ["b", "a", "b"]})
        assert m.keywords == ["b", "a", "b"]

    def test_gx_payload_is_kept_as_is(self):
        payload = {"dvcsimport": "github.com/x/y", "nested": {"list": [1, 2.5, None, True]}}
        m = Manifest.model_validate({"gx": payload})
        assert m.gx == payload


class TestToDocument:
    """Zero-value omission rules of the encoded document."""

    def test_minimal_manifest(self):
        doc = Manifest(name="pkg").to_document()
        assert doc == {"name": "pkg", "license": "", "bugs": {}, "gxVersion": ""}

    def test_required_keys_always_present(self):
        doc = Manifest().to_document()
        assert set(doc) == {"license", "bugs", "gxVersion"}

    def test_gx_omitted_only_when_absent(self):
        assert "gx" not in Manifest().to_document()
        assert Manifest(gx={}).to_document()["gx"] == {}
        assert Manifest(gx={"a": [1]}).to_document()["gx"] == {"a": [1]}

    def test_false_flag_is_omitted(self):
        assert "subtoolRequired" not in Manifest(subtool_required=False).to_document()
        assert Manifest(subtool_required=True).to_document()["subtoolRequired"] is True

    def test_dependency_omits_empty_fields_but_keeps_hash(self):
        doc = Manifest(dependencies=[Dependency(hash="QmA"), Dependency(hash="QmB", name="b", version="1.2.3")]).to_document()
        assert doc["gxDependencies"] == [
            {"hash": "QmA"},
            {"name": "b", "hash": "QmB", "version": "1.2.3"},
        ]

    def test_empty_hash_is_still_written(self):
        assert Dependency(hash="").model_dump() == {"hash": ""}

    def test_bugs_url_written_when_set(self):
        assert Manifest(bugs=BugsReference(url="http://example.com")).to_document()["bugs"] == {"url": "http://example.com"}

    def test_package_base_has_no_gx(self):
        doc = PackageBase(name="pkg").to_document()
        assert "gx" not in doc
        assert doc["name"] == "pkg"


class TestCreate:

    def test_create_stamps_format_version(self):
        m = Manifest.create("  mypkg ", language="go", version="0.1.0", license="MIT")

        assert m.name == "mypkg"
        assert m.language == "go"
        assert m.gx_version == MANIFEST_FORMAT_VERSION
        assert m.dependencies == []

    def test_create_with_explicit_format_version(self):
        assert Manifest.create("p", gx_version="0.13.0").gx_version == "0.13.0"

    @pytest.mark.parametrize("bad_name", ["", "   "])
    def test_create_rejects_empty_name(self, bad_name):
        with pytest.raises(ValueError):
            Manifest.create(bad_name)

    def test_mutating_dependencies_in_memory(self):
        m = Manifest.create("p")
        m.dependencies.append(Dependency(name="d", hash="QmD"))
        m.version = "1.0.1"

        assert m.find_dep("QmD").name == "d"
        assert m.to_document()["version"] == "1.0.1"
