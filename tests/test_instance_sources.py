"""Tests for the list and directory instance sources."""

import logging
from pathlib import Path

import pytest

from common.errors import InstallationNotFoundError, MissingDirectoryError, MissingFieldError
from locators.sources import ListInstanceSource, list_versioned_subdirs, versioned_candidates
from versioning.models import Version

COMMUNITY = "C:\\Program Files\\Microsoft Visual Studio\\2022\\Community"
ENTERPRISE = "C:\\Program Files\\Microsoft Visual Studio\\2022\\Enterprise"
VS14 = "C:\\Program Files (x86)\\Microsoft Visual Studio 14.0\\"

INSTANCES = [
    {"installationPath": VS14, "installationVersion": "14.0"},
    {"installationPath": COMMUNITY, "installationVersion": "17.12.35506.116"},
    {"installationPath": ENTERPRISE, "installationVersion": "17.08.35506.116"},
]


def v(text):
    return Version.parse(text)


class TestExtract:
    """Single record extraction."""

    def test_extracts_version_and_path(self):
        record = {
            "instanceId": "019109ba",
            "installDate": "2023-08-26T14:05:02Z",
            "installationName": "VisualStudio/17.12.0+35506.116",
            "installationPath": VS14,
            "installationVersion": "2.3.1.34",
            "productId": "Microsoft.VisualStudio.Product.Community",
        }
        candidate = ListInstanceSource().extract(record)
        assert candidate.version == v("2.3.1.34")
        assert candidate.path == Path(VS14)

    @pytest.mark.parametrize("record, field", [
        ({"installationVersion": "17.0"}, "installationPath"),
        ({"installationPath": COMMUNITY}, "installationVersion"),
        ({"installationPath": COMMUNITY, "installationVersion": 17}, "installationVersion"),
        ({"installationPath": "", "installationVersion": "17.0"}, "installationPath"),
        ({"installationPath": None, "installationVersion": "17.0"}, "installationPath"),
    ])
    def test_missing_fields(self, record, field):
        with pytest.raises(MissingFieldError) as excinfo:
            ListInstanceSource().extract(record)
        assert excinfo.value.field == field

    def test_unparsable_version_is_missing_field(self):
        with pytest.raises(MissingFieldError) as excinfo:
            ListInstanceSource().extract({"installationPath": COMMUNITY, "installationVersion": "unknown"})
        assert excinfo.value.field == "installationVersion"
        assert excinfo.value.__cause__ is not None

    def test_non_mapping_record(self):
        with pytest.raises(MissingFieldError):
            ListInstanceSource().extract(["17.0", COMMUNITY])

    def test_custom_field_names(self):
        source = ListInstanceSource(version_field="version", path_field="root")
        candidate = source.extract({"version": "1.2", "root": "/opt/tools"})
        assert candidate == source.extract({"version": "1.2.0", "root": "/opt/tools"})


class TestValidateAll:
    """Batch extraction with range filtering."""

    def test_single_match(self):
        report = ListInstanceSource().validate_all(INSTANCES, v("18.0"), v("17.9"))
        assert len(report.candidates) == 1
        assert report.candidates[0].version == v("17.12.35506.116")
        assert report.candidates[0].path == Path(COMMUNITY)
        assert len(report.out_of_range) == 2
        assert report.failures == []

    def test_unbounded_keeps_everything(self):
        report = ListInstanceSource().validate_all(INSTANCES)
        assert len(report.candidates) == 3
        assert report.total == 3

    def test_malformed_record_does_not_abort(self, caplog):
        records = INSTANCES + [{"installationVersion": "17.10.0.0"}, "garbage"]
        with caplog.at_level(logging.WARNING, logger="locators.sources"):
            report = ListInstanceSource().validate_all(records, v("18.0"), v("17.7"))
        assert [c.path for c in report.candidates] == [Path(COMMUNITY), Path(ENTERPRISE)]
        assert len(report.failures) == 2
        assert report.failures[0].record == {"installationVersion": "17.10.0.0"}
        assert isinstance(report.failures[0].error, MissingFieldError)
        assert "Encountered an error during parsing of instance data" in caplog.text

    def test_empty_input(self):
        report = ListInstanceSource().validate_all([])
        assert report.candidates == []
        assert report.total == 0


def _make_versioned_dirs(root, names, required=()):
    include = root / "Include"
    include.mkdir()
    for name in names:
        versioned = include / name
        versioned.mkdir()
        for sub in required:
            (versioned / sub).mkdir()
    return include


class TestVersionedSubdirs:
    """Directory based enumeration."""

    def test_range_filter(self, tmp_path):
        include = _make_versioned_dirs(tmp_path, ["10.0.20348.0", "10.0.22000.0", "10.0.22621.0"])
        found = list_versioned_subdirs(tmp_path, "Include", v("10.0.21000.0"), v("10.0.20000.0"))
        assert set(found) == {include / "10.0.20348.0"}

    def test_noise_is_skipped(self, tmp_path):
        include = _make_versioned_dirs(tmp_path, ["10.0.22621.0", "wdf", "not-a-version"])
        (include / "10.0.99999.0").write_text("a file, not a directory", encoding="utf-8")
        found = list_versioned_subdirs(tmp_path, "Include")
        assert found == [include / "10.0.22621.0"]

    def test_sorted_by_name(self, tmp_path):
        include = _make_versioned_dirs(tmp_path, ["10.0.22621.0", "10.0.19041.0", "10.0.20348.0"])
        found = list_versioned_subdirs(tmp_path, "Include")
        assert found == [include / "10.0.19041.0", include / "10.0.20348.0", include / "10.0.22621.0"]

    def test_structural_check(self, tmp_path):
        include = _make_versioned_dirs(tmp_path, ["10.0.20348.0"], required=["um"])
        (include / "10.0.22621.0").mkdir()
        candidates = versioned_candidates(
            tmp_path, "Include", is_valid=lambda p: (p / "um").is_dir()
        )
        assert [c.version for c in candidates] == [v("10.0.20348.0")]

    def test_missing_child_directory(self, tmp_path):
        with pytest.raises(MissingDirectoryError):
            list_versioned_subdirs(tmp_path, "Include")

    def test_missing_child_is_not_found(self, tmp_path):
        with pytest.raises(InstallationNotFoundError):
            list_versioned_subdirs(tmp_path / "does-not-exist", "Include")

    def test_nothing_in_range(self, tmp_path):
        _make_versioned_dirs(tmp_path, ["10.0.20348.0"])
        with pytest.raises(InstallationNotFoundError) as excinfo:
            list_versioned_subdirs(tmp_path, "Include", min_version=v("10.0.22000.0"))
        assert not isinstance(excinfo.value, MissingDirectoryError)
