"""
Tests for persistence — the generation metadata record.
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from axum_app_create import __version__
from axum_app_create.core.errors import (
    ConfigError,
    MetadataCorruptError,
    MetadataNotFoundError,
)
from axum_app_create.core.models.metadata import GenerationMetadata
from axum_app_create.core.models.project import FeatureSet
from axum_app_create.core.persistence.metadata_file import (
    METADATA_FILE,
    MetadataManager,
    deserialize,
    serialize,
)


class TestSerialization:
    def test_round_trip_is_stable(self, make_config):
        metadata = GenerationMetadata(
            config=make_config(features=FeatureSet(database="both", authentication=True)),
            file_checksums={"src/main.rs": "ab" * 32, "Cargo.toml": "cd" * 32},
        )
        text = serialize(metadata)
        assert serialize(deserialize(text)) == text
        assert deserialize(text) == metadata

    def test_checksums_sorted(self, make_config):
        metadata = GenerationMetadata(config=make_config(), file_checksums={"b": "1", "a": "2"})
        data = json.loads(serialize(metadata))
        assert list(data["file_checksums"]) == ["a", "b"]

    def test_four_fields(self, make_config):
        data = json.loads(serialize(GenerationMetadata(config=make_config())))
        assert set(data) == {"version", "generated_at", "config", "file_checksums"}
        assert data["version"] == __version__
        assert data["config"]["project_name"] == "demo"

    def test_invalid_json(self):
        with pytest.raises(MetadataCorruptError):
            deserialize("not json {{{")

    def test_invalid_record(self):
        with pytest.raises(MetadataCorruptError) as exc_info:
            deserialize(json.dumps({"version": "1.0.0", "file_checksums": {}}))
        assert "config" in str(exc_info.value)

    def test_timestamp_is_iso8601(self, make_config):
        data = json.loads(serialize(GenerationMetadata(config=make_config())))
        assert datetime.fromisoformat(data["generated_at"]).tzinfo is not None

    def test_invalid_timestamp(self, make_config):
        data = json.loads(serialize(GenerationMetadata(config=make_config())))
        data["generated_at"] = "banana"
        with pytest.raises(MetadataCorruptError) as exc_info:
            deserialize(json.dumps(data))
        assert "generated_at" in str(exc_info.value)


class TestMetadataManager:
    def test_create_and_read(self, tmp_path: Path, make_config):
        MetadataManager.create(tmp_path, make_config(), {"README.md": "00" * 32})
        assert (tmp_path / METADATA_FILE).is_file()

        loaded = MetadataManager.read(tmp_path)
        assert loaded.config.project_name == "demo"
        assert loaded.file_checksums == {"README.md": "00" * 32}

    def test_create_refuses_existing(self, tmp_path: Path, make_config):
        MetadataManager.create(tmp_path, make_config(), {})
        with pytest.raises(ConfigError):
            MetadataManager.create(tmp_path, make_config(), {})

    def test_read_missing(self, tmp_path: Path):
        with pytest.raises(MetadataNotFoundError) as exc_info:
            MetadataManager.read(tmp_path)
        assert isinstance(exc_info.value, ConfigError)
        assert METADATA_FILE in str(exc_info.value)

    def test_read_corrupt(self, tmp_path: Path):
        (tmp_path / METADATA_FILE).write_text('{"version": ')
        with pytest.raises(MetadataCorruptError) as exc_info:
            MetadataManager.read(tmp_path)
        assert exc_info.value.path == tmp_path / METADATA_FILE

    def test_update_keeps_config(self, tmp_path: Path, make_config):
        created = MetadataManager.create(tmp_path, make_config(year=2020), {"a": "1"})
        updated = MetadataManager.update(tmp_path, {"a": "2", "b": "3"})
        assert updated.config == created.config
        assert MetadataManager.read(tmp_path).file_checksums == {"a": "2", "b": "3"}

    def test_update_replaces_config_when_given(self, tmp_path: Path, make_config):
        MetadataManager.create(tmp_path, make_config(), {})
        MetadataManager.update(tmp_path, {}, config=make_config(ci=True))
        assert MetadataManager.read(tmp_path).config.ci is True

    def test_atomic_write_leaves_no_temp_files(self, tmp_path: Path, make_config):
        MetadataManager.create(tmp_path, make_config(), {})
        MetadataManager.update(tmp_path, {"x": "y"})
        assert list(tmp_path.glob(".aac_meta_*.tmp")) == []
