"""
Tests for the persistence module.

Tests save/load round-trip, gzip output, schema compatibility and the
per-round draw log.
"""

import gzip
import json

import pytest

import dungeonquest
from dungeonquest.config import AnalyzerConfig
from dungeonquest.errors import SchemaVersionError
from dungeonquest.persistence import (
    ANALYSIS_SCHEMA_VERSION,
    AnalysisDocument,
    AnalysisMetadata,
    DrawLogObserver,
    clear_log_dir,
    load_analysis,
    save_analysis,
)
from dungeonquest.tree import CompositeObserver, LoggingObserver, annotate_tree, build_game_tree


@pytest.fixture
def annotated_tree(small_config):
    root = build_game_tree(small_config)
    annotate_tree(root)
    return root


class TestAnalysisMetadata:
    """Test AnalysisMetadata dataclass."""

    def test_default_timestamp(self):
        """Metadata should auto-populate timestamp."""
        meta = AnalysisMetadata()
        assert meta.timestamp != ""
        assert "T" in meta.timestamp  # ISO format
        assert meta.schema_version == ANALYSIS_SCHEMA_VERSION

    def test_custom_values(self):
        meta = AnalysisMetadata(version="2.0.0", timestamp="2026-01-26T12:00:00Z", description="x")
        assert meta.version == "2.0.0"
        assert meta.timestamp == "2026-01-26T12:00:00Z"
        assert meta.description == "x"

    def test_version_matches_package(self):
        """Saved files are stamped with the installed package version."""
        assert AnalysisMetadata().version == dungeonquest.__version__

    def test_missing_version_defaults_to_package(self):
        document = AnalysisDocument.from_dict({"metadata": {}})
        assert document.metadata.version == dungeonquest.__version__


class TestSaveLoad:
    """Test save_analysis() and load_analysis()."""

    def test_json_round_trip(self, tmp_path, small_config, annotated_tree):
        path = save_analysis(annotated_tree, tmp_path / "analysis", config=small_config)
        assert path.name == "analysis.json"

        document = load_analysis(path)
        assert document.config == small_config
        assert document.tree == annotated_tree
        assert document.tree.num_outcomes == 66
        assert document.tree.can_offense_win is True

    def test_document_layout(self, tmp_path, small_config, annotated_tree):
        path = save_analysis(annotated_tree, tmp_path / "analysis", config=small_config,
                             description="one round")
        with open(path) as f:
            data = json.load(f)
        assert set(data) == {"metadata", "config", "tree"}
        assert data["metadata"]["description"] == "one round"
        assert data["tree"]["t"] == "DefenseNode"
        assert data["tree"]["numOutcomes"] == 66

    def test_gzip(self, tmp_path, small_config, annotated_tree):
        path = save_analysis(annotated_tree, tmp_path / "analysis", config=small_config, compress=True)
        assert path.name == "analysis.json.gz"
        with gzip.open(path, "rt") as f:
            assert json.load(f)["tree"]["round"] == 1
        assert load_analysis(path).tree == annotated_tree

    def test_creates_parent_dirs(self, tmp_path, annotated_tree):
        path = save_analysis(annotated_tree, tmp_path / "nested" / "dir" / "analysis")
        assert path.exists()
        assert load_analysis(path).config is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_analysis(tmp_path / "nope.json")

    def test_newer_schema_rejected(self, tmp_path, annotated_tree):
        path = save_analysis(annotated_tree, tmp_path / "analysis")
        with open(path) as f:
            data = json.load(f)
        data["metadata"]["schema_version"] = ANALYSIS_SCHEMA_VERSION + 1
        with open(path, "w") as f:
            json.dump(data, f)

        with pytest.raises(SchemaVersionError, match="newer than supported"):
            load_analysis(path)

    def test_empty_document(self):
        document = AnalysisDocument.from_dict({})
        assert document.tree is None
        assert document.config is None


class TestDrawLog:
    """Test DrawLogObserver and clear_log_dir()."""

    def test_writes_round_one(self, tmp_path, small_config):
        observer = DrawLogObserver(tmp_path / "logs")
        build_game_tree(small_config, observer=observer)

        filename = tmp_path / "logs" / "round_1" / "draw_probabilities.json"
        assert observer.written == [filename]
        with open(filename) as f:
            entries = json.load(f)
        assert [e["combination"] for e in entries] == [{"B": 2, "S": 2}, {"B": 3, "S": 1}, {"B": 4}]
        assert [e["probabilityExact"] for e in entries] == ["2/5", "8/15", "1/15"]
        assert entries[1]["probability"] == pytest.approx(8 / 15)

    def test_one_file_per_round(self, tmp_path, small_config):
        config = AnalyzerConfig.from_dict({**small_config.to_dict(), "max_rounds": 2})
        observer = DrawLogObserver(tmp_path / "logs")
        build_game_tree(config, observer=observer)
        assert [p.parent.name for p in observer.written] == ["round_1", "round_2"]

    def test_composes_with_logging(self, tmp_path, small_config, caplog):
        observer = CompositeObserver([LoggingObserver(), DrawLogObserver(tmp_path)])
        with caplog.at_level("INFO"):
            build_game_tree(small_config, observer=observer)
        assert "Processing round 1" in caplog.text
        assert (tmp_path / "round_1" / "draw_probabilities.json").exists()

    def test_clear_log_dir(self, tmp_path):
        log_dir = tmp_path / "logs"
        (log_dir / "round_1").mkdir(parents=True)
        assert clear_log_dir(log_dir) is True
        assert not log_dir.exists()
        assert clear_log_dir(log_dir) is False
