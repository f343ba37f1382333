"""
Persistence for analysis results.

Writes the annotated tree (with the configuration that produced it) as a
self-contained JSON document for the viewer, and optionally logs each
round's draw distribution to a log directory.
"""

import gzip
import json
import logging
import shutil
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from . import __version__
from .config import AnalyzerConfig
from .errors import SchemaVersionError
from .tree.nodes import DefenseNode
from .tree.observers import BuildObserver

logger = logging.getLogger(__name__)

# Schema version for compatibility checking
ANALYSIS_SCHEMA_VERSION = 1

ANALYSIS_FILENAME = "game_analysis"
DRAW_LOG_FILENAME = "draw_probabilities.json"


@dataclass
class AnalysisMetadata:
    """Metadata about a saved analysis."""
    version: str = __version__
    schema_version: int = ANALYSIS_SCHEMA_VERSION
    timestamp: str = ""
    description: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class AnalysisDocument:
    """
    A saved analysis: metadata, the producing configuration and the tree.

    The tree is rebuilt with its annotations; re-annotating it is a no-op.
    """
    metadata: AnalysisMetadata = field(default_factory=AnalysisMetadata)
    config: Optional[AnalyzerConfig] = None
    tree: Optional[DefenseNode] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "metadata": asdict(self.metadata),
            "config": self.config.to_dict() if self.config else None,
            "tree": self.tree.to_dict() if self.tree else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisDocument":
        """Reconstruct a document from its dictionary form."""
        meta = data.get("metadata", {})
        metadata = AnalysisMetadata(
            version=meta.get("version", __version__),
            schema_version=meta.get("schema_version", 1),
            timestamp=meta.get("timestamp", ""),
            description=meta.get("description", ""),
        )

        if metadata.schema_version > ANALYSIS_SCHEMA_VERSION:
            raise SchemaVersionError(
                f"Analysis schema version {metadata.schema_version} "
                f"is newer than supported version {ANALYSIS_SCHEMA_VERSION}. "
                "Please update the software."
            )

        cfg = data.get("config")
        tree = data.get("tree")
        return cls(
            metadata=metadata,
            config=AnalyzerConfig.from_dict(cfg) if cfg else None,
            tree=DefenseNode.from_dict(tree) if tree else None,
        )


def save_analysis(
    root: DefenseNode,
    path: Union[str, Path],
    config: Optional[AnalyzerConfig] = None,
    compress: bool = False,
    description: str = "",
) -> Path:
    """
    Save an analysis to disk.

    Args:
        root: Root DefenseNode (annotated or not).
        path: Path to save to (without extension).
        config: Configuration that produced the tree.
        compress: Whether to gzip the output (trees grow quickly).
        description: Free-form note stored in the metadata.

    Returns:
        Path to the saved file (.json or .json.gz).
    """
    document = AnalysisDocument(
        metadata=AnalysisMetadata(description=description),
        config=config,
        tree=root,
    )
    data = document.to_dict()

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if compress:
        final_path = Path(str(path) + ".json.gz")
        with gzip.open(final_path, "wt", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    else:
        final_path = Path(str(path) + ".json")
        with open(final_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    logger.info(f"Game analysis saved to {final_path}")
    return final_path


def load_analysis(path: Union[str, Path]) -> AnalysisDocument:
    """
    Load an analysis from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaVersionError: If the file was written by a newer schema.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Analysis not found: {path}")

    if path.suffix == ".gz":
        with gzip.open(path, "rt", encoding="utf-8") as f:
            data = json.load(f)
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

    return AnalysisDocument.from_dict(data)


def clear_log_dir(log_dir: Union[str, Path]) -> bool:
    """Remove a previous run's log directory. Returns True if one existed."""
    log_dir = Path(log_dir)
    if not log_dir.exists():
        return False
    shutil.rmtree(log_dir)
    logger.info(f"Cleared previous logs in {log_dir}")
    return True


class DrawLogObserver(BuildObserver):
    """
    Logs each round's draw distribution to ``<log_dir>/round_<n>/``.

    A round is expanded once per surviving branch; only the first
    distribution seen for each round number is written.
    """

    def __init__(self, log_dir: Union[str, Path]):
        self.log_dir = Path(log_dir)
        self.written: List[Path] = []
        self._logged_rounds: Set[int] = set()

    def draws_enumerated(self, round_number, draws):
        if round_number in self._logged_rounds:
            return
        self._logged_rounds.add(round_number)

        round_dir = self.log_dir / f"round_{round_number}"
        round_dir.mkdir(parents=True, exist_ok=True)
        filename = round_dir / DRAW_LOG_FILENAME

        payload = [
            {
                "combination": draw.as_dict(),
                "probability": float(draw.probability),
                "probabilityExact": str(draw.probability),
            }
            for draw in draws
        ]
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

        self.written.append(filename)
        logger.info(f"Round {round_number} draw probabilities logged to {filename}")


__all__ = [
    'ANALYSIS_SCHEMA_VERSION',
    'ANALYSIS_FILENAME',
    'DRAW_LOG_FILENAME',
    'AnalysisMetadata',
    'AnalysisDocument',
    'save_analysis',
    'load_analysis',
    'clear_log_dir',
    'DrawLogObserver',
]
