"""
Corpus Forensics - Spec Corpus Evolution Engine

Replays how a corpus of spec documents evolved commit by commit:
parses patches, diffs whole snapshots, searches every revision, and
attributes each commit's change to a taxonomy of review buckets over time.
"""

__version__ = "0.1.0"

from .config import EngineConfig, load_config
from .dataset import Dataset, decode_dataset, load_dataset
from .exceptions import ForensicsError
from .session import ForensicsSession, open_session

__all__ = [
    "ForensicsSession",  # Main entry point
    "open_session",
    "Dataset",
    "decode_dataset",
    "load_dataset",
    "EngineConfig",
    "load_config",
    "ForensicsError",
]
