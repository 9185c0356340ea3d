"""Shared test fixtures for Corpus Forensics tests."""

import copy

import pytest

from corpus_forensics.dataset import decode_dataset
from corpus_forensics.session import ForensicsSession


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


CORE_V1 = "# Core\nThe frame budget is 16ms.\n"
CORE_V2 = "# Core\nThe frame budget is 8ms.\nJitter must stay low.\n"
RENDER_V1 = "# Render\nDamage tracking keeps redraws cheap.\n"

PATCH_0 = (
    "diff --git a/spec/core.md b/spec/core.md\n"
    "new file mode 100644\n"
    "--- /dev/null\n"
    "+++ b/spec/core.md\n"
    "@@ -0,0 +1,2 @@\n"
    "+# Core\n"
    "+The frame budget is 16ms.\n"
)

PATCH_1 = (
    "diff --git a/spec/render.md b/spec/render.md\n"
    "new file mode 100644\n"
    "--- /dev/null\n"
    "+++ b/spec/render.md\n"
    "@@ -0,0 +1,2 @@\n"
    "+# Render\n"
    "+Damage tracking keeps redraws cheap.\n"
)

PATCH_2 = (
    "diff --git a/spec/core.md b/spec/core.md\n"
    "--- a/spec/core.md\n"
    "+++ b/spec/core.md\n"
    "@@ -1,2 +1,3 @@\n"
    " # Core\n"
    "-The frame budget is 16ms.\n"
    "+The frame budget is 8ms.\n"
    "+Jitter must stay low.\n"
)

# Three commits: one unreviewed, one reviewed into buckets 2 and 7, and one
# with a two-bucket group plus an uncategorized group.
SAMPLE_DATASET = {
    "generated_at": "2024-01-03T00:00:00Z",
    "scope_paths": ["spec/"],
    "bucket_defs": {
        "0": "Unreviewed",
        "1": "Correctness fix",
        "2": "New capability",
        "4": "Performance",
        "7": "Documentation",
        "10": "Other",
    },
    "commits": [
        {
            "sha": "a" * 40,
            "short": "aaaaaaa",
            "epoch": 1704103620,
            "date": "2024-01-01T10:07:00+00:00",
            "subject": "Initial spec",
            "author": {"name": "Dana", "email": "dana@example.com"},
            "numstat": [{"path": "spec/core.md", "added": 2, "deleted": 0}],
            "totals": {"added": 2, "deleted": 0, "files": 1},
            "patch": PATCH_0,
            "files": [{"path": "spec/core.md", "content": CORE_V1}],
            "review": None,
        },
        {
            "sha": "b" * 40,
            "short": "bbbbbbb",
            "epoch": 1704104520,
            "date": "2024-01-01T10:22:00+00:00",
            "subject": "Add renderer notes",
            "numstat": [{"path": "spec/render.md", "added": 2, "deleted": 0}],
            "totals": {"added": 2, "deleted": 0, "files": 1},
            "patch": PATCH_1,
            "files": [
                {"path": "spec/core.md", "content": CORE_V1},
                {"path": "spec/render.md", "content": RENDER_V1},
            ],
            "review": {
                "groups": [
                    {
                        "title": "Renderer notes",
                        "confidence": 0.9,
                        "rationale": "Describes damage tracking",
                        "evidence": ["spec/render.md"],
                        "buckets": [2, 7],
                    }
                ],
                "notes": [],
            },
        },
        {
            "sha": "c" * 40,
            "short": "ccccccc",
            "epoch": 1704186000,
            "date": "2024-01-02T09:00:00+00:00",
            "subject": "Tighten frame budget",
            "numstat": [{"path": "spec/core.md", "added": 2, "deleted": 1}],
            "totals": {"added": 2, "deleted": 1, "files": 1},
            "patch": PATCH_2,
            "files": [
                {"path": "spec/core.md", "content": CORE_V2},
                {"path": "spec/render.md", "content": RENDER_V1},
            ],
            "review": {
                "groups": [
                    {"title": "Budget fix", "confidence": 0.8, "buckets": [1, 4]},
                    {"title": "Misc", "confidence": 0.3, "buckets": []},
                ],
            },
        },
    ],
}


@pytest.fixture
def dataset_payload():
    """Raw dataset mapping, safe to mutate."""
    return copy.deepcopy(SAMPLE_DATASET)


@pytest.fixture
def dataset(dataset_payload):
    """Decoded three-commit dataset."""
    return decode_dataset(dataset_payload)


@pytest.fixture
def session(dataset):
    """Session over the three-commit dataset with default config."""
    return ForensicsSession(dataset)
