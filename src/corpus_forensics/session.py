"""Forensics session management for Corpus Forensics.

This module provides the ForensicsSession - the single owner of everything
derived from one loaded dataset: commit views, the parsed-patch and snapshot
caches, the incremental search index and its builder, and the perf log.
Reloading a dataset discards all of it at once.

Example:
    >>> from corpus_forensics.dataset import load_dataset
    >>> from corpus_forensics.session import ForensicsSession
    >>>
    >>> session = ForensicsSession(load_dataset("spec_evolution.json"))
    >>> session.start_indexing()
    >>> session.scheduler.run_until_idle()
    >>> hits = session.search("frame budget", scope="allCommits")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .analytics import (
    BucketSeries,
    TimelineData,
    TimeResolution,
    WeightMode,
    build_bucket_series,
    build_timeline,
    next_playback_index,
)
from .cache import LRUCache
from .compare import (
    ALL_FILES,
    EditDistance,
    FileChangeSummary,
    FileContribution,
    LineDiff,
    PatchFile,
    TextStats,
    bounded_distance,
    build_corpus_text,
    build_snapshot_text,
    compute_file_change_summary,
    compute_per_file_contribution,
    compute_text_stats,
    default_upper_bound,
    diff_text_lines,
    parse_patch,
    split_lines,
)
from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .dataset import CommitView, Dataset, Metric, build_commit_views, has_bucket, load_dataset
from .deeplink import DiffLayout, HashState, ViewTab, decode_hash_state, encode_hash_state
from .exceptions import CompareError, ErrorCode, SearchError, SessionError
from .logging_config import configure_logging, get_logger
from .perf import PerfLog
from .search import (
    CooperativeScheduler,
    CorpusSearchIndex,
    IndexBuilder,
    IndexProgress,
    SearchDocument,
    SearchHit,
    SearchScope,
    search_one,
)
from .search.scheduler import BackgroundScheduler

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompareReport:
    """Summary of two snapshots for the compare panel."""

    base_idx: int
    target_idx: int
    file_choice: str
    files: FileChangeSummary
    base_stats: TextStats
    target_stats: TextStats
    contributions: list[FileContribution]

    @property
    def delta_lines(self) -> int:
        return self.target_stats.lines - self.base_stats.lines

    @property
    def delta_bytes(self) -> int:
        return self.target_stats.bytes - self.base_stats.bytes

    @property
    def delta_words(self) -> int:
        return self.target_stats.words - self.base_stats.words


@dataclass(frozen=True)
class DistanceReport:
    base_idx: int
    target_idx: int
    file_choice: str
    upper_bound: int
    result: EditDistance

    @property
    def distance(self) -> int:
        return self.result.value

    @property
    def early_exit(self) -> bool:
        return self.result.early_exit


@dataclass(frozen=True)
class AppliedHashState:
    """A decoded fragment resolved against the loaded commits."""

    state: HashState
    selected_idx: int
    commit_found: bool


class ForensicsSession:
    """Owns one dataset and every cache and index derived from it.

    Args:
        dataset: Decoded dataset
        config: Engine configuration (defaults when None)
        scheduler: Where index batches run; a CooperativeScheduler when None
        on_index_progress: Called after every indexed batch
    """

    def __init__(
        self,
        dataset: Dataset,
        config: Optional[EngineConfig] = None,
        scheduler: Optional[BackgroundScheduler] = None,
        on_index_progress: Optional[Callable[[IndexProgress], None]] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler if scheduler is not None else CooperativeScheduler()
        self.on_index_progress = on_index_progress
        self.perf = PerfLog(self.config.perf_log_size)
        self._builder: Optional[IndexBuilder] = None
        self.reload(dataset)

    # -- lifecycle ---------------------------------------------------------

    def reload(self, dataset: Dataset) -> None:
        """Swap in a new dataset, discarding caches and any in-flight index build."""
        if self._builder is not None:
            self._builder.cancel()
            self._builder = None

        self.dataset = dataset
        self.views: tuple[CommitView, ...] = build_commit_views(dataset)
        self._by_short = {}
        for view in self.views:
            self._by_short.setdefault(view.short, view.idx)

        self.patch_cache: LRUCache[list[PatchFile]] = LRUCache(self.config.patch_cache_size, name="patches")
        self.snapshot_cache: LRUCache[str] = LRUCache(self.config.snapshot_cache_size, name="snapshots")
        self.index = CorpusSearchIndex(
            snippet_before=self.config.snippet_before,
            snippet_after=self.config.snippet_after,
        )
        self.index.init(SearchDocument.from_view(v) for v in self.views)
        logger.info(f"Loaded {len(self.views)} commits ({self.reviewed_count} reviewed)")

    def start_indexing(self) -> IndexBuilder:
        """Begin (or keep) building the all-commits index in the background."""
        if self._builder is None:
            self._builder = IndexBuilder(
                self.index,
                self.scheduler,
                batch_size=self.config.index_batch_size,
                on_progress=self.on_index_progress,
            )
            self._builder.start()
        return self._builder

    @property
    def index_progress(self) -> IndexProgress:
        return self.index.progress

    # -- commits -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self.views)

    @property
    def reviewed_count(self) -> int:
        return sum(1 for v in self.views if v.reviewed)

    def view(self, idx: int) -> CommitView:
        if not 0 <= idx < len(self.views):
            raise SessionError(
                f"Commit index {idx} out of range",
                ErrorCode.CF500,
                context={"idx": idx, "commits": len(self.views)},
            )
        return self.views[idx]

    def index_of_short(self, short: str) -> Optional[int]:
        return self._by_short.get(short)

    def bucket_definition(self, bucket: int) -> str:
        return self.dataset.bucket_definition(bucket)

    def filtered_commits(
        self,
        reviewed_only: bool = False,
        bucket_filter: Optional[int] = None,
        query: str = "",
    ) -> list[CommitView]:
        """Commits passing the ledger filters; ``query`` matches subject or short id."""
        q = query.strip().lower()
        result = []
        for view in self.views:
            if reviewed_only and not view.reviewed:
                continue
            if bucket_filter is not None and not has_bucket(view.bucket_mask, bucket_filter):
                continue
            if q and q not in view.subject.lower() and q not in view.short.lower():
                continue
            result.append(view)
        return result

    def navigate_filtered(
        self,
        current: int,
        direction: int,
        reviewed_only: bool = False,
        bucket_filter: Optional[int] = None,
        query: str = "",
    ) -> int:
        """Step to the previous (-1) or next (+1) filtered commit, wrapping around.

        When ``current`` is not itself in the filtered list, moving forward
        lands on the first match and moving back on the last. With nothing
        matching, ``current`` is returned unchanged.
        """
        if direction not in (1, -1):
            raise ValueError("direction must be 1 or -1")
        order = [v.idx for v in self.filtered_commits(reviewed_only, bucket_filter, query)]
        if not order:
            return current
        try:
            position = order.index(current)
        except ValueError:
            return order[0] if direction == 1 else order[-1]
        return order[(position + direction) % len(order)]

    # -- per-commit content ------------------------------------------------

    def patch_files(self, idx: int) -> list[PatchFile]:
        """Parsed patch of a commit, cached by position and sha."""
        view = self.view(idx)
        key = f"{view.idx}:{view.sha}"
        cached = self.patch_cache.get(key)
        if cached is not None:
            return cached
        files = self.perf.timed("parse_patch", lambda: parse_patch(view.patch))
        self.patch_cache.set(key, files)
        return files

    def snapshot_text(self, idx: int, file_choice: Optional[str] = ALL_FILES) -> str:
        """Snapshot document of a commit, cached by ``idx:sha:file``."""
        view = self.view(idx)
        choice = file_choice or ALL_FILES
        key = f"{view.idx}:{view.sha}:{choice}"
        cached = self.snapshot_cache.get(key)
        if cached is not None:
            return cached
        text = build_snapshot_text(view.files, choice)
        self.snapshot_cache.set(key, text)
        return text

    # -- comparison --------------------------------------------------------

    def compare(self, base_idx: int, target_idx: int, file_choice: Optional[str] = ALL_FILES) -> CompareReport:
        base = self.view(base_idx)
        target = self.view(target_idx)
        choice = file_choice or ALL_FILES

        def run() -> CompareReport:
            return CompareReport(
                base_idx=base.idx,
                target_idx=target.idx,
                file_choice=choice,
                files=compute_file_change_summary(base.files, target.files),
                base_stats=compute_text_stats(build_corpus_text(base.files, choice)),
                target_stats=compute_text_stats(build_corpus_text(target.files, choice)),
                contributions=compute_per_file_contribution(base.files, target.files),
            )

        return self.perf.timed("compare", run)

    def corpus_diff(self, base_idx: int, target_idx: int, file_choice: str) -> LineDiff:
        """Line diff of one file between two snapshots.

        Raises:
            CompareError: If ``file_choice`` selects all files
        """
        if not file_choice or file_choice == ALL_FILES:
            raise CompareError(
                "Corpus diff needs a single file",
                ErrorCode.CF302,
                context={"file_choice": str(file_choice)},
                recovery_hint="Pick one file or use edit_distance for the whole corpus",
            )
        base = self.view(base_idx)
        target = self.view(target_idx)
        return self.perf.timed(
            "corpus_diff",
            lambda: diff_text_lines(
                build_corpus_text(base.files, file_choice),
                build_corpus_text(target.files, file_choice),
                max_lines=self.config.max_diff_lines,
            ),
        )

    def edit_distance(
        self,
        base_idx: int,
        target_idx: int,
        file_choice: Optional[str] = ALL_FILES,
        upper_bound: Optional[int] = None,
    ) -> DistanceReport:
        """Bounded line edit distance; the bound defaults to the line-count heuristic."""
        base = self.view(base_idx)
        target = self.view(target_idx)
        choice = file_choice or ALL_FILES
        a = split_lines(build_corpus_text(base.files, choice))
        b = split_lines(build_corpus_text(target.files, choice))
        bound = default_upper_bound(len(a), len(b)) if upper_bound is None else upper_bound
        result = self.perf.timed("edit_distance", lambda: bounded_distance(a, b, bound))
        return DistanceReport(
            base_idx=base.idx,
            target_idx=target.idx,
            file_choice=choice,
            upper_bound=bound,
            result=result,
        )

    # -- search ------------------------------------------------------------

    def search(
        self,
        query: str,
        scope: SearchScope | str = SearchScope.THIS_COMMIT,
        selected_idx: int = 0,
    ) -> list[SearchHit]:
        """Search the selected commit or every indexed commit.

        All-commits searches start the background index if needed and only
        see commits indexed so far.
        """
        try:
            scope = SearchScope(scope)
        except ValueError:
            raise SearchError(
                f"Unknown search scope: {scope}",
                ErrorCode.CF400,
                context={"scope": str(scope)},
                recoverable=False,
            )

        query = query.strip()
        if len(query) < self.config.min_query_length or not self.views:
            return []

        if scope is SearchScope.THIS_COMMIT:
            document = SearchDocument.from_view(self.view(selected_idx))
            return self.perf.timed(
                "search_one",
                lambda: search_one(
                    document,
                    query,
                    limit=self.config.single_search_limit,
                    before=self.config.snippet_before,
                    after=self.config.snippet_after,
                ),
            )

        self.start_indexing()
        return self.perf.timed(
            "search_corpus",
            lambda: self.index.search(query, limit=self.config.corpus_search_limit),
        )

    # -- analytics ---------------------------------------------------------

    def bucket_series(
        self,
        metric: Metric | str = Metric.GROUPS,
        mode: WeightMode | str = WeightMode.SOFT,
        resolution: TimeResolution | str = TimeResolution.DAY,
        reviewed_only: bool = False,
        bucket_filter: Optional[int] = None,
    ) -> BucketSeries:
        return self.perf.timed(
            "bucket_series",
            lambda: build_bucket_series(self.views, metric, mode, resolution, reviewed_only, bucket_filter),
        )

    def timeline(self, metric: Metric | str = Metric.LINES, bucket_filter: Optional[int] = None) -> TimelineData:
        return build_timeline(self.views, metric, bucket_filter)

    def next_playback_index(
        self,
        current: int,
        reviewed_only: bool = False,
        bucket_filter: Optional[int] = None,
        query: str = "",
    ) -> Optional[int]:
        """Next commit while autoplaying; walks the filtered list when it is non-empty."""
        order = [v.idx for v in self.filtered_commits(reviewed_only, bucket_filter, query)]
        if not order:
            order = [v.idx for v in self.views]
        return next_playback_index(current, order)

    # -- deep links --------------------------------------------------------

    def apply_hash_state(self, fragment: str) -> AppliedHashState:
        """Decode a fragment and resolve its commit; unknown commits select the first."""
        state = decode_hash_state(fragment)
        idx = self.index_of_short(state.commit_short) if state.commit_short else None
        return AppliedHashState(state=state, selected_idx=idx if idx is not None else 0, commit_found=idx is not None)

    def hash_for(
        self,
        selected_idx: int,
        tab: ViewTab | str = ViewTab.DIFF,
        file_choice: Optional[str] = None,
        diff_layout: DiffLayout | str = DiffLayout.UNIFIED,
        query: str = "",
        reviewed_only: bool = False,
        bucket: Optional[int] = None,
    ) -> str:
        state = HashState(
            commit_short=self.view(selected_idx).short,
            tab=ViewTab(tab),
            file=None if file_choice in (None, ALL_FILES) else file_choice,
            diff_layout=DiffLayout(diff_layout),
            query=query,
            reviewed_only=reviewed_only,
            bucket=bucket,
        )
        return encode_hash_state(state)


def open_session(
    dataset_path: str | Path,
    config: Optional[EngineConfig] = None,
    log_file: Optional[str] = None,
    **session_kwargs,
) -> ForensicsSession:
    """Load config (when not given) and a dataset file, set up logging, return a session.

    Hosts that manage logging themselves construct :class:`ForensicsSession`
    directly instead.
    """
    config = config if config is not None else load_config()
    configure_logging(config, log_file)
    dataset = load_dataset(dataset_path)
    logger.info(f"Loaded {len(dataset.commits)} commits from {dataset_path}")
    return ForensicsSession(dataset, config, **session_kwargs)
