"""Extraction entry points: per-file dispatch and parallel batch extraction.

Extraction never raises. Any failure inside a format extractor is logged,
counted, and the tokens collected before the failure are returned, because
ingestion has to tolerate garbage input from arbitrary themes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import PurePosixPath

from tokenplane.config.models import ExtractionConfig
from tokenplane.core.logging import get_logger
from tokenplane.core.telemetry import record_suppressed_failure
from tokenplane.extraction.base import TokenCollector
from tokenplane.extraction.script import extract_script
from tokenplane.extraction.settings import extract_settings
from tokenplane.extraction.stylesheet import extract_stylesheet
from tokenplane.extraction.template import extract_template
from tokenplane.tokens.models import ExtractedToken, SourceFormat

logger = get_logger("extraction")

FORMAT_BY_SUFFIX: dict[str, SourceFormat] = {
    ".css": "stylesheet",
    ".scss": "stylesheet",
    ".less": "stylesheet",
    ".liquid": "template",
    ".js": "script",
    ".jsx": "script",
    ".ts": "script",
    ".tsx": "script",
    ".mjs": "script",
    ".cjs": "script",
    ".json": "settings",
}

_EXTRACTORS: dict[SourceFormat, Callable[[TokenCollector], None]] = {
    "stylesheet": extract_stylesheet,
    "template": extract_template,
    "script": extract_script,
    "settings": extract_settings,
}


@dataclass(frozen=True)
class SourceFile:
    """A file handed to the extractor."""

    path: str
    content: str


def detect_format(file_path: str) -> SourceFormat | None:
    return FORMAT_BY_SUFFIX.get(PurePosixPath(file_path).suffix.lower())


def extract_tokens(content: str, file_path: str, *, context_chars: int = 80) -> list[ExtractedToken]:
    """Extract located value occurrences from one file.

    Unknown file types and empty content yield ``[]``.
    """
    source_format = detect_format(file_path)
    if source_format is None or not content.strip():
        return []

    collector = TokenCollector(content, file_path, source_format, context_chars=context_chars)
    try:
        _EXTRACTORS[source_format](collector)
    except Exception as e:
        logger.warning(
            "extraction_failed",
            file_path=file_path,
            format=source_format,
            error=str(e),
            partial_tokens=len(collector.tokens),
        )
        record_suppressed_failure("extraction", format=source_format)
    return collector.tokens


def _extract_worker(path: str, content: str, context_chars: int) -> list[ExtractedToken]:
    """Process-pool entry point (module level so it pickles)."""
    return extract_tokens(content, path, context_chars=context_chars)


class TokenExtractor:
    """Batch extraction over many files, optionally across processes.

    Files are independent, so the pool shares no state; results are
    concatenated in input order regardless of completion order.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def is_eligible(self, file: SourceFile) -> bool:
        """Known format, not excluded, under the size limit."""
        name = PurePosixPath(file.path).name.lower()
        if any(name.endswith(suffix) for suffix in self.config.excluded_suffixes):
            return False
        if detect_format(file.path) is None:
            return False
        size_kb = len(file.content.encode("utf-8", errors="replace")) / 1024
        if size_kb > self.config.max_file_size_kb:
            logger.info("file_too_large_skipped", file_path=file.path, size_kb=round(size_kb))
            return False
        return True

    def extract(self, file: SourceFile) -> list[ExtractedToken]:
        return extract_tokens(file.content, file.path, context_chars=self.config.context_chars)

    def extract_files(self, files: Sequence[SourceFile]) -> list[ExtractedToken]:
        eligible = [f for f in files if self.is_eligible(f)]
        workers = self.config.max_workers
        if workers > 1 and len(eligible) >= self.config.parallel_threshold:
            per_file = self._parallel_extract(eligible, workers)
        else:
            per_file = [self.extract(f) for f in eligible]

        tokens = [token for file_tokens in per_file for token in file_tokens]
        logger.debug("extraction_complete", files=len(eligible), tokens=len(tokens))
        return tokens

    def _parallel_extract(
        self, files: list[SourceFile], workers: int
    ) -> list[list[ExtractedToken]]:
        results: list[list[ExtractedToken]] = [[] for _ in files]
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(_extract_worker, f.path, f.content, self.config.context_chars): i
                for i, f in enumerate(files)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.warning(
                        "extraction_worker_failed",
                        file_path=files[index].path,
                        error=str(e),
                    )
                    record_suppressed_failure("extraction", format="worker")
        return results
