"""Background task indexing.

Main API:
    process_file(file_path, content, settings)  → TaskParseResult
    process_batch(files, settings)              → BatchIndexResult
    handle_message(payload)                     → result payload (dict)
    TaskIndexWorker                             → queue-fed background thread

Commands and results cross the worker boundary as plain dicts, so a caller
never shares task objects with the worker thread.
"""

import asyncio
import copy
import logging
import queue
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models.messages import (
    BatchFile,
    BatchFileResult,
    BatchIndexCommand,
    BatchIndexResult,
    BatchStats,
    ErrorResult,
    FileMetadata,
    FileStats,
    IndexerCommand,
    IndexerResult,
    IndexerSettings,
    ParseStats,
    ParseTasksCommand,
    TaskParseResult,
)
from ..models.task import Task
from ..parsing.hierarchy import build_task_hierarchy
from ..parsing.line_parser import ParseOptions, front_matter_tags, parse_tasks_from_content
from ..utils.dates import extract_date_from_path

logger = logging.getLogger(__name__)

COMMAND_TYPES = ("parse_tasks", "batch_index")

_command_adapter: TypeAdapter[ParseTasksCommand | BatchIndexCommand] = TypeAdapter(IndexerCommand)
_result_adapter: TypeAdapter[TaskParseResult | BatchIndexResult | ErrorResult] = TypeAdapter(IndexerResult)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _is_daily_note(file_path: str, settings: IndexerSettings) -> bool:
    folder = settings.daily_note_path.rstrip("/")
    if not folder:
        return True
    return file_path.startswith(folder + "/")


def apply_daily_note_date(tasks: list[Task], file_path: str, settings: IndexerSettings) -> None:
    """
    Fill the configured date field of tasks from a daily note's path.

    Only unset dates are filled. Tasks that receive the date record the
    date type in ``use_as_date_type``.
    """
    if not settings.use_daily_note_path_as_date or not _is_daily_note(file_path, settings):
        return

    date_value = extract_date_from_path(file_path, settings.daily_note_format, settings.daily_note_path)
    if date_value is None:
        return

    field_name = f"{settings.use_as_date_type}_date"
    for task in tasks:
        if getattr(task, field_name) is None:
            setattr(task, field_name, date_value)
            task.use_as_date_type = settings.use_as_date_type


def process_file(
    file_path: str,
    content: str,
    settings: IndexerSettings,
    stats: FileStats | None = None,
    metadata: FileMetadata | None = None,
) -> TaskParseResult:
    """
    Parse all tasks of one file and link them into a hierarchy.

    Args:
        file_path: Path of the file, used for task IDs
        content: Full file text
        settings: Parsing settings snapshot
        stats: File stats from the caller (unused by parsing)
        metadata: Pre-computed file metadata such as tags

    Returns:
        Parse result with tasks in line order

    Raises:
        yaml.YAMLError: If the file's front matter is malformed
    """
    start = time.perf_counter()

    file_tags = front_matter_tags(content)
    if metadata is not None:
        file_tags.extend(metadata.tags)

    options = ParseOptions(
        metadata_format=settings.prefer_metadata_format,
        completed_markers=settings.completed_markers,
    )
    tasks = parse_tasks_from_content(file_path, content, options, file_tags=file_tags)
    forest = build_task_hierarchy(tasks)
    apply_daily_note_date(tasks, file_path, settings)

    completed = sum(1 for task in tasks if task.completed)
    return TaskParseResult(
        file_path=file_path,
        tasks=forest.all_tasks(),
        stats=ParseStats(
            total_tasks=len(tasks),
            completed_tasks=completed,
            processing_time_ms=_elapsed_ms(start),
        ),
    )


def process_batch(files: Iterable[BatchFile], settings: IndexerSettings) -> BatchIndexResult:
    """
    Parse many files, isolating failures per file.

    A file that fails is logged, counted and reported in ``errors``; the
    remaining files are still processed.
    """
    start = time.perf_counter()
    result = BatchIndexResult()

    for batch_file in files:
        result.stats.total_files += 1
        try:
            parsed = process_file(
                batch_file.path,
                batch_file.content,
                settings,
                batch_file.stats,
                batch_file.metadata,
            )
        except Exception as e:
            logger.warning(f"Failed to index {batch_file.path}: {e}")
            result.stats.failed_files += 1
            result.errors.append(ErrorResult(error=str(e), file_path=batch_file.path))
            continue

        result.results.append(
            BatchFileResult(
                file_path=batch_file.path,
                task_count=len(parsed.tasks),
                tasks=parsed.tasks,
            )
        )
        result.stats.total_tasks += len(parsed.tasks)

    result.stats.processing_time_ms = _elapsed_ms(start)
    logger.info(
        f"Indexed {result.stats.total_files} files "
        f"({result.stats.total_tasks} tasks, {result.stats.failed_files} failed)"
    )
    return result


def handle_message(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Validate a command payload, run it and return the result payload.

    Every failure, including an unknown command type, becomes an error
    result rather than an exception.
    """
    message_type = payload.get("type") if isinstance(payload, dict) else None
    if message_type not in COMMAND_TYPES:
        return ErrorResult(error=f"Unknown command type: {message_type}").model_dump()

    try:
        command = _command_adapter.validate_python(payload)
    except ValidationError as e:
        return ErrorResult(error=f"Invalid {message_type} command: {e}").model_dump()

    try:
        if isinstance(command, ParseTasksCommand):
            result: BaseModel = process_file(
                command.file_path,
                command.content,
                command.settings,
                command.stats,
                command.metadata,
            )
        else:
            result = process_batch(command.files, command.settings)
    except Exception as e:
        file_path = command.file_path if isinstance(command, ParseTasksCommand) else None
        logger.warning(f"Index command {message_type} failed: {e}")
        return ErrorResult(error=str(e), file_path=file_path).model_dump()

    return result.model_dump()


class TaskIndexWorker:
    """
    Runs index commands on a background thread.

    Commands are queued and handled one at a time in submission order.
    Each submission gets its own future, so concurrent requests are never
    confused with one another.

    Every future completes: a command submitted while the worker is not
    accepting work, or still queued when the thread exits, fails with
    ``RuntimeError``.
    """

    def __init__(self, handler: Callable[[dict[str, Any]], dict[str, Any]] = handle_message) -> None:
        self._handler = handler
        self._queue: "queue.Queue[tuple[dict[str, Any], Future] | None]" = queue.Queue()
        self._thread: threading.Thread | None = None
        self._accepting = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._accepting and self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the worker thread if it is not running.

        Raises:
            RuntimeError: If a previous thread is still finishing after a
                timed-out ``stop()``
        """
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                if self._accepting:
                    return
                raise RuntimeError("Index worker is still stopping")
            self._thread = threading.Thread(target=self._worker_loop, name="mdtasks-indexer", daemon=True)
            self._accepting = True
            self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """
        Finish queued commands, then stop the worker thread.

        If the thread is still busy when ``timeout`` expires it keeps
        running; calling ``stop()`` again waits for it.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            if self._accepting:
                self._accepting = False
                self._queue.put(None)  # sentinel

        thread.join(timeout)

        with self._lock:
            if self._thread is thread and not thread.is_alive():
                self._thread = None

    def submit(
        self, command: ParseTasksCommand | BatchIndexCommand | dict[str, Any]
    ) -> "Future[TaskParseResult | BatchIndexResult | ErrorResult]":
        """
        Queue a command.

        The returned future fails with ``RuntimeError`` if the worker is not
        running.
        """
        if isinstance(command, BaseModel):
            payload = command.model_dump()
        else:
            payload = copy.deepcopy(command)

        future: Future = Future()
        with self._lock:
            if self._accepting:
                self._queue.put((payload, future))
                return future

        future.set_exception(RuntimeError("Index worker is not running"))
        return future

    async def request(
        self, command: ParseTasksCommand | BatchIndexCommand | dict[str, Any]
    ) -> TaskParseResult | BatchIndexResult | ErrorResult:
        """Submit a command and await its result."""
        return await asyncio.wrap_future(self.submit(command))

    def _worker_loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:  # sentinel → stop
                break
            payload, future = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                reply = self._handler(payload)
                future.set_result(_result_adapter.validate_python(reply))
            except Exception as e:
                logger.exception("Index worker failed to handle %s", payload.get("type"))
                future.set_exception(e)
        self._fail_pending()

    def _fail_pending(self) -> None:
        """Fail futures left in the queue after the sentinel."""
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            if item is None:
                continue
            _, future = item
            if future.set_running_or_notify_cancel():
                future.set_exception(RuntimeError("Index worker stopped"))

    def __enter__(self) -> "TaskIndexWorker":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
