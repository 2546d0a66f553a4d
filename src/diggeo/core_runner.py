# src/diggeo/core_runner.py
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import List, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape

from diggeo.errors import ApiError, DiggeoError, ResolutionError
from diggeo.modules.dns_resolve import DomainResolver
from diggeo.modules.geoip_lookup import GeoClient
from diggeo.utils.logger_manager import get_logger, log_exception

EXIT_OK = 0
EXIT_TARGET_FAILED = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3

DEFAULT_JOBS = 4


# -------------------------------
# Task / outcome dataclasses
# -------------------------------
@dataclass
class LookupTask:
    ip: str
    origin: Optional[str] = None  # domain the ip was resolved from

    @property
    def label(self) -> str:
        return f"{self.ip} ({self.origin})" if self.origin else self.ip


@dataclass
class LookupOutcome:
    task: LookupTask
    body: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    outcomes: List[LookupOutcome] = field(default_factory=list)
    resolution_errors: List[ResolutionError] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return len(self.resolution_errors) + sum(1 for o in self.outcomes if not o.ok)

    @property
    def exit_code(self) -> int:
        return EXIT_TARGET_FAILED if self.failed else EXIT_OK


# -------------------------------
# Output sink
# -------------------------------
class OutputSink:
    """
    Serialises writes so a record is never split across threads.
    Bodies go to stdout untouched; errors go to stderr through rich.
    """

    def __init__(self, err_console: Console | None = None):
        self._lock = Lock()
        self.err_console = err_console or Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)

    def result(self, body: str):
        with self._lock:
            click.echo(body, nl=not body.endswith("\n"), color=True)

    def error(self, label: str, error: Exception):
        kind = getattr(error, "kind", type(error).__name__)
        with self._lock:
            self.err_console.print(f"[bold red]{escape(label)}[/bold red]: [red]{kind}[/red]: {escape(str(error))}")
            if isinstance(error, ApiError) and error.body:
                self.err_console.print(error.body.rstrip("\n"), markup=False)

    def emit(self, outcome: LookupOutcome):
        if outcome.ok:
            self.result(outcome.body or "")
        else:
            self.error(outcome.task.label, outcome.error)


# -------------------------------
# Runner
# -------------------------------
class CoreRunner:
    """
    Turns targets into lookup tasks and runs them on a bounded thread pool.
    Outcomes are emitted in task order whatever order the lookups finish in.
    """

    def __init__(
        self,
        client: GeoClient,
        resolver: DomainResolver | None = None,
        jobs: int = DEFAULT_JOBS,
        sink: OutputSink | None = None,
    ):
        self.client = client
        self.resolver = resolver or DomainResolver()
        self.jobs = max(1, jobs)
        self.sink = sink or OutputSink()
        self.logger = get_logger()
        self.summary = RunSummary()

    def plan_direct(self, targets: Sequence[str]) -> List[LookupTask]:
        return [LookupTask(ip=t) for t in targets]

    def plan_dig(self, domain: str, ipv4_only: bool = False) -> List[LookupTask]:
        """Resolve `domain`; a failure is reported now and leaves no tasks."""
        try:
            addresses = self.resolver.resolve(domain, ipv4_only=ipv4_only)
        except ResolutionError as e:
            self.logger.info(f"[DNS] {e}")
            self.summary.resolution_errors.append(e)
            self.sink.error(domain, e)
            return []
        self.logger.info(f"[DNS] {domain} -> {', '.join(addresses)}")
        return [LookupTask(ip=a, origin=domain) for a in addresses]

    def _lookup(self, task: LookupTask) -> LookupOutcome:
        try:
            return LookupOutcome(task=task, body=self.client.lookup(task.ip))
        except DiggeoError as e:
            self.logger.info(f"[FAIL] {task.label}: {e}")
            return LookupOutcome(task=task, error=e)
        except Exception as e:
            log_exception(self.logger, f"Unexpected error while looking up {task.label}", e)
            return LookupOutcome(task=task, error=e)

    def run(self, tasks: Sequence[LookupTask]) -> RunSummary:
        self.logger.info(f"[START] {len(tasks)} lookup(s), {self.jobs} worker(s)")
        if tasks:
            with ThreadPoolExecutor(max_workers=min(self.jobs, len(tasks))) as executor:
                futures = [executor.submit(self._lookup, t) for t in tasks]
                for future in futures:
                    outcome = future.result()
                    self.summary.outcomes.append(outcome)
                    self.sink.emit(outcome)

        self.logger.info(f"[DONE] {self.summary.succeeded} ok, {self.summary.failed} failed")
        return self.summary
