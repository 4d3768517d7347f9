"""
Work-unit jobs that drive callouts

A job prepares its work units, processes them scope by scope and is handed
every scope outcome once at the end. CalloutStatusJob is the stock job: one
callout per record, with the response status written back to the record.
Failure policy lives here, in the caller, not in the REST client.
"""

import logging
from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional,
    Protocol, Sequence, Union, runtime_checkable
)
from dataclasses import dataclass, field

import requests

from .client import RestClient
from .exceptions import CalloutSDKError, ValidationError
from .types import HttpVerb

logger = logging.getLogger(__name__)

DEFAULT_SCOPE_SIZE = 200

Record = Dict[str, Any]


@dataclass
class ScopeOutcome:
    """Result of processing one scope"""
    successes: int = 0
    failures: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class JobSummary:
    """Aggregated result of a job run"""
    scopes: int = 0
    successes: int = 0
    failures: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.successes + self.failures

    def add(self, outcome: ScopeOutcome) -> None:
        self.scopes += 1
        self.successes += outcome.successes
        self.failures += outcome.failures
        self.errors.extend(outcome.errors)


@runtime_checkable
class WorkUnitJob(Protocol):
    """Lifecycle a job runner drives"""

    def prepare_work_units(self) -> Iterable[Any]:
        """Return the work units to process"""
        ...

    def process_scope(self, scope: Sequence[Any]) -> ScopeOutcome:
        """Process one scope of work units"""
        ...

    def finalize(self, outcomes: List[ScopeOutcome]) -> None:
        """Called once after every scope has been processed"""
        ...


def chunk(items: Iterable[Any], size: int) -> Iterator[List[Any]]:
    """Split items into lists of at most size elements."""
    scope: List[Any] = []
    for item in items:
        scope.append(item)
        if len(scope) >= size:
            yield scope
            scope = []
    if scope:
        yield scope


def run_job(job: WorkUnitJob, scope_size: int = DEFAULT_SCOPE_SIZE) -> JobSummary:
    """
    Run a job to completion.

    Args:
        job: Job to run
        scope_size: Maximum number of work units per scope

    Returns:
        JobSummary: Aggregated outcome counts

    Raises:
        ValidationError: If scope_size is not positive
    """
    if scope_size <= 0:
        raise ValidationError("scope_size must be positive")

    outcomes: List[ScopeOutcome] = []
    summary = JobSummary()

    for scope in chunk(job.prepare_work_units(), scope_size):
        outcome = job.process_scope(scope)
        outcomes.append(outcome)
        summary.add(outcome)

    job.finalize(outcomes)

    logger.info(
        f"Job {type(job).__name__} finished: {summary.scopes} scopes, "
        f"{summary.successes} succeeded, {summary.failures} failed"
    )
    return summary


class CalloutStatusJob:
    """
    Issues one callout per record and records the response status.

    Args:
        client: REST client bound to the target credential
        records: Records to process (mutable mappings)
        path_for: Builds the resource path for a record
        body_for: Builds the raw body for a record (optional)
        verb: HTTP verb used for every callout
        status_field: Record field that receives the status code
        store: Persists each processed scope (optional)
    """

    def __init__(
        self,
        client: RestClient,
        records: Iterable[Record],
        path_for: Callable[[Record], str],
        body_for: Optional[Callable[[Record], str]] = None,
        verb: Union[HttpVerb, str] = HttpVerb.POST,
        status_field: str = 'status',
        store: Optional[Callable[[List[Record]], None]] = None,
        headers: Optional[Mapping[str, str]] = None
    ):
        self.client = client
        self.records = records
        self.path_for = path_for
        self.body_for = body_for
        self.verb = verb
        self.status_field = status_field
        self.store = store
        self.headers = headers
        self.summary: Optional[JobSummary] = None

    def prepare_work_units(self) -> Iterable[Record]:
        return self.records

    def process_scope(self, scope: Sequence[Record]) -> ScopeOutcome:
        outcome = ScopeOutcome()

        for record in scope:
            try:
                path = self.path_for(record)
                body = self.body_for(record) if self.body_for else ''
            except Exception as e:
                # A record the callbacks cannot handle fails alone
                self._record_failure(record, outcome, f"could not build callout: {e!r}")
                continue

            try:
                response = self.client.call(self.verb, path, '', body, self.headers)
            except (requests.exceptions.RequestException, CalloutSDKError) as e:
                self._record_failure(record, outcome, str(e))
                continue

            record[self.status_field] = response.status_code
            if response.ok:
                outcome.successes += 1
            else:
                outcome.failures += 1
                outcome.errors.append(
                    f"{record.get('id', '<no id>')}: HTTP {response.status_code}"
                )

        if self.store is not None:
            try:
                self.store(list(scope))
            except Exception as e:
                # Records whose status could not be saved count as failed
                saved_ok = outcome.successes
                outcome.successes = 0
                outcome.failures += saved_ok
                outcome.errors.append(f"store failed: {e}")
                logger.warning(f"Failed to store scope of {len(scope)} records: {e}")

        return outcome

    def _record_failure(self, record: Record, outcome: ScopeOutcome, reason: str) -> None:
        record[self.status_field] = None
        outcome.failures += 1
        outcome.errors.append(f"{record.get('id', '<no id>')}: {reason}")
        logger.warning(f"Callout failed for record {record.get('id')}: {reason}")

    def finalize(self, outcomes: List[ScopeOutcome]) -> None:
        summary = JobSummary()
        for outcome in outcomes:
            summary.add(outcome)
        self.summary = summary
