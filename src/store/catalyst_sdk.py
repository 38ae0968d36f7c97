"""Python SDK for Catalyst push operations.

This module exposes high-level APIs for pushing fund data, pinging
tables, and running declarative run-specs against one shared store.
"""

from __future__ import annotations

from types import TracebackType

from core.config import CatalystConfig
from core.run_spec_execution import execute_run_spec_file
from core.types import PushOptions, PushSummary, RecordSource, RowStore
from ingest.pipeline import PushPipelineRunner
from ingest.remote_source import RemoteSourceAdapter
from store.supabase_gateway import SupabaseGateway


class CatalystClient:
    """Primary SDK entry point owning the store gateway and source adapter."""

    def __init__(
        self,
        config: CatalystConfig | None = None,
        store: RowStore | None = None,
        source: RecordSource | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional row store, defaults to a Supabase gateway.
            source: Optional record source, defaults to the remote adapter.

        Raises:
            CatalystConfigError: If no store is given and Supabase settings are missing.
        """
        self._config = config or CatalystConfig.from_env()
        self._store = store or SupabaseGateway(self._config)
        self._source = source or RemoteSourceAdapter(self._config)

    def __enter__(self) -> "CatalystClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close HTTP resources owned by the default collaborators."""
        for collaborator in (self._store, self._source):
            if isinstance(collaborator, (SupabaseGateway, RemoteSourceAdapter)):
                collaborator.close()

    def push(self, options: PushOptions) -> PushSummary:
        """Push one Fund's data into the store.

        Args:
            options: Push options.

        Returns:
            Per-table run summary.

        Raises:
            CatalystError: If any stage fails; earlier tables stay inserted.
        """
        return PushPipelineRunner(options, self._store, self._source).run()

    def ping(self, table: str) -> int:
        """Return the number of rows stored in a table.

        Raises:
            CatalystStoreError: If the table cannot be read.
        """
        return len(self._store.select_rows(table, columns="id"))

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_run_spec_file(self, spec_file)
