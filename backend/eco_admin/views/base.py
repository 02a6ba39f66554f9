"""
Entity View Base

A view owns an in-memory copy of one table slice: it loads the rows,
derives the displayed subset from the search text, and re-fetches after
every mutation. Failures are written to the log and otherwise swallowed;
the view keeps whatever it displayed before.

Fetches carry a generation token. A result is applied only if it belongs
to the most recent fetch and the view has not been closed, so a slow stale
response can never overwrite fresher state.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..services.audit import AuditTrail
from ..services.backend_client import BackendClient, BackendError
from ..services.filtering import filter_rows
from ..services.labels import Labels, load_labels

logger = logging.getLogger(__name__)


class EntityView:
    """Load / filter / mutate state holder for one entity list."""

    name = "entity"
    search_fields: Sequence[str] = ()

    def __init__(
        self,
        client: BackendClient,
        labels: Optional[Labels] = None,
        audit: Optional[AuditTrail] = None,
    ):
        self.client = client
        self.labels = labels or load_labels()
        self.audit = audit or AuditTrail(client)
        self.rows: List[Dict[str, Any]] = []
        self.search = ""
        self.loading = False
        self.closed = False
        self._generation = 0

    # -------------------------------------------------------------------------
    # Fetch lifecycle
    # -------------------------------------------------------------------------

    def fetch(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def begin_fetch(self) -> int:
        self._generation += 1
        self.loading = True
        return self._generation

    def is_current(self, token: int) -> bool:
        return not self.closed and token == self._generation

    def apply_fetch(self, token: int, rows: List[Dict[str, Any]]) -> bool:
        """Install a fetch result. Returns False when the result was stale and dropped."""
        if not self.is_current(token):
            logger.debug("%s view dropped stale fetch %s (current %s)", self.name, token, self._generation)
            return False
        self.rows = list(rows)
        self.loading = False
        return True

    def fail_fetch(self, token: int) -> None:
        if self.is_current(token):
            self.loading = False

    def load(self) -> bool:
        """Fetch the table slice. Returns True when fresh rows were applied."""
        token = self.begin_fetch()
        try:
            rows = self.fetch()
        except BackendError:
            logger.exception("Error fetching %s", self.name)
            self.fail_fetch(token)
            return False
        return self.apply_fetch(token, rows)

    def close(self) -> None:
        """Unmount: outstanding fetches no longer touch this view."""
        self.closed = True
        self.loading = False

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def set_search(self, query: Optional[str]) -> None:
        self.search = query or ""

    @property
    def filtered(self) -> List[Dict[str, Any]]:
        if not self.search_fields:
            return list(self.rows)
        return filter_rows(self.rows, self.search, self.search_fields)

    def find(self, row_id: str) -> Optional[Dict[str, Any]]:
        for row in self.rows:
            if row["id"] == row_id:
                return row
        return None
