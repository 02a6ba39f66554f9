"""
Audit trail for operator mutations.

Entries are appended to system_logs and never rewritten. Writing the entry
is best effort: a failed append is logged and the mutation it describes
stands.
"""
import logging
from typing import Any, Dict, Optional

from ..models.db_models import LogLevel
from .backend_client import BackendClient, BackendError

logger = logging.getLogger(__name__)


class AuditTrail:
    """Appends SystemLogEntry rows on behalf of the acting admin."""

    def __init__(self, client: BackendClient, ip_address: Optional[str] = None):
        self.client = client
        self.ip_address = ip_address

    def record(
        self,
        action: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        level: LogLevel = LogLevel.INFO,
    ) -> Optional[Dict[str, Any]]:
        entry = {
            "log_level": level.value,
            "action": action,
            "user_id": self.client.actor_id,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "details": details or {},
            "ip_address": self.ip_address,
        }
        try:
            return self.client.insert("system_logs", entry)
        except BackendError:
            logger.exception("Failed to append audit entry %s for %s %s", action, entity_type, entity_id)
            return None
