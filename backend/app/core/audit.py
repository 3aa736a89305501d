"""
Audit logging for business-critical store operations.

One JSON line per event on the "audit" logger: order placement, status
changes, deletions, and every admin change to the catalog.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Separate logger for audit events (can be shipped to centralized logging)
audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for store events."""

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete", "stock", "status"
        resource_type: str,  # "order", "medicine"
        resource_id: int,
        actor: str = "admin",
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a change to an order or a catalog record.

        Usage:
            AuditLog.log_action("status", "order", 12, changes={"from": "placed", "to": "verified"})
            AuditLog.log_action("delete", "medicine", 4, changes={"name": "Aspirin"})
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"{resource_type}.{action}",
            "actor": actor,
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_order_placed(
        order_id: int,
        user_id: str,
        total_amount: Any,
        item_count: int,
        requires_prescription: bool,
    ):
        """
        Log a completed checkout.

        Usage:
            AuditLog.log_order_placed(7, "user123", Decimal("20.00"), 1, False)
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": "order.placed",
            "actor": user_id,
            "resource_id": order_id,
            "total_amount": str(total_amount),
            "item_count": item_count,
            "requires_prescription": requires_prescription,
        }

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_rejected(
        action: str,  # "checkout", "status"
        resource_type: str,
        reason: str,
        actor: str = "admin",
        resource_id: Optional[int] = None,
    ):
        """
        Log a rejected business operation (illegal transition, checkout without Rx).

        Usage:
            AuditLog.log_rejected("checkout", "order", "prescription missing", actor="user123")
        """
        log_entry = {
            "timestamp": _now(),
            "event_severity": "WARNING",
            "event_type": f"{resource_type}.{action}.rejected",
            "actor": actor,
            "reason": reason,
        }
        if resource_id is not None:
            log_entry["resource_id"] = resource_id

        audit_logger.warning(json.dumps(log_entry))
