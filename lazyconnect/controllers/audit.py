"""
Lazy Controller Connector — Audit Controller
=============================================

What:  Used as route middleware ("AuditController:mark"). Runs before the
       route's action, with no arguments, on every matching request.
"""

import logging

from lazyconnect.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class AuditController:
    def __init__(self, app):
        self.app = app
        self.marks = 0

    def mark(self) -> None:
        self.marks += 1
        logger.debug("[%s] audit mark #%d", request_id_var.get(""), self.marks)
