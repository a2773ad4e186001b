"""
View revalidation signal.
Writes bump a revision counter per view path; readers compare revisions to
know whether data they derived from that view is stale.
"""
import logging
from collections import defaultdict
from typing import DefaultDict

logger = logging.getLogger(__name__)

ADMIN_VIEW_PATH = "/admin"


class Revalidator:
    def __init__(self):
        self._revisions: DefaultDict[str, int] = defaultdict(int)

    def revalidate_path(self, path: str) -> int:
        self._revisions[path] += 1
        logger.debug("Revalidated %s (revision %d)", path, self._revisions[path])
        return self._revisions[path]

    def revision(self, path: str) -> int:
        return self._revisions[path]
