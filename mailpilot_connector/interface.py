"""MailboxInterface: the ABC every mailbox connector implements."""

from __future__ import annotations

import abc
from collections.abc import AsyncIterator

from .models import RawMessage


class MailboxInterface(abc.ABC):
    """Abstract interface for a mailbox source.

    Concrete connectors implement ``fetch_recent`` as an async generator
    that owns exactly one remote session for the lifetime of the
    iteration.  The ingestion pipeline consumes it and never touches the
    session directly.
    """

    @abc.abstractmethod
    def fetch_recent(self, count: int) -> AsyncIterator[RawMessage]:
        """Yield at most *count* candidate messages in server order.

        The session must be torn down before the generator finishes,
        whether iteration completes, the consumer stops early, or an
        error is raised.
        """
        ...

    async def test_connection(self) -> bool:
        """Open and close a session, returning whether it succeeded.

        Override to probe the remote store.  The default reports
        ``False`` so an unimplemented probe never looks healthy.
        """
        return False
