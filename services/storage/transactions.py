"""
Unit of work over a database session. Everything written through the yielded session commits together when the block exits cleanly and rolls back together when it raises.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Optional, Protocol

from sqlalchemy.orm import Session

from database import get_db_session

logger = logging.getLogger(__name__)


class TransactionManager(Protocol):
    def in_transaction(self) -> ContextManager[Session]: ...


class SessionTransactionManager:
    def __init__(self, session_factory: Optional[Callable[[], ContextManager[Session]]] = None) -> None:
        self._session_factory = session_factory or get_db_session

    @contextmanager
    def in_transaction(self) -> Iterator[Session]:
        with self._session_factory() as db:
            try:
                yield db
            except Exception as exc:
                logger.debug("Rolling back unit of work: %s", exc)
                raise
