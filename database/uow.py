import contextlib

from database.database import SessionLocal, db_session_scope
from database.repository import MarketplaceRepository


@contextlib.contextmanager
def marketplace_uow(session_factory=SessionLocal):
    """Per-unit-of-work transaction scope.

    Yields a MarketplaceRepository bound to a fresh Session from
    ``session_factory``. The engines never commit themselves: everything one
    operation writes (application plus abuse event, delivery logs plus alert
    markers) lands in a single transaction.

    Usage:
        with marketplace_uow() as repo:
            summary = AlertDeliveryService(...).run(repo, DeliveryScope.ALL)
        # commit happens automatically on successful exit
    """
    with db_session_scope(session_factory) as session:
        yield MarketplaceRepository(session)
