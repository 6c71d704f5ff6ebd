from identifiers import generate_handle
from storage.analytics import AnalyticsAggregator
from storage.messaging import MessagingStore
from storage.transactions import TransactionStore
from storage.users import UserDirectory


class Storage:
    """The stores one application instance works against."""

    def __init__(self, db, handle_factory=generate_handle):
        self.users = UserDirectory(db, handle_factory)
        self.transactions = TransactionStore(db)
        self.analytics = AnalyticsAggregator(self.transactions, self.users)
        self.messaging = MessagingStore(db, self.users)
