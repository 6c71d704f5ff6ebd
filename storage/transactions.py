import logging
from datetime import datetime
from decimal import Decimal

from models import Transaction

logger = logging.getLogger(__name__)


class TransactionStore:
    def __init__(self, db):
        self.db = db

    def _user_query(self, user_id):
        return (
            self.db.select(Transaction)
            .filter_by(user_id=user_id)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        )

    def insert(self, user_id, type, category, amount, date, description=None):
        tx = Transaction(
            user_id=user_id,
            type=type,
            category=category,
            amount=Decimal(amount),
            date=date,
            description=description,
            created_at=datetime.now(),
        )
        self.db.session.add(tx)
        self.db.session.commit()
        logger.info("Added %s transaction %s for user %s", type, tx.id, user_id)
        return tx

    def delete(self, tx_id, user_id):
        """Delete a transaction owned by ``user_id``; anything else is a no-op."""
        removed = self.db.session.execute(
            self.db.delete(Transaction).where(
                Transaction.id == tx_id, Transaction.user_id == user_id
            )
        ).rowcount
        self.db.session.commit()
        if removed:
            logger.info("Deleted transaction %s for user %s", tx_id, user_id)
        return bool(removed)

    def list_by_user(self, user_id, limit=None):
        query = self._user_query(user_id)
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.session.scalars(query))

    def list_by_user_and_range(self, user_id, start, end):
        query = self._user_query(user_id).where(
            Transaction.date >= start, Transaction.date <= end
        )
        return list(self.db.session.scalars(query))
