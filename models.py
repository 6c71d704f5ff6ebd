import uuid
from datetime import datetime
from decimal import Decimal

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.types import TypeDecorator

db = SQLAlchemy()

TRANSACTION_TYPES = ('income', 'expense')
EXPENSE_CATEGORIES = ('food', 'transport', 'shopping', 'entertainment', 'bills', 'other')
INCOME_CATEGORIES = ('salary', 'freelance', 'business', 'investment', 'bonus')
CATEGORIES = EXPENSE_CATEGORIES + INCOME_CATEGORIES
MESSAGE_TYPES = ('text', 'ping')

CENT = Decimal('0.01')


def new_id():
    return str(uuid.uuid4())


class Money(TypeDecorator):
    """Exact two-place decimal.

    Native NUMERIC where the engine has one, a decimal string on SQLite, which would
    otherwise round-trip amounts through floats.
    """
    impl = db.Numeric(15, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'sqlite':
            return dialect.type_descriptor(db.String(32))
        return dialect.type_descriptor(db.Numeric(15, 2, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = Decimal(value).quantize(CENT)
        return str(value) if dialect.name == 'sqlite' else value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).quantize(CENT)


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    full_name = db.Column(db.String(100), nullable=False)
    private_key = db.Column(db.String(255), nullable=False, unique=True)
    wey_id = db.Column(db.String(8), nullable=False, unique=True)
    monthly_target = db.Column(Money, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class Transaction(db.Model):
    __tablename__ = 'transactions'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    amount = db.Column(Money, nullable=False)
    type = db.Column(db.String(10), nullable=False)
    category = db.Column(db.String(20), nullable=False)
    description = db.Column(db.Text)
    date = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class Contact(db.Model):
    __tablename__ = 'contacts'
    __table_args__ = (db.UniqueConstraint('user_id', 'contact_wey_id'),)

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    contact_wey_id = db.Column(db.String(8), db.ForeignKey('users.wey_id'), nullable=False)
    contact_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class ChatMessage(db.Model):
    __tablename__ = 'chat_messages'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    from_user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    to_wey_id = db.Column(db.String(8), db.ForeignKey('users.wey_id'), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    message_type = db.Column(db.String(10), nullable=False, default='text')
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)


class GlobalMessage(db.Model):
    __tablename__ = 'global_chat'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
