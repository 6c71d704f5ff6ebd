import logging
import threading
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError

from errors import ContactExists, HandleNotFound
from models import ChatMessage, Contact, GlobalMessage

logger = logging.getLogger(__name__)


class MessagingStore:
    """Contacts, direct messages between handles, and the global broadcast channel."""

    def __init__(self, db, users):
        self.db = db
        self.users = users
        self._lock = threading.Lock()

    def _resolve(self, handle):
        user = self.users.get_by_handle(handle)
        if user is None:
            raise HandleNotFound()
        return user

    def _between(self, owner, other):
        return or_(
            and_(ChatMessage.from_user_id == owner.id, ChatMessage.to_wey_id == other.wey_id),
            and_(ChatMessage.from_user_id == other.id, ChatMessage.to_wey_id == owner.wey_id),
        )

    def _unread_from(self, owner, other):
        return and_(
            ChatMessage.from_user_id == other.id,
            ChatMessage.to_wey_id == owner.wey_id,
            ChatMessage.is_read.is_(False),
        )

    # Contacts

    def add_contact(self, owner_id, handle, label):
        self._resolve(handle)
        with self._lock:
            existing = self.db.session.execute(
                self.db.select(Contact).filter_by(user_id=owner_id, contact_wey_id=handle)
            ).scalar_one_or_none()
            if existing is not None:
                raise ContactExists()

            contact = Contact(
                user_id=owner_id,
                contact_wey_id=handle,
                contact_name=label,
                created_at=datetime.now(),
            )
            self.db.session.add(contact)
            try:
                self.db.session.commit()
            except IntegrityError:
                self.db.session.rollback()
                raise ContactExists()

        logger.info("User %s added contact %s", owner_id, handle)
        return contact

    def delete_contact(self, owner_id, contact_id):
        removed = self.db.session.execute(
            self.db.delete(Contact).where(Contact.id == contact_id, Contact.user_id == owner_id)
        ).rowcount
        self.db.session.commit()
        return bool(removed)

    def list_contacts(self, owner_id):
        owner = self.users.get_by_id(owner_id)
        if owner is None:
            return []
        contacts = self.db.session.scalars(
            self.db.select(Contact).filter_by(user_id=owner_id)
        ).all()

        result = []
        for contact in contacts:
            other = self.users.get_by_handle(contact.contact_wey_id)
            last = None
            unread = 0
            if other is not None:
                last = self.db.session.scalars(
                    self.db.select(ChatMessage)
                    .where(self._between(owner, other))
                    .order_by(ChatMessage.created_at.desc())
                    .limit(1)
                ).first()
                unread = self.db.session.scalar(
                    self.db.select(self.db.func.count(ChatMessage.id)).where(self._unread_from(owner, other))
                )
            result.append({
                'contact': contact,
                'last_message': last.content if last else '',
                'last_message_time': last.created_at if last else contact.created_at,
                'unread_count': unread,
            })

        result.sort(key=lambda c: c['last_message_time'], reverse=True)
        return result

    # Direct messages

    def send_direct(self, from_id, to_handle, content, kind='text'):
        self._resolve(to_handle)
        message = ChatMessage(
            from_user_id=from_id,
            to_wey_id=to_handle,
            content=content,
            message_type=kind,
            is_read=False,
            created_at=datetime.now(),
        )
        self.db.session.add(message)
        self.db.session.commit()
        logger.info("User %s sent %s message to %s", from_id, kind, to_handle)
        return message

    def list_conversation(self, owner_id, handle, limit=50):
        owner = self.users.get_by_id(owner_id)
        other = self.users.get_by_handle(handle)
        if owner is None or other is None:
            return []

        messages = self.db.session.scalars(
            self.db.select(ChatMessage)
            .where(self._between(owner, other))
            .order_by(ChatMessage.created_at.desc())
            .limit(limit)
        )
        return [(m, m.from_user_id == owner_id) for m in messages]

    def mark_read(self, owner_id, handle):
        """Mark everything ``handle`` sent to the owner as read; returns how many flipped."""
        owner = self.users.get_by_id(owner_id)
        other = self.users.get_by_handle(handle)
        if owner is None or other is None:
            return 0

        updated = self.db.session.execute(
            self.db.update(ChatMessage).where(self._unread_from(owner, other)).values(is_read=True)
        ).rowcount
        self.db.session.commit()
        return updated

    # Broadcast

    def send_broadcast(self, from_id, content):
        message = GlobalMessage(user_id=from_id, content=content, created_at=datetime.now())
        self.db.session.add(message)
        self.db.session.commit()
        logger.info("User %s posted to global chat", from_id)
        return message

    def list_broadcast(self, limit=50):
        messages = self.db.session.scalars(
            self.db.select(GlobalMessage).order_by(GlobalMessage.created_at.desc()).limit(limit)
        )
        return [(m, self.users.get_by_id(m.user_id)) for m in messages]
