import logging
import threading
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from errors import CredentialInUse, InvalidCredential
from identifiers import generate_handle
from models import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Users, resolvable by internal id, credential or public handle (Wey ID)."""

    def __init__(self, db, handle_factory=generate_handle):
        self.db = db
        self.handle_factory = handle_factory
        self._lock = threading.Lock()

    def _find(self, **criteria):
        return self.db.session.execute(
            self.db.select(User).filter_by(**criteria)
        ).scalar_one_or_none()

    def get_by_id(self, user_id):
        return self.db.session.get(User, user_id)

    def get_by_handle(self, handle):
        return self._find(wey_id=handle)

    def get_by_credential(self, credential):
        return self._find(private_key=credential)

    def _unused_handle(self):
        while True:
            handle = self.handle_factory()
            if self.get_by_handle(handle) is None:
                return handle
            logger.debug("Handle collision on %s, regenerating", handle)

    def register(self, name, target, credential):
        with self._lock:
            while True:
                if self.get_by_credential(credential) is not None:
                    raise CredentialInUse()

                user = User(
                    full_name=name,
                    private_key=credential,
                    wey_id=self._unused_handle(),
                    monthly_target=Decimal(target),
                    created_at=datetime.now(),
                )
                self.db.session.add(user)
                try:
                    self.db.session.commit()
                except IntegrityError:
                    # Another writer got in first; re-check which value clashed.
                    self.db.session.rollback()
                    continue

                logger.info("Registered user %s with handle %s", user.id, user.wey_id)
                return user

    def authenticate(self, credential):
        user = self.get_by_credential(credential)
        if user is None:
            raise InvalidCredential()
        return user
