import logging
from typing import Dict, Optional

from client import StorefrontClient
from local_storage import LocalStorage

logger = logging.getLogger(__name__)


class AuthSession:
    """The signed-in shopper, kept under ``currentUser`` in local storage.

    The stored object is the safe user projection returned by the API plus
    the bearer token, which is handed to the client on load.
    """

    KEY = "currentUser"

    def __init__(self, client: StorefrontClient, storage: LocalStorage):
        self.client = client
        self.storage = storage
        user = self.current_user
        if user:
            self.client.token = user.get("token")

    @property
    def current_user(self) -> Optional[Dict]:
        return self.storage.get_item(self.KEY)

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def is_admin(self) -> bool:
        user = self.current_user
        return bool(user and user.get("role") == "admin")

    def _start(self, response: Dict) -> Dict:
        user = {**response["user"], "token": response["access_token"]}
        self.storage.set_item(self.KEY, user)
        self.client.token = user["token"]
        return user

    def sign_up(self, first_name: str, last_name: str, email: str, password: str, phone: str) -> Dict:
        response = self.client.register(
            firstName=first_name.strip(),
            lastName=last_name.strip(),
            email=email.strip(),
            password=password,
            phone=phone.strip(),
        )
        logger.info("User signed up: %s", response["user"]["email"])
        return self._start(response)

    def sign_in(self, email: str, password: str) -> Dict:
        response = self.client.login(email.strip(), password)
        logger.info("User signed in: %s", response["user"]["email"])
        return self._start(response)

    def sign_out(self) -> None:
        user = self.current_user
        if user:
            logger.info("User signed out: %s", user.get("email"))
        self.storage.remove_item(self.KEY)
        self.client.token = None
