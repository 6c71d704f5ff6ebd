import secrets
import string

TOKEN_ALPHABET = string.ascii_letters + string.digits
HANDLE_ALPHABET = string.ascii_uppercase + string.digits

CREDENTIAL_PREFIX = 'SK-'
CREDENTIAL_LENGTH = 32
HANDLE_LENGTH = 8


def generate_token(prefix=CREDENTIAL_PREFIX, length=CREDENTIAL_LENGTH):
    """Return ``prefix`` followed by ``length`` random alphanumeric characters.

    Uniqueness is not guaranteed; callers that need it must check and retry.
    """
    return prefix + ''.join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def generate_handle():
    return ''.join(secrets.choice(HANDLE_ALPHABET) for _ in range(HANDLE_LENGTH))
