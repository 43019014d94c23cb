from slowapi import Limiter
from slowapi.util import get_remote_address

from app.features.users.dependencies import get_authorization_header

# Authenticated traffic is keyed on the bearer token; the auth endpoints
# override the key with the client address.
limiter = Limiter(key_func=get_authorization_header)

limit_by_address = get_remote_address
