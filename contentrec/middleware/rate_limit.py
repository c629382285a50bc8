from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared between the app (state + exception handler) and the routers (decorators)
limiter = Limiter(key_func=get_remote_address)
