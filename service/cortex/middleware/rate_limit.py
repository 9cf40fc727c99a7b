from slowapi import Limiter
from slowapi.util import get_remote_address

# Rate limiter for endpoints that call the AI API
limiter = Limiter(key_func=get_remote_address)
