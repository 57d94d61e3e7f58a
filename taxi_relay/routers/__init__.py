from .blocked import router as blocked
from .requests import router as requests

all_router = [
    requests,
    blocked,
]
