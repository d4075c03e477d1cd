from .api import api_router
