from lesson_market.api.v1.router import api_router

__all__ = ["api_router"]
