import uvicorn

from lesson_market.core.config import settings


def main() -> None:
    uvicorn.run("lesson_market.main:app", host=settings.host, port=settings.port, reload=settings.is_development)


if __name__ == "__main__":
    main()
