"""
Run the API server: python -m restaurant_backend
"""

import uvicorn

from restaurant_backend.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "restaurant_backend.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
