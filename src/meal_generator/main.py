"""Application entry point.

This module creates the application instance using the factory pattern.

Usage:
    # Development with auto-reload
    uvicorn meal_generator.main:app --reload
"""

from meal_generator.factory import create_app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    from meal_generator.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "meal_generator.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
