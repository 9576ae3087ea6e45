"""Run the API with uvicorn: `python -m seat_reservation` or `seat-reservation-api`."""

import uvicorn

from seat_reservation.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "seat_reservation.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
