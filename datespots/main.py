"""Run the Dates of Bangalore map page and its JSON API under uvicorn.

The app loads stories from the record store on startup; see datespots.config
for the DATESPOTS_* environment settings.
"""
import logging

import uvicorn

from datespots.config import API_HOST, API_PORT, LOG_LEVEL


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")
    uvicorn.run(
        "datespots.api.app:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
    )


if __name__ == "__main__":
    main()
