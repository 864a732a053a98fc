import logging


def setup(level: int = logging.INFO) -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s: %(message)s", level=level
    )
