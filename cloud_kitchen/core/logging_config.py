import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the whole service."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is far too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
