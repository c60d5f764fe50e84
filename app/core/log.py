from __future__ import annotations

import logging

from .settings import S

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or S.log_level).upper(), format=LOG_FORMAT)
    # boto's debug output drowns everything else.
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
