from __future__ import annotations
import logging
from jsm_portal.config import load_log_level


def logging_conf() -> None:
    logging.basicConfig(
        level=load_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
