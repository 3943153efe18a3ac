import logging
import logging.config
from typing import Optional

from habitgrid.config import TrackerConfig, config as default_config

def setup_logging(cfg: Optional[TrackerConfig] = None) -> logging.Logger:
    cfg = cfg or default_config
    if cfg.log_to_file:
        cfg.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(cfg.get_logging_config())
    return logging.getLogger("habitgrid")
