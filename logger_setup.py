# logger_setup.py

import logging
import os

def setup_logging(config: dict, log_root='runs'):
    """
    Attaches console and file output to the "crystal_sim" logger.

    The logger does not propagate, so pygame and numba output stays out of the
    run log. Calling this again replaces the handlers instead of stacking them.

    Data Contract:
    - Inputs:
        - config (dict): the loaded config.json. Uses 'run_id' and the
          'logging' section ('level', 'format').
        - log_root (str): directory that holds one folder per run.
    - Outputs: the configured logging.Logger.
    - Side Effects: creates <log_root>/<run_id>/ and opens simulation.log in it.
    """
    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger("crystal_sim")
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join(log_root, run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.FileHandler(log_file), logging.StreamHandler()]

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return logger
