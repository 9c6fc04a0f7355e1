'''
Logging setup for the poster pipeline.
'''
import logging
import sys


def setup_logging(level=logging.INFO, log_file=None):
    '''
    Configure the root logger with a stdout handler and an optional file handler.

    params:
        level (int, optional): Defaults to logging.INFO.
        log_file (str or Path, optional): also write the log here.
    '''
    logger = logging.getLogger()
    logger.setLevel(level)

    # avoid duplicate handlers when called twice in one session
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # fiona/pyogrio and matplotlib are chatty at DEBUG
    logging.getLogger('matplotlib').setLevel(max(level, logging.WARNING))
    logging.getLogger('pyogrio').setLevel(max(level, logging.WARNING))

    logger.debug('Logging initialized.')
