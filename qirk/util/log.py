import logging
import sys
import os
import threading

_RECORD_COUNTER = 0
_RECORD_COUNTER_LOCK = threading.Lock()

LOG_FORMAT = "[%(call_order)d] %(message)s - %(filename)s - %(funcName)s()"

ROOT_LOGGER, FILE_HANDLER, STREAM_HANDLER = None, None, None


class CallOrderFilter(logging.Filter):
    """Filter that adds a sequential call_order attribute to each log record."""
    def filter(self, record):
        global _RECORD_COUNTER
        with _RECORD_COUNTER_LOCK:
            _RECORD_COUNTER += 1
            record.call_order = _RECORD_COUNTER
        return True


def setup_root_logger(log_file_name=None):
    """Configure the one-and-only handlers and filter on the qirk root logger.

    The file name defaults to ``$QIRK_LOG_FILE`` (``qirk.log`` when unset) and is
    created in the current working directory. An empty name disables the file
    handler. ``LOG_TO_CONSOLE=true`` additionally attaches a stdout handler.
    """
    global ROOT_LOGGER, FILE_HANDLER, STREAM_HANDLER
    if ROOT_LOGGER is not None:
        return ROOT_LOGGER

    if log_file_name is None:
        log_file_name = os.getenv("QIRK_LOG_FILE", "qirk.log")

    ROOT_LOGGER = logging.getLogger("qirk")
    ROOT_LOGGER.setLevel(logging.DEBUG)
    ROOT_LOGGER.propagate = False

    call_filter = CallOrderFilter()
    formatter = logging.Formatter(LOG_FORMAT)

    if log_file_name:
        log_file = os.path.join(os.getcwd(), log_file_name)
        FILE_HANDLER = logging.FileHandler(log_file, mode="w", delay=True)
        FILE_HANDLER.setLevel(logging.DEBUG)
        FILE_HANDLER.addFilter(call_filter)
        FILE_HANDLER.setFormatter(formatter)
        ROOT_LOGGER.addHandler(FILE_HANDLER)

    if os.getenv("LOG_TO_CONSOLE", "false").lower() == "true":
        STREAM_HANDLER = logging.StreamHandler(sys.stdout)
        STREAM_HANDLER.setLevel(logging.DEBUG)
        STREAM_HANDLER.addFilter(call_filter)
        STREAM_HANDLER.setFormatter(formatter)
        ROOT_LOGGER.addHandler(STREAM_HANDLER)

    if not ROOT_LOGGER.handlers:
        ROOT_LOGGER.addHandler(logging.NullHandler())

    return ROOT_LOGGER


def get_logger(name=""):
    """
    Returns either:
      - the root 'qirk' logger, if name=="" or "qirk"
      - or a child 'qirk.<name>' logger (module names already under qirk are kept)
    """
    root = setup_root_logger()
    if name in ("", "qirk"):
        return root
    if not name.startswith("qirk."):
        name = f"qirk.{name}"
    lg = logging.getLogger(name)
    lg.setLevel(logging.DEBUG)
    # records travel up to 'qirk' where the handlers live
    lg.propagate = True
    return lg


def reset_call_order():
    """Zero out the counter so the next log will be [1]."""
    global _RECORD_COUNTER
    with _RECORD_COUNTER_LOCK:
        _RECORD_COUNTER = 0
