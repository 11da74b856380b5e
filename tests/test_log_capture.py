import logging

from src.treecollect.observability import LogBuffer, install_log_capture, remove_log_capture


def test_buffer_keeps_newest_lines_up_to_capacity():
    logger = logging.getLogger("tests.log_capture.capacity")
    logger.propagate = False
    buffer = install_log_capture(3, logger=logger)
    try:
        for index in range(5):
            logger.info(f"message {index}")
    finally:
        remove_log_capture(buffer, logger=logger)

    lines = buffer.lines()
    assert len(lines) == 3
    assert lines[0].endswith("[INFO] message 4")
    assert lines[-1].endswith("[INFO] message 2")
    assert buffer.lines(newest_first=False)[0].endswith("message 2")


def test_install_lowers_level_and_remove_restores_it():
    logger = logging.getLogger("tests.log_capture.level")
    logger.propagate = False
    logger.setLevel(logging.WARNING)

    buffer = install_log_capture(10, logger=logger)
    assert logger.level == logging.INFO
    assert buffer in logger.handlers

    remove_log_capture(buffer, logger=logger)
    assert logger.level == logging.WARNING
    assert buffer not in logger.handlers


def test_debug_records_are_not_captured():
    buffer = LogBuffer(capacity=5)
    logger = logging.getLogger("tests.log_capture.debug")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(buffer)
    try:
        logger.debug("too chatty")
        logger.warning("Rate limit exceeded for territory 4. Using straight lines.")
    finally:
        logger.removeHandler(buffer)

    assert buffer.capacity == 5
    assert len(buffer.lines()) == 1
    assert "[WARNING] Rate limit exceeded for territory 4" in buffer.lines()[0]

    buffer.clear()
    assert buffer.lines() == []
