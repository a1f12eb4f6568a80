import logging

from comicsticks import log


def test_init_debug_enables_debug():
    log.init(True)
    assert log.debug_enabled() is True


def test_init_without_debug_disables_debug():
    log.init(False)
    assert log.debug_enabled() is False


def test_get_logger_is_child_of_package_logger():
    child = log.get_logger("cache")
    assert child.parent is log.get_logger() or child.name.startswith(
        log.get_logger().name + "."
    )
    assert child.name.endswith(".cache")


def test_get_logger_without_name_is_package_logger():
    assert log.get_logger() is log.get_logger(None)
    assert log.get_logger("") is log.get_logger()


def test_debug_messages_emitted_only_when_enabled(caplog):
    logger = log.get_logger("test")

    log.init(True)
    with caplog.at_level(logging.DEBUG):
        logger.debug("visible debug message")
    assert "visible debug message" in caplog.text

    caplog.clear()
    log.init(False)
    logger.debug("hidden debug message")
    assert "hidden debug message" not in caplog.text


def test_init_is_idempotent_with_handlers():
    log.init(False)
    count = len(log.get_logger().handlers)
    log.init(True)
    log.init(False)
    assert len(log.get_logger().handlers) == count