import logging

from acr_replicator.common.logging import (
    SERVICE_NAME,
    LoggingMixins,
    add_handler_to_logger,
    get_service_logger,
)


class ServiceHandler(LoggingMixins):
    pass


def test__get_service_logger__defaults_to_package_service():
    assert get_service_logger().service == SERVICE_NAME
    assert get_service_logger("my-service").service == "my-service"


def test__LoggingMixins__creates_logger_per_service_name():
    obj = ServiceHandler()

    assert obj.logger.service == "ServiceHandler"
    assert obj.log is obj.logger


def test__add_handler_to_logger__adds_handler_once():
    source = get_service_logger("handler-test")
    target = logging.getLogger("acr_replicator.test.target")

    add_handler_to_logger(source, target)
    add_handler_to_logger(source, target)

    assert target.handlers.count(source.registered_handler) == 1
    target.removeHandler(source.registered_handler)
