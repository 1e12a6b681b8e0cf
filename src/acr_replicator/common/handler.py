from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from aibs_informatics_core.models.base import ModelProtocol
from aibs_informatics_core.utils.json import JSON
from aws_lambda_powertools.utilities.typing import LambdaContext

from acr_replicator.common.base import HandlerMixins
from acr_replicator.common.exceptions import DecodeError
from acr_replicator.common.logging import LoggingMixins

LambdaEvent = Union[JSON, str, bytes]  # type: ignore # https://github.com/python/mypy/issues/7866
LambdaHandlerType = Callable[[LambdaEvent, LambdaContext], Optional[JSON]]

REQUEST = TypeVar("REQUEST")
RESPONSE = TypeVar("RESPONSE", bound=ModelProtocol)


@dataclass  # type: ignore[misc] # mypy #5374
class EventHandler(
    LoggingMixins,
    HandlerMixins,
    Generic[REQUEST, RESPONSE],
):
    """Base class for strongly-typed event handlers.

    Subclasses turn the raw event delivered by the hosting runtime into a
    REQUEST object (`deserialize_request`) and handle it (`handle`). A
    RESPONSE following the `ModelProtocol` is serialized back to the runtime.

    Events that cannot be decoded (`DecodeError`) are logged and end the
    invocation without a response. Any other exception propagates so that
    the runtime's redelivery policy applies.

    Type Parameters:
        REQUEST: The decoded event type.
        RESPONSE: The response model type (must implement ModelProtocol).

    Example:
        ```python
        class MyHandler(EventHandler[MyEvent, MyResponse]):
            @classmethod
            def deserialize_request(cls, event: LambdaEvent) -> MyEvent:
                return MyEvent.from_dict(event)

            def handle(self, request: MyEvent) -> MyResponse:
                return MyResponse(message=f"Hello, {request.name}!")

        handler = MyHandler.get_handler()
        ```
    """

    def __post_init__(self):
        self.context = LambdaContext()

    @classmethod
    def deserialize_request(cls, event: LambdaEvent) -> REQUEST:
        """Decode the raw event.

        Raises:
            DecodeError: If the event is empty or malformed.
        """
        raise NotImplementedError(  # pragma: no cover
            f"{cls.__name__} must implement deserialize_request"
        )

    @classmethod
    def serialize_response(cls, response: RESPONSE) -> JSON:
        return response.to_dict()

    def handle(self, request: REQUEST) -> Optional[RESPONSE]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement handle")

    # --------------------------------------------------------------------
    # Handler provider methods
    # --------------------------------------------------------------------

    @classmethod
    def get_handler(cls, *args, **kwargs) -> LambdaHandlerType:
        """Create the entry point function for this handler class.

        The returned function builds a fresh handler instance for every
        invocation, so nothing is shared between concurrent events.

        Args:
            *args: Positional arguments passed to the handler constructor.
            **kwargs: Keyword arguments passed to the handler constructor.

        Returns:
            A callable taking (event, context) suitable for the hosting runtime.
        """

        logger = cls.get_logger(service=cls.service_name(), add_to_root=False)

        @logger.inject_lambda_context(log_event=True)
        def handler(event: LambdaEvent, context: LambdaContext) -> Optional[JSON]:
            event_handler = cls(*args, **kwargs)  # type: ignore[call-arg]
            event_handler.log = logger
            event_handler.context = context
            event_handler.add_logger_to_root()

            try:
                request = event_handler.deserialize_request(event)
            except DecodeError as e:
                event_handler.log.error(f"Could not decode event: {e}")
                return None

            event_handler.log.info("Event successfully decoded. Calling handler...")
            response = event_handler.handle(request=request)

            if response:
                event_handler.log.info(f"Handler completed with response: {response}")
                return event_handler.serialize_response(response)

            event_handler.log.info("Handler completed without a response")
            return None

        return handler

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
