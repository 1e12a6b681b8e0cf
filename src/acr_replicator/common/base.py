from aws_lambda_powertools.utilities.typing import LambdaContext

CONTEXT_ATTR = "_context"


class HandlerMixins:
    """Mixin class providing common handler utilities.

    Provides access to the invocation context and the handler/service name
    used by logging.

    Attributes:
        context: The invocation context object for the current event.
    """

    @property
    def context(self) -> LambdaContext:
        """Get the invocation context.

        Returns:
            The context object passed by the hosting runtime.

        Raises:
            ValueError: If context has not been set.
        """
        if not hasattr(self, CONTEXT_ATTR):
            raise ValueError(f"{self.__class__.__name__} has no invocation context")
        return getattr(self, CONTEXT_ATTR)

    @context.setter
    def context(self, value: LambdaContext):
        setattr(self, CONTEXT_ATTR, value)

    @classmethod
    def handler_name(cls) -> str:
        return cls.__name__

    @classmethod
    def service_name(cls) -> str:
        """Get the service name for logging.

        Returns:
            The class name as the service identifier.
        """
        return cls.__name__
