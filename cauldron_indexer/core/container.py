# cauldron_indexer/core/container.py

import inspect
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from msgspec import Struct

from .config import IndexerConfig
from .errors import ServiceResolutionError
from .logging import IndexerLogger, log_with_context, DEBUG, ERROR

T = TypeVar('T')


class Registration(Struct):
    implementation: Optional[type] = None
    factory: Optional[Callable[['IndexerContainer'], Any]] = None


class IndexerContainer:
    """
    One container per network. Every service is built once, on first get().

    Classes are built by constructor injection: a parameter annotated with a
    registered type gets that service, and parameters named ``config`` or
    ``network`` get the indexer config or its network.
    """

    def __init__(self, config: IndexerConfig):
        self._config = config
        self._registrations: Dict[type, Registration] = {}
        self._instances: Dict[type, Any] = {}
        self._building: List[type] = []
        self._named_values: Dict[str, Callable[[], Any]] = {
            'config': lambda: self._config,
            'network': lambda: self._config.network,
        }
        self._logger = IndexerLogger.get_logger('core.container')

    @property
    def config(self) -> IndexerConfig:
        return self._config

    def register_singleton(self, interface: Type[T], implementation: Type[T]) -> 'IndexerContainer':
        self._registrations[interface] = Registration(implementation=implementation)
        return self

    def register_factory(self, interface: Type[T], factory: Callable[['IndexerContainer'], T]) -> 'IndexerContainer':
        self._registrations[interface] = Registration(factory=factory)
        return self

    def get(self, service_type: Type[T]) -> T:
        if service_type in self._instances:
            return self._instances[service_type]

        registration = self._registrations.get(service_type)
        if registration is None:
            raise ServiceResolutionError(f"Service {service_type.__name__} not registered")

        if service_type in self._building:
            chain = ' -> '.join(t.__name__ for t in self._building + [service_type])
            raise ServiceResolutionError(f"Circular dependency: {chain}")

        self._building.append(service_type)
        try:
            if registration.factory is not None:
                instance = registration.factory(self)
            else:
                instance = self._construct(registration.implementation)
        except Exception as e:
            log_with_context(self._logger, ERROR, "Failed to build service",
                            service=service_type.__name__,
                            error=str(e),
                            exception_type=type(e).__name__)
            raise
        finally:
            self._building.pop()

        self._instances[service_type] = instance
        log_with_context(self._logger, DEBUG, "Service built",
                        service=service_type.__name__,
                        implementation=type(instance).__name__)
        return instance

    def _construct(self, implementation: type) -> Any:
        kwargs = {}
        for name, param in inspect.signature(implementation.__init__).parameters.items():
            if name == 'self' or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            if param.annotation in self._registrations:
                kwargs[name] = self.get(param.annotation)
            elif name in self._named_values:
                kwargs[name] = self._named_values[name]()
            elif param.default is inspect.Parameter.empty:
                raise ServiceResolutionError(
                    f"Cannot resolve parameter '{name}' of {implementation.__name__}"
                )

        return implementation(**kwargs)
