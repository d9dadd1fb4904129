from qualinject.deferred import Deferred
from qualinject.exceptions import (
    AmbiguousDependencyError,
    AsyncDependencyInSyncContextError,
    DependencyNotFoundError,
    InjectionError,
    InvalidParameterError,
)
from qualinject.injectable import Injectable, InstanceState
from qualinject.injector import Injector
from qualinject.parameter import Parameter
from qualinject.qualifier import Qualifier, QualifierLike, create_qualifier, qualifier

__all__ = [
    "AmbiguousDependencyError",
    "AsyncDependencyInSyncContextError",
    "Deferred",
    "DependencyNotFoundError",
    "Injectable",
    "InjectionError",
    "Injector",
    "InstanceState",
    "InvalidParameterError",
    "Parameter",
    "Qualifier",
    "QualifierLike",
    "create_qualifier",
    "qualifier",
]
