"""envtag — populate dataclasses and pydantic models from environment variables."""

from envtag.domain.duration import Duration
from envtag.domain.errors import (
    BindError,
    Bound,
    ConversionFailedError,
    EnvtagError,
    MissingRequiredError,
    OutOfRangeError,
    PreconditionError,
    UnassignableError,
    UnsupportedTypeError,
)
from envtag.domain.policy import Env, FieldPolicy, parse_directive
from envtag.domain.types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from envtag.services.binder import RecordBinder, bind, load
from envtag.services.converters import Converter, ConverterRegistry, build_default_registry
from envtag.services.result import Aggregation, ErrorCollection

__version__ = "0.3.0"

__all__ = [
    "Aggregation",
    "BindError",
    "Bound",
    "ConversionFailedError",
    "Converter",
    "ConverterRegistry",
    "Duration",
    "Env",
    "EnvtagError",
    "ErrorCollection",
    "FieldPolicy",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Kind",
    "MissingRequiredError",
    "OutOfRangeError",
    "PreconditionError",
    "RecordBinder",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnassignableError",
    "UnsupportedTypeError",
    "__version__",
    "bind",
    "build_default_registry",
    "load",
    "parse_directive",
]
