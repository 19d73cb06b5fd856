"""FastAPI DataSpec - cast request bodies into declared types inside request flows."""

from fastapi_dataspec.annotation import (
    DEFAULT_TYPE_NAME,
    TypeAnnotation,
    TypeIdentifier,
    TypeRef,
    typeref,
)
from fastapi_dataspec.casting import (
    CastEngine,
    CastError,
    CastResult,
    Failure,
    PydanticCastEngine,
    Success,
)
from fastapi_dataspec.component import ComponentCategory, FlowComponent
from fastapi_dataspec.components.body import JSONBody
from fastapi_dataspec.components.cast import BodyCast, value
from fastapi_dataspec.composition import OverrideFlow, merge_flows
from fastapi_dataspec.context import RequestContext
from fastapi_dataspec.dependency import enrich_openapi, flow_dependency
from fastapi_dataspec.exceptions import (
    FlowException,
    FlowInternalError,
    MissingTypeRef,
    SchemaConflict,
    TypeRefError,
)
from fastapi_dataspec.flow import Flow
from fastapi_dataspec.hooks import (
    AfterComponent,
    AfterFlow,
    BeforeFlow,
    FlowHook,
)
from fastapi_dataspec.outcome import CONTINUE, Continue, Halt, StageResult
from fastapi_dataspec.trace import FlowTrace, TraceEntry

__all__ = [
    "CONTINUE",
    "DEFAULT_TYPE_NAME",
    "AfterComponent",
    "AfterFlow",
    "BeforeFlow",
    "BodyCast",
    "CastEngine",
    "CastError",
    "CastResult",
    "ComponentCategory",
    "Continue",
    "Failure",
    "Flow",
    "FlowComponent",
    "FlowException",
    "FlowHook",
    "FlowInternalError",
    "FlowTrace",
    "Halt",
    "JSONBody",
    "MissingTypeRef",
    "OverrideFlow",
    "PydanticCastEngine",
    "RequestContext",
    "SchemaConflict",
    "StageResult",
    "Success",
    "TraceEntry",
    "TypeAnnotation",
    "TypeIdentifier",
    "TypeRef",
    "TypeRefError",
    "enrich_openapi",
    "flow_dependency",
    "merge_flows",
    "typeref",
    "value",
]
