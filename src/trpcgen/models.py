from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class ProcedureKind(str, Enum):
    QUERY = "Query"
    MUTATION = "Mutation"


class DecoratorDescriptor(BaseModel):
    name: str
    arguments: dict[str, str] = {}


class ProcedureDescriptor(BaseModel):
    name: str
    decorators: list[DecoratorDescriptor] = []


class RouterDescriptor(BaseModel):
    name: str
    alias: str | None = None
    procedures: list[ProcedureDescriptor] = []


class ProcedureMetadata(BaseModel):
    name: str
    kind: ProcedureKind


class RouterMetadata(BaseModel):
    name: str
    path: Path
    alias: str | None = None
    procedures: list[ProcedureMetadata] = []


# ---------------------------------------------------------------------------
# Type descriptors
# ---------------------------------------------------------------------------

PrimitiveName = Literal["string", "boolean", "number", "null", "undefined", "void"]


class PrimitiveType(BaseModel):
    kind: Literal["primitive"] = "primitive"
    name: PrimitiveName


class LiteralType(BaseModel):
    kind: Literal["literal"] = "literal"
    value: str


class ArrayType(BaseModel):
    kind: Literal["array"] = "array"
    element: "TypeDescriptor"


class PropertyDescriptor(BaseModel):
    name: str
    type: "TypeDescriptor"


class ObjectType(BaseModel):
    kind: Literal["object"] = "object"
    name: str | None = None
    properties: list[PropertyDescriptor] = []
    is_callable: bool = False


class UnionType(BaseModel):
    kind: Literal["union"] = "union"
    members: list["TypeDescriptor"]


class IntersectionType(BaseModel):
    kind: Literal["intersection"] = "intersection"
    members: list["TypeDescriptor"]


class PromiseType(BaseModel):
    kind: Literal["promise"] = "promise"
    inner: "TypeDescriptor"


class UnknownType(BaseModel):
    kind: Literal["unknown"] = "unknown"
    text: str = ""


TypeDescriptor = Annotated[
    Union[
        PrimitiveType,
        LiteralType,
        ArrayType,
        ObjectType,
        UnionType,
        IntersectionType,
        PromiseType,
        UnknownType,
    ],
    Field(discriminator="kind"),
]

# necessary for recursive types
for _model in (ArrayType, PropertyDescriptor, ObjectType, UnionType, IntersectionType, PromiseType):
    _model.model_rebuild()
