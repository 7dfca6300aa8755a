from trpcgen.models import (
    ArrayType,
    IntersectionType,
    LiteralType,
    ObjectType,
    PrimitiveType,
    PromiseType,
    TypeDescriptor,
    UnionType,
)

SEPARATOR = ","

_PRIMITIVE_BUILDERS = frozenset({"string", "boolean", "null", "number", "undefined"})


class SchemaSynthesizer:
    """Derive a schema-builder expression from a type descriptor.

    Every non-empty fragment ends with ``SEPARATOR`` so fragments can be
    concatenated straight into an enclosing ``z.object({...})`` or
    ``z.union([...])``.
    """

    def __init__(self, schema_namespace: str = "z") -> None:
        self._ns = schema_namespace

    def synthesize(self, descriptor: TypeDescriptor) -> str:
        # Order matters: a literal is also classified by its primitive kind,
        # and callables must be filtered before generic object handling.
        if isinstance(descriptor, PromiseType):
            return self.synthesize(descriptor.inner)

        if isinstance(descriptor, LiteralType):
            schema = f"{self._ns}.literal({descriptor.value})"
        elif isinstance(descriptor, PrimitiveType) and descriptor.name in _PRIMITIVE_BUILDERS:
            schema = f"{self._ns}.{descriptor.name}()"
        elif isinstance(descriptor, ArrayType):
            schema = f"{self._ns}.array({self.synthesize(descriptor.element)})"
        elif isinstance(descriptor, ObjectType):
            if descriptor.is_callable:
                return ""
            schema = self._synthesize_object(descriptor)
        elif isinstance(descriptor, UnionType):
            members = "".join(self.synthesize(member) for member in descriptor.members)
            schema = f"{self._ns}.union([{members}])"
        elif isinstance(descriptor, IntersectionType):
            schema = self._synthesize_intersection(descriptor)
        elif isinstance(descriptor, PrimitiveType) and descriptor.name == "void":
            schema = f"{self._ns}.void()"
        else:
            schema = f"{self._ns}.any()"

        return f"{schema}{SEPARATOR}"

    def _synthesize_object(self, descriptor: ObjectType) -> str:
        properties = "".join(
            f"{prop.name}:{self.synthesize(prop.type)}"
            for prop in descriptor.properties
            if not (isinstance(prop.type, ObjectType) and prop.type.is_callable)
        )
        return f"{self._ns}.object({{{properties}}})"

    def _synthesize_intersection(self, descriptor: IntersectionType) -> str:
        if not descriptor.members:
            return f"{self._ns}.any()"
        first, *rest = descriptor.members
        # The chain continues after the first fragment, so its separator goes.
        schema = self.synthesize(first).removesuffix(SEPARATOR)
        for member in rest:
            schema += f".and({self.synthesize(member)})"
        return schema
