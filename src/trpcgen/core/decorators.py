from tree_sitter import Node

from trpcgen.core.ast import SourceFile, call_arguments, decorator_call, decorator_name, field, named_children, unquote
from trpcgen.core.flatten import SchemaFlattener
from trpcgen.models import DecoratorDescriptor, ProcedureKind

_PROCEDURE_KINDS = frozenset(kind.value for kind in ProcedureKind)


class DecoratorSerializer:
    """Turn method decorators into descriptors with flattened argument expressions."""

    def __init__(self, flattener: SchemaFlattener) -> None:
        self._flattener = flattener

    def serialize_procedure_decorators(
        self, decorators: list[Node], source_file: SourceFile
    ) -> list[DecoratorDescriptor]:
        serialized: list[DecoratorDescriptor] = []
        for decorator in decorators:
            name = decorator_name(decorator, source_file)
            arguments = self._procedure_arguments(decorator, source_file) if name in _PROCEDURE_KINDS else {}
            serialized.append(DecoratorDescriptor(name=name, arguments=arguments))
        return serialized

    def _procedure_arguments(self, decorator: Node, source_file: SourceFile) -> dict[str, str]:
        call = decorator_call(decorator)
        if call is None:
            return {}
        arguments = call_arguments(call)
        if not arguments or arguments[0].type != "object":
            return {}

        serialized: dict[str, str] = {}
        for member in named_children(arguments[0]):
            if member.type == "pair":
                key = field(member, "key")
                value = field(member, "value")
                if key is None or value is None:
                    continue
                serialized[unquote(source_file.text(key))] = self._flattener.flatten(value, source_file)
            elif member.type == "shorthand_property_identifier":
                serialized[source_file.text(member)] = self._flattener.flatten(member, source_file)
        return serialized
