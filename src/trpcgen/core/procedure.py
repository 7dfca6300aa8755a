from trpcgen.models import DecoratorDescriptor, ProcedureDescriptor, ProcedureKind

PLACEHOLDER = "PLACEHOLDER_DO_NOT_REMOVE"

_PROCEDURE_KINDS = frozenset(kind.value for kind in ProcedureKind)


def find_procedure_decorator(decorators: list[DecoratorDescriptor]) -> DecoratorDescriptor | None:
    """The ``Query``/``Mutation`` decorator of a procedure, if any."""
    return next((decorator for decorator in decorators if decorator.name in _PROCEDURE_KINDS), None)


def with_output(decorator: DecoratorDescriptor, output: str) -> DecoratorDescriptor:
    """Copy of ``decorator`` with its ``output`` argument set."""
    return decorator.model_copy(update={"arguments": {**decorator.arguments, "output": output}})


def render_procedure(procedure: ProcedureDescriptor) -> str:
    decorator = find_procedure_decorator(procedure.decorators)
    if decorator is None:
        return ""

    chained = "".join(f".{key}({value})" for key, value in decorator.arguments.items())
    return (
        f"{procedure.name}: publicProcedure{chained}"
        f'.{decorator.name.lower()}(async () => "{PLACEHOLDER}" as any )'
    )
