"""Unit tests for type-directed schema synthesis."""

import pytest

from trpcgen.core.synthesize import SchemaSynthesizer
from trpcgen.models import (
    ArrayType,
    IntersectionType,
    LiteralType,
    ObjectType,
    PrimitiveType,
    PromiseType,
    PropertyDescriptor,
    TypeDescriptor,
    UnionType,
    UnknownType,
)

STRING = PrimitiveType(name="string")
NUMBER = PrimitiveType(name="number")
FUNCTION = ObjectType(is_callable=True)


@pytest.fixture
def synthesizer() -> SchemaSynthesizer:
    return SchemaSynthesizer()


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        (STRING, "z.string(),"),
        (NUMBER, "z.number(),"),
        (PrimitiveType(name="boolean"), "z.boolean(),"),
        (PrimitiveType(name="null"), "z.null(),"),
        (PrimitiveType(name="undefined"), "z.undefined(),"),
        (PrimitiveType(name="void"), "z.void(),"),
        (LiteralType(value="'admin'"), "z.literal('admin'),"),
        (LiteralType(value="42"), "z.literal(42),"),
        (UnknownType(text="symbol"), "z.any(),"),
    ],
    ids=["string", "number", "boolean", "null", "undefined", "void", "string-literal", "number-literal", "unknown"],
)
def test_leaf_types(synthesizer: SchemaSynthesizer, descriptor: TypeDescriptor, expected: str) -> None:
    assert synthesizer.synthesize(descriptor) == expected


def test_array(synthesizer: SchemaSynthesizer) -> None:
    assert synthesizer.synthesize(ArrayType(element=STRING)) == "z.array(z.string(),),"


def test_object_properties_in_declared_order(synthesizer: SchemaSynthesizer) -> None:
    descriptor = ObjectType(
        properties=[PropertyDescriptor(name="a", type=STRING), PropertyDescriptor(name="b", type=NUMBER)]
    )

    assert synthesizer.synthesize(descriptor) == "z.object({a:z.string(),b:z.number(),}),"


def test_promise_is_transparent(synthesizer: SchemaSynthesizer) -> None:
    assert synthesizer.synthesize(PromiseType(inner=NUMBER)) == synthesizer.synthesize(NUMBER)


def test_promise_of_literal_stays_literal(synthesizer: SchemaSynthesizer) -> None:
    assert synthesizer.synthesize(PromiseType(inner=LiteralType(value="true"))) == "z.literal(true),"


def test_union_members_in_declared_order(synthesizer: SchemaSynthesizer) -> None:
    assert synthesizer.synthesize(UnionType(members=[STRING, NUMBER])) == "z.union([z.string(),z.number(),]),"


def test_intersection_chains_with_and(synthesizer: SchemaSynthesizer) -> None:
    descriptor = IntersectionType(
        members=[
            ObjectType(properties=[PropertyDescriptor(name="a", type=STRING)]),
            ObjectType(properties=[PropertyDescriptor(name="b", type=NUMBER)]),
            ObjectType(properties=[PropertyDescriptor(name="c", type=STRING)]),
        ]
    )

    assert synthesizer.synthesize(descriptor) == (
        "z.object({a:z.string(),}).and(z.object({b:z.number(),}),).and(z.object({c:z.string(),}),),"
    )


def test_callable_properties_are_omitted(synthesizer: SchemaSynthesizer) -> None:
    descriptor = ObjectType(
        properties=[
            PropertyDescriptor(name="id", type=NUMBER),
            PropertyDescriptor(name="greet", type=FUNCTION),
            PropertyDescriptor(name="name", type=STRING),
        ]
    )

    assert synthesizer.synthesize(descriptor) == "z.object({id:z.number(),name:z.string(),}),"


def test_callable_object_yields_empty_fragment(synthesizer: SchemaSynthesizer) -> None:
    descriptor = ObjectType(properties=[PropertyDescriptor(name="length", type=NUMBER)], is_callable=True)

    assert synthesizer.synthesize(descriptor) == ""


def test_nested_structures(synthesizer: SchemaSynthesizer) -> None:
    descriptor = PromiseType(
        inner=ArrayType(
            element=ObjectType(
                properties=[
                    PropertyDescriptor(name="tags", type=ArrayType(element=STRING)),
                    PropertyDescriptor(name="role", type=UnionType(members=[LiteralType(value='"a"'), UnknownType()])),
                ]
            )
        )
    )

    assert synthesizer.synthesize(descriptor) == (
        'z.array(z.object({tags:z.array(z.string(),),role:z.union([z.literal("a"),z.any(),]),}),),'
    )


def test_custom_namespace() -> None:
    assert SchemaSynthesizer("zod").synthesize(ArrayType(element=STRING)) == "zod.array(zod.string(),),"
