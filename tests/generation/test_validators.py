from __future__ import annotations

import pytest

from sdkgen.generation.validators import render_validator
from sdkgen.ir import (
    UNKNOWN,
    AllOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRField,
    IRSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    RefSchema,
    StringSchema,
)


class TestRenderValidator:
    @pytest.mark.parametrize(
        ("schema", "expected"),
        [
            pytest.param(StringSchema(), "z.string()", id="string"),
            pytest.param(StringSchema(format="date-time"), "z.string().datetime()", id="datetime"),
            pytest.param(StringSchema(format="email"), "z.string().email()", id="email"),
            pytest.param(StringSchema(format="uri"), "z.string().url()", id="uri"),
            pytest.param(StringSchema(format="uuid"), "z.string().uuid()", id="uuid"),
            pytest.param(IntegerSchema(), "z.number().int()", id="integer"),
            pytest.param(NumberSchema(nullable=True), "z.number().nullable()", id="nullable-number"),
            pytest.param(BooleanSchema(), "z.boolean()", id="boolean"),
            pytest.param(NullSchema(nullable=True), "z.null()", id="null"),
            pytest.param(UNKNOWN, "z.unknown()", id="unknown"),
            pytest.param(RefSchema(ref="User"), "Schema.UserSchema", id="ref"),
            pytest.param(ArraySchema(items=IntegerSchema()), "z.array(z.number().int())", id="array"),
            pytest.param(ObjectSchema(), "z.record(z.string(), z.unknown())", id="empty-object"),
            pytest.param(EnumSchema(values=("a", "b")), 'z.enum(["a", "b"])', id="string-enum"),
            pytest.param(
                EnumSchema(values=(1, 2), base="integer"),
                "z.union([z.literal(1), z.literal(2)])",
                id="integer-enum",
            ),
            pytest.param(
                OneOfSchema(variants=(StringSchema(), IntegerSchema())),
                "z.union([z.string(), z.number().int()])",
                id="union",
            ),
            pytest.param(OneOfSchema(variants=(StringSchema(),)), "z.string()", id="single-union"),
            pytest.param(
                AllOfSchema(parts=(RefSchema(ref="A"), RefSchema(ref="B"))),
                "Schema.ASchema.and(Schema.BSchema)",
                id="all-of",
            ),
        ],
    )
    def test_renders(self, schema: IRSchema, expected: str) -> None:
        assert render_validator(schema) == expected

    def test_object_fields(self) -> None:
        schema = ObjectSchema(
            properties=(
                IRField(name="id", type=StringSchema(format="uuid"), required=True),
                IRField(name="tags", type=ArraySchema(items=StringSchema()), required=False),
            ),
            additional_properties=UNKNOWN,
        )
        assert render_validator(schema) == (
            "z.object({ id: z.string().uuid(), tags: z.array(z.string()).optional() }).catchall(z.unknown())"
        )

    def test_local_refs(self) -> None:
        assert render_validator(ArraySchema(items=RefSchema(ref="User")), local=True) == "z.array(UserSchema)"
