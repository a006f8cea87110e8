from __future__ import annotations

import pandas as pd

from penguin_paradox.schema import PenguinSchema


def build_pandera_schema(schema: PenguinSchema, *, allow_extra_columns: bool = True):
    try:
        import pandera.pandas as pa
    except Exception as exc:
        raise RuntimeError("Pandera is required for validation gates.") from exc

    columns = {schema.group: pa.Column(str, nullable=False, coerce=True)}
    for measurement in schema.measurements:
        columns[measurement] = pa.Column(
            float,
            checks=pa.Check.gt(0.0),
            nullable=False,
            coerce=True,
        )

    return pa.DataFrameSchema(
        columns=columns,
        strict=not allow_extra_columns,
        coerce=True,
    )


def validate_frame(
    frame: pd.DataFrame,
    schema: PenguinSchema,
    *,
    context: str,
    allow_extra_columns: bool = True,
) -> pd.DataFrame:
    schema.ensure_valid()
    pandera_schema = build_pandera_schema(schema, allow_extra_columns=allow_extra_columns)

    try:
        validated = pandera_schema.validate(frame, lazy=True)
    except Exception as exc:
        raise ValueError(f"Validation gate failed in {context}: {exc}") from exc

    return validated
