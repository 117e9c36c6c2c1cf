# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Output rendering for quota listings.

Formats: table, csv, json, yaml, count, ids
"""

import csv
import io
import json
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import yaml

from .exceptions import ValidationError
from .models import DEFAULT_FIELDS, TenantQuotaRecord

FORMATS = ["table", "csv", "count", "ids", "json", "yaml"]

_FIELD_SPLIT = re.compile(r",[ \t]*")


def parse_fields(fields: Union[str, Sequence[str], None]) -> List[str]:
    """Split a comma separated field list ("blog_id, url")"""
    if fields is None:
        return list(DEFAULT_FIELDS)
    if isinstance(fields, str):
        fields = _FIELD_SPLIT.split(fields.strip())

    result = [f for f in fields if f]
    unknown = [f for f in result if f not in DEFAULT_FIELDS]
    if unknown:
        raise ValidationError(
            f"Invalid field: {', '.join(unknown)}. Available fields: {', '.join(DEFAULT_FIELDS)}",
            field="fields",
            value=unknown,
        )
    return result or list(DEFAULT_FIELDS)


def _display(field: str, value: Any) -> str:
    if field == "quota_used_percent":
        return f"{value:.2f}"
    return str(value)


def _rows(records: Iterable[TenantQuotaRecord], fields: List[str]) -> List[Dict[str, Any]]:
    return [{f: getattr(record, f) for f in fields} for record in records]


def render_table(rows: List[Dict[str, Any]], fields: List[str]) -> str:
    cells = [[_display(f, row[f]) for f in fields] for row in rows]
    widths = [
        max([len(f)] + [len(line[i]) for line in cells]) for i, f in enumerate(fields)
    ]

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(values: List[str]) -> str:
        return "|" + "|".join(f" {v:<{w}} " for v, w in zip(values, widths)) + "|"

    out = [border, line(fields), border]
    if cells:
        out.extend(line(values) for values in cells)
        out.append(border)
    return "\n".join(out)


def render_csv(rows: List[Dict[str, Any]], fields: List[str]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(fields)
    for row in rows:
        writer.writerow([_display(f, row[f]) for f in fields])
    return buffer.getvalue().rstrip("\n")


def format_items(
    records: Iterable[TenantQuotaRecord],
    fmt: str = "table",
    fields: Optional[Sequence[str]] = None,
) -> str:
    """
    Render quota records.

    Args:
        records: Records to render (consumed once)
        fmt: One of FORMATS
        fields: Columns to render, defaults to DEFAULT_FIELDS

    Returns:
        Rendered text without trailing newline
    """
    if fmt not in FORMATS:
        raise ValidationError(
            f"Invalid format: {fmt}. Must be one of: {', '.join(FORMATS)}",
            field="format",
            value=fmt,
        )

    if fmt == "ids":
        return " ".join(str(record.blog_id) for record in records)
    if fmt == "count":
        return str(sum(1 for _ in records))

    columns = parse_fields(fields)
    rows = _rows(records, columns)

    if fmt == "json":
        return json.dumps(rows)
    if fmt == "yaml":
        return yaml.safe_dump(rows, default_flow_style=False, sort_keys=False).rstrip("\n")
    if fmt == "csv":
        return render_csv(rows, columns)
    return render_table(rows, columns)


def format_field(
    records: Iterable[TenantQuotaRecord],
    field: str,
    fmt: str = "table",
) -> str:
    """Render the values of a single field, one per line (``--field=url``)"""
    if fmt not in FORMATS:
        raise ValidationError(f"Invalid format: {fmt}", field="format", value=fmt)
    if fmt in ("ids", "count"):
        return format_items(records, fmt)

    columns = parse_fields([field])
    if len(columns) != 1:
        raise ValidationError(f"Invalid field: {field}", field="field", value=field)
    column = columns[0]
    values = [getattr(record, column) for record in records]

    if fmt == "json":
        return json.dumps(values)
    if fmt == "yaml":
        return yaml.safe_dump(values, default_flow_style=False).rstrip("\n")
    return "\n".join(_display(column, value) for value in values)
