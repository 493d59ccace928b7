"""Plain-text table rendering of data-source rows."""

from typing import Iterable, Mapping, Optional

from ..protocol.schema import DATA_SOURCE_COLUMNS, SqlInstance


def instance_rows(instances: Iterable[SqlInstance]) -> list[dict[str, str]]:
    return [instance.to_row() for instance in instances]


def render_table(rows: Iterable[Mapping[str, Optional[str]]]) -> str:
    """Render rows as a fixed-width table with a header line."""
    cells = [
        [row.get(column) or "" for column in DATA_SOURCE_COLUMNS]
        for row in rows
    ]
    widths = [
        max([len(column)] + [len(line[i]) for line in cells])
        for i, column in enumerate(DATA_SOURCE_COLUMNS)
    ]

    def fmt(values):
        return "  ".join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

    lines = [fmt(DATA_SOURCE_COLUMNS), fmt(["-" * w for w in widths])]
    lines += [fmt(line) for line in cells]
    return "\n".join(lines)
