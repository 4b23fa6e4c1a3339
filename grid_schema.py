from dataclasses import dataclass, field, replace
from typing import Callable, Optional

import pandas as pd

from cell_address import column_label


def _no_defaults() -> dict:
    return {}


@dataclass(frozen=True)
class GridSchema:
    """Field layout and row policy shared by the store, the engine and the panes.

    ``fixed_rows`` switches the grid into position-preserving mode: the row
    count never drops below it and edits past the end pad blank rows so the
    value lands where it was typed. Without it the grid shows
    ``empty_row_budget`` trailing rows and an edit there appends one record.
    """

    name: str
    fields: tuple[str, ...]
    labels: tuple[str, ...]
    kinds: tuple[str, ...]
    id_field: Optional[str] = None
    empty_row_budget: int = 20
    fixed_rows: Optional[int] = None
    export_headers: Optional[tuple[str, ...]] = None
    default_record: Callable[[], dict] = field(default=_no_defaults, compare=False)
    seed_rows: tuple[dict, ...] = field(default=(), compare=False)
    aliases: dict = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if len(self.labels) != len(self.fields) or len(self.kinds) != len(self.fields):
            raise ValueError("fields, labels and kinds must have the same length")
        if self.id_field is not None and self.id_field not in self.fields:
            raise ValueError(f"id field '{self.id_field}' not in fields")

    @property
    def appends_on_virtual_edit(self) -> bool:
        return self.fixed_rows is None

    def has_field(self, name) -> bool:
        return name in self.fields

    def label_for(self, name: str) -> str:
        return self.labels[self.fields.index(name)]

    def kind_for(self, name: str) -> str:
        return self.kinds[self.fields.index(name)]

    def headers(self) -> list[str]:
        return list(self.export_headers or self.labels)

    def resolve_field(self, name) -> Optional[str]:
        """Map a field name, alias or label (any case) onto a schema field."""
        if not isinstance(name, str):
            return None
        if name in self.fields:
            return name
        if name in self.aliases:
            return self.aliases[name]
        lowered = name.strip().lower()
        for f, label in zip(self.fields, self.labels):
            if lowered in (f.lower(), label.lower()):
                return f
        for alias, target in self.aliases.items():
            if lowered == alias.lower():
                return target
        return None

    def with_budget(self, empty_row_budget: int) -> "GridSchema":
        return replace(self, empty_row_budget=max(0, int(empty_row_budget)))


def _new_task_record() -> dict:
    return {
        "job_request": "New Task",
        "submitted": pd.Timestamp.today().strftime("%d/%m/%Y"),
        "status": "Need to start",
        "submitter": "Current User",
        "url": "",
        "assigned": "",
        "priority": "Medium",
        "due_date": "",
        "est_value": "0",
    }


PROJECT_SEED_ROWS = (
    {
        "id": "1",
        "job_request": "Launch social media campaign for pro...",
        "submitted": "15-11-2024",
        "status": "In-progress",
        "submitter": "Aisha Patel",
        "url": "www.aishapatel...",
        "assigned": "Sophie Choudhury",
        "priority": "Medium",
        "due_date": "20-11-2024",
        "est_value": "6,200,000",
    },
    {
        "id": "2",
        "job_request": "Update press kit for company redesign",
        "submitted": "28-10-2024",
        "status": "Need to start",
        "submitter": "Irfan Khan",
        "url": "www.irfankhan...",
        "assigned": "Tejas Pandey",
        "priority": "High",
        "due_date": "30-10-2024",
        "est_value": "3,500,000",
    },
    {
        "id": "3",
        "job_request": "Finalize user testing feedback for app...",
        "submitted": "05-12-2024",
        "status": "In-progress",
        "submitter": "Mark Johnson",
        "url": "www.markjohns...",
        "assigned": "Rachel Lee",
        "priority": "Medium",
        "due_date": "10-12-2024",
        "est_value": "4,750,000",
    },
    {
        "id": "4",
        "job_request": "Design new features for the website",
        "submitted": "10-01-2025",
        "status": "Complete",
        "submitter": "Emily Green",
        "url": "www.emilygreen...",
        "assigned": "Tom Wright",
        "priority": "Low",
        "due_date": "15-01-2025",
        "est_value": "5,800,000",
    },
    {
        "id": "5",
        "job_request": "Prepare monthly report for Q4",
        "submitted": "25-01-2025",
        "status": "Blocked",
        "submitter": "Jessica Brown",
        "url": "www.jessicabro...",
        "assigned": "Kevin Smith",
        "priority": "Low",
        "due_date": "30-01-2025",
        "est_value": "2,600,000",
    },
)


PROJECT_SCHEMA = GridSchema(
    name="projects",
    fields=(
        "id",
        "job_request",
        "submitted",
        "status",
        "submitter",
        "url",
        "assigned",
        "priority",
        "due_date",
        "est_value",
    ),
    labels=(
        "#",
        "Job Request",
        "Submitted",
        "Status",
        "Submitter",
        "URL",
        "Assigned",
        "Priority",
        "Due Date",
        "Est. Value",
    ),
    kinds=(
        "id",
        "text",
        "date",
        "status",
        "text",
        "url",
        "text",
        "priority",
        "date",
        "currency",
    ),
    id_field="id",
    export_headers=(
        "ID",
        "Job Request",
        "Submitted",
        "Status",
        "Submitter",
        "URL",
        "Assigned",
        "Priority",
        "Due Date",
        "Est. Value",
    ),
    default_record=_new_task_record,
    seed_rows=PROJECT_SEED_ROWS,
    aliases={
        "jobRequest": "job_request",
        "dueDate": "due_date",
        "estValue": "est_value",
    },
)


FREE_GRID_COLUMNS = 26
FREE_GRID_ROWS = 50

FREE_GRID_SCHEMA = GridSchema(
    name="sheet",
    fields=tuple(column_label(i) for i in range(FREE_GRID_COLUMNS)),
    labels=tuple(column_label(i) for i in range(FREE_GRID_COLUMNS)),
    kinds=("text",) * FREE_GRID_COLUMNS,
    empty_row_budget=0,
    fixed_rows=FREE_GRID_ROWS,
)


SCHEMAS = {
    PROJECT_SCHEMA.name: PROJECT_SCHEMA,
    FREE_GRID_SCHEMA.name: FREE_GRID_SCHEMA,
}


STATUS_STYLES = {
    "in-progress": "yellow",
    "need to start": "blue",
    "complete": "green",
    "blocked": "red",
}

PRIORITY_STYLES = {
    "high": "red",
    "medium": "yellow",
    "low": "blue",
}


def display_text(kind: str, value: str) -> str:
    """Text shown for a cell once its column's renderer hint is applied."""
    if not value:
        return ""
    if kind == "currency":
        return f"₹{value}"
    return value


def display_color(kind: str, value: str) -> Optional[str]:
    if not value:
        return None
    if kind == "status":
        return STATUS_STYLES.get(value.strip().lower(), "gray")
    if kind == "priority":
        return PRIORITY_STYLES.get(value.strip().lower(), "gray")
    if kind == "url":
        return "blue"
    return None
