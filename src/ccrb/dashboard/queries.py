"""Fixed dashboard queries and their wire payloads."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

OFFICERS = "officers"
COMPLAINTS = "complaints"

_SOURCE_ALIAS = "t"


@dataclass(frozen=True, slots=True)
class QueryDefinition:
    """A single-entity select, optionally filtered by ``column IN values``."""

    name: str
    entity: str
    properties: tuple[str, ...]
    filter_property: str | None = None
    filter_values: tuple[str, ...] = ()


OFFICER_PROPERTIES = (
    "Tax ID",
    "Command",
    "Officer Last Name",
    "Officer First Name",
    "Rank",
    "Shield No",
)

COMPLAINT_PROPERTIES = (
    "Tax ID",
    "Complaint Id",
    "Incident Date",
    "FADO Type",
    "Allegation",
    "CCRB Allegation Disposition",
    "NYPD Allegation Disposition",
    "NYPD Officer Penalty",
)


def officer_query(*, active: bool) -> QueryDefinition:
    return QueryDefinition(
        name=f"{OFFICERS}-{'active' if active else 'inactive'}",
        entity="Officers",
        properties=OFFICER_PROPERTIES,
        filter_property="Active Per Last Reported Status",
        filter_values=("Yes",) if active else ("No",),
    )


def complaint_query() -> QueryDefinition:
    return QueryDefinition(name=COMPLAINTS, entity="Allegations", properties=COMPLAINT_PROPERTIES)


def _column(prop: str) -> dict[str, Any]:
    return {"Column": {"Expression": {"SourceRef": {"Source": _SOURCE_ALIAS}}, "Property": prop}}


def _literal(value: str) -> dict[str, Any]:
    escaped = value.replace("'", "''")
    return {"Literal": {"Value": f"'{escaped}'"}}


def build_payload(
    definition: QueryDefinition,
    *,
    dataset_id: str,
    report_id: str,
    model_id: int,
    page_size: int,
) -> dict[str, Any]:
    """Render ``definition`` as a querydata request body."""

    semantic_query: dict[str, Any] = {
        "Version": 2,
        "From": [{"Name": _SOURCE_ALIAS, "Entity": definition.entity, "Type": 0}],
        "Select": [
            {**_column(prop), "Name": f"{definition.entity}.{prop}"} for prop in definition.properties
        ],
    }
    if definition.filter_property:
        semantic_query["Where"] = [
            {
                "Condition": {
                    "In": {
                        "Expressions": [_column(definition.filter_property)],
                        "Values": [[_literal(value)] for value in definition.filter_values],
                    }
                }
            }
        ]

    command = {
        "SemanticQueryDataShapeCommand": {
            "Query": semantic_query,
            "Binding": {
                "Primary": {"Groupings": [{"Projections": list(range(len(definition.properties)))}]},
                "DataReduction": {"DataVolume": 3, "Primary": {"Window": {"Count": page_size}}},
                "Version": 1,
            },
            "ExecutionMetricsKind": 1,
        }
    }

    return {
        "version": "1.0.0",
        "queries": [
            {
                "Query": {"Commands": [command]},
                "QueryId": "",
                "ApplicationContext": {
                    "DatasetId": dataset_id,
                    "Sources": [{"ReportId": report_id, "VisualId": ""}],
                },
            }
        ],
        "cancelQueries": [],
        "modelId": model_id,
    }


def window(payload: dict[str, Any]) -> dict[str, Any]:
    """Return the pagination window of the first query in ``payload``."""

    command = payload["queries"][0]["Query"]["Commands"][0]["SemanticQueryDataShapeCommand"]
    return command["Binding"]["DataReduction"]["Primary"]["Window"]


def with_restart_tokens(payload: dict[str, Any], tokens: Any) -> dict[str, Any]:
    """Copy ``payload`` with the continuation tokens echoed into its window."""

    following = copy.deepcopy(payload)
    window(following)["RestartTokens"] = copy.deepcopy(tokens)
    return following
