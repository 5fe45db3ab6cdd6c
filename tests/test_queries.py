from __future__ import annotations

from ccrb.dashboard.queries import (
    OFFICER_PROPERTIES,
    build_payload,
    complaint_query,
    officer_query,
    window,
    with_restart_tokens,
)


def test_payload_selects_dataset_and_report() -> None:
    payload = build_payload(officer_query(active=True), dataset_id="ds-1", report_id="rp-1", model_id=7, page_size=500)

    query = payload["queries"][0]
    assert query["ApplicationContext"]["DatasetId"] == "ds-1"
    assert query["ApplicationContext"]["Sources"][0]["ReportId"] == "rp-1"
    assert payload["modelId"] == 7
    assert window(payload) == {"Count": 500}

    command = query["Query"]["Commands"][0]["SemanticQueryDataShapeCommand"]
    selected = [item["Column"]["Property"] for item in command["Query"]["Select"]]
    assert selected == list(OFFICER_PROPERTIES)
    assert command["Binding"]["Primary"]["Groupings"][0]["Projections"] == list(range(len(OFFICER_PROPERTIES)))


def test_roster_variants_filter_on_status() -> None:
    def filter_values(active: bool) -> list:
        payload = build_payload(officer_query(active=active), dataset_id="d", report_id="r", model_id=0, page_size=10)
        command = payload["queries"][0]["Query"]["Commands"][0]["SemanticQueryDataShapeCommand"]
        return command["Query"]["Where"][0]["Condition"]["In"]["Values"]

    assert filter_values(True) == [[{"Literal": {"Value": "'Yes'"}}]]
    assert filter_values(False) == [[{"Literal": {"Value": "'No'"}}]]


def test_complaint_query_is_unfiltered() -> None:
    payload = build_payload(complaint_query(), dataset_id="d", report_id="r", model_id=0, page_size=10)
    command = payload["queries"][0]["Query"]["Commands"][0]["SemanticQueryDataShapeCommand"]

    assert "Where" not in command["Query"]


def test_with_restart_tokens_copies_payload() -> None:
    payload = build_payload(complaint_query(), dataset_id="d", report_id="r", model_id=0, page_size=10)
    tokens = [["'9001'", "2L"]]

    following = with_restart_tokens(payload, tokens)

    assert window(following) == {"Count": 10, "RestartTokens": tokens}
    assert "RestartTokens" not in window(payload)
