"""
Google Sheets host tests against a fake discovery resource.
"""

import pytest

from sheet_access import NotFound, SheetAccessFacade, SheetNotFoundError
from sheet_access.sheets_client import ServiceAccountSheetsClient
from sheet_access.spreadsheet import GoogleRange, GoogleSheet, GoogleSpreadsheet


class _Request:
    def __init__(self, result):
        self._result = result

    def execute(self):
        return self._result


class FakeValues:
    def __init__(self, resource):
        self._resource = resource

    def get(self, spreadsheetId, range, valueRenderOption):
        self._resource.calls.append(("values.get", range, valueRenderOption))
        return _Request({"range": range, "values": self._resource.values_by_range.get(range, [])})

    def update(self, spreadsheetId, range, valueInputOption, body):
        self._resource.updates.append((range, valueInputOption, body))
        return _Request({"updatedRange": range})


class FakeSpreadsheets:
    def __init__(self, sheets, values_by_range=None, replies=None):
        self.sheets = sheets
        self.values_by_range = values_by_range or {}
        self.replies = replies or []
        self.calls = []
        self.updates = []
        self.batches = []

    def get(self, spreadsheetId, fields=None):
        self.calls.append(("get", spreadsheetId))
        return _Request(
            {
                "spreadsheetId": spreadsheetId,
                "properties": {"title": "Book"},
                "sheets": [
                    {"properties": {"sheetId": sheet_id, "title": title, "gridProperties": {"rowCount": 1000, "columnCount": 26}}}
                    for sheet_id, title in self.sheets
                ],
            }
        )

    def values(self):
        return FakeValues(self)

    def batchUpdate(self, spreadsheetId, body):
        self.batches.append(body)
        return _Request({"spreadsheetId": spreadsheetId, "replies": self.replies})


class FakeService:
    def __init__(self, resource):
        self._resource = resource

    def spreadsheets(self):
        return self._resource


def _spreadsheet(**kwargs):
    resource = FakeSpreadsheets([(0, "Sheet1"), (7, "Lists")], **kwargs)
    client = ServiceAccountSheetsClient(service=FakeService(resource))
    return GoogleSpreadsheet(client, "abc123"), resource


def _sheet(spreadsheet, name="Sheet1"):
    return spreadsheet.get_sheet_by_name(name).sheet


def test_metadata_is_flattened():
    spreadsheet, _ = _spreadsheet()
    metadata = spreadsheet.client.get_spreadsheet_metadata("abc123")
    assert metadata["title"] == "Book"
    assert [s["title"] for s in metadata["sheets"]] == ["Sheet1", "Lists"]
    assert metadata["sheets"][1]["sheetId"] == 7


def test_lookup_returns_found_or_not_found():
    spreadsheet, resource = _spreadsheet()

    sheet = _sheet(spreadsheet, "Lists")
    assert isinstance(sheet, GoogleSheet)
    assert sheet.sheet_id == 7

    assert spreadsheet.get_sheet_by_name("Missing") == NotFound("Missing")

    # No caching between lookups
    assert [c for c in resource.calls if c[0] == "get"] == [("get", "abc123"), ("get", "abc123")]


def test_get_values_are_padded_to_range_shape():
    spreadsheet, resource = _spreadsheet(values_by_range={"'Sheet1'!A1:B3": [["42"], [], ["x", 5]]})

    values = _sheet(spreadsheet).get_range(1, 1, 3, 2).get_values()

    assert values == [["42", ""], ["", ""], ["x", "5"]]
    assert resource.calls[-1] == ("values.get", "'Sheet1'!A1:B3", "FORMATTED_VALUE")


def test_facade_reads_single_cell():
    spreadsheet, resource = _spreadsheet(values_by_range={"'Sheet1'!A1": [["42"]]})
    facade = SheetAccessFacade(spreadsheet)

    assert facade.get_cell_value("Sheet1", "A1") == "42"
    assert facade.get_cell_value("Sheet1", "B2") == ""


def test_missing_sheet_sends_no_mutation():
    spreadsheet, resource = _spreadsheet()
    facade = SheetAccessFacade(spreadsheet)

    with pytest.raises(SheetNotFoundError):
        facade.set_values("Missing", 1, 1, 1, 1, [["x"]])
    with pytest.raises(SheetNotFoundError):
        facade.set_checkbox("Missing", 1, 1, 1, 1)

    assert resource.updates == []
    assert resource.batches == []


def test_set_values_and_set_value():
    spreadsheet, resource = _spreadsheet()
    sheet = _sheet(spreadsheet)

    sheet.get_range(2, 2, 1, 2).set_values([["a", "b"]])
    sheet.get_range(3, 1).set_value("c")

    assert resource.updates == [
        ("'Sheet1'!B2:C2", "USER_ENTERED", {"values": [["a", "b"]]}),
        ("'Sheet1'!A3", "USER_ENTERED", {"values": [["c"]]}),
    ]


def test_set_values_shape_mismatch_sends_nothing():
    spreadsheet, resource = _spreadsheet()
    with pytest.raises(ValueError):
        _sheet(spreadsheet).get_range(1, 1, 2, 2).set_values([["a", "b"], ["c"]])
    assert resource.updates == []


def test_last_row_and_column_use_sheet_extent():
    spreadsheet, resource = _spreadsheet(values_by_range={"'Sheet1'": [["a"], [], ["b", "c", "d"]]})
    sheet = _sheet(spreadsheet)

    assert sheet.get_last_row() == 3
    assert sheet.get_last_column() == 3


def test_last_row_of_empty_sheet_is_zero():
    spreadsheet, _ = _spreadsheet()
    assert _sheet(spreadsheet, "Lists").get_last_row() == 0
    assert _sheet(spreadsheet, "Lists").get_last_column() == 0


def test_grid_range_is_zero_based_exclusive():
    spreadsheet, _ = _spreadsheet()
    handle = _sheet(spreadsheet, "Lists").get_range_a1("B2:D5")
    assert handle.grid_range() == {
        "sheetId": 7,
        "startRowIndex": 1,
        "endRowIndex": 5,
        "startColumnIndex": 1,
        "endColumnIndex": 4,
    }


def test_inverted_range_sends_normalised_a1():
    spreadsheet, resource = _spreadsheet(values_by_range={"'Sheet1'!A1:B2": [["42", "b1"], ["a2", "b2"]]})
    facade = SheetAccessFacade(spreadsheet)

    assert facade.get_rows_by_positions("Sheet1", "B2:A1") == [["42", "b1"], ["a2", "b2"]]
    assert resource.calls[-1] == ("values.get", "'Sheet1'!A1:B2", "FORMATTED_VALUE")


def test_remove_duplicates_request():
    replies = [{"deleteDuplicates": {"duplicatesRemovedCount": 2}}]
    spreadsheet, resource = _spreadsheet(replies=replies)

    removed = _sheet(spreadsheet).get_range(1, 1, 10, 3).remove_duplicates([1, 3])

    assert removed == 2
    dedupe = resource.batches[0]["requests"][0]["deleteDuplicates"]
    assert dedupe["range"]["endRowIndex"] == 10
    assert dedupe["comparisonColumns"] == [
        {"sheetId": 0, "dimension": "COLUMNS", "startIndex": 0, "endIndex": 1},
        {"sheetId": 0, "dimension": "COLUMNS", "startIndex": 2, "endIndex": 3},
    ]


def test_remove_duplicates_without_columns_compares_whole_rows():
    spreadsheet, resource = _spreadsheet()
    assert _sheet(spreadsheet).get_range(1, 1, 3, 2).remove_duplicates() == 0
    assert "comparisonColumns" not in resource.batches[0]["requests"][0]["deleteDuplicates"]


def test_insert_checkboxes_request():
    spreadsheet, resource = _spreadsheet()
    _sheet(spreadsheet).get_range(2, 1, 3, 1).insert_checkboxes()

    request = resource.batches[0]["requests"][0]["setDataValidation"]
    assert request["rule"] == {"condition": {"type": "BOOLEAN"}}
    assert request["range"]["startRowIndex"] == 1
    assert request["range"]["endRowIndex"] == 4


def test_set_background_and_clear():
    spreadsheet, resource = _spreadsheet()
    handle = _sheet(spreadsheet).get_range(1, 1, 1, 1)

    handle.set_background("#ff0000")
    handle.set_background(None)

    set_request, clear_request = [b["requests"][0]["repeatCell"] for b in resource.batches]
    assert set_request["cell"]["userEnteredFormat"]["backgroundColor"] == {"red": 1.0, "green": 0.0, "blue": 0.0}
    assert set_request["fields"] == "userEnteredFormat.backgroundColor"
    assert clear_request["cell"] == {"userEnteredFormat": {}}
    assert clear_request["fields"] == "userEnteredFormat.backgroundColor"


def test_set_background_rejects_invalid_color_before_request():
    spreadsheet, resource = _spreadsheet()
    with pytest.raises(ValueError):
        _sheet(spreadsheet).get_range(1, 1).set_background("red")
    assert resource.batches == []


def test_pulldown_rule_request():
    spreadsheet, resource = _spreadsheet()
    facade = SheetAccessFacade(spreadsheet)
    source = facade.get_range("Lists", 1, 1, 5, 1)
    assert isinstance(source, GoogleRange)

    facade.set_pulldown_rule("Sheet1", 2, 3, 3, 1, source)

    request = resource.batches[0]["requests"][0]["setDataValidation"]
    assert request["range"] == {
        "sheetId": 0,
        "startRowIndex": 1,
        "endRowIndex": 4,
        "startColumnIndex": 2,
        "endColumnIndex": 3,
    }
    assert request["rule"] == {
        "condition": {"type": "ONE_OF_RANGE", "values": [{"userEnteredValue": "='Lists'!A1:A5"}]},
        "showCustomUi": True,
        "strict": True,
    }


def test_service_account_info_from_env(monkeypatch):
    from sheet_access.sheets_client import load_service_account_info

    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_JSON", '{"client_email": "bot@example.iam.gserviceaccount.com"}')
    assert load_service_account_info()["client_email"] == "bot@example.iam.gserviceaccount.com"

    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_JSON", "{broken")
    with pytest.raises(ValueError):
        load_service_account_info()


def test_service_account_info_from_file(monkeypatch, tmp_path):
    from sheet_access.sheets_client import load_service_account_info

    key_file = tmp_path / "key.json"
    key_file.write_text('{"project_id": "demo"}', encoding="utf-8")
    monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_JSON", raising=False)
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_FILE", str(key_file))

    assert load_service_account_info()["project_id"] == "demo"
