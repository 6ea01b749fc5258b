import pytest
from datetime import datetime, timedelta

from garden.rows import ContactRow


def _today(offset_days=0):
    return (datetime.now() + timedelta(days=offset_days)).strftime("%Y/%m/%d")


class TestRoutes:
    """Class-based tests for the garden API routes."""

    @pytest.fixture(autouse=True)
    def setup(self, client, mocker, monkeypatch):
        """Set up the test client with a stubbed Sheets service and row source."""
        monkeypatch.delenv("GARDEN_SPREADSHEET_ID", raising=False)
        self.client = client
        self.mock_service_cls = mocker.patch("app.routes.garden_api.GoogleSheetsService")
        self.mock_fetch = mocker.patch("app.routes.garden_api.fetch_contact_rows")
        self.mock_fetch.return_value = (
            ContactRow("田中", "ABC商事", ("2025/08/01", "2025/08/04", ""), "2025/08/05", "訪問"),
            ContactRow("田中", "ABC商事", ("2025/08/02",), "", "電話"),
            ContactRow("田中", "", ("2025/07/30",), "2025/07/31", "メール"),
            ContactRow("佐藤", "XYZ", ("2025/08/03",), _today(), "訪問"),
            ContactRow("佐藤", "XYZ", ("2025/08/03",), _today(), "訪問"),
            ContactRow("鈴木", "QQ", ("2025/08/03",), _today(), "訪問"),
            ContactRow("", "QQ", ("2025/08/03",), _today(), "訪問"),
        )

    def test_employee_route(self):
        response = self.client.get('/api/employee/田中')
        assert response.status_code == 200

        data = response.get_json()["data"]
        assert data["employee"] == "田中"
        assert data["totalContributions"] == 3
        assert data["latestContactDate"] == "2025/08/04"
        assert data["latestConfirmedDate"] == "2025/08/05"
        assert data["clients"]["ABC商事"]["count"] == 2
        assert data["clients"]["ABC商事"]["stage"] == 1
        assert data["clients"]["ABC商事"]["latestConfirmedDate"] == "2025/08/05"
        assert data["clients"]["不明な作物"]["count"] == 1

        args = self.mock_fetch.call_args[0]
        assert args[1] == "test-sheet-id"
        assert len(args[2]) == 7

    def test_employee_route_unknown_employee(self):
        response = self.client.get('/api/employee/nobody')
        assert response.status_code == 200
        assert response.get_json()["data"]["clients"] == {}

    def test_ranking_route(self):
        response = self.client.get('/api/ranking')
        assert response.status_code == 200
        assert response.get_json()["data"] == [
            {"name": "佐藤", "count": 2, "clients": ["XYZ"]},
            {"name": "鈴木", "count": 1, "clients": ["QQ"]},
        ]

    def test_ranking_route_limit(self):
        response = self.client.get('/api/ranking?limit=1')
        assert [r["name"] for r in response.get_json()["data"]] == ["佐藤"]

    def test_sheets_route(self):
        response = self.client.get('/api/sheets')
        assert response.status_code == 200
        body = response.get_json()
        assert body["employees"] == ["田中", "佐藤", "鈴木"]
        assert body["data"][0] == {"name": "田中", "client": "ABC商事", "date": "2025/08/05", "content": "訪問"}
        assert len(body["data"]) == 5

    def test_no_rows_available(self):
        self.mock_fetch.return_value = ()
        assert self.client.get('/api/ranking').get_json() == {"data": []}
        assert self.client.get('/api/employee/田中').get_json()["data"]["clients"] == {}

    def test_missing_spreadsheet_config(self, app_context):
        app_context.config["spreadsheets"] = {}
        response = self.client.get('/api/ranking')
        assert response.status_code == 500
        body = response.get_json()
        assert body["error"] == "Failed to fetch ranking data"
        assert "spreadsheet id missing" in body["details"]

    def test_sheets_service_is_reused(self):
        self.client.get('/api/ranking')
        self.client.get('/api/sheets')
        self.mock_service_cls.assert_called_once()

    def test_missing_credentials(self):
        self.mock_service_cls.side_effect = FileNotFoundError(
            "service_account.json not found. Set GSHEETS_CREDENTIALS or GOOGLE_APPLICATION_CREDENTIALS.")
        response = self.client.get('/api/employee/田中')
        assert response.status_code == 500
        body = response.get_json()
        assert body["error"] == "Failed to fetch employee data"
        assert "service_account.json not found" in body["details"]
        self.mock_fetch.assert_not_called()

    def test_read_failure_is_no_rows_not_an_error(self):
        # fetch_contact_rows already turns API errors into an empty result
        self.mock_fetch.return_value = ()
        response = self.client.get('/api/sheets')
        assert response.status_code == 200
        assert response.get_json() == {"data": [], "employees": []}
