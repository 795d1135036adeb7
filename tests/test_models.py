"""Unit tests for record, watermark and outcome models."""

from datetime import datetime

from conversion_report.models import DEFAULT_SEED, QueryResult, RawRecord, RunOutcome, RunWindow, WatermarkHistory


class TestRawRecord:
    """Tests for dotted-path lookup."""

    def test_top_level_field(self) -> None:
        """get_path resolves a plain field."""
        record = RawRecord(data={"URL_GCLID__c": "abc"})
        assert record.get_path("URL_GCLID__c") == "abc"

    def test_nested_field(self) -> None:
        """get_path walks relationship objects."""
        record = RawRecord(data={"Opportunity__r": {"StageName": "Applied"}})
        assert record.get_path("Opportunity__r.StageName") == "Applied"

    def test_missing_segment_returns_none(self) -> None:
        """Missing or null parents yield None instead of raising."""
        assert RawRecord(data={}).get_path("Opportunity__r.StageName") is None
        assert RawRecord(data={"Opportunity__r": None}).get_path("Opportunity__r.StageName") is None
        assert RawRecord(data={"Opportunity__r": "x"}).get_path("Opportunity__r.StageName") is None


class TestQueryResult:
    """Tests for QueryResult parsing."""

    def test_from_response(self) -> None:
        """Parses totalSize, records and keeps the raw body."""
        body = {"totalSize": 1, "done": True, "records": [{"Id": "1"}]}
        result = QueryResult.from_response(body)
        assert result.total_size == 1
        assert result.done is True
        assert result.records[0].get_path("Id") == "1"
        assert result.raw == body

    def test_extend_appends_page(self) -> None:
        """extend merges a follow-up page and updates paging state."""
        result = QueryResult.from_response(
            {"totalSize": 2, "done": False, "nextRecordsUrl": "/next", "records": [{"Id": "1"}]}
        )
        result.extend({"done": True, "records": [{"Id": "2"}]})
        assert [r.get_path("Id") for r in result.records] == ["1", "2"]
        assert result.done is True
        assert result.next_records_url is None


class TestWatermarkHistory:
    """Tests for WatermarkHistory."""

    def test_seeded(self) -> None:
        """Seed history holds the single default timestamp."""
        assert WatermarkHistory.seeded().run_date_times == ["2022-11-22T23:59:59.999Z"]
        assert WatermarkHistory.seeded().last == DEFAULT_SEED

    def test_appended_returns_new_history(self) -> None:
        """appended leaves the source history untouched."""
        history = WatermarkHistory(run_date_times=["a"])
        extended = history.appended("b")
        assert history.run_date_times == ["a"]
        assert extended.run_date_times == ["a", "b"]
        assert extended.last == "b"

    def test_from_document(self) -> None:
        """Reads the list under the child key."""
        history = WatermarkHistory.from_document({"lastRunDateTimes": ["a", "b"]}, "lastRunDateTimes")
        assert history is not None
        assert history.last == "b"

    def test_from_document_absent(self) -> None:
        """Missing document, missing child or empty list yield None."""
        assert WatermarkHistory.from_document(None, "k") is None
        assert WatermarkHistory.from_document({"other": ["a"]}, "k") is None
        assert WatermarkHistory.from_document({"k": []}, "k") is None

    def test_to_document(self) -> None:
        """Document shape is {child_key: [...]}."""
        history = WatermarkHistory(run_date_times=["a", "b"])
        assert history.to_document("lastRunDateTimes") == {"lastRunDateTimes": ["a", "b"]}


class TestRunWindow:
    """Tests for window computation."""

    def test_bounds(self) -> None:
        """Lower is the last watermark, upper is the start of the local day."""
        history = WatermarkHistory(run_date_times=[DEFAULT_SEED, "2023-01-04T00:00:00.000Z"])
        window = RunWindow.for_history(history, datetime(2023, 1, 5, 14, 30, 12))
        assert window.lower_bound == "2023-01-04T00:00:00.000Z"
        assert window.upper_bound == "2023-01-05T00:00:00.000Z"

    def test_components_are_zero_padded(self) -> None:
        """Single-digit months and days are padded."""
        window = RunWindow.for_history(WatermarkHistory.seeded(), datetime(2023, 3, 7, 0, 0, 1))
        assert window.upper_bound == "2023-03-07T00:00:00.000Z"

    def test_same_day_rerun_is_zero_width(self) -> None:
        """After a run, a second run on the same day gets lower == upper."""
        now = datetime(2023, 1, 5, 8, 0, 0)
        first = RunWindow.for_history(WatermarkHistory.seeded(), now)
        history = WatermarkHistory.seeded().appended(first.upper_bound)
        second = RunWindow.for_history(history, datetime(2023, 1, 5, 20, 0, 0))
        assert second.lower_bound == second.upper_bound == first.upper_bound


class TestRunOutcome:
    """Tests for the response body."""

    def test_to_response(self) -> None:
        """Single response body carries success flag, window and query body."""
        outcome = RunOutcome(
            request_id="1",
            report_type="googleSearchAdsConversions",
            environment="prod",
            window=RunWindow(lower_bound="a", upper_bound="b"),
            query_response={"totalSize": 0},
        )
        body = outcome.to_response()
        assert body["success"] is True
        assert body["lowerBound"] == "a"
        assert body["upperBound"] == "b"
        assert body["queryResponse"] == {"totalSize": 0}
