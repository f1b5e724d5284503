"""
Unit tests for TradeCsvIngestor

CSV rows → trade-data records keyed by token
"""

import pytest

from services.trade_ingestion.csv_source import TradeCsvIngestor
from tests.fakes import RecordingProducer

CSV = """token_address,price_in_sol,block_time,amount
SOL,0.5,2024-01-01 00:00:01,10
BONK,0.0001,2024-01-01 00:00:02,5
SOL,,2024-01-01 00:00:03,1
SOL,abc,2024-01-01 00:00:04,1
SOL,0.6,2024-01-01 00:00:05,3
"""


@pytest.fixture
def trades_csv(tmp_path):
    path = tmp_path / "trades_data.csv"
    path.write_text(CSV)
    return path


@pytest.mark.unit
class TestBuildRecord:
    """Test row conversion"""

    def test_price_is_converted_to_float(self):
        record = TradeCsvIngestor.build_record(
            {"token_address": " SOL ", "price_in_sol": "0.25", "block_time": "t", "amount": "1"}
        )

        assert record == {
            "token_address": "SOL",
            "price_in_sol": 0.25,
            "block_time": "t",
            "amount": "1",
        }

    @pytest.mark.parametrize(
        "row",
        [
            {"token_address": "", "price_in_sol": "1", "block_time": "t"},
            {"token_address": "SOL", "price_in_sol": "x", "block_time": "t"},
            {"token_address": "SOL", "price_in_sol": "1"},
        ],
    )
    def test_unusable_rows(self, row):
        assert TradeCsvIngestor.build_record(row) is None


@pytest.mark.unit
class TestIngestorRun:
    """Test publishing a whole file"""

    @pytest.mark.asyncio
    async def test_run_publishes_valid_rows_in_order(self, trades_csv):
        producer = RecordingProducer()
        ingestor = TradeCsvIngestor(producer, trades_csv, "trade-data")

        stats = await ingestor.run()

        assert stats == {"rows": 5, "sent": 3, "skipped": 2, "failed": 0}
        assert [(key, data["price_in_sol"]) for _, data, key in producer.records] == [
            ("SOL", 0.5),
            ("BONK", 0.0001),
            ("SOL", 0.6),
        ]
        assert all(stream == "trade-data" for stream, _, _ in producer.records)

    @pytest.mark.asyncio
    async def test_publish_failures_are_counted(self, trades_csv):
        producer = RecordingProducer(fail_times=1)
        ingestor = TradeCsvIngestor(producer, trades_csv, "trade-data")

        stats = await ingestor.run()

        assert stats["failed"] == 1
        assert stats["sent"] == 2

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        ingestor = TradeCsvIngestor(RecordingProducer(), tmp_path / "nope.csv", "trade-data")

        with pytest.raises(FileNotFoundError):
            await ingestor.run()
