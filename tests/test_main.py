"""Tests for main.py CLI functionality."""

import json
import logging
from unittest.mock import patch

from city_imagery.core.models import BatchOutcome
from city_imagery.main import main
from city_imagery.testing.fakes import FakeS3Client

OUTCOMES = [
    BatchOutcome(location_name="Lisbon", country="Portugal", success=True, image_count=3),
    BatchOutcome(
        location_name="Qwertown",
        country="Nowhere",
        success=False,
        error_message="search exploded",
    ),
]


class TestMainCLI:
    """Tests for the main CLI functionality."""

    def test_main_with_no_args_shows_help(self):
        """Test that running main without arguments shows help."""
        with patch("sys.argv", ["city-imagery"]):
            with patch("argparse.ArgumentParser.print_help") as mock_help:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_help.assert_called_once()
                    mock_exit.assert_called_once_with(1)

    def test_main_version_command(self):
        """Test version command output."""
        with patch("sys.argv", ["city-imagery", "version"]):
            with patch("builtins.print") as mock_print:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_print.assert_any_call("City Imagery CLI")
                    mock_print.assert_any_call("Version 0.1.0")
                    mock_print.assert_any_call(
                        "Batch city image acquisition with curated and generic fallbacks"
                    )
                    mock_exit.assert_called_once_with(0)

    def test_main_sample_command(self, capsys):
        with patch("sys.argv", ["city-imagery", "sample", "--count", "2"]):
            with patch("sys.exit") as mock_exit:
                main()
                mock_exit.assert_called_once_with(0)

        printed = json.loads(capsys.readouterr().out)
        assert len(printed) == 2
        assert {"name", "country", "country_code"} <= set(printed[0])

    def test_main_run_with_sample(self, tmp_path):
        report_path = tmp_path / "report.json"
        test_args = [
            "city-imagery",
            "run",
            "--sample",
            "2",
            "--batch-size",
            "5",
            "--no-fallback",
            "--report-file",
            str(report_path),
        ]

        with patch("sys.argv", test_args):
            with patch("city_imagery.main.run_pipeline", return_value=OUTCOMES) as mock_run:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_exit.assert_called_once_with(0)

        locations, config = mock_run.call_args[0]
        assert len(locations) == 2
        assert config.batch_size == 5
        assert config.use_fallback_on_empty is False
        report = json.loads(report_path.read_text())
        assert report["statistics"]["total"] == 2
        assert report["needs_curation"] == ["Qwertown"]

    def test_main_run_with_locations_file(self, tmp_path):
        locations_path = tmp_path / "cities.json"
        locations_path.write_text(
            json.dumps([{"name": "Porto", "country": "Portugal", "country_code": "PT"}])
        )

        with patch("sys.argv", ["city-imagery", "run", "--locations", str(locations_path)]):
            with patch("city_imagery.main.run_pipeline", return_value=[]) as mock_run:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_exit.assert_called_once_with(0)

        locations = mock_run.call_args[0][0]
        assert locations[0].name == "Porto"
        assert locations[0].country_code == "PT"

    def test_main_run_invalid_locations_file(self, tmp_path):
        locations_path = tmp_path / "cities.json"
        locations_path.write_text('{"name": "Porto"}')

        with patch("sys.argv", ["city-imagery", "run", "--locations", str(locations_path)]):
            with patch("city_imagery.main.run_pipeline") as mock_run:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_exit.assert_called_once_with(1)
                    mock_run.assert_not_called()

    def test_main_run_invalid_batch_size(self):
        with patch("sys.argv", ["city-imagery", "run", "--sample", "3", "--batch-size", "0"]):
            with patch("city_imagery.main.run_pipeline") as mock_run:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_exit.assert_called_once_with(1)
                    mock_run.assert_not_called()

    def test_main_run_uploads_report(self):
        fake_s3 = FakeS3Client()
        test_args = [
            "city-imagery",
            "run",
            "--sample",
            "1",
            "--report-bucket",
            "reports",
            "--report-prefix",
            "runs",
        ]

        with patch("sys.argv", test_args):
            with patch("city_imagery.main.run_pipeline", return_value=OUTCOMES):
                with patch(
                    "city_imagery.main.S3ClientFactory.create_s3_client",
                    return_value=fake_s3,
                ):
                    with patch("sys.exit") as mock_exit:
                        main()
                        mock_exit.assert_called_once_with(0)

        keys = list(fake_s3.objects["reports"])
        assert len(keys) == 1
        assert keys[0].startswith("runs/batch-processing-results-")

    def test_main_run_interrupted(self):
        with patch("sys.argv", ["city-imagery", "run", "--sample", "1"]):
            with patch("city_imagery.main.run_pipeline", side_effect=KeyboardInterrupt):
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_exit.assert_called_once_with(130)

    def test_main_stats_command(self, tmp_path, capsys):
        report_path = tmp_path / "report.json"
        report_path.write_text(json.dumps({"results": [o.model_dump() for o in OUTCOMES]}))

        with patch("sys.argv", ["city-imagery", "stats", str(report_path)]):
            with patch("sys.exit") as mock_exit:
                main()
                mock_exit.assert_called_once_with(0)

        out = capsys.readouterr().out
        assert "Total: 2" in out
        assert "Success rate: 50.0%" in out
        assert "Needs curation: Qwertown (search exploded)" in out

    def test_main_stats_missing_report(self, tmp_path):
        with patch("sys.argv", ["city-imagery", "stats", str(tmp_path / "missing.json")]):
            with patch("sys.exit") as mock_exit:
                main()
                mock_exit.assert_called_once_with(1)

    def test_main_run_debug_reaches_pipeline_logger(self, monkeypatch):
        monkeypatch.delenv("UNSPLASH_ACCESS_KEY", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        messages = []

        class ListHandler(logging.Handler):
            def emit(self, record):
                messages.append(record.getMessage())

        handler = ListHandler(level=logging.DEBUG)
        run_logger = logging.getLogger("city_imagery")
        run_logger.addHandler(handler)
        test_args = [
            "city-imagery",
            "run",
            "--sample",
            "2",
            "--batch-size",
            "1",
            "--batch-delay-ms",
            "0",
            "--debug",
        ]
        try:
            with patch("sys.argv", test_args):
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_exit.assert_called_once_with(0)
        finally:
            run_logger.removeHandler(handler)
            run_logger.setLevel(logging.INFO)
            logging.getLogger("pipeline").setLevel(logging.INFO)
            logging.getLogger().setLevel(logging.WARNING)

        assert any("Waiting 0ms before next batch" in m for m in messages)
