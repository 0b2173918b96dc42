"""
Unit tests for the CLI: argument parsing and error reporting.
"""

import json
from unittest.mock import patch

import pytest

from carbon_lens.analysis.errors import ExternalCallError, ParseError
from carbon_lens.cli import main

SUMMARY = {"image_path": "photo.jpg", "number_of_objects_detected": 1, "analysis": {"objects": []}}


class TestCLI:
    @patch("carbon_lens.cli.run_pipeline")
    @patch("sys.argv", ["carbon-lens", "analyze", "--image", "photo.jpg"])
    def test_analyze_prints_json(self, mock_run):
        mock_run.return_value = SUMMARY

        with patch("builtins.print") as mock_print:
            main()

        mock_run.assert_called_once_with(
            image_path="photo.jpg", out_dir=None, llm_backend="mock", max_side=1024
        )
        mock_print.assert_called_once()
        assert json.loads(mock_print.call_args[0][0]) == SUMMARY

    @patch("carbon_lens.cli.run_pipeline")
    @patch(
        "sys.argv",
        ["carbon-lens", "analyze", "--image", "p.jpg", "--out", "runs/x", "--llm", "gemini", "--max-side", "512"],
    )
    def test_analyze_custom_args(self, mock_run):
        mock_run.return_value = SUMMARY

        with patch("builtins.print"):
            main()

        mock_run.assert_called_once_with(
            image_path="p.jpg", out_dir="runs/x", llm_backend="gemini", max_side=512
        )

    @patch("carbon_lens.cli.run_pipeline")
    @patch("sys.argv", ["carbon-lens", "analyze", "--image", "p.jpg", "--llm", "nope"])
    def test_unknown_backend(self, mock_run):
        with patch("builtins.print") as mock_print:
            main()

        mock_run.assert_not_called()
        assert "Backend 'nope' not found" in mock_print.call_args_list[0][0][0]

    @patch("sys.argv", ["carbon-lens", "--list-backends"])
    def test_list_backends(self):
        with patch("builtins.print") as mock_print:
            main()

        printed = [c[0][0] for c in mock_print.call_args_list]
        assert printed[0] == "Available backends:"
        assert "  - mock" in printed

    @patch("sys.argv", ["carbon-lens"])
    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 0

    @patch("carbon_lens.cli.run_pipeline")
    @patch("sys.argv", ["carbon-lens", "analyze", "--image", "p.jpg"])
    def test_format_error_exit_code(self, mock_run, capsys):
        mock_run.side_effect = ParseError("Invalid response format from AI model")

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "could not be understood" in capsys.readouterr().err

    @patch("carbon_lens.cli.run_pipeline")
    @patch("sys.argv", ["carbon-lens", "analyze", "--image", "p.jpg"])
    def test_external_error_exit_code(self, mock_run, capsys):
        mock_run.side_effect = ExternalCallError("gemini", "quota exceeded")

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "AI service call failed" in capsys.readouterr().err

    @patch("carbon_lens.cli.run_pipeline")
    @patch("sys.argv", ["carbon-lens", "analyze", "--image", "missing.jpg"])
    def test_missing_image_exit_code(self, mock_run, capsys):
        mock_run.side_effect = FileNotFoundError("Image not found: missing.jpg")

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Image not found" in capsys.readouterr().err
