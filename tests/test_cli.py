import os
import sys
import json
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import format_warnings, parse_history_file, stats_report, main
from config import YamlConfig
from stats_service import StatisticsService

NOW = datetime.datetime(2024, 10, 20, 15, 30)


class CLIToolsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.history_path = "test_history.txt"
        self.logs_path = "test_logs.json"
        self.yaml_path = "test_cli.yaml"
        self.cfg = YamlConfig(self.yaml_path)

    def tearDown(self) -> None:
        for path in [self.history_path, self.logs_path, self.yaml_path]:
            if os.path.exists(path):
                os.remove(path)

    def write(self, path: str, text: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def test_format_warnings(self) -> None:
        warnings = [f"w{i}" for i in range(8)]
        self.assertEqual(format_warnings(warnings, 5), ["w0", "w1", "w2", "w3", "w4", "...and 3 more"])
        self.assertEqual(format_warnings(warnings[:2], 5), ["w0", "w1"])

    def test_parse_preview(self) -> None:
        self.write(self.history_path, "10/1: 20, 20, 30, 30\nno idea\n")
        lines = parse_history_file(self.history_path, self.cfg, now=NOW)
        self.assertEqual(lines[0], "2024-10-01    100  20, 20, 30, 30")
        self.assertIn("4 sets, 100 reps across 1 days (2024-10-01 to 2024-10-01)", lines)
        self.assertIn('  Could not parse line: "no idea"', lines)

    def test_parse_nothing(self) -> None:
        self.write(self.history_path, "nothing here")
        lines = parse_history_file(self.history_path, self.cfg, now=NOW)
        self.assertEqual(lines[0], "Nothing to import")

    def test_parse_json(self) -> None:
        self.write(self.history_path, "10/2: 25w 20")
        (out,) = parse_history_file(self.history_path, self.cfg, as_json=True, now=NOW)
        payloads = json.loads(out)
        self.assertEqual([p["reps"] for p in payloads], [25, 20])
        self.assertEqual(payloads[0]["variation"], "Weighted")
        self.assertEqual(payloads[1]["logged_at"], "2024-10-02T12:01:00")

    def test_stats_report(self) -> None:
        logs = [
            {"id": "1", "reps": 60, "logged_at": "2024-10-20T08:00:00"},
            {"id": "2", "reps": 60, "logged_at": "2024-10-20T18:00:00", "variation": "Wide"},
            {"id": "3", "reps": 100, "logged_at": "2024-10-19T12:00:00"},
        ]
        self.write(self.logs_path, json.dumps(logs))
        service = StatisticsService(clock=lambda: NOW)
        lines = stats_report(self.logs_path, self.cfg, service=service)
        self.assertIn("Current streak: 2 days", lines)
        self.assertIn("Most in a day: 120", lines)
        self.assertIn("Lifetime total: 220", lines)
        self.assertEqual(lines[-1], "  Oct 20    120 *")
        self.assertEqual(len([line for line in lines if line.startswith(("  Oct", "  Sep"))]), 7)

    def test_stats_report_with_invalid_stored_goal(self) -> None:
        self.write(self.yaml_path, "daily_goal: -5\n")
        logs = [{"id": "1", "reps": 100, "logged_at": "2024-10-20T08:00:00"}]
        self.write(self.logs_path, json.dumps(logs))
        service = StatisticsService(clock=lambda: NOW)
        lines = stats_report(self.logs_path, self.cfg, service=service)
        self.assertEqual(lines[0], "Today: 100/100 in 1 sets (100%)")
        self.assertIn("Current streak: 1 days", lines)

    def test_goal_command(self) -> None:
        main(["--settings", self.yaml_path, "goal", "--set", "120"])
        self.assertEqual(YamlConfig(self.yaml_path).daily_goal(), 120)


if __name__ == "__main__":
    unittest.main()
