import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from test_estree import sample_program


ROOT = Path(__file__).resolve().parents[1]


def run_cli(*args):
    env = os.environ.copy()
    env["PYTHONPATH"] = str(ROOT) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "stylewalker", *args],
        cwd=ROOT,
        text=True,
        capture_output=True,
        env=env,
        check=False,
    )


class CLITests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.source = self.tmp / "app.json"
        self.source.write_text(json.dumps(sample_program()), encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def test_json_output(self):
        proc = run_cli(str(self.source))
        self.assertEqual(proc.returncode, 0, proc.stderr)

        payload = json.loads(proc.stdout)
        self.assertTrue(payload["ok"])
        self.assertEqual(len(payload["results"]), 1)

        result = payload["results"][0]
        self.assertTrue(result["ok"])
        self.assertEqual(result["file"], "app.json")
        self.assertEqual(result["summary"], {"warning": 5, "error": 0, "total": 5})
        self.assertEqual(
            [(f["line"], f["rule_id"]) for f in result["findings"]],
            [
                (1, "NoVarDeclaration"),
                (1, "NoVarDeclaration"),
                (2, "NamingConvention"),
                (5, "NamingConvention"),
                (8, "GuardClausePreferred"),
            ],
        )
        self.assertEqual(payload["rule_groups"], ["declarations", "loops", "naming", "structure"])

    def test_text_output_with_groups(self):
        proc = run_cli("--text", "--groups", "naming", str(self.source))
        self.assertEqual(proc.returncode, 0, proc.stderr)

        lines = proc.stdout.strip().splitlines()
        self.assertEqual(
            lines,
            [
                "2:1 [warning] NamingConvention: Class name 'userProfile' should be UpperCamelCase.",
                "5:3 [warning] NamingConvention: Method name 'Render' should be lowerCamelCase.",
                "0 errors, 2 warnings",
            ],
        )

    def test_config_severity_sets_exit_status(self):
        config = self.tmp / "stylewalker.json"
        config.write_text(
            json.dumps({"groups": ["declarations"], "rules": {"NoVarDeclaration": {"severity": "error"}}}),
            encoding="utf-8",
        )
        proc = run_cli("--config", str(config), "--text", str(self.source))

        self.assertEqual(proc.returncode, 1)
        self.assertIn("1:1 [error] NoVarDeclaration", proc.stdout)
        self.assertTrue(proc.stdout.strip().endswith("2 errors, 0 warnings"))

    def test_several_files_get_headers_and_failures_are_reported(self):
        other = self.tmp / "notes.txt"
        other.write_text("hello", encoding="utf-8")
        proc = run_cli("--text", "--jobs", "2", str(self.source), str(other))

        self.assertEqual(proc.returncode, 1)
        self.assertIn("=== app.json ===", proc.stdout)
        self.assertIn("=== notes.txt ===", proc.stdout)
        self.assertIn("Failed to parse notes.txt", proc.stdout)

    def test_failed_file_in_json_mode(self):
        proc = run_cli(str(self.tmp / "missing.json"))
        self.assertEqual(proc.returncode, 1)
        result = json.loads(proc.stdout)["results"][0]
        self.assertFalse(result["ok"])
        self.assertIn("does not exist", result["error"])

    def test_non_utf8_file_fails_alone_in_a_batch(self):
        bad = self.tmp / "bad.json"
        bad.write_bytes(b'{"type": "Program", "body": [], "x": "\xff\xfe"}')
        proc = run_cli(str(bad), str(self.source))

        self.assertEqual(proc.returncode, 1)
        self.assertNotIn("Traceback", proc.stderr)
        payload = json.loads(proc.stdout)
        self.assertTrue(payload["ok"])

        failed, good = payload["results"]
        self.assertEqual(failed["file"], "bad.json")
        self.assertFalse(failed["ok"])
        self.assertIn("Failed to parse bad.json", failed["error"])
        self.assertTrue(good["ok"])
        self.assertEqual(good["summary"]["total"], 5)

    def test_non_utf8_config_is_a_usage_error(self):
        config = self.tmp / "stylewalker.json"
        config.write_bytes(b'{"groups": ["\xff"]}')
        proc = run_cli("--config", str(config), str(self.source))

        self.assertEqual(proc.returncode, 2)
        self.assertNotIn("Traceback", proc.stderr)
        payload = json.loads(proc.stdout)
        self.assertFalse(payload["ok"])
        self.assertIn("Could not read config file", payload["error"])

    def test_unknown_group_is_a_usage_error(self):
        proc = run_cli("--groups", "spacing", str(self.source))
        self.assertEqual(proc.returncode, 2)
        payload = json.loads(proc.stdout)
        self.assertFalse(payload["ok"])
        self.assertIn("spacing", payload["error"])


if __name__ == "__main__":
    unittest.main()
