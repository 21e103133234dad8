import io
import json
import re
import unittest
from contextlib import redirect_stderr

from adtpy import ConsoleLogger, log_progress, timestamp, resolve


def _fork(task):
    calls = []
    task.fork(lambda e: calls.append(("err", e)), lambda v: calls.append(("ok", v)))
    return calls


class TestLogger(unittest.TestCase):
    def test_text_output_with_bound_fields(self):
        buf = io.StringIO()
        logger = ConsoleLogger(name="book").bind(page=3)
        with redirect_stderr(buf):
            logger.info("saved", path="out.pdf")
        line = buf.getvalue().strip()
        self.assertIn("book INFO: saved page=3 path=out.pdf", line)

    def test_json_output(self):
        buf = io.StringIO()
        logger = ConsoleLogger(json_output=True)
        with redirect_stderr(buf):
            logger.error("boom", code=1)
        rec = json.loads(buf.getvalue().strip())
        self.assertEqual(rec["level"], "ERROR")
        self.assertEqual(rec["fields"], {"code": 1})

    def test_level_filtering(self):
        buf = io.StringIO()
        logger = ConsoleLogger(level="WARN")
        with redirect_stderr(buf):
            logger.info("hidden")
            logger.warn("shown")
        self.assertNotIn("hidden", buf.getvalue())
        self.assertIn("shown", buf.getvalue())
        logger.set_level("debug")
        self.assertTrue(logger.enabled("DEBUG"))

    def test_bind_keeps_threshold(self):
        buf = io.StringIO()
        child = ConsoleLogger(name="book", level="ERROR").bind(page=1)
        with redirect_stderr(buf):
            child.warn("hidden")
            child.error("shown")
        self.assertNotIn("hidden", buf.getvalue())
        self.assertIn("book ERROR: shown page=1", buf.getvalue())

    def test_timestamp_format(self):
        calls = _fork(timestamp())
        self.assertRegex(calls[0][1], r"^\d{2}:\d{2}:\d{2}$")

    def test_log_progress_logs_at_fork_time_and_passes_value(self):
        buf = io.StringIO()
        logger = ConsoleLogger(name="pipe")
        with redirect_stderr(buf):
            t = resolve("state").chain(log_progress("Browser created", logger))
            self.assertEqual(buf.getvalue(), "")
            calls = _fork(t)
        self.assertEqual(calls, [("ok", "state")])
        self.assertTrue(re.search(r"pipe INFO: \d{2}:\d{2}:\d{2} - Browser created", buf.getvalue()))
