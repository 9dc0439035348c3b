"""Tests for point construction and logging setup."""

import logging
import unittest

from influxtemplate.logging_config import configure_logging
from influxtemplate.points import identity, make_point


class TestMakePoint(unittest.TestCase):
    def test_full_point(self):
        point = make_point("samples", {"value": 3.5}, tags={"host": "a"}, time=1000)

        self.assertEqual(
            point,
            {"measurement": "samples", "fields": {"value": 3.5}, "tags": {"host": "a"}, "time": 1000},
        )

    def test_optional_parts_omitted(self):
        point = make_point("samples", {"value": 1}, tags={})

        self.assertEqual(point, {"measurement": "samples", "fields": {"value": 1}})

    def test_time_zero_kept(self):
        self.assertEqual(make_point("samples", {"value": 1}, time=0)["time"], 0)

    def test_fields_required(self):
        with self.assertRaises(ValueError):
            make_point("samples", {})

    def test_measurement_required(self):
        with self.assertRaises(ValueError):
            make_point("", {"value": 1})

    def test_identity_converter(self):
        point = {"measurement": "m", "fields": {"v": 1}}
        self.assertIs(identity(point), point)


class TestConfigureLogging(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))
        self._urllib3_level = logging.getLogger("urllib3").level

    def tearDown(self):
        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)
        level, handlers = self._saved
        for h in handlers:
            root.addHandler(h)
        root.setLevel(level)
        logging.getLogger("urllib3").setLevel(self._urllib3_level)

    def test_split_handlers(self):
        configure_logging(logging.DEBUG)

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 2)
        self.assertEqual(sorted(h.level for h in root.handlers), [logging.DEBUG, logging.ERROR])
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)

    def test_level_name(self):
        configure_logging("info", debug_transport=True)

        self.assertEqual(logging.getLogger().level, logging.INFO)
        self.assertEqual(logging.getLogger("urllib3").level, logging.INFO)

    def test_unknown_level_name(self):
        with self.assertRaises(ValueError):
            configure_logging("chatty")


if __name__ == "__main__":
    unittest.main()
