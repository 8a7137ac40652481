"""
Test suite for lib/utils.py
"""

import json
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))
from lib.utils import jsonDumps, load_dotenv  # noqa: E402


class TestJsonDumps(unittest.TestCase):

    def test_compact_by_default(self):
        """Test compact separators and sorted keys"""
        self.assertEqual(jsonDumps({"b": 1, "a": [1, 2]}), '{"a":[1,2],"b":1}')

    def test_indent_disables_compact(self):
        """Test that indent produces pretty-printed JSON"""
        self.assertEqual(jsonDumps({"a": 1}, indent=2), '{\n  "a": 1\n}')

    def test_unicode_is_kept(self):
        """Test that non-ASCII text is not escaped"""
        self.assertEqual(jsonDumps({"text": "привет"}), '{"text":"привет"}')

    def test_unknown_types_as_strings(self):
        """Test that non-serializable values are converted with str()"""
        value = object()
        self.assertEqual(json.loads(jsonDumps({"value": value})), {"value": str(value)})


class TestLoadDotenv(unittest.TestCase):

    def setUp(self):
        self.tmpDir = tempfile.TemporaryDirectory()
        self.envPath = os.path.join(self.tmpDir.name, ".env")

    def tearDown(self):
        self.tmpDir.cleanup()

    def test_parse_key_values(self):
        """Test parsing of key=value lines, comments and quotes"""
        with open(self.envPath, "wt") as f:
            f.write('# comment\nFIRST=one\n\nSECOND = "two"\nURL=http://host/?a=b\ninvalid line\n')

        result = load_dotenv(self.envPath, populateEnv=False)
        self.assertEqual(result, {"FIRST": "one", "SECOND": "two", "URL": "http://host/?a=b"})

    def test_populate_env(self):
        """Test that variables are put into os.environ"""
        with open(self.envPath, "wt") as f:
            f.write("LAMENESS_UTILS_TEST=value\n")

        try:
            load_dotenv(self.envPath)
            self.assertEqual(os.environ.get("LAMENESS_UTILS_TEST"), "value")
        finally:
            os.environ.pop("LAMENESS_UTILS_TEST", None)

    def test_missing_file(self):
        """Test that missing file gives empty result"""
        self.assertEqual(load_dotenv(os.path.join(self.tmpDir.name, "missing.env")), {})


if __name__ == "__main__":
    unittest.main()
