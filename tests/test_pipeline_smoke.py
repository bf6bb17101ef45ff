import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import app.main  # noqa: F401
from app.analysis.parser import parse_completion
from app.core.config.scoring import get_scoring_value


class PipelineSmokeTests(unittest.TestCase):
    def test_safe_imports_and_scoring_config_lookup(self):
        self.assertEqual(get_scoring_value("sections.max_items"), 5)

    def test_routes_are_mounted(self):
        paths = {route.path for route in app.main.app.routes}
        for path in ("/", "/v1/health", "/v1/analyze", "/api/analyze", "/v1/job-recommendations"):
            self.assertIn(path, paths)

    def test_parse_completion_never_raises_on_garbage(self):
        for text in ("", "   ", "SCORE:", "💥💥💥", "FEEDBACK POINTS:\nCONSTRUCTIVE FEEDBACK:"):
            result = parse_completion(text, "medium")
            self.assertTrue(result.rejection_letter)
            self.assertTrue(result.feedback_points)
            self.assertTrue(result.constructive_feedback)


if __name__ == "__main__":
    unittest.main()
