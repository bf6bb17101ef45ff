import asyncio
import unittest

from fakes import FakeCompletionClient

from app.ai.errors import UpstreamTimeoutError
from app.parsing.models import UnsupportedFormatError
from app.schemas.analysis import AnalysisRequest
from app.services.analysis_service import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
    EmptyResumeError,
    analyze_resume,
    analyze_upload,
    truncate_resume,
)

COMPLETION = (
    "IS THIS A RESUME? YES\nSCORE: 81\nLETTER GRADE: B- (Decent)\n"
    "REJECTION LETTER:\nDear Applicant,\nWe regret to inform you.\nBest regards,\nThe Rejection Bot\n"
    "FEEDBACK POINTS:\n1. Too long\n2. Buzzwords everywhere\n"
    "CONSTRUCTIVE FEEDBACK:\n1. Trim to one page\n2. Replace buzzwords with results\n"
)


class TruncateResumeTests(unittest.TestCase):
    def test_long_text_is_cut_with_marker(self):
        self.assertEqual(truncate_resume("abcdef", 3), "abc\n[...]")

    def test_short_text_is_only_stripped(self):
        self.assertEqual(truncate_resume("  abc  ", 10), "abc")


class AnalyzeServiceTests(unittest.TestCase):
    def test_upload_round_trip(self):
        client = FakeCompletionClient(COMPLETION)
        result = asyncio.run(
            analyze_upload(
                client,
                filename="resume.txt",
                content=b"Jane Doe\nBackend engineer, 5 years of Python",
                intensity="savage",
                job_position="  Backend Engineer ",
            )
        )

        self.assertEqual(result.score, 81)
        self.assertEqual(result.letter_grade, "B- - Decent")
        self.assertEqual(result.feedback_points, ("Too long", "Buzzwords everywhere"))
        self.assertTrue(result.rejection_letter.startswith("Subject: Your Application for the Backend Engineer Position"))

        call = client.calls[0]
        self.assertEqual(call["temperature"], ANALYSIS_TEMPERATURE)
        self.assertEqual(call["max_tokens"], ANALYSIS_MAX_TOKENS)
        self.assertFalse(call["json_mode"])
        prompt = call["messages"][-1].content
        self.assertIn("Backend engineer, 5 years of Python", prompt)
        self.assertIn('"Backend Engineer" position', prompt)

    def test_blank_file_is_rejected_before_calling_the_model(self):
        client = FakeCompletionClient(COMPLETION)
        with self.assertRaises(EmptyResumeError):
            asyncio.run(analyze_upload(client, filename="resume.txt", content=b"  \n "))
        self.assertEqual(client.calls, [])

    def test_unsupported_file_type(self):
        with self.assertRaises(UnsupportedFormatError):
            asyncio.run(analyze_upload(FakeCompletionClient(COMPLETION), filename="resume.png", content=b"\x89PNG"))

    def test_completion_errors_propagate(self):
        client = FakeCompletionClient(error=UpstreamTimeoutError("slow", timeout_s=1.0))
        request = AnalysisRequest(resume_text="Jane Doe", intensity="mild")
        with self.assertRaises(UpstreamTimeoutError):
            asyncio.run(analyze_resume(client, request))


if __name__ == "__main__":
    unittest.main()
