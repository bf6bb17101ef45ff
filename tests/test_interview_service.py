import asyncio
import json
import random
import unittest

from fakes import FakeCompletionClient

from app.ai.errors import UpstreamServiceError
from app.schemas.interview import ResumeContext
from app.services.interview_service import (
    DEFAULT_QUESTIONS,
    INAPPROPRIATE_FEEDBACK,
    analyze_answer,
    fallback_question_pool,
    generate_question,
    is_inappropriate,
    pick_fallback_question,
)

LONG_ANSWER = " ".join(["I led the migration of our billing system and cut costs by thirty percent."] * 3)


class GenerateQuestionTests(unittest.TestCase):
    def test_model_question_is_unquoted(self):
        client = FakeCompletionClient('"Why did you leave your last role?"\n')
        question = asyncio.run(
            generate_question(
                client,
                resume=ResumeContext(score=61, letter_grade="D- - Weak", feedback_points=["No metrics"]),
                previous_questions=["Tell me about yourself."],
                question_count=2,
                job_position="Data Analyst",
            )
        )

        self.assertEqual(question, "Why did you leave your last role?")
        system, user = client.calls[0]["messages"]
        self.assertIn("scored 61/100 (Grade: D-)", system.content)
        self.assertIn('"Data Analyst" position', system.content)
        self.assertIn("interview question #2", user.content)
        self.assertIn("Tell me about yourself.", user.content)

    def test_upstream_failure_falls_back_to_pool(self):
        client = FakeCompletionClient(error=UpstreamServiceError("down", unreachable=True))
        question = asyncio.run(generate_question(client, rng=random.Random(3)))
        self.assertIn(question, DEFAULT_QUESTIONS)

    def test_blank_completion_falls_back_to_pool(self):
        question = asyncio.run(
            generate_question(FakeCompletionClient("  "), job_field="Healthcare", rng=random.Random(1))
        )
        pool = fallback_question_pool(resume=None, job_position="", job_field="Healthcare")
        self.assertIn(question, pool)

    def test_pool_includes_role_and_resume_questions(self):
        pool = fallback_question_pool(
            resume=ResumeContext(score=70, letter_grade="C-"),
            job_position="Nurse",
            job_field="Healthcare",
        )
        self.assertIn("What specifically attracts you to a Nurse role?", pool)
        self.assertTrue(any("Healthcare" in question for question in pool))
        self.assertTrue(any("resume grade of C-" in question for question in pool))
        self.assertEqual(pool[-len(DEFAULT_QUESTIONS):], list(DEFAULT_QUESTIONS))

    def test_previous_questions_are_skipped(self):
        pool = ["Alpha question about teamwork", "Beta question about deadlines"]
        previous = ["Earlier I asked: Alpha question about teamwork"]
        for seed in range(10):
            self.assertEqual(pick_fallback_question(pool, previous, random.Random(seed)), pool[1])

    def test_exhausted_pool_reuses_questions(self):
        pool = ["Alpha question about teamwork"]
        self.assertEqual(pick_fallback_question(pool, pool, random.Random(0)), pool[0])


class AnalyzeAnswerTests(unittest.TestCase):
    def test_inappropriate_answer_skips_the_model(self):
        client = FakeCompletionClient("{}")
        feedback = asyncio.run(analyze_answer(client, transcript="This job is shit", question="Why us?"))
        self.assertEqual(feedback, INAPPROPRIATE_FEEDBACK)
        self.assertEqual(feedback.score, 2)
        self.assertEqual(client.calls, [])

    def test_filter_uses_whole_words(self):
        self.assertFalse(is_inappropriate("I passed the class assessment in Hellenic history"))
        self.assertTrue(is_inappropriate("What the HELL"))

    def test_json_with_chatter_is_parsed_and_score_clamped(self):
        payload = {
            "feedback": "Clear and structured.",
            "score": 12,
            "isProfessional": True,
            "strengths": ["Specific numbers"],
            "improvements": ["Mention the team size"],
        }
        client = FakeCompletionClient(f"Here is my analysis:\n```json\n{json.dumps(payload)}\n```")

        feedback = asyncio.run(analyze_answer(client, transcript=LONG_ANSWER, question="Biggest win?"))

        self.assertEqual(feedback.score, 10)
        self.assertEqual(feedback.strengths, ["Specific numbers"])
        self.assertTrue(client.calls[0]["json_mode"])

    def test_invalid_json_uses_length_based_fallback(self):
        short = asyncio.run(analyze_answer(FakeCompletionClient("not json"), transcript="I did stuff.", question="Q?"))
        self.assertEqual(short.score, 4)

        long = asyncio.run(analyze_answer(FakeCompletionClient("not json"), transcript=LONG_ANSWER, question="Q?"))
        self.assertEqual(long.score, 6)

    def test_schema_mismatch_uses_fallback(self):
        client = FakeCompletionClient('{"verdict": "fine"}')
        feedback = asyncio.run(analyze_answer(client, transcript=LONG_ANSWER, question="Q?"))
        self.assertEqual(feedback.score, 6)

    def test_upstream_failure_uses_fallback(self):
        client = FakeCompletionClient(error=UpstreamServiceError("boom", status_code=500))
        feedback = asyncio.run(analyze_answer(client, transcript="Short answer.", question="Q?"))
        self.assertEqual(feedback.score, 4)
        self.assertTrue(feedback.is_professional)


if __name__ == "__main__":
    unittest.main()
