import unittest

from pydantic import ValidationError

from app.analysis.grading import letter_grade_for, score_floor
from app.analysis.parser import NOT_A_RESUME_RESULT, grade_explanation, parse_completion
from app.schemas.analysis import INTENSITIES, AnalysisResult

SCENARIO_A = """IS THIS A RESUME? YES
SCORE: 40
LETTER GRADE: ...
REJECTION LETTER:
Dear Applicant,
...
Best regards,
The Rejection Bot
FEEDBACK POINTS:
1. Point one
CONSTRUCTIVE FEEDBACK:
1. Improve X
"""

MARKDOWN_COMPLETION = """**IS THIS A RESUME?** YES
**SCORE:** 72
**LETTER GRADE:** B+ (Strong projects, weak formatting)

**REJECTION LETTER:**
Dear Applicant,

Thank you for applying. Your resume reads like a grocery list.

Best regards,
The Rejection Bot

**FEEDBACK POINTS:**
1. 🎯 **Vague summary** that says nothing
2. 📉 No measurable results
2. 📉 No measurable results
- Vedant Palsaniya's Resume Review

**CONSTRUCTIVE FEEDBACK:**
- Improvement: Quantify outcomes 💪
- Suggestion: Cut the objective statement
"""


class ParseCompletionTests(unittest.TestCase):
    def test_scenario_floor_and_recomputed_grade(self):
        result = parse_completion(SCENARIO_A, "savage")

        self.assertTrue(result.is_valid_resume)
        self.assertEqual(result.score, 45)
        # The band table is authoritative: 45 falls in the lowest band.
        self.assertEqual(result.letter_grade, "F")
        self.assertEqual(result.feedback_points, ("Point one",))
        self.assertEqual(result.constructive_feedback, ("Improve X",))
        self.assertIn("Dear Applicant,", result.rejection_letter)
        self.assertTrue(result.rejection_letter.endswith("Best regards,\nThe Rejection Bot"))

    def test_missing_score_uses_default_then_floor(self):
        text = (
            "IS THIS A RESUME? YES\nLETTER GRADE: A+ (Flawless)\nREJECTION LETTER:\nNo.\n"
            "FEEDBACK POINTS:\n- a thing\nCONSTRUCTIVE FEEDBACK:\n- do better"
        )
        medium = parse_completion(text, "medium")
        self.assertEqual(medium.score, 55)
        self.assertEqual(medium.letter_grade, "F - Flawless")

        mild = parse_completion(text, "mild")
        self.assertEqual(mild.score, 65)
        self.assertEqual(mild.letter_grade, "D - Flawless")

    def test_model_grade_is_replaced_but_explanation_kept(self):
        result = parse_completion("SCORE: 91\nLETTER GRADE: C- because reasons", "mild")
        self.assertEqual(result.score, 91)
        self.assertEqual(result.letter_grade, "A- - because reasons")

    def test_markdown_heavy_completion(self):
        result = parse_completion(MARKDOWN_COMPLETION, "medium")

        self.assertEqual(result.score, 72)
        self.assertEqual(result.letter_grade, "C- - Strong projects, weak formatting")
        self.assertEqual(
            result.feedback_points,
            ("Vague summary that says nothing", "No measurable results"),
        )
        self.assertEqual(
            result.constructive_feedback,
            ("Quantify outcomes", "Cut the objective statement"),
        )
        self.assertIn("grocery list", result.rejection_letter)
        self.assertNotIn("**", result.rejection_letter)

    def test_items_are_capped_and_unique(self):
        lines = "\n".join(f"{index}. Problem {index % 4}" for index in range(1, 10))
        more = "\n".join(f"- Fix {index}" for index in range(8))
        text = f"FEEDBACK POINTS:\n{lines}\nCONSTRUCTIVE FEEDBACK:\n{more}"

        result = parse_completion(text, "medium")
        self.assertEqual(len(result.feedback_points), 4)
        self.assertEqual(len(set(result.feedback_points)), 4)
        self.assertEqual(len(result.constructive_feedback), 5)

    def test_empty_completion_still_yields_complete_result(self):
        result = parse_completion("", "medium")
        self.assertEqual(result.score, 55)
        self.assertEqual(result.letter_grade, "F")
        self.assertTrue(result.rejection_letter.startswith("Subject:"))
        self.assertTrue(1 <= len(result.feedback_points) <= 5)
        self.assertTrue(1 <= len(result.constructive_feedback) <= 5)

    def test_letter_keeps_sentences_that_start_with_score(self):
        text = (
            "IS THIS A RESUME? YES\nSCORE: 58\nREJECTION LETTER:\nDear Applicant,\nScore: 70 is not enough.\n\n"
            "Your summary rambles for half a page.\nSincerely,\nHR\nFEEDBACK POINTS:\n- Rambling\n"
            "CONSTRUCTIVE FEEDBACK:\n- Cut the summary"
        )
        result = parse_completion(text, "medium")
        self.assertIn("Your summary rambles for half a page.", result.rejection_letter)
        self.assertTrue(result.rejection_letter.endswith("Sincerely,\nHR"))
        self.assertNotIn("earned a grade", result.rejection_letter)
        self.assertEqual(result.feedback_points, ("Rambling",))

    def test_score_and_grade_invariants(self):
        for intensity in INTENSITIES:
            for score in range(0, 101, 7):
                with self.subTest(intensity=intensity, score=score):
                    result = parse_completion(f"SCORE: {score}\nLETTER GRADE: A+", intensity)
                    self.assertGreaterEqual(result.score, score_floor(intensity))
                    self.assertEqual(result.letter_grade.split()[0], letter_grade_for(result.score))


class NotAResumeTests(unittest.TestCase):
    def test_gate_returns_sentinel(self):
        for text in (
            "IS THIS A RESUME? NO\nSCORE: 99",
            "is this a resume? no",
            "**IS THIS A RESUME?** No\nFEEDBACK POINTS:\n- fine",
            "IS THIS A RESUME? YES\nSCORE: 80\nIS THIS A RESUME? NO\n",
        ):
            with self.subTest(text=text):
                result = parse_completion(text, "savage")
                self.assertIs(result, NOT_A_RESUME_RESULT)
                self.assertFalse(result.is_valid_resume)
                self.assertEqual(result.score, 0)
                self.assertEqual(result.letter_grade, "F-")

    def test_yes_answer_is_not_the_sentinel(self):
        self.assertIsNot(parse_completion("IS THIS A RESUME? YES", "medium"), NOT_A_RESUME_RESULT)


class AnalysisResultSchemaTests(unittest.TestCase):
    def test_feedback_lists_hold_one_to_five_items(self):
        base = {"score": 50, "letter_grade": "F", "rejection_letter": "Dear Applicant,"}
        six = tuple(f"Point {index}" for index in range(6))
        with self.assertRaises(ValidationError):
            AnalysisResult(**base, feedback_points=six, constructive_feedback=("Tip",))
        with self.assertRaises(ValidationError):
            AnalysisResult(**base, feedback_points=("Point",), constructive_feedback=six)
        result = AnalysisResult(**base, feedback_points=six[:5], constructive_feedback=("Tip",))
        self.assertEqual(len(result.feedback_points), 5)


class GradeExplanationTests(unittest.TestCase):
    def test_variants(self):
        self.assertEqual(grade_explanation("LETTER GRADE: B+ (Solid work)"), "Solid work")
        self.assertEqual(grade_explanation("LETTER GRADE: D - too many typos"), "too many typos")
        self.assertEqual(grade_explanation("LETTER GRADE: A"), "")
        self.assertEqual(grade_explanation("no grade here"), "")


if __name__ == "__main__":
    unittest.main()
