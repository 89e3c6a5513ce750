import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobfillr.catalog import LocalCatalog, load_seed_templates, seed_templates  # noqa: E402
from jobfillr.core.errors import AnswerValidationError, InvalidInput, StoreUnavailable, UnknownTemplate  # noqa: E402
from jobfillr.schemas import (  # noqa: E402
    AnswerSource,
    Confidence,
    EducationData,
    MatchContext,
    ObservedQuestion,
    PersonalInfo,
    WorkExperienceData,
    parse_template,
)
from jobfillr.services import AutofillService  # noqa: E402
from jobfillr.storage import AnswerStore, Database, ProfileStore, TemplateStore  # noqa: E402

USER_ID = 42
ANN = PersonalInfo(first_name="Ann", last_name="Lee", email="a@b.com")


class ServiceTestCase(unittest.TestCase):
    templates = None

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = Database(str(Path(self._tmp.name) / "autofill.db"))
        self.template_store = TemplateStore(self.db)
        seed_templates(self.template_store, self.templates or load_seed_templates())
        self.answers = AnswerStore(self.db)
        self.profiles = ProfileStore(self.db)
        self.service = AutofillService(
            catalog=LocalCatalog(self.template_store.list_templates()),
            answers=self.answers,
            profiles=self.profiles,
        )

    def tearDown(self):
        self.db.close()
        self._tmp.cleanup()


class EmailScenarioTests(ServiceTestCase):
    templates = [
        parse_template(
            {
                "id": 1,
                "category": "personal.email",
                "question": "What is your email address?",
                "question_type": "text",
            }
        )
    ]

    def test_email_is_filled_from_profile(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        resolved = self.service.resolve(USER_ID, ObservedQuestion(text="Email Address"))
        self.assertEqual(resolved.template_id, 1)
        self.assertEqual(resolved.value, "a@b.com")
        self.assertEqual(resolved.source, AnswerSource.PROFILE_FIELD)
        self.assertEqual(resolved.confidence, Confidence.SYNTHESIZED)

    def test_stored_answer_wins_over_profile(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        self.service.submit_answer(USER_ID, 1, "jane@doe.com")
        resolved = self.service.resolve(USER_ID, ObservedQuestion(text="Email Address"))
        self.assertEqual(resolved.value, "jane@doe.com")
        self.assertEqual(resolved.source, AnswerSource.STORED_ANSWER)
        self.assertEqual(resolved.confidence, Confidence.EXACT)

    def test_answers_are_per_user(self):
        self.service.submit_answer(USER_ID, 1, "jane@doe.com")
        resolved = self.service.resolve(USER_ID + 1, ObservedQuestion(text="Email Address"))
        self.assertEqual(resolved.confidence, Confidence.UNRESOLVED)


class SeedCatalogServiceTests(ServiceTestCase):
    def test_unknown_question_is_unresolved(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        resolved = self.service.resolve(
            USER_ID, ObservedQuestion(text="Are you legally authorized to work in the US?")
        )
        self.assertEqual(resolved.confidence, Confidence.UNRESOLVED)
        self.assertIsNone(resolved.value)
        self.assertIsNone(resolved.template_id)

    def test_batch_shares_one_snapshot(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        self.profiles.add_work_experience(
            USER_ID, WorkExperienceData(company="Globex", title="Engineer", current=True)
        )
        results = self.service.resolve_batch(
            USER_ID,
            [
                ObservedQuestion(text="First name"),
                ObservedQuestion(text="Current company"),
                ObservedQuestion(text="Favourite colour"),
            ],
            MatchContext(recent_categories=("personal.email",)),
        )
        self.assertEqual([result.value for result in results], ["Ann", "Globex", None])
        self.assertEqual(results[2].confidence, Confidence.UNRESOLVED)

    def test_batch_rejects_empty_field(self):
        with self.assertRaises(InvalidInput):
            self.service.resolve_batch(USER_ID, [ObservedQuestion(text="Email"), ObservedQuestion(text=" ")])

    def test_submit_normalizes_option_label(self):
        answer = self.service.submit_answer(USER_ID, 52, "remote")
        self.assertEqual(answer.answer, "Remote")
        resolved = self.service.resolve(USER_ID, ObservedQuestion(text="Work arrangement", question_type="select"))
        self.assertEqual(resolved.value, "Remote")

    def test_submit_rejects_wrong_shape(self):
        with self.assertRaises(AnswerValidationError):
            self.service.submit_answer(USER_ID, 53, "yes")
        with self.assertRaises(AnswerValidationError):
            self.service.submit_answer(USER_ID, 42, ["Python", "COBOL"])
        with self.assertRaises(AnswerValidationError):
            self.service.submit_answer(USER_ID, 33, "June 2020")
        self.assertEqual(self.service.list_answers(USER_ID), [])

    def test_submit_rejects_unknown_template(self):
        with self.assertRaises(UnknownTemplate):
            self.service.submit_answer(USER_ID, 9999, "anything")

    def test_submit_twice_is_idempotent(self):
        first = self.service.submit_answer(USER_ID, 42, ["Python", "Go", "Python"])
        second = self.service.submit_answer(USER_ID, 42, ["Python", "Go", "Python"])
        self.assertEqual(first.id, second.id)
        self.assertEqual(first.answer, ["Python", "Go"])
        self.assertEqual(second.answer, first.answer)
        self.assertGreaterEqual(second.updated_at, first.updated_at)
        self.assertEqual(len(self.service.list_answers(USER_ID)), 1)

    def test_submit_overwrites_previous_answer(self):
        self.service.submit_answer(USER_ID, 50, "100k")
        self.service.submit_answer(USER_ID, 50, "120k")
        self.assertEqual([answer.answer for answer in self.service.list_answers(USER_ID)], ["120k"])

    def test_delete_answer(self):
        self.service.submit_answer(USER_ID, 50, "100k")
        self.assertTrue(self.service.delete_answer(USER_ID, 50))
        self.assertFalse(self.service.delete_answer(USER_ID, 50))

    def test_delete_user_data_removes_everything(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        self.profiles.add_education(USER_ID, EducationData(institution="State U", degree="BSc"))
        self.service.submit_answer(USER_ID, 50, "100k")
        deleted = self.service.delete_user_data(USER_ID)
        self.assertEqual(deleted["user_answers"], 1)
        self.assertEqual(deleted["educations"], 1)
        self.assertEqual(deleted["profiles"], 1)
        self.assertIsNone(self.profiles.get_profile(USER_ID))
        self.assertEqual(self.service.get_profile_completion(USER_ID).percentage, 0)

    def test_delete_user_data_is_all_or_nothing(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        self.service.submit_answer(USER_ID, 50, "100k")
        with self.db.transaction() as conn:
            conn.execute("DROP TABLE profiles")
        with self.assertRaises(StoreUnavailable):
            self.service.delete_user_data(USER_ID)
        # the failed profile delete rolls the answer delete back with it
        self.assertEqual([answer.template_id for answer in self.answers.list_answers(USER_ID)], [50])

    def test_export_user_data(self):
        self.profiles.save_personal_info(USER_ID, ANN)
        self.profiles.add_work_experience(USER_ID, WorkExperienceData(company="Globex", title="Engineer"))
        self.service.submit_answer(USER_ID, 51, "yes")
        export = self.service.export_user_data(USER_ID)
        self.assertEqual(export.user_id, USER_ID)
        self.assertEqual(export.profile.personal_info.email, "a@b.com")
        self.assertEqual([job.company for job in export.profile.work_experiences], ["Globex"])
        self.assertEqual([(answer.template_id, answer.answer) for answer in export.answers], [(51, "Yes")])
        self.assertEqual(export.completion.percentage, export.profile.profile.completion_percentage)

    def test_export_for_unknown_user_is_empty(self):
        export = self.service.export_user_data(999)
        self.assertIsNone(export.profile.profile)
        self.assertEqual(export.answers, [])
        self.assertEqual(export.completion.percentage, 0)


class SeedingTests(ServiceTestCase):
    def test_reseeding_creates_nothing(self):
        templates = load_seed_templates()
        self.assertEqual(seed_templates(self.template_store, templates), 0)
        self.assertEqual(len(self.template_store.list_templates()), len(templates))

    def test_same_question_under_new_id_is_skipped(self):
        duplicate = parse_template(
            {"id": 500, "category": "personal.email", "question": "What is your email address?", "question_type": "text"}
        )
        self.assertEqual(seed_templates(self.template_store, [duplicate]), 0)
        self.assertIsNone(self.template_store.get_template(500))

    def test_existing_rows_are_not_rewritten(self):
        changed = parse_template(
            {"id": 1, "category": "personal.email", "question": "Email?", "question_type": "text"}
        )
        self.assertEqual(seed_templates(self.template_store, [changed]), 0)
        self.assertEqual(self.template_store.get_template(1).question, "What is your email address?")


if __name__ == "__main__":
    unittest.main()
