import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobfillr.resolution.completion import score_completion  # noqa: E402
from jobfillr.schemas import (  # noqa: E402
    Education,
    EducationData,
    PersonalInfo,
    Profile,
    ProfileSnapshot,
    WorkExperience,
    WorkExperienceData,
)
from jobfillr.storage import Database, ProfileStore  # noqa: E402
from jobfillr.storage.profile_store import clean_skills  # noqa: E402

USER_ID = 9
ANN = PersonalInfo(first_name="Ann", last_name="Lee", email="a@b.com")


class CompletionScoreTests(unittest.TestCase):
    def test_no_profile_scores_zero(self):
        report = score_completion(ProfileSnapshot(user_id=USER_ID))
        self.assertEqual(report.percentage, 0)
        self.assertFalse(any(report.sections.model_dump().values()))

    def test_personal_info_and_skills_is_half(self):
        profile = Profile(id=1, user_id=USER_ID, personal_info=ANN, skills=("Go",))
        report = score_completion(ProfileSnapshot(user_id=USER_ID, profile=profile))
        self.assertEqual(report.percentage, 50)
        self.assertTrue(report.sections.personal_info)
        self.assertTrue(report.sections.skills)
        self.assertFalse(report.sections.work_experience)

    def test_each_section_is_a_quarter(self):
        profile = Profile(id=1, user_id=USER_ID, skills=("  ",))
        self.assertEqual(score_completion(ProfileSnapshot(user_id=USER_ID, profile=profile)).percentage, 0)
        one = ProfileSnapshot(
            user_id=USER_ID,
            profile=Profile(id=1, user_id=USER_ID),
            educations=(Education(id=1, user_id=USER_ID, institution="State U"),),
        )
        self.assertEqual(score_completion(one).percentage, 25)

    def test_full_profile_is_complete(self):
        full = ProfileSnapshot(
            user_id=USER_ID,
            profile=Profile(id=1, user_id=USER_ID, personal_info=ANN, skills=("Go",)),
            work_experiences=(WorkExperience(id=1, user_id=USER_ID, company="Globex", title="Engineer"),),
            educations=(Education(id=1, user_id=USER_ID, institution="State U"),),
        )
        self.assertEqual(score_completion(full).percentage, 100)


class ProfileStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = Database(str(Path(self._tmp.name) / "autofill.db"))
        self.store = ProfileStore(self.db)

    def tearDown(self):
        self.db.close()
        self._tmp.cleanup()

    def test_every_write_recomputes_completion(self):
        self.assertEqual(self.store.save_personal_info(USER_ID, ANN).completion_percentage, 25)
        self.assertEqual(self.store.save_skills(USER_ID, ["Go"]).completion_percentage, 50)

        job = self.store.add_work_experience(USER_ID, WorkExperienceData(company="Globex", title="Engineer"))
        self.assertEqual(self.store.get_profile(USER_ID).completion_percentage, 75)

        school = self.store.add_education(USER_ID, EducationData(institution="State U"))
        self.assertEqual(self.store.get_profile(USER_ID).completion_percentage, 100)

        self.assertTrue(self.store.delete_work_experience(USER_ID, job.id))
        self.assertEqual(self.store.get_profile(USER_ID).completion_percentage, 75)

        self.assertTrue(self.store.delete_education(USER_ID, school.id))
        self.assertEqual(self.store.save_skills(USER_ID, [" "]).completion_percentage, 25)

        self.assertEqual(self.store.reset_profile(USER_ID).completion_percentage, 0)

    def test_entries_keep_insertion_order(self):
        first = self.store.add_work_experience(USER_ID, WorkExperienceData(company="Initech", title="Intern"))
        second = self.store.add_work_experience(USER_ID, WorkExperienceData(company="Globex", title="Engineer"))
        self.assertEqual((first.order, second.order), (0, 1))
        snapshot = self.store.load_snapshot(USER_ID)
        self.assertEqual([job.company for job in snapshot.work_experiences], ["Initech", "Globex"])

    def test_update_and_delete_are_scoped_to_the_owner(self):
        job = self.store.add_work_experience(USER_ID, WorkExperienceData(company="Globex", title="Engineer"))
        update = WorkExperienceData(company="Globex", title="Lead", current=True)
        self.assertIsNone(self.store.update_work_experience(USER_ID + 1, job.id, update))
        self.assertFalse(self.store.delete_work_experience(USER_ID + 1, job.id))
        updated = self.store.update_work_experience(USER_ID, job.id, update)
        self.assertEqual(updated.title, "Lead")
        self.assertTrue(updated.current)

    def test_skills_are_deduplicated_case_insensitively(self):
        self.assertEqual(clean_skills(["Go", " python ", "go", "", "Python"]), ["Go", "python"])
        profile = self.store.save_skills(USER_ID, ["Go", "GO", "Rust"])
        self.assertEqual(profile.skills, ("Go", "Rust"))


if __name__ == "__main__":
    unittest.main()
