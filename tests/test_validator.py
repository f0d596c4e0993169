import unittest

from hysio.anamnesis.schema import (
    ActivityLimitation,
    ClinicalSectionStructure,
    EnhancedClinicalStructure,
    PainIntensity,
    PreviousTreatment,
)
from hysio.anamnesis.validator import is_structure_complete, structure_completeness, validate_completeness


def _complete_structure() -> EnhancedClinicalStructure:
    s = EnhancedClinicalStructure()
    s.request.primary_concern = "Pijn rechterknie bij traplopen"
    s.request.patient_goals = ["traplopen zonder pijn"]
    s.request.expectations = "Binnen 8 weken herstel"
    s.history.onset_description = "Na voetbalwedstrijd"
    s.history.previous_treatments = [PreviousTreatment(type="huisarts")]
    s.disorders.pain_description.intensity = PainIntensity(current=5, worst=7, best=3, average=5)
    s.disorders.pain_description.location = ["rechterknie"]
    s.limitations.activities_of_daily_living = [ActivityLimitation(activity="traplopen")]
    s.summary.key_findings = ["Knieklachten na sport"]
    return s


class TestCompletenessValidator(unittest.TestCase):
    def test_complete(self):
        report = validate_completeness(_complete_structure())
        self.assertTrue(report.is_complete)
        self.assertEqual(report.missing_fields, [])
        self.assertEqual(report.quality_score, 100)
        self.assertEqual(report.recommendations, [])

    def test_missing_primary_concern_and_onset(self):
        s = _complete_structure()
        s.request.primary_concern = ""
        s.history.onset_description = ""
        report = validate_completeness(s)
        self.assertFalse(report.is_complete)
        self.assertEqual(report.quality_score, 75)
        self.assertIn("Primaire zorg patiënt", report.missing_fields)
        self.assertIn("Ontstaan klachten", report.missing_fields)
        self.assertEqual(len(report.missing_fields), 2)

    def test_empty_structure_floor(self):
        report = validate_completeness(EnhancedClinicalStructure())
        self.assertEqual(report.quality_score, 25)
        self.assertEqual(len(report.missing_fields), 6)
        self.assertGreaterEqual(report.quality_score, 0)

    def test_recommendations_do_not_change_score(self):
        s = _complete_structure()
        s.request.expectations = ""
        s.history.previous_treatments = []
        s.disorders.pain_description.location = []
        report = validate_completeness(s)
        self.assertTrue(report.is_complete)
        self.assertEqual(report.quality_score, 100)
        self.assertEqual(len(report.recommendations), 3)

    def test_zero_pain_score_counts_as_missing(self):
        s = _complete_structure()
        s.disorders.pain_description.intensity = PainIntensity(current=0, worst=7, best=0, average=3)
        report = validate_completeness(s)
        self.assertEqual(report.missing_fields, ["Pijn intensiteit (NRS)"])
        self.assertEqual(report.quality_score, 90)

    def test_invalid_input_treated_as_empty(self):
        report = validate_completeness(None)
        self.assertFalse(report.is_complete)
        self.assertEqual(report.quality_score, 25)


class TestFourFieldCompleteness(unittest.TestCase):
    def test_percentage(self):
        s = ClinicalSectionStructure(primary_concern="A", history="B", disorders=" ")
        self.assertEqual(structure_completeness(s), 50)
        self.assertFalse(is_structure_complete(s))

    def test_complete(self):
        s = ClinicalSectionStructure(primary_concern="A", history="B", disorders="C", limitations="D")
        self.assertEqual(structure_completeness(s), 100)
        self.assertTrue(is_structure_complete(s))


if __name__ == "__main__":
    unittest.main()
