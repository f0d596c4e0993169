import unittest

from pydantic import ValidationError

from hysio.anamnesis.schema import (
    UNSPECIFIED,
    Effectiveness,
    MovementImpairment,
    PainIntensity,
    Severity,
)
from hysio.anamnesis.subparsers import (
    parse_activity_limitations,
    parse_movement_impairments,
    parse_pain_description,
    parse_previous_treatments,
)


class TestPainParser(unittest.TestCase):
    def test_nrs_range(self):
        pain = parse_pain_description("Lage rug, NRS 4-7")
        self.assertEqual(pain.intensity.best, 4)
        self.assertEqual(pain.intensity.worst, 7)
        self.assertEqual(pain.intensity.current, 4)
        self.assertEqual(pain.intensity.average, 4)

    def test_single_score(self):
        pain = parse_pain_description("NRS: 6")
        self.assertEqual(pain.intensity, PainIntensity(current=6, worst=6, best=6, average=6))

    def test_out_of_ten_fallback(self):
        pain = parse_pain_description("Doffe pijn, 5/10")
        self.assertEqual(pain.intensity.current, 5)

    def test_location_and_character(self):
        pain = parse_pain_description("nek, linkerschouder, karakter: stekend")
        self.assertEqual(pain.location, ["nek", "linkerschouder"])
        self.assertEqual(pain.character, ["stekend"])

    def test_out_of_scale_numbers_ignored(self):
        pain = parse_pain_description("NRS 12")
        self.assertEqual(pain.intensity.current, 0)

    def test_missing_input(self):
        for value in (None, "", "   "):
            with self.subTest(value=value):
                pain = parse_pain_description(value)
                self.assertEqual(pain.location, [])
                self.assertEqual(pain.intensity.current, 0)


class TestListSubParsers(unittest.TestCase):
    def test_movement_defaults(self):
        items = parse_movement_impairments("flexie knie, extensie knie")
        self.assertEqual(len(items), 2)
        first = items[0]
        self.assertEqual(first.movement, "flexie knie")
        self.assertEqual(first.joint, UNSPECIFIED)
        self.assertEqual(first.limitation, "Beperking aanwezig")
        self.assertIs(first.severity, Severity.MODERATE)

    def test_severity_not_inferred(self):
        items = parse_movement_impairments("ernstig beperkte flexie")
        self.assertIs(items[0].severity, Severity.MODERATE)

    def test_adl_defaults(self):
        items = parse_activity_limitations("aankleden; traplopen")
        self.assertEqual([a.activity for a in items], ["aankleden", "traplopen"])
        self.assertEqual(items[1].frequency, UNSPECIFIED)
        self.assertEqual(items[1].limitation, "Beperking gerapporteerd")
        self.assertIs(items[1].severity, Severity.MODERATE)

    def test_treatment_defaults(self):
        items = parse_previous_treatments("fysiotherapie 2022")
        self.assertEqual(items[0].type, "fysiotherapie 2022")
        self.assertEqual(items[0].provider, UNSPECIFIED)
        self.assertEqual(items[0].duration, UNSPECIFIED)
        self.assertIs(items[0].effectiveness, Effectiveness.SOMEWHAT_EFFECTIVE)

    def test_placeholder_yields_nothing(self):
        self.assertEqual(parse_movement_impairments("Niet besproken in anamnese"), [])
        self.assertEqual(parse_activity_limitations(None), [])
        self.assertEqual(parse_previous_treatments(""), [])


class TestEnumCoercion(unittest.TestCase):
    def test_severity_aliases(self):
        self.assertIs(Severity.coerce("ernstig"), Severity.SEVERE)
        self.assertIs(Severity.coerce("Licht"), Severity.MILD)
        self.assertIs(Severity.coerce("onbekend"), Severity.MODERATE)
        self.assertIs(Severity.coerce(None), Severity.MODERATE)

    def test_effectiveness_aliases(self):
        self.assertIs(Effectiveness.coerce("very effective"), Effectiveness.VERY_EFFECTIVE)
        self.assertIs(Effectiveness.coerce("niet effectief"), Effectiveness.NOT_EFFECTIVE)
        self.assertIs(Effectiveness.coerce("?"), Effectiveness.SOMEWHAT_EFFECTIVE)

    def test_model_coerces_unknown_severity(self):
        item = MovementImpairment(movement="rotatie", severity="heel erg")
        self.assertIs(item.severity, Severity.MODERATE)

    def test_pain_scale_is_bounded(self):
        with self.assertRaises(ValidationError):
            PainIntensity(current=11)


if __name__ == "__main__":
    unittest.main()
