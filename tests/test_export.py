import unittest
from datetime import date

from hysio.anamnesis.schema import ClinicalSectionStructure
from hysio.export import UnsupportedExportFormat, export_filename, export_structure
from hysio.models import PatientInfo

TODAY = date(2024, 3, 15)


class TestExport(unittest.TestCase):
    def setUp(self):
        self.structure = ClinicalSectionStructure(
            primary_concern="Weer kunnen fietsen",
            history="Sinds <2> weken",
            red_flags=["Koorts", "Nachtzweten"],
        )
        self.patient = PatientInfo(initials="A.B.", chief_complaint="Knieklachten")

    def test_filename(self):
        self.assertEqual(export_filename("hhsb", self.patient, "txt", TODAY), "HHSB_A.B._2024-03-15.txt")
        self.assertEqual(export_filename("phsb", None, "html", TODAY), "PHSB_Patient_2024-03-15.html")

    def test_txt(self):
        result = export_structure(self.structure, "txt", patient=self.patient, today=TODAY)
        self.assertEqual(result.media_type, "text/plain; charset=utf-8")
        self.assertIn("HHSB ANAMNESEKAART\n==================", result.content)
        self.assertIn("Weer kunnen fietsen", result.content)
        self.assertIn("Geen informatie beschikbaar", result.content)
        self.assertIn("Geen samenvatting beschikbaar", result.content)
        self.assertIn("1. Koorts\n2. Nachtzweten", result.content)

    def test_html_escapes_text(self):
        result = export_structure(self.structure, "HTML", patient=self.patient, today=TODAY)
        self.assertTrue(result.filename.endswith(".html"))
        self.assertIn("Sinds &lt;2&gt; weken", result.content)
        self.assertNotIn("<2>", result.content)
        self.assertIn("<li>Koorts</li>", result.content)
        self.assertIn("A.B. - Knieklachten", result.content)

    def test_markdown_is_canonical_text(self):
        result = export_structure(self.structure, "md", today=TODAY)
        self.assertTrue(result.content.startswith("**H - Hulpvraag:**\nWeer kunnen fietsen\n\n"))
        self.assertTrue(result.content.endswith("[RODE VLAG: Nachtzweten]\n"))

    def test_accepts_mapping(self):
        result = export_structure({"primary_concern": "A"}, "md", "phsb", today=TODAY)
        self.assertEqual(result.content, "**P - Patiënt Probleem/Hulpvraag:**\nA\n")
        self.assertTrue(result.filename.startswith("PHSB_"))

    def test_binary_formats_rejected(self):
        for fmt in ("docx", "pdf", "rtf", ""):
            with self.subTest(fmt=fmt):
                with self.assertRaises(UnsupportedExportFormat):
                    export_structure(self.structure, fmt)


if __name__ == "__main__":
    unittest.main()
