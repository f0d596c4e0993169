import unittest

from hysio.anamnesis.extract import (
    dedupe_flags,
    extract_bullet_field,
    extract_red_flags,
    extract_section,
    to_item_list,
)


class TestSectionExtractor(unittest.TestCase):
    def test_stops_at_next_header(self):
        text = "**H - Hulpvraag:** A\n\n**H - Historie:** B"
        self.assertEqual(extract_section(text, "Hulpvraag"), "A")
        self.assertEqual(extract_section(text, "Historie"), "B")

    def test_logical_field_names(self):
        text = "**H - Hulpvraag:** A\n\n**S - Stoornissen:** C"
        self.assertEqual(extract_section(text, "primary_concern"), "A")
        self.assertEqual(extract_section(text, "disorders"), "C")

    def test_short_bold_headers(self):
        text = "**Hulpvraag:**\nWil weer fietsen\n\n**Beperkingen:**\nTraplopen lukt niet"
        self.assertEqual(extract_section(text, "Hulpvraag"), "Wil weer fietsen")
        self.assertEqual(extract_section(text, "Beperkingen"), "Traplopen lukt niet")

    def test_case_insensitive(self):
        text = "**HULPVRAAG:**\nPijnvrij werken\n\n**HISTORIE:**\nSinds januari"
        self.assertEqual(extract_section(text, "hulpvraag"), "Pijnvrij werken")
        self.assertEqual(extract_section(text, "historie"), "Sinds januari")

    def test_plain_label_fallback(self):
        text = "Hulpvraag: Weer kunnen tillen\nHistorie: Val van trap"
        self.assertEqual(extract_section(text, "Hulpvraag"), "Weer kunnen tillen")
        self.assertEqual(extract_section(text, "Historie"), "Val van trap")

    def test_stops_at_summary_and_red_flags(self):
        text = (
            "**B - Beperkingen:** Kan niet sporten\n\n"
            "**Samenvatting Anamnese:** Liespijn bij hardlopen\n\n"
            "**Rode Vlagen:**\n- Nachtzweten"
        )
        self.assertEqual(extract_section(text, "Beperkingen"), "Kan niet sporten")
        self.assertEqual(extract_section(text, "summary"), "Liespijn bij hardlopen")

    def test_multiline_body_trimmed(self):
        text = "**H - Historie:**\n\nRegel een\nRegel twee\n\n\n**S - Stoornissen:** x"
        self.assertEqual(extract_section(text, "Historie"), "Regel een\nRegel twee")

    def test_plain_labels_inside_bold_document_are_body_text(self):
        text = (
            "**H - Historie:**\nVal van trap\nSamenvatting: eerder ook klachten\n### Werk\n\n"
            "**S - Stoornissen:** C"
        )
        self.assertEqual(
            extract_section(text, "history"),
            "Val van trap\nSamenvatting: eerder ook klachten\n### Werk",
        )
        self.assertIsNone(extract_section(text, "summary"))

    def test_bold_text_mid_line_is_not_a_header(self):
        text = "**H - Historie:**\n**Patiënt** valt vaak\n\n**S - Stoornissen:** C"
        self.assertEqual(extract_section(text, "history"), "**Patiënt** valt vaak")
        self.assertEqual(extract_section(text, "disorders"), "C")

    def test_missing_or_empty_section(self):
        self.assertIsNone(extract_section("**H - Hulpvraag:** A", "Historie"))
        self.assertIsNone(extract_section("**H - Hulpvraag:**\n\n**H - Historie:** B", "Hulpvraag"))

    def test_non_string_input(self):
        self.assertIsNone(extract_section(None, "Hulpvraag"))
        self.assertIsNone(extract_section(42, "Hulpvraag"))
        self.assertIsNone(extract_section("", "Hulpvraag"))

    def test_generic_label(self):
        text = "**Voorgeschiedenis:** Knie-operatie 2019\n\n**H - Historie:** B"
        self.assertEqual(extract_section(text, "Voorgeschiedenis"), "Knie-operatie 2019")


class TestBulletFieldExtractor(unittest.TestCase):
    BODY = (
        "• Primaire zorg: Pijn in de rechterschouder\n"
        "• Functionele doelen: weer kunnen zwemmen,\n"
        "  boodschappen tillen\n"
        "• Verwachtingen: Binnen 6 weken pijnvrij"
    )

    def test_single_line_value(self):
        self.assertEqual(extract_bullet_field(self.BODY, "Primaire zorg"), "Pijn in de rechterschouder")

    def test_wrapped_value(self):
        value = extract_bullet_field(self.BODY, "Functionele doelen")
        self.assertEqual(value, "weer kunnen zwemmen,\n  boodschappen tillen")

    def test_last_bullet_runs_to_end(self):
        self.assertEqual(extract_bullet_field(self.BODY, "Verwachtingen"), "Binnen 6 weken pijnvrij")

    def test_dash_glyph_and_no_colon(self):
        body = "- Ontstaan na val\n- Verloop: geleidelijk beter"
        self.assertEqual(extract_bullet_field(body, "Ontstaan"), "na val")
        self.assertEqual(extract_bullet_field(body, "Verloop"), "geleidelijk beter")

    def test_missing_label(self):
        self.assertIsNone(extract_bullet_field(self.BODY, "Medicatie"))
        self.assertIsNone(extract_bullet_field("", "Medicatie"))
        self.assertIsNone(extract_bullet_field(None, "Medicatie"))

    def test_label_prefix_does_not_match_longer_word(self):
        body = "• Sport/recreatie: voetbal\n• Werk: beeldschermwerk"
        self.assertIsNone(extract_bullet_field(body, "Sport"))
        self.assertEqual(extract_bullet_field(body, "Sport/recreatie"), "voetbal")


class TestListNormalizer(unittest.TestCase):
    def test_placeholder_only(self):
        self.assertEqual(to_item_list("Niet besproken in anamnese"), [])
        self.assertEqual(to_item_list("niet besproken in anamnese."), [])

    def test_empty(self):
        self.assertEqual(to_item_list(None), [])
        self.assertEqual(to_item_list("   "), [])

    def test_split_trim_keep_duplicates(self):
        self.assertEqual(
            to_item_list("zwemmen, fietsen; zwemmen ,"),
            ["zwemmen", "fietsen", "zwemmen"],
        )

    def test_placeholder_items_dropped(self):
        self.assertEqual(to_item_list("paracetamol, niet genoemd"), ["paracetamol"])


class TestRedFlags(unittest.TestCase):
    def test_inline_marker_deduplicated(self):
        text = (
            "**H - Historie:** [RODE VLAG: Acuut trauma] na val\n\n"
            "**S - Stoornissen:** zwelling [RODE VLAG: Acuut trauma]"
        )
        self.assertEqual(extract_red_flags(text), ["Acuut trauma"])

    def test_block_and_markers_merged_in_order(self):
        text = (
            "**H - Historie:** koorts [RODE VLAG: Koorts]\n\n"
            "**Rode Vlagen:**\n"
            "- Onverklaard gewichtsverlies\n"
            "[RODE VLAG: Koorts]"
        )
        self.assertEqual(extract_red_flags(text), ["Onverklaard gewichtsverlies", "Koorts"])

    def test_none_lines_in_block_skipped(self):
        text = "**Rode Vlagen:**\nGeen rode vlagen"
        self.assertEqual(extract_red_flags(text), [])

    def test_english_marker(self):
        self.assertEqual(extract_red_flags("tekst [RED FLAG: Saddle anesthesia]"), ["Saddle anesthesia"])

    def test_invalid_input(self):
        self.assertEqual(extract_red_flags(None), [])
        self.assertEqual(extract_red_flags(""), [])

    def test_dedupe_is_exact(self):
        self.assertEqual(dedupe_flags(["a", "A", " a ", "", "b"]), ["a", "A", "b"])

    def test_dedupe_normalizes_to_one_line(self):
        flags = ["Koorts\nen  nachtzweten", "Koorts en nachtzweten", "Pijn [links]"]
        self.assertEqual(dedupe_flags(flags), ["Koorts en nachtzweten", "Pijn (links)"])


if __name__ == "__main__":
    unittest.main()
