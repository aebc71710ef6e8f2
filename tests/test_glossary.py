"""Tests for glossary masking and loading."""

from pathlib import Path

import pytest

from polysub.core.models import Glossary, GlossaryEntry
from polysub.translation.glossary import GlossaryEngine, load_glossary


def _glossary(*entries: GlossaryEntry, src: str = "en", tgt: str = "fr") -> Glossary:
    return Glossary(name="test", source_language=src, target_language=tgt, entries=list(entries))


class TestGlossaryEngine:
    def test_term_masked_and_resolved(self):
        engine = GlossaryEngine(_glossary(GlossaryEntry("warp drive", "distorsion")), "en", "fr")
        masked, replacements = engine.apply_pre("Engage the warp drive now")
        assert masked == "Engage the ⟦GLOSS_0⟧ now"
        assert engine.apply_post("Activez la ⟦GLOSS_0⟧ maintenant", replacements) == (
            "Activez la distorsion maintenant"
        )

    def test_case_insensitive_by_default(self):
        engine = GlossaryEngine(_glossary(GlossaryEntry("Warp Drive", "distorsion")), "en", "fr")
        masked, _ = engine.apply_pre("WARP DRIVE online")
        assert masked == "⟦GLOSS_0⟧ online"

    def test_case_sensitive_entry(self):
        entry = GlossaryEntry("Data", "Data", case_sensitive=True)
        engine = GlossaryEngine(_glossary(entry), "en", "fr")
        masked, replacements = engine.apply_pre("Data checks the data")
        assert masked == "⟦GLOSS_0⟧ checks the data"
        assert replacements == {"⟦GLOSS_0⟧": "Data"}

    def test_whole_word_matching(self):
        engine = GlossaryEngine(_glossary(GlossaryEntry("cat", "chat")), "en", "fr")
        masked, replacements = engine.apply_pre("concatenate the cat")
        assert masked == "concatenate the ⟦GLOSS_0⟧"
        assert len(replacements) == 1

    def test_substring_matching_when_not_whole_word(self):
        engine = GlossaryEngine(
            _glossary(GlossaryEntry("cat", "chat", whole_word=False)), "en", "fr"
        )
        masked, _ = engine.apply_pre("concatenate")
        assert masked == "con⟦GLOSS_0⟧enate"

    def test_earlier_entry_wins_overlap(self):
        engine = GlossaryEngine(
            _glossary(GlossaryEntry("warp drive", "distorsion"), GlossaryEntry("drive", "moteur")),
            "en",
            "fr",
        )
        masked, replacements = engine.apply_pre("warp drive and drive")
        assert masked == "⟦GLOSS_0⟧ and ⟦GLOSS_1⟧"
        assert replacements == {"⟦GLOSS_0⟧": "distorsion", "⟦GLOSS_1⟧": "moteur"}

    def test_existing_placeholders_untouched(self):
        engine = GlossaryEngine(
            _glossary(GlossaryEntry("IO", "XX", case_sensitive=True, whole_word=False)), "en", "fr"
        )
        masked, replacements = engine.apply_pre("⟦IO_0⟧Hi⟦IC_1⟧")
        assert masked == "⟦IO_0⟧Hi⟦IC_1⟧"
        assert replacements == {}

    def test_inactive_for_other_language_pair(self):
        engine = GlossaryEngine(_glossary(GlossaryEntry("warp", "distorsion")), "en", "de")
        assert not engine.active
        assert engine.apply_pre("warp") == ("warp", {})

    def test_inactive_without_glossary(self):
        engine = GlossaryEngine(None, "en", "fr")
        assert not engine.active
        assert engine.apply_post("text", {}) == "text"

    def test_post_tolerates_spaced_placeholder(self):
        engine = GlossaryEngine(_glossary(GlossaryEntry("warp", "distorsion")), "en", "fr")
        _, replacements = engine.apply_pre("warp")
        assert engine.apply_post("⟦ GLOSS_0 ⟧", replacements) == "distorsion"


class TestLoadGlossary:
    def test_load_toml(self, sample_glossary: Path):
        glossary = load_glossary(sample_glossary)
        assert glossary.name == "Star Trek"
        assert glossary.applies_to("EN", "fr")
        assert glossary.entries[0] == GlossaryEntry("Starfleet", "Starfleet", case_sensitive=True)
        assert glossary.entries[1].whole_word is True

    def test_load_json(self, tmp_path: Path):
        path = tmp_path / "terms.json"
        path.write_text(
            '{"source_language": "en", "target_language": "es",'
            ' "entries": [{"source": "ship", "target": "nave"}]}',
            encoding="utf-8",
        )
        glossary = load_glossary(path)
        assert glossary.name == "terms"
        assert glossary.entries == [GlossaryEntry("ship", "nave")]

    def test_missing_language_raises(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('name = "x"\n', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid glossary"):
            load_glossary(path)

    def test_malformed_json_raises(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_glossary(path)
