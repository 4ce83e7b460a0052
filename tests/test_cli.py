"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from seo_wizard.cli import main
from seo_wizard.config import WizardConfig
from seo_wizard.keyword_loader import load_keyword_research
from seo_wizard.wizard import SeoWizard


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def make_wizard(fake_llm_factory, fake_images, storage_backend):
    """Build a wizard wired to fakes; keyword arguments go to the fake LLM."""

    def make(**llm_kwargs) -> SeoWizard:
        return SeoWizard(
            config=WizardConfig(),
            llm_client=fake_llm_factory(**llm_kwargs),
            image_client=fake_images,
            storage=storage_backend.client(),
        )

    return make


def _invoke(runner: CliRunner, wizard: SeoWizard, args: list[str]):
    return runner.invoke(main, args, obj={"wizard": wizard})


class TestResearchCommand:
    """Tests for the research command."""

    def test_lists_keywords(self, runner, make_wizard, research_payload):
        result = _invoke(runner, make_wizard(response=research_payload), ["research", "solar panels"])

        assert result.exit_code == 0, result.output
        assert "solar panel cost" in result.output
        assert "photovoltaic cells" in result.output

    def test_filter(self, runner, make_wizard, research_payload):
        result = _invoke(
            runner,
            make_wizard(response=research_payload),
            ["research", "solar panels", "--filter", "cost"],
        )

        assert result.exit_code == 0, result.output
        assert "solar panel cost" in result.output
        assert "photovoltaic cells" not in result.output

    def test_export(self, runner, make_wizard, research_payload, tmp_path: Path):
        export_path = tmp_path / "research.csv"
        result = _invoke(
            runner,
            make_wizard(response=research_payload),
            ["research", "solar panels", "--filter", "cost", "--export", str(export_path)],
        )

        assert result.exit_code == 0, result.output
        # The export keeps every suggestion, not just the filtered view
        assert len(load_keyword_research(export_path)) == 4

    def test_provider_error_exits(self, runner, make_wizard):
        result = _invoke(runner, make_wizard(response={"keywords": "nope"}), ["research", "solar panels"])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_single_locale_markdown(self, runner, make_wizard, tmp_path: Path):
        result = _invoke(
            runner,
            make_wizard(),
            ["generate", "solar panels", "-k", "battery storage", "-o", str(tmp_path)],
        )

        assert result.exit_code == 0, result.output
        output = tmp_path / "solar-panels-en-us.md"
        assert output.read_text(encoding="utf-8").startswith("# Solar Panels (en-US)")
        assert "Word count:" in result.output

    def test_multiple_locales_get_suffixes(self, runner, make_wizard, tmp_path: Path):
        result = _invoke(
            runner,
            make_wizard(),
            ["generate", "solar panels", "-l", "en-US", "-l", "fr-FR", "--format", "txt", "-o", str(tmp_path)],
        )

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "solar-panels-en-us-en-us.txt",
            "solar-panels-fr-fr-fr-fr.txt",
        ]

    def test_docx_export(self, runner, make_wizard, tmp_path: Path):
        result = _invoke(
            runner,
            make_wizard(),
            ["generate", "solar panels", "--format", "docx", "--highlight", "-o", str(tmp_path)],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "solar-panels-en-us.docx").exists()

    def test_save_with_thumbnail(self, runner, make_wizard, storage_backend, tmp_path: Path):
        result = _invoke(
            runner,
            make_wizard(),
            [
                "generate", "solar panels",
                "-k", "battery storage",
                "--thumbnail", "--save",
                "--intent", "Commercial",
                "-o", str(tmp_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Article id: article-1" in result.output

        record = storage_backend.records["article-1"]
        assert record["primaryKeyword"] == "solar panels"
        assert record["userLsiKeywords"] == ["battery storage"]
        assert record["thumbnailUrl"] == "https://cdn.example.com/images/1.jpg"
        assert record["searchIntent"] == "Commercial"
        assert record["generationSettings"]["locales"] == ["en-US"]

    def test_reports_image_placeholders(self, runner, make_wizard, article_payload, tmp_path: Path):
        article_payload["sections"][0]["content"] += "\n[IMAGE: A rooftop solar array]"
        result = _invoke(
            runner,
            make_wizard(response=article_payload),
            ["generate", "solar panels", "--images", "-o", str(tmp_path)],
        )

        assert result.exit_code == 0, result.output
        assert "Image placeholders: 1" in result.output

    def test_keywords_file(self, runner, make_wizard, sample_keywords_csv, tmp_path: Path):
        wizard = make_wizard()
        result = _invoke(
            runner,
            wizard,
            [
                "generate", "solar panels",
                "-k", "net metering",
                "--keywords-file", str(sample_keywords_csv),
                "-o", str(tmp_path),
            ],
        )

        assert result.exit_code == 0, result.output
        prompt = wizard.llm.calls[0]["prompt"]
        assert "net metering" in prompt
        assert "solar inverter" in prompt

    def test_failing_locale_exits(self, runner, make_wizard, tmp_path: Path):
        result = _invoke(
            runner,
            make_wizard(failing_locales=("fr-FR",)),
            ["generate", "solar panels", "-l", "en-US", "-l", "fr-FR", "-o", str(tmp_path)],
        )

        assert result.exit_code == 1
        assert "fr-FR" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_invalid_length(self, runner, make_wizard):
        result = _invoke(runner, make_wizard(), ["generate", "solar panels", "--length", "huge"])
        assert result.exit_code == 2


class TestSavedArticleCommands:
    """Tests for the saved and delete commands."""

    def test_no_saved_articles(self, runner, make_wizard):
        result = _invoke(runner, make_wizard(), ["saved"])

        assert result.exit_code == 0, result.output
        assert "No saved articles." in result.output

    def test_list_and_delete(self, runner, make_wizard, storage_backend, tmp_path: Path):
        _invoke(runner, make_wizard(), ["generate", "solar panels", "--save", "-o", str(tmp_path)])

        listed = _invoke(runner, make_wizard(), ["saved"])
        assert listed.exit_code == 0, listed.output
        assert "article-1" in listed.output

        deleted = _invoke(runner, make_wizard(), ["delete", "article-1"])
        assert deleted.exit_code == 0, deleted.output
        assert "Deleted article-1" in deleted.output
        assert storage_backend.records == {}

    def test_delete_missing_exits(self, runner, make_wizard):
        result = _invoke(runner, make_wizard(), ["delete", "missing"])

        assert result.exit_code == 1
        assert "404" in result.output
