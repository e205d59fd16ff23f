"""Tests for the deterministic scoring engine."""

import pytest
from pydantic import ValidationError

from conftest import BASELINE_METRICS, STRONG_METRICS, make_metrics
from models.metrics import RawMetrics
from models.scoring import Category, CategoryScores
from services.errors import MalformedMetrics
from services.scoring_engine import (
    clamp,
    overall_score,
    round_half_up,
    score,
    score_content,
    score_education,
    score_format,
    score_keywords,
    score_redaccion,
    score_structure,
)


class TestBaseline:
    def test_all_zero_metrics_score_base_values(self):
        result = score(BASELINE_METRICS)
        assert result.categories.format == 60
        assert result.categories.content == 50
        assert result.categories.keywords == 60
        assert result.categories.education == 70
        assert result.categories.structure == 65
        assert result.categories.redaccion == 80
        # 385 / 6 = 64.17
        assert result.overall_score == 64

    def test_only_base_lines_when_nothing_fires(self):
        result = score(BASELINE_METRICS)
        for category in Category:
            details = result.breakdown.get(category).details
            assert len(details) == 1
            assert details[0].startswith("Base: ")

    def test_strong_cv(self):
        result = score(STRONG_METRICS)
        assert result.categories.values() == [100, 100, 100, 89, 91, 97]
        # 577 / 6 = 96.17
        assert result.overall_score == 96


class TestFormat:
    def test_ideal_length_only(self):
        bd = score_format(make_metrics(pageCount=1))
        assert bd.points == 75
        assert bd.details == ["Base: 60 pts", "Extensión ideal (1-2 pág): +15"]

    def test_too_many_pages(self):
        bd = score_format(make_metrics(pageCount=3))
        assert bd.points == 50
        assert bd.details[-1] == "Exceso de páginas: -10"

    def test_zero_pages_neither_bonus_nor_penalty(self):
        bd = score_format(make_metrics(pageCount=0))
        assert bd.points == 60

    def test_everything(self):
        bd = score_format(make_metrics(usesBullets=True, pageCount=2, hasSections=True))
        assert bd.points == 100
        assert bd.details == [
            "Base: 60 pts",
            "Uso de viñetas: +10",
            "Extensión ideal (1-2 pág): +15",
            "Secciones claras: +15",
        ]
        assert bd.label == "Formato y Estructura"


class TestContent:
    def test_capped_at_100(self):
        bd = score_content(make_metrics(
            yearsExperience=10,
            jobCount=5,
            hasLogrosCuantificables=10,
            usesProfessionalLanguage=True,
        ))
        assert bd.points == 100
        assert bd.details == [
            "Base: 50 pts",
            "Años de experiencia (10): +30",
            "Trayectoria laboral: +15",
            "Logros cuantificables: +20",
            "Lenguaje profesional: +10",
        ]

    def test_bonus_caps(self):
        bd = score_content(make_metrics(yearsExperience=40))
        assert bd.points == 80

    def test_fractional_years_round_half_up(self):
        bd = score_content(make_metrics(yearsExperience=0.5))
        # 50 + 1.5 = 51.5 -> 52
        assert bd.points == 52
        assert "Años de experiencia (0.5): +1.5" in bd.details


class TestKeywords:
    @pytest.mark.parametrize("skills,expected", [
        (0, 60), (2, 60), (3, 70), (5, 70), (6, 80), (10, 80), (11, 85), (40, 85),
    ])
    def test_skill_tiers(self, skills, expected):
        assert score_keywords(make_metrics(skillsCount=skills)).points == expected

    def test_capped_at_100(self):
        bd = score_keywords(make_metrics(skillsCount=15, industryKeywordsCount=20))
        assert bd.points == 100
        assert bd.details == [
            "Base: 60 pts",
            "Amplio set de habilidades (11+): +25",
            "Palabras clave del sector: +15",
        ]


class TestEducation:
    def test_university_takes_precedence(self):
        bd = score_education(make_metrics(
            hasEducacionUniversitaria=True,
            hasEducacionTerciaria=True,
            hasCertificaciones=10,
        ))
        assert bd.points == 100
        assert "Título universitario: +15" in bd.details
        assert not any("terciario" in d for d in bd.details)

    def test_university_and_tertiary_do_not_stack(self):
        both = score_education(make_metrics(hasEducacionUniversitaria=True, hasEducacionTerciaria=True))
        assert both.points == 85

    def test_tertiary_only(self):
        bd = score_education(make_metrics(hasEducacionTerciaria=True))
        assert bd.points == 80
        assert bd.details[-1] == "Título terciario: +10"

    def test_certifications(self):
        assert score_education(make_metrics(hasCertificaciones=2)).points == 76


class TestStructure:
    def test_fractional_keyword_bonus_rounded_at_clamp(self):
        bd = score_structure(make_metrics(industryKeywordsCount=3))
        # 65 + 1.2 = 66.2 -> 66
        assert bd.points == 66
        assert bd.details == ["Base: 65 pts", "Optimización de keywords: +1.2"]

    def test_keyword_bonus_cap(self):
        bd = score_structure(make_metrics(industryKeywordsCount=100))
        assert bd.points == 80

    def test_critical_data_needs_both(self):
        assert score_structure(make_metrics(hasFechas=True)).points == 65
        assert score_structure(make_metrics(hasDatosContacto=True)).points == 65
        bd = score_structure(make_metrics(hasFechas=True, hasDatosContacto=True))
        assert bd.points == 70
        assert bd.details[-1] == "Datos críticos presentes: +5"

    def test_ats_friendly(self):
        bd = score_structure(make_metrics(isAtsFriendly=True))
        assert bd.points == 80
        assert bd.label == "Optimización ATS"


class TestRedaccion:
    def test_heavy_spelling_penalty(self):
        bd = score_redaccion(make_metrics(
            errorOrtograficoCount=30,
            wordCount=500,
            usesProfessionalLanguage=True,
        ))
        assert bd.points == 10
        assert bd.details == [
            "Base: 80 pts",
            "Penalización por ortografía: -90",
            "Extensión de texto ideal: +10",
            "Tono profesional: +10",
        ]

    def test_floor_at_zero(self):
        bd = score_redaccion(make_metrics(errorOrtograficoCount=1000))
        assert bd.points == 0

    @pytest.mark.parametrize("words,expected", [(399, 80), (400, 90), (800, 90), (801, 80)])
    def test_word_count_range_inclusive(self, words, expected):
        assert score_redaccion(make_metrics(wordCount=words)).points == expected


class TestInvariants:
    def test_deterministic(self):
        first = score(STRONG_METRICS)
        second = score(dict(STRONG_METRICS))
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_extreme_inputs_stay_in_range(self):
        result = score({
            **STRONG_METRICS,
            "pageCount": 10_000,
            "yearsExperience": 1e9,
            "errorOrtograficoCount": 10_000,
            "industryKeywordsCount": 10_000,
        })
        for value in result.categories.values():
            assert 0 <= value <= 100
        assert result.categories.redaccion == 0

    def test_huge_keyword_count_saturates(self):
        result = score({**BASELINE_METRICS, "industryKeywordsCount": 10**400})
        assert result.categories.structure == 80
        assert result.categories.keywords == 75
        assert "Optimización de keywords: +15" in result.breakdown.structure.details

    def test_huge_spelling_count_floors_at_zero(self):
        result = score({**BASELINE_METRICS, "errorOrtograficoCount": 10**400})
        assert result.categories.redaccion == 0
        assert result.breakdown.redaccion.details[1].startswith("Penalización por ortografía: -3000")

    def test_keyword_saturation_does_not_change_normal_counts(self):
        for count in range(0, 60):
            expected = min(15, (count / 5) * 2)
            assert score_structure(make_metrics(industryKeywordsCount=count)).points == round_half_up(65 + expected)

    def test_breakdown_points_match_categories(self):
        result = score(STRONG_METRICS)
        for category in Category:
            assert result.breakdown.get(category).points == result.categories.get(category)

    def test_accepts_snake_case_and_model(self):
        snake = make_metrics(pageCount=1).model_dump()
        assert score(snake) == score(make_metrics(pageCount=1))


class TestMalformedMetrics:
    def test_missing_field(self):
        data = dict(BASELINE_METRICS)
        del data["wordCount"]
        with pytest.raises(MalformedMetrics) as exc:
            score(data)
        assert any("wordCount" in f or "word_count" in f for f in exc.value.fields)

    def test_negative_count(self):
        with pytest.raises(MalformedMetrics):
            score({**BASELINE_METRICS, "jobCount": -1})

    def test_string_flag_is_not_coerced(self):
        with pytest.raises(MalformedMetrics):
            score({**BASELINE_METRICS, "usesBullets": "yes"})

    def test_not_a_mapping(self):
        with pytest.raises(MalformedMetrics):
            score(None)

    def test_reports_every_bad_field(self):
        data = {k: v for k, v in BASELINE_METRICS.items() if k not in ("pageCount", "jobCount")}
        with pytest.raises(MalformedMetrics) as exc:
            RawMetrics.parse(data)
        assert len(exc.value.fields) == 2

    def test_metrics_are_immutable(self):
        m = make_metrics()
        with pytest.raises(ValidationError):
            m.page_count = 5


class TestHelpers:
    def test_clamp(self):
        assert clamp(-5) == 0
        assert clamp(150) == 100
        assert clamp(42.5) == 42.5

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(64.5) == 65
        assert round_half_up(64.49) == 64
        assert round_half_up(0) == 0

    def test_overall_ties_round_up(self):
        categories = CategoryScores(
            format=62, content=50, keywords=60, structure=65, education=70, redaccion=80,
        )
        # 387 / 6 = 64.5
        assert overall_score(categories) == 65
