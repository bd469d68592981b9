"""Tests for the relevance scorer and judgment validation."""

import json

import pytest

from services.errors import DataQualityWarning, ScoringFailure, TransportFailure
from services.pipeline.scorer import RelevanceScorer, validate_judgments
from services.pipeline.summarizer import summarize

POOL = {"a", "b", "c"}
QUERY = "technical cofounder who loves sustainable tech"


class TestValidateJudgments:
    def test_valid_batch(self, make_judgment):
        doc = {"matches": [make_judgment("a", 95), make_judgment("b", 72)]}
        judgments, warnings = validate_judgments(doc, POOL)
        assert [(j.profile_id, j.score) for j in judgments] == [("a", 95), ("b", 72)]
        assert warnings == []

    @pytest.mark.parametrize("document", [[], "matches", 42, None])
    def test_top_level_not_object(self, document):
        with pytest.raises(ScoringFailure):
            validate_judgments(document, POOL)

    @pytest.mark.parametrize("document", [{}, {"results": []}, {"matches": {"a": 1}}, {"matches": None}])
    def test_missing_matches_list(self, document):
        with pytest.raises(ScoringFailure):
            validate_judgments(document, POOL)

    def test_empty_matches_is_valid(self):
        assert validate_judgments({"matches": []}, POOL) == ([], [])

    def test_drops_unknown_id(self, make_judgment):
        doc = {"matches": [make_judgment("zzz", 99), make_judgment("a", 80)]}
        judgments, warnings = validate_judgments(doc, POOL)
        assert [j.profile_id for j in judgments] == ["a"]
        assert warnings == [DataQualityWarning("zzz", "unknown candidate id")]

    @pytest.mark.parametrize("score", [-1, 101, "90", None, True, float("nan")])
    def test_drops_bad_score(self, make_judgment, score):
        doc = {"matches": [make_judgment("a", score), make_judgment("b", 60)]}
        judgments, warnings = validate_judgments(doc, POOL)
        assert [j.profile_id for j in judgments] == ["b"]
        assert len(warnings) == 1
        assert warnings[0].candidate_id == "a"
        assert "score" in warnings[0].reason

    @pytest.mark.parametrize("explanation", ["", "   ", None, 5])
    def test_drops_empty_explanation(self, make_judgment, explanation):
        doc = {"matches": [make_judgment("a", 80, explanation=explanation)]}
        judgments, warnings = validate_judgments(doc, POOL)
        assert judgments == []
        assert len(warnings) == 1

    def test_missing_fields(self):
        doc = {"matches": [{"profile_id": "a"}, {"score": 90, "explanation": "x"}, "junk"]}
        judgments, warnings = validate_judgments(doc, POOL)
        assert judgments == []
        assert len(warnings) == 3
        assert warnings[2] == DataQualityWarning(None, "judgment is not an object")

    @pytest.mark.parametrize("score", [87.6, 49.6])
    def test_fractional_score_dropped(self, make_judgment, score):
        judgments, warnings = validate_judgments({"matches": [make_judgment("a", score)]}, POOL)
        assert judgments == []
        assert len(warnings) == 1
        assert "score must be an integer" in warnings[0].reason

    def test_integral_float_score_accepted(self, make_judgment):
        judgments, warnings = validate_judgments({"matches": [make_judgment("a", 88.0)]}, POOL)
        assert judgments[0].score == 88
        assert isinstance(judgments[0].score, int)
        assert warnings == []

    def test_attributes_sanitized(self, make_judgment):
        doc = {"matches": [make_judgment("a", 80, attrs=["Go", "", 3, " Climate ", "Rust", "Extra"])]}
        judgments, _ = validate_judgments(doc, POOL)
        assert judgments[0].top_attributes == ["Go", "Climate", "Rust"]

    def test_attributes_optional(self):
        doc = {"matches": [{"profile_id": "a", "score": 80, "explanation": "Fits."}]}
        judgments, _ = validate_judgments(doc, POOL)
        assert judgments[0].top_attributes == []


class TestRelevanceScorer:
    def _summaries(self, make_profile, *ids):
        return [summarize(make_profile(i)) for i in ids]

    @pytest.mark.asyncio
    async def test_single_call_with_query_and_summaries(self, make_profile, make_judgment, scoring_backend):
        backend = scoring_backend({"matches": [make_judgment("a", 95)]})
        scorer = RelevanceScorer(generate=backend, timeout=5.0)

        judgments = await scorer.score(QUERY, self._summaries(make_profile, "a", "b"))

        assert [j.profile_id for j in judgments] == ["a"]
        assert len(backend.calls) == 1
        instruction, contents, timeout = backend.calls[0]
        assert "Ikigai" in instruction
        assert '"matches"' in instruction
        assert json.dumps(QUERY) in contents
        assert '"id": "a"' in contents and '"id": "b"' in contents
        assert "@example.com" not in contents
        assert timeout == 5.0

    @pytest.mark.asyncio
    async def test_no_summaries_no_call(self, scoring_backend):
        backend = scoring_backend({"matches": []})
        assert await RelevanceScorer(generate=backend).score(QUERY, []) == []
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_retries_transient_transport_failure_once(self, make_profile, make_judgment, scoring_backend):
        backend = scoring_backend(
            TransportFailure("timed out"),
            {"matches": [make_judgment("a", 70)]},
        )
        scorer = RelevanceScorer(generate=backend, max_retries=1, retry_wait=0)

        judgments = await scorer.score(QUERY, self._summaries(make_profile, "a"))
        assert [j.score for j in judgments] == [70]
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_surfaces_after_retry(self, make_profile, scoring_backend):
        backend = scoring_backend(TransportFailure("503"))
        scorer = RelevanceScorer(generate=backend, max_retries=1, retry_wait=0)

        with pytest.raises(TransportFailure):
            await scorer.score(QUERY, self._summaries(make_profile, "a"))
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_retry_is_bounded_to_one(self, make_profile, scoring_backend):
        backend = scoring_backend(TransportFailure("503"))
        scorer = RelevanceScorer(generate=backend, max_retries=5, retry_wait=0)

        with pytest.raises(TransportFailure):
            await scorer.score(QUERY, self._summaries(make_profile, "a"))
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_non_transient_transport_failure_not_retried(self, make_profile, scoring_backend):
        backend = scoring_backend(TransportFailure("bad key", transient=False))
        scorer = RelevanceScorer(generate=backend, max_retries=1, retry_wait=0)

        with pytest.raises(TransportFailure):
            await scorer.score(QUERY, self._summaries(make_profile, "a"))
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_scoring_failure_never_retried(self, make_profile, scoring_backend):
        backend = scoring_backend(ScoringFailure("invalid JSON", raw="not json"))
        scorer = RelevanceScorer(generate=backend, max_retries=1, retry_wait=0)

        with pytest.raises(ScoringFailure):
            await scorer.score(QUERY, self._summaries(make_profile, "a"))
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_wrong_shape_is_scoring_failure(self, make_profile, make_judgment, scoring_backend):
        backend = scoring_backend([make_judgment("a", 90)])
        scorer = RelevanceScorer(generate=backend, retry_wait=0)

        with pytest.raises(ScoringFailure):
            await scorer.score(QUERY, self._summaries(make_profile, "a"))
        assert len(backend.calls) == 1
