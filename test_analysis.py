import pytest

from analysis import ArticleAnalysisService
from conftest import AI_RESULT, FakeExtractor, FakeGateway, StubClassifier
from errors import InvalidInput, RateLimited
from schemas import AnalysisRequest
from scorer import analyze


def make_service(mode, gateway=None, extractor=None, classifier=None):
    return ArticleAnalysisService(
        mode=mode,
        gateway=gateway or FakeGateway(),
        extractor=extractor or FakeExtractor(),
        classifier=classifier,
    )


class TestEngineSelection:
    def test_auto_uses_ai_when_configured(self):
        assert make_service("auto", gateway=FakeGateway(configured=True)).engine == "ai"

    def test_auto_falls_back_to_heuristic_without_key(self):
        assert make_service("auto", gateway=FakeGateway(configured=False)).engine == "heuristic"

    @pytest.mark.parametrize("mode", ["ai", "heuristic"])
    def test_explicit_modes(self, mode):
        assert make_service(mode, gateway=FakeGateway(configured=False)).engine == mode

    def test_mode_is_case_insensitive(self):
        assert make_service("HEURISTIC").mode == "heuristic"

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            make_service("magic")


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_ai_engine_returns_gateway_result(self):
        gateway = FakeGateway()
        service = make_service("ai", gateway=gateway)

        result = await service.analyze(AnalysisRequest(articleText="  Some text  ", articleUrl="https://a.example/x"))

        assert result == AI_RESULT
        assert gateway.calls == [("  Some text  ", "https://a.example/x")]

    @pytest.mark.asyncio
    async def test_blank_text_with_url_sends_url_prompt(self):
        gateway = FakeGateway()
        service = make_service("ai", gateway=gateway)
        await service.analyze(AnalysisRequest(articleText="   ", articleUrl="https://a.example/x"))
        assert gateway.calls == [("", "https://a.example/x")]

    @pytest.mark.asyncio
    async def test_heuristic_scores_text_unstripped(self):
        text = "a" * 195 + " " * 10
        result = await make_service("heuristic").analyze(AnalysisRequest(articleText=text))
        assert result == analyze(text)
        assert result.credibilityScore == 50

    @pytest.mark.asyncio
    async def test_heuristic_blank_text_with_url_fetches(self):
        extractor = FakeExtractor()
        service = make_service("heuristic", extractor=extractor)
        await service.analyze(AnalysisRequest(articleText="  ", articleUrl="https://news.example.com/story"))
        assert extractor.urls == ["https://news.example.com/story"]

    @pytest.mark.asyncio
    async def test_heuristic_engine_scores_text(self):
        gateway = FakeGateway()
        service = make_service("heuristic", gateway=gateway)

        result = await service.analyze(AnalysisRequest(articleText="The city council met on Monday to discuss budgets."))

        assert result.credibilityScore == 40
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_heuristic_uses_classifier(self):
        service = make_service("heuristic", classifier=StubClassifier("NEGATIVE", 0.95))
        result = await service.analyze(AnalysisRequest(articleText="The city council met on Monday to discuss budgets."))
        assert result.credibilityScore == 20

    @pytest.mark.asyncio
    async def test_heuristic_fetches_url_only_input(self):
        extractor = FakeExtractor()
        service = make_service("heuristic", extractor=extractor)

        result = await service.analyze(AnalysisRequest(articleUrl="https://news.example.com/story"))

        assert extractor.urls == ["https://news.example.com/story"]
        assert result.credibilityScore == 40

    @pytest.mark.asyncio
    async def test_text_wins_over_url_for_heuristic(self):
        extractor = FakeExtractor()
        service = make_service("heuristic", extractor=extractor)
        await service.analyze(AnalysisRequest(articleText="a" * 300, articleUrl="https://news.example.com/story"))
        assert extractor.urls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", ["ai", "heuristic", "auto"])
    @pytest.mark.parametrize(
        "request_kwargs",
        [{}, {"articleText": ""}, {"articleText": "   ", "articleUrl": "  "}, {"articleText": None}],
    )
    async def test_empty_request_rejected(self, mode, request_kwargs):
        with pytest.raises(InvalidInput) as exc_info:
            await make_service(mode).analyze(AnalysisRequest(**request_kwargs))
        assert exc_info.value.message == "Either articleText or articleUrl is required"

    @pytest.mark.asyncio
    async def test_gateway_errors_are_not_replaced(self):
        service = make_service("auto", gateway=FakeGateway(error=RateLimited()))
        with pytest.raises(RateLimited):
            await service.analyze(AnalysisRequest(articleText="Some text"))

    @pytest.mark.asyncio
    async def test_analyze_heuristic_ignores_mode(self):
        gateway = FakeGateway()
        service = make_service("ai", gateway=gateway)
        result = await service.analyze_heuristic(AnalysisRequest(articleText="a" * 1000))
        assert result.credibilityScore == 60
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_close_releases_clients(self):
        gateway, extractor = FakeGateway(), FakeExtractor()
        await make_service("auto", gateway=gateway, extractor=extractor).close()
        assert gateway.closed and extractor.closed
