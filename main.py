"""ContentValuator - classification and valuation demo entry point"""

from datetime import datetime, timedelta, timezone

from content_valuator.analysis.content_feature_extractor import ContentFeatureExtractor
from content_valuator.analysis.content_resolver import MappingContentResolver
from content_valuator.models.features import RawContent
from content_valuator.pipeline import InMemoryDetectionSink, LoggingNotificationSink, ValuationPipeline
from content_valuator.portfolio.market_data import industry_benchmark, licensing_recommendations
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger, setup_logging


def main() -> None:
    setup_logging()
    logger = get_logger(__name__)
    logger.info("ContentValuator started")

    config = ConfigManager()
    resolver = MappingContentResolver({
        "/research/llm-eval": RawContent(
            title="Evaluating language models in practice",
            body=(
                "<h2>Abstract</h2><p>In our study we analyzed the methodology of "
                "model evaluation and report statistical results.</p>" * 120
            ),
            publish_date="2026-01-15",
            tags=["ai", "evaluation"],
        ),
    })
    sink = InMemoryDetectionSink()
    pipeline = ValuationPipeline(
        config,
        extractor=ContentFeatureExtractor(resolver=resolver, config=config),
        detection_sink=sink,
        notification_sink=LoggingNotificationSink(),
    )

    now = datetime.now(timezone.utc)
    accesses = [
        ("Mozilla/5.0 (compatible; GPTBot/1.2; +https://openai.com/gptbot)", "https://site.example/research/llm-eval"),
        ("ClaudeBot/1.0; +claudebot@anthropic.com", "https://site.example/research/llm-eval"),
        ("PerplexityBot/1.0", "https://site.example/blog/weekly-notes"),
        ("Amazonbot/0.1", "https://site.example/uploads/diagram.png"),
        ("my-archive-crawler-bot/0.3", "https://site.example/guides/how-to-start"),
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0 Safari/537.36", "https://site.example/about"),
    ]

    print("=" * 60)
    print(" ContentValuator: classification & valuation demo")
    print("=" * 60)

    for i, (identifier, locator) in enumerate(accesses):
        record = pipeline.evaluate(identifier, locator, observed_at=now + timedelta(minutes=i))
        classification = record.classification
        print(f"\nIdentifier: \"{identifier[:60]}\"")
        print(f"  bot: {classification.is_bot} ({classification.bot_type or '-'}, "
              f"confidence {classification.confidence}, risk {classification.risk_level})")
        print(f"  content: {record.features.content_type}, {record.features.word_count} words, "
              f"quality {record.features.quality_score}")
        print(f"  value: ${record.valuation.estimated_value:.2f} "
              f"({record.valuation.licensing_potential}, cap={record.valuation.breakdown.binding_cap})")

    summary = pipeline.portfolio()
    print(f"\n{'=' * 60}")
    print(f"Portfolio: {summary.item_count} detections, total ${summary.total_value:.2f}")
    print(f"  top actors: {summary.top_actors_by_value}")
    print(f"  estimated annual revenue: ${summary.estimated_annual_revenue:.2f}")
    for recommendation in summary.recommendations:
        print(f"  - {recommendation}")

    benchmark = industry_benchmark(summary.estimated_annual_revenue)
    print(f"  benchmark: {benchmark.category} ({benchmark.percentile})")
    portfolio_tags = set(summary.content_type_values)
    for record in sink.all():
        portfolio_tags.update(record.features.characteristics)
    for route in licensing_recommendations(summary.total_value, sorted(portfolio_tags)):
        print(f"  licensing route: {route.type} - {route.description}")


if __name__ == "__main__":
    main()
