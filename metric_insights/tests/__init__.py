'''
Metric Insights Test Suite

Test Modules:
-------------
- test_metric_values.py: Row coercion, metric extraction, rounding
- test_metric_loader.py: Two-window fetch and split
- test_dimension_drivers.py: Per-dimension attribution, thresholds, aggregation
- test_confidence.py: Confidence score and label mapping
- test_summarizer.py: Summary templates
- test_recommendations.py: Recommendation rules and caps
- test_metric_analyzer.py: End-to-end scenarios, totality, batch isolation
- test_api.py: Route handlers

Running Tests:
--------------
    pip install -e ".[test]"
    pytest

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
