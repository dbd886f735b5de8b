"""
Rule-based recommendations for metric explanations.

Rules are evaluated in priority order and the output is capped at three:

1. no_data / error -> connect a data source (only recommendation)
2. stable -> continue monitoring (only recommendation)
3. needs_attention -> declining pages, then the first declining channel, then
   the first declining device
4. improving -> the first growing channel, then growing pages

Channel and device templates are matched by substring on the driver label.
The patterns overlap ("organic search" contains "search"), so they live in
ordered rule lists rather than dictionaries; the first match wins. Labels that
match no rule still get a generic recommendation.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from metric_insights.models.enums import DriverType, ExplanationStatus, MetricKey
from metric_insights.models.schemas import DriverResult, Recommendation

MAX_RECOMMENDATIONS: int = 3

# Page drivers listed per page recommendation
MAX_TARGET_URLS: int = 3


@dataclass(frozen=True)
class TemplateRule:
    """Advice for labels containing any of `patterns`."""
    patterns: Tuple[str, ...]
    decline: Recommendation
    growth: Recommendation

    def matches(self, label: str) -> bool:
        lower_label = label.lower()
        return any(pattern in lower_label for pattern in self.patterns)


CONNECT_DATA_SOURCE = Recommendation(
    title="Connect Google Analytics",
    why="You need GA4 data to analyze this metric and receive actionable insights.",
    targetUrls=[],
    suggestedActions=["Go to Settings > Integrations > Connect Google Analytics"],
)

CONTINUE_MONITORING = Recommendation(
    title="Continue monitoring",
    why="Your metrics are stable. Focus on maintaining current performance while testing incremental improvements.",
    targetUrls=[],
    suggestedActions=[
        "Set up weekly performance reviews",
        "Identify opportunities for growth experiments",
    ],
)

CHANNEL_RULES: Tuple[TemplateRule, ...] = (
    TemplateRule(
        patterns=("organic", "search"),
        decline=Recommendation(
            title="Review SEO performance",
            why="Organic search traffic has declined. Check for ranking drops or technical issues.",
            suggestedActions=[
                "Check Google Search Console for crawl errors",
                "Review keyword rankings for position drops",
                "Audit recent content changes",
            ],
        ),
        growth=Recommendation(
            title="Scale your SEO success",
            why="Organic search traffic is growing. Capitalize on this momentum.",
            suggestedActions=[
                "Identify new keyword opportunities",
                "Create more content in winning topic clusters",
                "Build more backlinks to high-performing pages",
            ],
        ),
    ),
    TemplateRule(
        patterns=("direct",),
        decline=Recommendation(
            title="Strengthen brand awareness",
            why="Direct traffic has declined, suggesting reduced brand recognition.",
            suggestedActions=[
                "Increase brand marketing activities",
                "Send email campaigns to re-engage existing users",
                "Check for any site reliability issues",
            ],
        ),
        growth=Recommendation(
            title="Build on brand momentum",
            why="Direct traffic is growing, indicating strong brand recognition.",
            suggestedActions=[
                "Leverage this audience for upselling",
                "Encourage referrals from loyal visitors",
            ],
        ),
    ),
    TemplateRule(
        patterns=("referral",),
        decline=Recommendation(
            title="Revive referral partnerships",
            why="Referral traffic has declined. Check your backlink sources.",
            suggestedActions=[
                "Audit referring domains in Google Analytics",
                "Reach out to top referrers for collaboration",
                "Check for lost or broken backlinks",
            ],
        ),
        growth=Recommendation(
            title="Expand referral success",
            why="Referral traffic is growing. Nurture these partnerships.",
            suggestedActions=[
                "Identify new partnership opportunities",
                "Create more shareable content",
            ],
        ),
    ),
    TemplateRule(
        patterns=("social",),
        decline=Recommendation(
            title="Boost social engagement",
            why="Social media traffic has declined.",
            suggestedActions=[
                "Review posting frequency and content quality",
                "Engage more with your social audience",
                "Test different content formats",
            ],
        ),
        growth=Recommendation(
            title="Amplify social success",
            why="Social media traffic is growing.",
            suggestedActions=[
                "Increase posting frequency on winning platforms",
                "Repurpose content that resonates",
            ],
        ),
    ),
)

DEVICE_RULES: Tuple[TemplateRule, ...] = (
    TemplateRule(
        patterns=("mobile",),
        decline=Recommendation(
            title="Fix mobile experience",
            why="Mobile traffic has declined. Check for mobile usability issues.",
            suggestedActions=[
                "Test site on mobile devices",
                "Check Core Web Vitals for mobile",
                "Ensure responsive design works properly",
                "Verify touch targets and font sizes",
            ],
        ),
        growth=Recommendation(
            title="Optimize for mobile growth",
            why="Mobile traffic is growing. Ensure the experience matches.",
            suggestedActions=[
                "Prioritize mobile-first features",
                "Test checkout/conversion flows on mobile",
            ],
        ),
    ),
    TemplateRule(
        patterns=("desktop",),
        decline=Recommendation(
            title="Review desktop experience",
            why="Desktop traffic has declined.",
            suggestedActions=[
                "Check for browser compatibility issues",
                "Review desktop-specific features",
            ],
        ),
        growth=Recommendation(
            title="Leverage desktop users",
            why="Desktop traffic is growing.",
            suggestedActions=[
                "Optimize conversion flows for desktop",
                "Consider desktop-specific features",
            ],
        ),
    ),
)


# =============================================================================
# TEMPLATE LOOKUP
# =============================================================================

def get_channel_recommendation(channel: str, declining: bool) -> Recommendation:
    for rule in CHANNEL_RULES:
        if rule.matches(channel):
            template = rule.decline if declining else rule.growth
            return template.model_copy(deep=True)

    return Recommendation(
        title=f"Analyze {channel} channel",
        why=f"{channel} traffic has {'declined' if declining else 'grown'}.",
        suggestedActions=[
            "Review channel-specific analytics",
            "Identify what changed in this channel",
        ],
    )


def get_device_recommendation(device: str, declining: bool) -> Recommendation:
    for rule in DEVICE_RULES:
        if rule.matches(device):
            template = rule.decline if declining else rule.growth
            return template.model_copy(deep=True)

    return Recommendation(
        title=f"Analyze {device} experience",
        why=f"{device} traffic has {'declined' if declining else 'grown'}.",
        suggestedActions=["Review device-specific analytics"],
    )


# =============================================================================
# GENERATION
# =============================================================================

def _decline_subject(metric_key: MetricKey) -> str:
    return "engagement" if metric_key == MetricKey.EVENT_COUNT else "traffic"


def _first_of_type(
    drivers: Sequence[DriverResult],
    driver_type: DriverType,
    declining: bool,
) -> List[DriverResult]:
    return [
        d for d in drivers
        if d.type == driver_type and ((d.delta < 0) if declining else (d.delta > 0))
    ][:1]


def generate_recommendations(
    metric_key: MetricKey,
    status: ExplanationStatus,
    top_drivers: Sequence[DriverResult],
    page_drivers: Sequence[DriverResult],
) -> List[Recommendation]:
    """
    Build up to three recommendations for an explanation.

    Args:
        metric_key: Metric being explained
        status: Explanation status
        top_drivers: Ranked top drivers (channel and device rules read these)
        page_drivers: All landing page drivers, not only those in top_drivers

    Returns:
        At most MAX_RECOMMENDATIONS recommendations.
    """
    if status in (ExplanationStatus.NO_DATA, ExplanationStatus.ERROR):
        return [CONNECT_DATA_SOURCE.model_copy(deep=True)]

    if status == ExplanationStatus.STABLE:
        return [CONTINUE_MONITORING.model_copy(deep=True)]

    recommendations: List[Recommendation] = []

    if status == ExplanationStatus.NEEDS_ATTENTION:
        declining_pages = [p for p in page_drivers if p.delta < 0][:MAX_TARGET_URLS]
        if declining_pages:
            recommendations.append(Recommendation(
                title="Investigate underperforming pages",
                why=f"These pages contributed most to the {_decline_subject(metric_key)} decline.",
                targetUrls=[p.label for p in declining_pages],
                suggestedActions=[
                    "Review recent changes to these pages",
                    "Check for broken links or slow load times",
                    "Analyze search rankings for keywords targeting these pages",
                ],
            ))

        for channel in _first_of_type(top_drivers, DriverType.CHANNEL, declining=True):
            recommendations.append(get_channel_recommendation(channel.label, declining=True))

        for device in _first_of_type(top_drivers, DriverType.DEVICE, declining=True):
            recommendations.append(get_device_recommendation(device.label, declining=True))

    if status == ExplanationStatus.IMPROVING:
        for channel in _first_of_type(top_drivers, DriverType.CHANNEL, declining=False):
            recommendations.append(get_channel_recommendation(channel.label, declining=False))

        growing_pages = [p for p in page_drivers if p.delta > 0][:MAX_TARGET_URLS]
        if growing_pages:
            recommendations.append(Recommendation(
                title="Double down on top performers",
                why="These pages are driving your growth. Consider replicating their success.",
                targetUrls=[p.label for p in growing_pages],
                suggestedActions=[
                    "Create similar content based on these winning formats",
                    "Increase internal linking to these pages",
                    "Optimize call-to-actions on these high-traffic pages",
                ],
            ))

    return recommendations[:MAX_RECOMMENDATIONS]
