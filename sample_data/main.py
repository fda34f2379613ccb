"""
Form Architect Sample Data CLI.

Generates sample submissions for every quality tier of a template, scores
them and prints the mean lead and spam score per tier.

Usage:
    python -m sample_data.main --template contact-form --count 100
    python -m sample_data.main --template quote-request --count 50 --spam --seed 7
"""

import argparse
import json
import logging
import random
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from submission_quality.sample_data import QualityTier, SampleDataGenerator
from submission_quality.scoring_model import LeadScorer
from submission_quality.spam_detector import SpamDetector
from submission_quality.templates import TemplateLibrary, TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class SampleReport:
    """Mean scores per tier for one template."""
    template_id: str
    count: int
    force_spam: bool
    tiers: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template": self.template_id,
            "count": self.count,
            "force_spam": self.force_spam,
            "tiers": self.tiers,
        }


def _mean(values: List[int]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


def build_report(
    template_id: str,
    count: int,
    force_spam: bool = False,
    seed: Optional[int] = None,
    library: Optional[TemplateLibrary] = None,
) -> SampleReport:
    """
    Generate ``count`` samples per tier and average their scores.

    Args:
        template_id: Template to generate for
        count: Samples per tier
        force_spam: Generate spam-looking samples
        seed: Random seed for reproducible runs
        library: Template library to look the template up in

    Returns:
        SampleReport
    """
    template = (library or TemplateLibrary()).get(template_id)
    generator = SampleDataGenerator(random.Random(seed))
    scorer = LeadScorer()
    detector = SpamDetector()

    report = SampleReport(template_id=template_id, count=count, force_spam=force_spam)
    for tier in QualityTier:
        lead_scores, spam_scores = [], []
        for _ in range(count):
            data = generator.generate(template, tier, force_spam=force_spam)
            lead_scores.append(scorer.calculate(data))
            spam_scores.append(detector.analyze(data).spam_score)

        report.tiers[tier.value] = {
            "mean_lead_score": _mean(lead_scores),
            "mean_spam_score": _mean(spam_scores),
        }
        logger.info(f"{tier.value}: lead {_mean(lead_scores)}, spam {_mean(spam_scores)}")

    return report


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Form Architect sample data scoring")
    parser.add_argument("--template", default="contact-form", help="Template ID")
    parser.add_argument("--count", type=int, default=100, help="Samples per quality tier")
    parser.add_argument("--spam", action="store_true", help="Force spam-looking samples")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.count < 1:
        logger.error("--count must be at least 1")
        sys.exit(1)

    try:
        report = build_report(args.template, args.count, force_spam=args.spam, seed=args.seed)
    except TemplateNotFoundError:
        logger.error(f"Unknown template: {args.template}")
        sys.exit(1)

    print(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    main()
