"""Tests for Spam Detection."""

import pytest
from submission_quality.behavior import StaticBehaviorContext
from submission_quality.spam_detector import QualityConfig, SpamDetector, is_spam


@pytest.fixture
def detector():
    return SpamDetector()


def ai_detector(classifier, **overrides):
    config = QualityConfig(ai_spam_check_enabled=True, ai_api_key="sk-test", **overrides)
    return SpamDetector(config, classifier=classifier)


class FailingBehavior:
    def count_recent_submissions(self, ip_address, window=None):
        raise ConnectionError("database unavailable")


# ── Factors ───────────────────────────────────────────

class TestSpamFactors:
    def test_obvious_spam_below_default_threshold(self, detector):
        result = detector.analyze({"email": "temp123@mailinator.com", "comment": "BUY NOW!!! CLICK HERE!!!"})
        assert result.score_breakdown == {
            "pattern_analysis": 25,
            "content_quality": 0,
            "email_domain": 20,
            "submission_behavior": 0,
        }
        assert result.spam_score == 45
        assert result.is_spam is False

    def test_empty_submission(self, detector):
        result = detector.analyze({})
        assert result.spam_score == 0
        assert result.is_spam is False

    def test_clean_submission(self, detector, contact_submission):
        assert detector.analyze(contact_submission).spam_score == 0

    def test_pattern_factor_capped(self, detector):
        text = "FREE MONEY!!! VISIT http://a.ru http://b.ru http://c.ru http://d.ru NOW NOW NOW"
        result = detector.analyze({"message": text})
        assert result.score_breakdown["pattern_analysis"] == 35

    def test_two_urls(self, detector):
        result = detector.analyze({"message": "See https://example.com and https://example.org for details"})
        assert result.score_breakdown["pattern_analysis"] == 10

    def test_short_text(self, detector):
        result = detector.analyze({"message": "hey"})
        assert result.score_breakdown["content_quality"] == 20

    def test_repeated_characters(self, detector):
        result = detector.analyze({"message": "This is sooooo good, please call me back"})
        assert result.score_breakdown["content_quality"] == 15

    def test_gibberish_and_no_letters(self, detector):
        gibberish = detector.analyze({"message": "qwrtzp xcvbnm plkjhg mnbvcx details please"})
        assert gibberish.score_breakdown["content_quality"] == 15

        digits = detector.analyze({"message": "1234 5678 9012"})
        assert digits.score_breakdown["content_quality"] == 10

    def test_email_domain_signals(self, detector):
        result = detector.analyze({"email": "abc123@spammer.ru"})
        assert result.score_breakdown["email_domain"] == 20

    def test_no_email_no_domain_points(self, detector):
        assert detector.analyze({"message": "Hello there, a normal note"}).score_breakdown["email_domain"] == 0

    def test_empty_disposable_override_respected(self, detector):
        submission = {"email": "jane@mailinator.com"}
        assert detector.analyze(submission).score_breakdown["email_domain"] == 20
        no_list = SpamDetector(disposable_domains=frozenset())
        assert no_list.analyze(submission).score_breakdown["email_domain"] == 0

    def test_lists_are_ignored(self, detector):
        result = detector.analyze({"services": ["BUY NOW!!!", "CASINO"]})
        assert result.spam_score == 0

    def test_score_bounds(self, detector):
        text = "BUY NOW!!! " * 30 + "zzzzzzzzz bcdfg bcdfg bcdfg bcdfg http http http http"
        result = detector.analyze(
            {"email": "abc123@mailinator.com", "message": text},
            behavior=StaticBehaviorContext(20),
            ip_address="203.0.113.9",
        )
        assert 0 <= result.spam_score <= 100
        assert result.spam_score == 35 + 25 + 20 + 10


# ── Behaviour ─────────────────────────────────────────

class TestSubmissionBehavior:
    @pytest.mark.parametrize("count,points", [(0, 0), (3, 0), (4, 5), (5, 5), (6, 10), (40, 10)])
    def test_recent_count_bands(self, detector, count, points):
        result = detector.analyze({}, behavior=StaticBehaviorContext(count), ip_address="203.0.113.9")
        assert result.score_breakdown["submission_behavior"] == points

    def test_no_ip_no_points(self, detector):
        result = detector.analyze({}, behavior=StaticBehaviorContext(10), ip_address=None)
        assert result.score_breakdown["submission_behavior"] == 0

    def test_lookup_failure_contributes_nothing(self, detector):
        result = detector.analyze({}, behavior=FailingBehavior(), ip_address="203.0.113.9")
        assert result.score_breakdown["submission_behavior"] == 0


# ── AI factor ─────────────────────────────────────────

class TestAIContentAnalysis:
    def test_classifier_score_added(self, fake_classifier, contact_submission):
        classifier = fake_classifier(score=7)
        result = ai_detector(classifier).analyze(contact_submission)
        assert result.score_breakdown["ai_content_analysis"] == 7
        assert result.spam_score == 7

    def test_classifier_score_clamped(self, fake_classifier, contact_submission):
        assert ai_detector(fake_classifier(score=42)).analyze(contact_submission).spam_score == 10
        assert ai_detector(fake_classifier(score=-3)).analyze(contact_submission).spam_score == 0

    def test_classifier_failure_contributes_nothing(self, fake_classifier, contact_submission):
        classifier = fake_classifier(error=TimeoutError("slow"))
        result = ai_detector(classifier).analyze(contact_submission)
        assert result.score_breakdown["ai_content_analysis"] == 0

    def test_text_truncated(self, fake_classifier):
        classifier = fake_classifier(score=1)
        ai_detector(classifier).analyze({"message": "a" * 2000})
        assert len(classifier.calls[0]) == 500

    def test_short_text_skipped(self, fake_classifier):
        classifier = fake_classifier(score=9)
        ai_detector(classifier).analyze({"message": "hi there"})
        assert classifier.calls == []

    def test_not_called_without_key(self, fake_classifier, contact_submission):
        classifier = fake_classifier(score=9)
        config = QualityConfig(ai_spam_check_enabled=True, ai_api_key=None)
        result = SpamDetector(config, classifier=classifier).analyze(contact_submission)
        assert classifier.calls == []
        assert "ai_content_analysis" not in result.score_breakdown

    def test_not_called_when_disabled(self, fake_classifier, contact_submission):
        classifier = fake_classifier(score=9)
        config = QualityConfig(ai_spam_check_enabled=False, ai_api_key="sk-test")
        SpamDetector(config, classifier=classifier).analyze(contact_submission)
        assert classifier.calls == []


# ── Configuration and verdict ─────────────────────────

class TestVerdict:
    def test_detection_disabled(self, fake_classifier):
        classifier = fake_classifier(score=10)
        config = QualityConfig(spam_detection_enabled=False, ai_spam_check_enabled=True, ai_api_key="sk")
        result = SpamDetector(config, classifier=classifier).analyze(
            {"email": "abc123@mailinator.com", "message": "BUY NOW!!!"}
        )
        assert result.spam_score == 0
        assert result.is_spam is False
        assert classifier.calls == []

    def test_lower_threshold_flags_spam(self):
        submission = {"email": "temp123@mailinator.com", "comment": "BUY NOW!!! CLICK HERE!!!"}
        result = SpamDetector(QualityConfig(spam_threshold=40)).analyze(submission)
        assert result.spam_score == 45
        assert result.is_spam is True

    def test_threshold_is_inclusive(self):
        assert is_spam(60, 60)
        assert not is_spam(59, 60)
        assert is_spam(0, 0)

    def test_raising_threshold_never_adds_spam(self):
        scores = [0, 10, 39, 40, 59, 60, 61, 99, 100]
        for low, high in [(40, 60), (60, 80), (0, 100)]:
            for score in scores:
                if is_spam(score, high):
                    assert is_spam(score, low)

    @pytest.mark.parametrize("threshold", [-1, 101])
    def test_threshold_range_validated(self, threshold):
        with pytest.raises(ValueError):
            QualityConfig(spam_threshold=threshold)
